"""
SmartTodo Backend - Exception Translation Middleware Tests
===========================================================

What we test:
    ✅ Exception before the response → problem+json with the mapped status
    ✅ Exception after http.response.start → re-raised, nothing written
    ✅ Development vs production 500 detail
    ✅ Ids taken from scope["state"]
    ✅ Non-HTTP scopes pass straight through
"""

import json

import pytest

from smarttodo.exceptions import NotFoundError
from smarttodo.middleware.exception_translator import ExceptionTranslationMiddleware


def http_scope(headers=None, state=None):
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/boom",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
    }
    if state is not None:
        scope["state"] = state
    return scope


async def receive():
    return {"type": "http.request", "body": b"", "more_body": False}


class Recorder:
    def __init__(self):
        self.messages = []

    async def __call__(self, message):
        self.messages.append(message)

    @property
    def status(self):
        return self.messages[0]["status"]

    @property
    def headers(self):
        return {k.decode(): v.decode() for k, v in self.messages[0]["headers"]}

    @property
    def body(self):
        return json.loads(b"".join(m.get("body", b"") for m in self.messages[1:]))


def raising_app(exc):
    async def app(scope, receive, send):
        raise exc

    return app


class TestTranslation:
    @pytest.mark.asyncio
    async def test_unclassified_becomes_500(self):
        send = Recorder()
        middleware = ExceptionTranslationMiddleware(raising_app(RuntimeError("db password")))

        await middleware(http_scope(), receive, send)

        assert send.status == 500
        assert send.headers["content-type"] == "application/problem+json"
        assert send.body["title"] == "An error occurred while processing your request."
        assert "db password" not in send.body["detail"]
        assert send.body["traceId"]

    @pytest.mark.asyncio
    async def test_development_exposes_message(self):
        send = Recorder()
        middleware = ExceptionTranslationMiddleware(
            raising_app(RuntimeError("db password")), development=True
        )

        await middleware(http_scope(), receive, send)

        assert send.body["detail"] == "db password"

    @pytest.mark.asyncio
    async def test_not_found_becomes_404(self):
        send = Recorder()
        middleware = ExceptionTranslationMiddleware(raising_app(NotFoundError("TodoItem", "x")))

        await middleware(http_scope(), receive, send)

        assert send.status == 404
        assert send.body["detail"] == "TodoItem with ID 'x' was not found"

    @pytest.mark.asyncio
    async def test_uses_ids_from_state(self):
        send = Recorder()
        middleware = ExceptionTranslationMiddleware(raising_app(RuntimeError("x")))
        state = {"correlation_id": "corr-state", "trace_id": "trace-state"}

        await middleware(http_scope(state=state), receive, send)

        assert send.body["correlationId"] == "corr-state"
        assert send.body["traceId"] == "trace-state"
        assert send.headers["x-correlation-id"] == "corr-state"

    @pytest.mark.asyncio
    async def test_falls_back_to_header(self):
        send = Recorder()
        middleware = ExceptionTranslationMiddleware(raising_app(RuntimeError("x")))

        await middleware(http_scope(headers={"X-Correlation-ID": "from-header"}), receive, send)

        assert send.body["correlationId"] == "from-header"


class TestResponseAlreadyStarted:
    @pytest.mark.asyncio
    async def test_reraises_and_writes_nothing(self):
        async def app(scope, receive, send):
            await send({"type": "http.response.start", "status": 200, "headers": []})
            raise RuntimeError("mid-stream failure")

        send = Recorder()
        middleware = ExceptionTranslationMiddleware(app)

        with pytest.raises(RuntimeError, match="mid-stream failure"):
            await middleware(http_scope(), receive, send)

        assert send.messages == [{"type": "http.response.start", "status": 200, "headers": []}]


class TestPassThrough:
    @pytest.mark.asyncio
    async def test_non_http_scope_untouched(self):
        seen = []

        async def app(scope, receive, send):
            seen.append(scope["type"])

        middleware = ExceptionTranslationMiddleware(app)
        await middleware({"type": "lifespan"}, receive, Recorder())

        assert seen == ["lifespan"]
