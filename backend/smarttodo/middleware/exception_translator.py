"""
SmartTodo Backend - Exception Translation Middleware
=====================================================

What:  The single place where an escaping exception becomes a response.
How:   Wraps the rest of the app (routes → dispatcher → pipeline). Any
       exception is classified (smarttodo.problem_details) and written as
       application/problem+json with the matching status.
Who:   Installed inside CorrelationIdMiddleware so it can read the ids from
       scope["state"] and so the correlation header is still echoed.

Why pure ASGI (not BaseHTTPMiddleware):
    The translator must know whether `http.response.start` already went out.
    Wrapping `send` is the only reliable way to see that; once the status
    line is on the wire the translator does nothing and lets the original
    exception propagate.

Logging:
    ValidationError / NotFoundError → WARNING
    everything else                 → ERROR with the full traceback
"""

import logging
from typing import Optional

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from smarttodo.middleware.correlation import DEFAULT_CORRELATION_HEADER, resolve_correlation_id
from smarttodo.pipeline.context import new_trace_id
from smarttodo.problem_details import (
    PROBLEM_CONTENT_TYPE,
    Problem,
    build_problem_details,
    classify,
    is_expected,
)

logger = logging.getLogger(__name__)


class ExceptionTranslationMiddleware:
    """
    Converts exceptions from downstream into Problem Details responses.

    Args:
        app:          Downstream ASGI app
        development:  Expose raw exception messages on 500 responses
        header_name:  Correlation header, used when no upstream middleware
                      resolved the id and to echo it on error responses
    """

    def __init__(
        self,
        app: ASGIApp,
        development: bool = False,
        header_name: str = DEFAULT_CORRELATION_HEADER,
    ):
        self.app = app
        self.development = development
        self.header_name = header_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            if response_started:
                logger.warning(
                    "Response already started for %s %s; not translating %s",
                    scope.get("method", ""),
                    scope.get("path", ""),
                    type(exc).__name__,
                )
                raise
            await self._send_problem(scope, receive, send, exc)

    async def _send_problem(
        self, scope: Scope, receive: Receive, send: Send, exc: Exception
    ) -> None:
        state = scope.setdefault("state", {})
        correlation_id: Optional[str] = state.get("correlation_id")
        if not correlation_id:
            correlation_id = resolve_correlation_id(Headers(scope=scope).get(self.header_name))
        trace_id: str = state.get("trace_id") or new_trace_id()

        problem = classify(exc)
        self._log(problem, exc, scope, correlation_id, trace_id)

        body = build_problem_details(
            problem,
            trace_id=trace_id,
            correlation_id=correlation_id,
            development=self.development,
        )
        response = JSONResponse(
            content=body.to_dict(),
            status_code=body.status,
            headers={self.header_name: correlation_id},
            media_type=PROBLEM_CONTENT_TYPE,
        )
        await response(scope, receive, send)

    @staticmethod
    def _log(
        problem: Problem,
        exc: Exception,
        scope: Scope,
        correlation_id: str,
        trace_id: str,
    ) -> None:
        extra = {"correlation_id": correlation_id, "trace_id": trace_id}
        method = scope.get("method", "")
        path = scope.get("path", "")
        if is_expected(problem):
            logger.warning(
                "[%s] %s on %s %s: %s",
                correlation_id,
                type(exc).__name__,
                method,
                path,
                exc,
                extra=extra,
            )
        else:
            logger.error(
                "[%s] Unhandled %s on %s %s: %s",
                correlation_id,
                type(exc).__name__,
                method,
                path,
                exc,
                exc_info=exc,
                extra=extra,
            )
