"""
SmartTodo Backend - Correlation ID Middleware
==============================================

What:  Resolves the correlation id for each inbound call and echoes it on
       the response; also mints the per-call trace id.
How:   Reads the correlation header, falls back to a fresh UUID, stores both
       ids in request.state, and sets the header on the way out.
Who:   Runs right inside CORS, so the header is present on both
       success and error responses.

Downstream consumers read the ids from request.state (routes build the
DispatchContext from it; the exception translator reads scope["state"]).
They are passed explicitly from there on.
"""

import logging
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from smarttodo.pipeline.context import new_correlation_id, new_trace_id

logger = logging.getLogger(__name__)

DEFAULT_CORRELATION_HEADER = "X-Correlation-ID"


def resolve_correlation_id(header_value: Optional[str]) -> str:
    """
    Return `header_value` unchanged when it is non-blank after trimming,
    otherwise a fresh UUID string.
    """
    if header_value is not None and header_value.strip():
        return header_value
    return new_correlation_id()


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Assigns a correlation id and a trace id to each request.

    Behavior:
        1. Use the client's correlation header if present and non-blank
        2. Otherwise generate a new UUID
        3. Generate a trace id for this call
        4. Store both in request.state
        5. Add the correlation header to the response
    """

    def __init__(self, app: ASGIApp, header_name: str = DEFAULT_CORRELATION_HEADER):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        correlation_id = resolve_correlation_id(request.headers.get(self.header_name))
        request.state.correlation_id = correlation_id
        request.state.trace_id = new_trace_id()

        extra = {"correlation_id": correlation_id}
        logger.debug(
            "Request started: %s %s", request.method, request.url.path, extra=extra
        )
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                "Request failed: %s %s", request.method, request.url.path, extra=extra
            )
            raise

        response.headers[self.header_name] = correlation_id
        logger.debug(
            "Request completed: %s %s - Status %d",
            request.method,
            request.url.path,
            response.status_code,
            extra=extra,
        )
        return response
