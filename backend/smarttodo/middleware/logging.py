"""
SmartTodo Backend - Request Logging Middleware
===============================================

What:  One access-log line per HTTP request with status and duration.
How:   Measures time around call_next and logs at a level chosen by the
       status class. Sits between CorrelationIdMiddleware and the exception
       translator, so it sees the final status of translated errors.

Log Fields:
    method, path, status, duration_ms, client_ip, correlation_id

What we log vs what we DON'T log (privacy):
    Log:        method, path, status, duration, IP, correlation id
    Don't log:  request bodies (todo text may be personal), auth headers
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("smarttodo.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs structured information about each HTTP request and response.

    Level by status:
        5xx → ERROR
        4xx → WARNING
        2xx/3xx → INFO
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        path = request.url.path
        correlation_id = getattr(request.state, "correlation_id", "-")

        # Health checks are polled every few seconds
        if path == "/health":
            return await call_next(request)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            correlation_id,
            client_ip,
            extra={
                "correlation_id": correlation_id,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
