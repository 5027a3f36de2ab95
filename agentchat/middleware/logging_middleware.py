"""
HTTP request logging middleware.

Logs every request with method, path, status code, and duration. The request
id is bound into structlog's context so chat and tool logs can be correlated.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.stdlib.get_logger("http")

# Probes hit these constantly
_QUIET_PATHS = frozenset({"/healthz"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log HTTP requests with timing and status info."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("x-request-id", uuid.uuid4().hex[:8])

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["x-request-id"] = request_id
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 1)

            if status_code >= 500:
                log = logger.error
            elif status_code >= 400:
                log = logger.warning
            elif request.url.path in _QUIET_PATHS:
                log = logger.debug
            else:
                log = logger.info

            # For streamed responses this measures time to first byte
            log(
                "http_request",
                method=request.method,
                path=request.url.path,
                status=status_code,
                duration_ms=duration_ms,
                client=request.client.host if request.client else None,
            )
