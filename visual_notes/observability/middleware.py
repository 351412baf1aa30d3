"""
HTTP middleware for request tracing.

CorrelationMiddleware binds a correlation ID for the lifetime of a request
and echoes it back in the response headers. RequestLoggingMiddleware writes
one summary line per request once the response status is known.

Dependencies: starlette, visual_notes.observability.correlation
System role: Request/response observability
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from visual_notes.observability.correlation import (
    CORRELATION_HEADER,
    bind_correlation_id,
    reset_correlation_id,
)

logger = logging.getLogger(__name__)

# Probes hit this every few seconds
QUIET_PATHS = frozenset({"/api/v1/health", "/api/v1/health/ready"})


class CorrelationMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id, token = bind_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response = await call_next(request)
        finally:
            reset_correlation_id(token)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and wall time for each request.

    Generations routinely take tens of seconds, so durations are reported in
    seconds. Server errors are logged at WARNING so they stand out from the
    steady stream of INFO lines.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        route = f"{request.method} {request.url.path}"

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{route} -> unhandled {type(e).__name__} after {_elapsed(started)}"
            )
            raise

        if request.url.path not in QUIET_PATHS:
            level = logging.WARNING if response.status_code >= 500 else logging.INFO
            logger.log(level, f"{route} -> {response.status_code} in {_elapsed(started)}")
        return response


def _elapsed(started: float) -> str:
    return f"{time.perf_counter() - started:.2f}s"
