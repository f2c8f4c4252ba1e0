"""
HTTP middleware: correlation ids and request logging.
"""

import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from identity_api.utils.logging import clear_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_HEADERS = ("x-correlation-id", "x-request-id")


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Ensure every request carries a correlation id.

    The id is taken from ``X-Correlation-ID`` / ``X-Request-ID`` when the
    caller supplies one, stored on ``request.state``, bound into the
    structlog context and echoed in the response headers.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = self._get_or_generate_correlation_id(request)
        request.state.correlation_id = correlation_id
        set_correlation_id(correlation_id)

        try:
            response = await call_next(request)
        finally:
            clear_correlation_id()

        response.headers["X-Correlation-ID"] = correlation_id
        return response

    @staticmethod
    def _get_or_generate_correlation_id(request: Request) -> str:
        for header in CORRELATION_HEADERS:
            value = request.headers.get(header)
            if value:
                return value
        return str(uuid.uuid4())


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request with status and duration."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)

        logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "event_type": "http_request",
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "correlation_id": getattr(request.state, "correlation_id", None),
            }
        )
        return response
