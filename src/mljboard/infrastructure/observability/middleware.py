"""Middleware for observability: request/response logging."""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from mljboard.infrastructure.observability.logging import (
    get_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request and tag it with a correlation id."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request and log details.

        Args:
            request: Incoming request
            call_next: Next middleware/handler in chain

        Returns:
            Response from application
        """
        set_correlation_id(request.headers.get(CORRELATION_HEADER))

        method = request.method
        path = request.url.path
        logger.info("→ %s %s", method, path, extra={"method": method, "path": path})

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                "Request failed: %s %s",
                method,
                path,
                extra={"error_type": type(e).__name__},
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        status_mark = "✓" if response.status_code < 400 else "✗"
        logger.info(
            "%s %s %s → %d (%.0fms)",
            status_mark,
            method,
            path,
            response.status_code,
            duration_ms,
            extra={"status_code": response.status_code, "duration_ms": int(duration_ms)},
        )

        response.headers[CORRELATION_HEADER] = get_correlation_id()
        return response
