"""
Middleware for request/response logging with correlation IDs.
"""
import time
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from doclib.core.logging import set_correlation_id, get_logger

logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for HTTP request/response logging."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request, log its outcome and echo the correlation ID."""
        correlation_id = set_correlation_id(request.headers.get("X-Correlation-ID"))

        start_time = time.time()
        method = request.method
        path = request.url.path

        logger.info(
            "HTTP request started",
            method=method,
            path=path,
            query_params=dict(request.query_params),
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.time() - start_time
            logger.error(
                "HTTP request failed",
                method=method,
                path=path,
                duration_ms=round(duration * 1000, 2),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        duration = time.time() - start_time
        logger.info(
            "HTTP request completed",
            method=method,
            path=path,
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )

        # Log slow requests
        if duration > 1.0:
            logger.warning(
                "Slow HTTP request detected",
                method=method,
                path=path,
                duration_ms=round(duration * 1000, 2),
            )

        response.headers["X-Correlation-ID"] = correlation_id
        return response
