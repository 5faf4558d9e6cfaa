"""
HTTP request logging.

Logs method, path, client address and user agent for each request, then the
status and duration once the response is ready.
"""

import logging
import time
from typing import Callable, Set

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("firetracker.requests")

# Paths polled by monitors and browsers
SKIP_LOGGING_PATHS: Set[str] = {
    "/",
    "/api/health",
    "/favicon.ico",
    "/docs",
    "/redoc",
    "/openapi.json",
}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        skip_logging = path in SKIP_LOGGING_PATHS
        start_time = time.perf_counter()

        if not skip_logging:
            client_ip = request.client.host if request.client else "unknown"
            logger.info(
                f"{request.method} {path}",
                extra={
                    "http_method": request.method,
                    "http_path": path,
                    "client_ip": client_ip,
                    "user_agent": request.headers.get("user-agent", ""),
                }
            )

        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        if not skip_logging:
            status_code = response.status_code
            if status_code >= 500:
                log_func = logger.error
            elif status_code >= 400:
                log_func = logger.warning
            else:
                log_func = logger.info

            log_func(
                f"{request.method} {path} - {status_code} ({duration_ms:.2f}ms)",
                extra={
                    "http_method": request.method,
                    "http_path": path,
                    "http_status": status_code,
                    "duration_ms": round(duration_ms, 2),
                }
            )

        return response
