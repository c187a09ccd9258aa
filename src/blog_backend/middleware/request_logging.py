"""
Request logging middleware.

Logs one line per request with method, path, status code and duration. Query strings
are left out of the log line because `/login` carries credentials in its query.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from blog_backend.managers.logging_manager import get_logger

logger = get_logger(prefix="[REQUEST]")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error("%s %s failed after %.1fms", request.method, request.url.path, duration_ms, exc_info=True)
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info("%s %s -> %d (%.1fms)", request.method, request.url.path, response.status_code, duration_ms)
        return response
