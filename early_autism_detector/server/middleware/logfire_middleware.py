"""
Request timing middleware.

Every request is reported to Logfire under its route template (``/api/v1/children/{child_id}``
rather than the concrete id) so child and assessment identifiers stay out of the metrics.
"""

import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from early_autism_detector.core.logging_config import get_logger
from early_autism_detector.core.monitoring import log_api_request

logger = get_logger(__name__)

SLOW_REQUEST_MS = 1000
PROCESS_TIME_HEADER = "X-Process-Time"


def route_path(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class LogfireMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            path = route_path(request)
            logger.error(
                f"Unhandled error on {request.method} {path} after {elapsed_ms:.2f}ms: {e}",
                exc_info=True,
            )
            log_api_request(method=request.method, path=path, status_code=500, duration_ms=elapsed_ms)
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        path = route_path(request)
        log_api_request(method=request.method, path=path, status_code=response.status_code, duration_ms=elapsed_ms)
        response.headers[PROCESS_TIME_HEADER] = f"{elapsed_ms:.2f}"
        if elapsed_ms > SLOW_REQUEST_MS:
            logger.warning(f"Slow API request: {request.method} {path} returned {response.status_code} in {elapsed_ms:.2f}ms")
        return response
