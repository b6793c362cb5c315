"""Request logging middleware

Logs every request with method, path, status and duration in ms.
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Structured request/response logging

    - INFO: request received and successful responses
    - WARNING: client errors (4xx)
    - ERROR: server errors (5xx) and exceptions escaping the app
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        method = request.method
        path = request.url.path
        logger.info("Received request: method %s, URI %s", method, path)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "Request handling error: method %s, URI %s, duration %.0f ms, error: %s",
                method, path, duration_ms, exc,
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        status_code = response.status_code
        if status_code >= 500:
            log = logger.error
        elif status_code >= 400:
            log = logger.warning
        else:
            log = logger.info
        log(
            "Response: method %s, URI %s, status %s, duration %.0f ms",
            method, path, status_code, duration_ms,
        )
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response
