import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("pricescout")

SKIP_LOG_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status code and duration for each request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.time()
        response = await call_next(request)
        duration_ms = round((time.time() - start) * 1000)

        path = request.url.path
        if path in SKIP_LOG_PATHS:
            return response

        logger.info(
            f"{request.method} {path} {response.status_code}",
            extra={"extra_data": {
                "method": request.method,
                "path": path,
                "status": response.status_code,
                "duration_ms": duration_ms,
                "content_length": request.headers.get("content-length"),
            }},
        )
        return response
