"""
HTTP request logging middleware.

Binds a request id (and, for entrypoint calls, the entrypoint key) so every
log line emitted while the request runs can be correlated, then writes one
``http_request`` line when the response is ready.
"""

import time
import uuid
from typing import Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.stdlib.get_logger("http")

REQUEST_ID_HEADER = "x-request-id"
_ENTRYPOINT_PREFIX = "/entrypoints/"


def entrypoint_key(path: str) -> Optional[str]:
    """'/entrypoints/analyze-wallet/invoke' -> 'analyze-wallet'"""
    if not path.startswith(_ENTRYPOINT_PREFIX):
        return None
    key = path[len(_ENTRYPOINT_PREFIX):].split("/", 1)[0]
    return key or None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log HTTP requests with timing and status info."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        context = {"request_id": request_id}
        entrypoint = entrypoint_key(request.url.path)
        if entrypoint:
            context["entrypoint"] = entrypoint

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(**context)

        start = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 1)

            if status_code >= 500:
                log = logger.error
            elif status_code >= 400:
                log = logger.warning
            else:
                log = logger.info

            log(
                "http_request",
                method=request.method,
                path=request.url.path,
                status=status_code,
                duration_ms=duration_ms,
            )
            structlog.contextvars.clear_contextvars()
