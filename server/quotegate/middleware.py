# ─────────────────────────────────────────────────────────────────────────────
# Request Context Middleware — request id + access log
# ─────────────────────────────────────────────────────────────────────────────
# Binds request_id / method / path into structlog contextvars so every log
# line emitted while handling the request carries them, then logs one
# completion line with status and latency.
# ─────────────────────────────────────────────────────────────────────────────


import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Attach a request id to the logging context and the response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - start) * 1000, 1)

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info("request_complete", status=response.status_code, time_ms=elapsed_ms)
        return response
