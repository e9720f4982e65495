"""Per-request id, timing headers and one structured access-log line per request."""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from ..core.config import settings
from ..core.logging_config import request_id_var

logger = logging.getLogger(__name__)

# Probed constantly by orchestrators; logged at DEBUG unless they fail.
_QUIET_PATHS = frozenset({"/health"})


def access_log_level(path: str, status_code: int, duration_ms: float, slow_ms: float) -> int:
    """Pick the level of the access-log line for one finished request."""
    if status_code >= 500:
        return logging.ERROR
    if slow_ms > 0 and duration_ms >= slow_ms:
        return logging.WARNING
    if path in _QUIET_PATHS:
        return logging.DEBUG
    return logging.INFO


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tags the request with an id (client supplied ``X-Request-ID`` or a new
    one), echoes it back, and reports the handling time in ``X-Response-Time``."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex[:16]
        token = request_id_var.set(rid)
        request.state.request_id = rid

        start = time.monotonic()
        try:
            response = await call_next(request)
            duration_ms = round((time.monotonic() - start) * 1000, 1)

            response.headers["X-Request-ID"] = rid
            response.headers["X-Response-Time"] = f"{duration_ms}ms"

            path = request.url.path
            logger.log(
                access_log_level(path, response.status_code, duration_ms, settings.slow_request_ms),
                "%s %s %s",
                request.method,
                path,
                response.status_code,
                extra={
                    "method": request.method,
                    "path": path,
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                },
            )
            return response
        finally:
            request_id_var.reset(token)
