"""Turn domain and storage exceptions into ``{"error", "message", "details"}`` bodies."""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import HoldingsException, DatabaseError

logger = logging.getLogger(__name__)


def _error_response(request: Request, exc: HoldingsException) -> JSONResponse:
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "%s on %s %s",
        exc.error_code.value,
        request.method,
        request.url.path,
        extra={
            "error_code": exc.error_code.value,
            "status_code": exc.status_code,
            "details": exc.details,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def holdings_exception_handler(request: Request, exc: HoldingsException) -> JSONResponse:
    """Registered for ``HoldingsException`` and every subclass."""
    return _error_response(request, exc)


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Storage failures surface as DATABASE_ERROR with the driver's raw message."""
    logger.error("Unhandled database error", exc_info=exc)
    orig = getattr(exc, "orig", None)
    return _error_response(request, DatabaseError(str(orig) if orig else str(exc), exc))
