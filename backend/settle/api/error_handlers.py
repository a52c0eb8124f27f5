"""Error Handlers — every failure leaves the API in one envelope shape.

Invariants:
    - Response body is always SettleError.to_response(): {"error": {code, message, ...}}
    - Boundary validation failures (ours or FastAPI's) carry `details` naming the field
    - Unknown exceptions become InternalError; nothing from the exception reaches the body

Design Decisions:
    - Handlers are module-level coroutines registered with add_exception_handler,
      so tests call them directly without building a route
    - Log level follows the error category: a rejected input is routine (info),
      a conflict or auth failure is notable (warning), the rest is an error
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from settle.core.errors import (
    ErrorCategory, InputValidationError, InternalError,
    RequestInvalidError, SettleError,
)

logger = logging.getLogger(__name__)

_LOG_LEVEL = {
    ErrorCategory.VALIDATION: logging.INFO,
    ErrorCategory.AUTHENTICATION: logging.WARNING,
    ErrorCategory.CONFLICT: logging.WARNING,
    ErrorCategory.RESOURCE_NOT_FOUND: logging.WARNING,
}


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SettleError, settle_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


def envelope(exc: SettleError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def settle_error_handler(request: Request, exc: SettleError) -> JSONResponse:
    extra = {"error_code": exc.code, "path": request.url.path}
    if isinstance(exc, InputValidationError):
        extra["field"] = exc.param
    logger.log(
        _LOG_LEVEL.get(exc.category, logging.ERROR),
        exc.message, extra=extra,
    )
    return envelope(exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    return await settle_error_handler(request, RequestInvalidError(exc.errors()))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__}",
        exc_info=exc, extra={"path": request.url.path},
    )
    return envelope(InternalError())
