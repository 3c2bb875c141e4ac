"""
Mapping of domain exceptions to HTTP responses.

Client errors carry the domain message. Unexpected failures are logged with
their traceback and answered with an opaque message.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api.v1.schemas import ErrorResponse
from app.domain.exceptions import (
    CatalogError,
    LockTimeoutError,
    NotFoundError,
    ReferentialError,
    StateTransitionError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_CLIENT_ERRORS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ReferentialError: status.HTTP_400_BAD_REQUEST,
    StateTransitionError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(message=message).model_dump())


async def handle_catalog_error(request: Request, exc: CatalogError) -> JSONResponse:
    for exc_type, status_code in _CLIENT_ERRORS.items():
        if isinstance(exc, exc_type):
            logger.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
            return _error(status_code, exc.message)

    if isinstance(exc, LockTimeoutError):
        logger.warning("Lock timeout on %s %s", request.method, request.url.path)
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "The resource is busy, please retry")

    return await handle_unexpected_error(request, exc)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = ", ".join(
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}"
        for err in exc.errors()
    )
    logger.warning("Invalid request on %s %s: %s", request.method, request.url.path, errors)
    return _error(status.HTTP_400_BAD_REQUEST, errors or "Invalid request")


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unexpected error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CatalogError, handle_catalog_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
