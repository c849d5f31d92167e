"""Map the engine's error taxonomy onto HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from autoassign.domain.errors import (
    AutoAssignError,
    ConfigurationMissing,
    Conflict,
    InternalError,
    NotFound,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_CODES: dict[type[AutoAssignError], int] = {
    ConfigurationMissing: 404,
    NotFound: 404,
    Conflict: 409,
    ValidationError: 422,
    StoreError: 503,
    InternalError: 500,
}


def status_code_for(error: AutoAssignError) -> int:
    for error_type in type(error).__mro__:
        if error_type in STATUS_CODES:
            return STATUS_CODES[error_type]
    return 500


async def handle_auto_assign_error(request: Request, exc: AutoAssignError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s %s", request.method, request.url.path, exc.message, exc.details)
    return JSONResponse(status_code=status_code, content={"status": "error", **exc.to_dict()})


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Body, path and query type errors get the same shape as every other error."""
    error = ValidationError(
        "Request validation failed", {"errors": jsonable_encoder(exc.errors())}
    )
    return JSONResponse(status_code=422, content={"status": "error", **error.to_dict()})


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = InternalError("Internal server error")
    return JSONResponse(status_code=500, content={"status": "error", **error.to_dict()})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AutoAssignError, handle_auto_assign_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
