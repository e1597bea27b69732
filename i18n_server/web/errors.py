"""Map service exceptions onto JSON error responses."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from i18n_server.logging import logger
from i18n_server.services.exceptions import (
    DuplicateKey,
    InvalidInput,
    NotFound,
    ProviderError,
    ServiceError,
    StorageError,
)

_STATUS_BY_ERROR: tuple[tuple[type[ServiceError], int], ...] = (
    (NotFound, 404),
    (DuplicateKey, 409),
    (InvalidInput, 400),
    (StorageError, 500),
    (ProviderError, 502),
)


def status_for(exc: ServiceError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(
            "request_failed",
            path=request.url.path,
            exception_type=exc.__class__.__name__,
            error=str(exc),
        )
    return JSONResponse(status_code=status_code, content={"error": str(exc)})


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = {".".join(str(part) for part in error["loc"][1:]) for error in exc.errors()}
    fields.discard("")
    message = "Invalid request body"
    if fields:
        message = f"Missing or invalid fields: {', '.join(sorted(fields))}"
    return JSONResponse(status_code=400, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)


__all__ = ["register_exception_handlers", "status_for"]
