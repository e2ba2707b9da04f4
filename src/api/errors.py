"""
Exception handlers: render domain errors and framework errors in the
shared ``{success, message, error}`` envelope.
"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.schemas import ErrorResponse
from src.domain.errors import (
    BookingConflict,
    ConcurrentModification,
    Forbidden,
    NotFound,
    NoVehicleRegistered,
    TripError,
    TripValidationError,
)

logger = logging.getLogger(__name__)

# First match wins; anything unlisted is an internal error.
STATUS_CODES: list[tuple[type[TripError], int]] = [
    (TripValidationError, 400),
    (NoVehicleRegistered, 400),
    (BookingConflict, 400),
    (Forbidden, 403),
    (NotFound, 404),
    (ConcurrentModification, 409),
]


def status_for(exc: TripError) -> int:
    for cls, status_code in STATUS_CODES:
        if isinstance(exc, cls):
            return status_code
    return 500


async def trip_error_handler(request: Request, exc: TripError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    body = ErrorResponse(
        message=exc.message, error={"code": exc.code, **exc.details}
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    body = ErrorResponse(message=str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(mode="json"),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    body = ErrorResponse(
        message="Malformed request",
        error={"code": "invalid_request", "errors": _plain_errors(exc)},
    )
    return JSONResponse(status_code=400, content=body.model_dump(mode="json"))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s failed", request.method, request.url.path)
    body = ErrorResponse(
        message=str(exc) or "Internal server error",
        error={"code": "internal_error", "type": type(exc).__name__},
    )
    return JSONResponse(status_code=500, content=body.model_dump(mode="json"))


def _plain_errors(exc: RequestValidationError) -> list[dict[str, object]]:
    return [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
