"""
Translate failed ``ServiceResult``s and request validation errors into
the API error envelope ``{"error": {code, kind, message, field, details}}``.
"""
from __future__ import annotations

from typing import Optional, TypeVar

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from hostel_mess.core.exceptions import ErrorCode, ErrorKind
from hostel_mess.core.logging import get_logger
from hostel_mess.schemas.common import ErrorBody, ErrorResponse
from hostel_mess.services.base import ServiceError, ServiceResult

logger = get_logger(__name__)

T = TypeVar("T")

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.STATE: status.HTTP_409_CONFLICT,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# State errors caused by a lock on the hostel or its calendar.
LOCKED_CODES = frozenset(
    {
        ErrorCode.HOSTEL_SERVICE_SUSPENDED,
        ErrorCode.BILLING_PERIOD_CLOSED,
        ErrorCode.EDIT_WINDOW_CLOSED,
    }
)


class ServiceFailure(Exception):
    """Raised by endpoints to hand a failed result to the exception handler."""

    def __init__(self, error: ServiceError):
        self.error = error
        super().__init__(error.message)


def status_for(error: ServiceError) -> int:
    if error.code in LOCKED_CODES:
        return status.HTTP_423_LOCKED
    return STATUS_BY_KIND.get(error.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


def unwrap(result: ServiceResult[T]) -> T:
    """Return the result data or raise ``ServiceFailure``."""
    if not result.is_success:
        raise ServiceFailure(result.error)
    return result.data


def error_response(body: ErrorBody, status_code: int, request_id: Optional[str] = None) -> JSONResponse:
    headers = {"X-Request-ID": request_id} if request_id else None
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(ErrorResponse(error=body)),
        headers=headers,
    )


async def service_failure_handler(request: Request, exc: ServiceFailure) -> JSONResponse:
    error = exc.error
    body = ErrorBody(
        code=error.code.value,
        kind=error.kind.value,
        message=error.message,
        field=error.field,
        details=error.details,
    )
    return error_response(body, status_for(error), getattr(request.state, "request_id", None))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    field_errors = {}
    for error in exc.errors():
        field_path = ".".join(str(x) for x in error["loc"])
        field_errors[field_path] = {"message": error["msg"], "type": error["type"]}

    logger.info(
        f"Request validation failed: {len(field_errors)} field(s)",
        extra={"path": request.url.path, "field_errors": field_errors},
    )
    first_field = next(iter(field_errors), None)
    body = ErrorBody(
        code=ErrorCode.VALIDATION_ERROR.value,
        kind=ErrorKind.VALIDATION.value,
        message="Request validation failed",
        field=first_field,
        details={"field_errors": field_errors},
    )
    return error_response(
        body,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        getattr(request.state, "request_id", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceFailure, service_failure_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)


__all__ = [
    "ServiceFailure",
    "status_for",
    "unwrap",
    "register_exception_handlers",
]
