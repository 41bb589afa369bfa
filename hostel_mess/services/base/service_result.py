"""
Outcome type returned by every ledger operation.

A ``ServiceResult`` is either a success carrying data, or a failure
carrying exactly one tagged ``ServiceError``.
"""

from dataclasses import dataclass
from dataclasses import field as dataclass_field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

from hostel_mess.core.exceptions import BaseAppException, ErrorCode, ErrorKind


class ErrorSeverity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


_KIND_SEVERITY = {
    ErrorKind.VALIDATION: ErrorSeverity.INFO,
    ErrorKind.NOT_FOUND: ErrorSeverity.INFO,
    ErrorKind.STATE: ErrorSeverity.WARNING,
    ErrorKind.CONFLICT: ErrorSeverity.WARNING,
    ErrorKind.INTERNAL: ErrorSeverity.CRITICAL,
}


@dataclass
class ServiceError:
    """A tagged failure: code, kind, message and optional field/details."""

    code: ErrorCode
    message: str
    kind: ErrorKind = ErrorKind.INTERNAL
    severity: ErrorSeverity = ErrorSeverity.ERROR
    details: Optional[Dict[str, Any]] = None
    field: Optional[str] = None
    timestamp: datetime = dataclass_field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_exception(cls, exception: BaseAppException) -> "ServiceError":
        return cls(
            code=exception.error_code,
            message=exception.message,
            kind=exception.kind,
            severity=_KIND_SEVERITY[exception.kind],
            details=exception.details or None,
            field=exception.field,
        )

    @property
    def retryable(self) -> bool:
        """Only lost optimistic-lock races are worth retrying."""
        return self.code == ErrorCode.CONCURRENT_MODIFICATION


TData = TypeVar("TData")


@dataclass
class ServiceResult(Generic[TData]):
    is_success: bool
    data: Optional[TData] = None
    error: Optional[ServiceError] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, data: Optional[TData] = None, message: Optional[str] = None) -> "ServiceResult[TData]":
        return cls(is_success=True, data=data, message=message)

    @classmethod
    def failure(cls, error: ServiceError) -> "ServiceResult[TData]":
        return cls(is_success=False, error=error, message=error.message)

    @classmethod
    def validation_failure(
        cls,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ) -> "ServiceResult[TData]":
        return cls.failure(
            ServiceError(
                code=code,
                message=message,
                kind=ErrorKind.VALIDATION,
                severity=ErrorSeverity.INFO,
                field=field,
                details=details,
            )
        )

    @property
    def error_code(self) -> Optional[ErrorCode]:
        return self.error.code if self.error else None

    def __bool__(self) -> bool:
        return self.is_success

    def __repr__(self) -> str:
        if self.error:
            return f"ServiceResult(Failure: {self.error.code.value} {self.error.message})"
        return f"ServiceResult(Success: {self.message or type(self.data).__name__})"


__all__ = [
    "ErrorCode",
    "ErrorKind",
    "ErrorSeverity",
    "ServiceError",
    "ServiceResult",
]
