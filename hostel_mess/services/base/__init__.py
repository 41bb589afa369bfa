from hostel_mess.services.base.base_service import BaseService
from hostel_mess.services.base.service_result import (
    ErrorCode,
    ErrorKind,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)

__all__ = [
    "BaseService",
    "ErrorCode",
    "ErrorKind",
    "ErrorSeverity",
    "ServiceError",
    "ServiceResult",
]
