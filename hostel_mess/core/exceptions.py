"""
Custom Exceptions for the Hostel Mess Ledger

This module defines the error taxonomy used throughout the application.
Every domain rule violation is raised as a subclass of ``DomainError``
carrying a stable ``ErrorCode`` tag, an ``ErrorKind`` and enough structured
context (offending field, current and attempted values) for the API layer
to build a response without looking at storage errors.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Broad error classes; drive retry policy and transport mapping"""
    VALIDATION = "VALIDATION"
    CONFLICT = "CONFLICT"
    STATE = "STATE"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL"


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"

    # Seat & capacity
    DUPLICATE_SEAT = "DUPLICATE_SEAT"
    INVALID_OCCUPANT_BINDING = "INVALID_OCCUPANT_BINDING"
    SEAT_ALREADY_OCCUPIED = "SEAT_ALREADY_OCCUPIED"
    SEAT_CAPACITY_EXCEEDED = "SEAT_CAPACITY_EXCEEDED"
    SEAT_NOT_FOUND = "SEAT_NOT_FOUND"
    CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"

    # Hostel
    HOSTEL_NOT_FOUND = "HOSTEL_NOT_FOUND"
    DUPLICATE_SHORT_CODE = "DUPLICATE_SHORT_CODE"
    DUPLICATE_RULE_ORDER = "DUPLICATE_RULE_ORDER"
    HOSTEL_SERVICE_SUSPENDED = "HOSTEL_SERVICE_SUSPENDED"
    INVALID_COORDINATES = "INVALID_COORDINATES"
    INVALID_MEAL_WEIGHTS = "INVALID_MEAL_WEIGHTS"
    INVALID_SUSPENSION = "INVALID_SUSPENSION"

    # Membership
    USER_NOT_FOUND = "USER_NOT_FOUND"
    ALREADY_MEMBER = "ALREADY_MEMBER"
    NOT_A_MEMBER = "NOT_A_MEMBER"
    MEMBERSHIP_NOT_FOUND = "MEMBERSHIP_NOT_FOUND"
    INVALID_LEAVING_DATE = "INVALID_LEAVING_DATE"
    INVALID_DEPOSIT = "INVALID_DEPOSIT"

    # Meals
    INVALID_MEAL_COUNTS = "INVALID_MEAL_COUNTS"
    EDIT_WINDOW_CLOSED = "EDIT_WINDOW_CLOSED"

    # Grocery
    INVALID_GROCERY_ITEM = "INVALID_GROCERY_ITEM"
    BAZAR_NOT_FOUND = "BAZAR_NOT_FOUND"
    GROCERY_ITEM_NOT_FOUND = "GROCERY_ITEM_NOT_FOUND"
    MARKET_NOT_FOUND = "MARKET_NOT_FOUND"
    DUPLICATE_MARKET = "DUPLICATE_MARKET"
    DUPLICATE_PRESET = "DUPLICATE_PRESET"

    # Billing
    BILLING_PERIOD_CLOSED = "BILLING_PERIOD_CLOSED"
    BILLING_PERIOD_OVERLAP = "BILLING_PERIOD_OVERLAP"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    NO_MEALS_RECORDED = "NO_MEALS_RECORDED"
    INVALID_FINE = "INVALID_FINE"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.field = field
        super().__init__(self.message)

    @property
    def retryable(self) -> bool:
        """Only lost optimistic-concurrency races are safe to retry"""
        return self.error_code == ErrorCode.CONCURRENT_MODIFICATION

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "kind": self.kind.value,
                "field": self.field,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


class DomainError(BaseAppException):
    """Expected business-rule violation"""


# ========================================
# Kinds
# ========================================

class ValidationError(DomainError):
    """Caller supplied values that break a domain rule"""

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str = "Validation failed",
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code, details, field)


class ConflictError(DomainError):
    """Write collides with existing state"""

    kind = ErrorKind.CONFLICT

    def __init__(
        self,
        message: str = "Conflict",
        error_code: ErrorCode = ErrorCode.CONFLICT,
        details: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
    ):
        super().__init__(message, error_code, details, field)


class BusinessStateError(DomainError):
    """Operation not allowed in the current business state"""

    kind = ErrorKind.STATE

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
    ):
        super().__init__(message, error_code, details, field)


class ResourceNotFoundError(DomainError):
    """Exception raised when a requested resource is not found"""

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.NOT_FOUND,
    ):
        if not message:
            message = f"{resource_type} not found"
            if resource_id:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": resource_id
        }
        super().__init__(message, error_code, details)


class RepositoryError(BaseAppException):
    """Storage failure that matches no domain rule"""

    kind = ErrorKind.INTERNAL

    def __init__(self, message: str = "Storage operation failed"):
        super().__init__(message, ErrorCode.INTERNAL_ERROR)


# ========================================
# Not found
# ========================================

class HostelNotFoundError(ResourceNotFoundError):
    def __init__(self, hostel_id: Optional[str] = None, short_code: Optional[str] = None):
        message = None
        if short_code:
            message = f"No hostel with short code '{short_code}'"
        super().__init__("Hostel", hostel_id, message, ErrorCode.HOSTEL_NOT_FOUND)
        if short_code:
            self.details["short_code"] = short_code


class UserNotFoundError(ResourceNotFoundError):
    def __init__(self, user_id: Optional[str] = None):
        super().__init__("User", user_id, error_code=ErrorCode.USER_NOT_FOUND)


class SeatNotFoundError(ResourceNotFoundError):
    def __init__(self, seat_id: Optional[str] = None):
        super().__init__("Seat", seat_id, error_code=ErrorCode.SEAT_NOT_FOUND)


class MembershipNotFoundError(ResourceNotFoundError):
    def __init__(self, membership_id: Optional[str] = None):
        super().__init__("Membership", membership_id, error_code=ErrorCode.MEMBERSHIP_NOT_FOUND)


class BazarNotFoundError(ResourceNotFoundError):
    def __init__(self, bazar_id: Optional[str] = None):
        super().__init__("Bazar", bazar_id, error_code=ErrorCode.BAZAR_NOT_FOUND)


class GroceryItemNotFoundError(ResourceNotFoundError):
    def __init__(self, item_id: Optional[str] = None):
        super().__init__("Grocery item", item_id, error_code=ErrorCode.GROCERY_ITEM_NOT_FOUND)


class MarketNotFoundError(ResourceNotFoundError):
    def __init__(self, market_id: Optional[str] = None):
        super().__init__("Market", market_id, error_code=ErrorCode.MARKET_NOT_FOUND)


# ========================================
# Seat & capacity
# ========================================

class DuplicateSeatError(ConflictError):
    def __init__(self, hostel_id: str, seat_number: str):
        super().__init__(
            f"Seat '{seat_number}' already exists in this hostel",
            ErrorCode.DUPLICATE_SEAT,
            {"hostel_id": hostel_id, "seat_number": seat_number},
            field="seat_number",
        )


class InvalidOccupantBindingError(ValidationError):
    def __init__(self, status: str, occupant_id: Optional[str]):
        if occupant_id is None:
            message = "An occupied seat requires an occupant"
        else:
            message = f"A seat in status {status} cannot have an occupant"
        super().__init__(
            message,
            ErrorCode.INVALID_OCCUPANT_BINDING,
            field="occupant_id",
            details={"status": status, "occupant_id": occupant_id},
        )


class SeatAlreadyOccupiedError(ConflictError):
    def __init__(self, seat_id: str, current_occupant_id: str, attempted_occupant_id: str):
        super().__init__(
            "Seat is already occupied; vacate it first",
            ErrorCode.SEAT_ALREADY_OCCUPIED,
            {
                "seat_id": seat_id,
                "current_occupant_id": current_occupant_id,
                "attempted_occupant_id": attempted_occupant_id,
            },
            field="occupant_id",
        )


class SeatCapacityExceededError(ConflictError):
    def __init__(self, hostel_id: str, total: int, attempted: Dict[str, int]):
        super().__init__(
            "Occupied, available and maintenance seats cannot exceed total seats",
            ErrorCode.SEAT_CAPACITY_EXCEEDED,
            {
                "hostel_id": hostel_id,
                "total": total,
                "attempted": attempted,
                "attempted_sum": sum(attempted.values()),
            },
        )


class ConcurrentModificationError(ConflictError):
    def __init__(self, entity: str, entity_id: str, expected_version: Optional[int] = None,
                 current_version: Optional[int] = None):
        super().__init__(
            f"{entity} was modified concurrently; reload and retry",
            ErrorCode.CONCURRENT_MODIFICATION,
            {
                "entity": entity,
                "entity_id": entity_id,
                "expected_version": expected_version,
                "current_version": current_version,
            },
        )


# ========================================
# Hostel
# ========================================

class HostelServiceSuspendedError(BusinessStateError):
    def __init__(self, hostel_id: str, until: Any, reason: Optional[str]):
        super().__init__(
            "Hostel service is suspended",
            ErrorCode.HOSTEL_SERVICE_SUSPENDED,
            {
                "hostel_id": hostel_id,
                "suspended_until": until.isoformat() if until else None,
                "reason": reason,
            },
        )


# ========================================
# Membership
# ========================================

class AlreadyMemberError(ConflictError):
    def __init__(self, user_id: str, hostel_id: str):
        super().__init__(
            "User already has an active hostel membership",
            ErrorCode.ALREADY_MEMBER,
            {"user_id": user_id, "current_hostel_id": hostel_id},
        )


class NotAMemberError(BusinessStateError):
    def __init__(self, user_id: str, hostel_id: Optional[str] = None, on: Any = None):
        super().__init__(
            "User has no active membership covering this date" if on else "User has no active membership",
            ErrorCode.NOT_A_MEMBER,
            {
                "user_id": user_id,
                "hostel_id": hostel_id,
                "date": on.isoformat() if on else None,
            },
        )


# ========================================
# Meals & billing
# ========================================

class EditWindowClosedError(BusinessStateError):
    def __init__(self, meal_date: Any, closed_at: Any):
        super().__init__(
            "Meal edits for this date are no longer accepted",
            ErrorCode.EDIT_WINDOW_CLOSED,
            {"date": meal_date.isoformat(), "closed_at": closed_at.isoformat()},
            field="meal_date",
        )


class InvalidGroceryItemError(ValidationError):
    def __init__(self, message: str, field: str, value: Any):
        super().__init__(
            message,
            ErrorCode.INVALID_GROCERY_ITEM,
            field=field,
            details={"value": str(value)},
        )


class BillingPeriodClosedError(BusinessStateError):
    def __init__(self, hostel_id: str, on: Any, period_id: str):
        super().__init__(
            "A closed billing period covers this date",
            ErrorCode.BILLING_PERIOD_CLOSED,
            {"hostel_id": hostel_id, "date": on.isoformat(), "billing_period_id": period_id},
        )


class NoMealsRecordedError(BusinessStateError):
    def __init__(self, hostel_id: str, start: Any, end: Any, total_grocery_cost: Any):
        super().__init__(
            "No meals were recorded in this range; cost cannot be apportioned",
            ErrorCode.NO_MEALS_RECORDED,
            {
                "hostel_id": hostel_id,
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
                "total_grocery_cost": str(total_grocery_cost),
            },
        )


__all__ = [
    "ErrorKind",
    "ErrorCode",
    "BaseAppException",
    "DomainError",
    "ValidationError",
    "ConflictError",
    "BusinessStateError",
    "ResourceNotFoundError",
    "RepositoryError",
    "HostelNotFoundError",
    "UserNotFoundError",
    "SeatNotFoundError",
    "MembershipNotFoundError",
    "BazarNotFoundError",
    "GroceryItemNotFoundError",
    "MarketNotFoundError",
    "DuplicateSeatError",
    "InvalidOccupantBindingError",
    "SeatAlreadyOccupiedError",
    "SeatCapacityExceededError",
    "ConcurrentModificationError",
    "HostelServiceSuspendedError",
    "AlreadyMemberError",
    "NotAMemberError",
    "EditWindowClosedError",
    "InvalidGroceryItemError",
    "BillingPeriodClosedError",
    "NoMealsRecordedError",
]
