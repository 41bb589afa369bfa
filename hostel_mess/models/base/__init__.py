"""
Base models package.

Provides base classes, mixins and enums for all database models.
"""

from hostel_mess.models.base.base_model import (
    Base,
    BaseModel,
    TimestampModel,
    TenantModel,
    utcnow,
)
from hostel_mess.models.base.mixins import LocationMixin
from hostel_mess.models.base.enums import (
    HostelType,
    RuleLevel,
    SeatStatus,
    GroceryCategory,
    GroceryUnit,
    MealType,
)

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "TenantModel",
    "utcnow",
    "LocationMixin",
    "HostelType",
    "RuleLevel",
    "SeatStatus",
    "GroceryCategory",
    "GroceryUnit",
    "MealType",
]
