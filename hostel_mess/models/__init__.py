"""
ORM models.

Importing this package registers every table on ``Base.metadata``.
"""

from hostel_mess.models.base import Base
from hostel_mess.models.user import User
from hostel_mess.models.hostel import Fine, Hostel, HostelMembership, HostelRule
from hostel_mess.models.room import Seat
from hostel_mess.models.mess import (
    Bazar,
    BillingPeriod,
    GroceryItem,
    Market,
    MealRecord,
    PresetGroceryItem,
)

__all__ = [
    "Base",
    "User",
    "Hostel",
    "HostelRule",
    "HostelMembership",
    "Fine",
    "Seat",
    "MealRecord",
    "Bazar",
    "GroceryItem",
    "Market",
    "PresetGroceryItem",
    "BillingPeriod",
]
