"""
Data access layer.

Repositories wrap one model each and never commit; services own the
transaction boundary.
"""

from hostel_mess.repositories.base import BaseRepository
from hostel_mess.repositories.hostel import (
    FineRepository,
    HostelRepository,
    HostelRuleRepository,
    MembershipRepository,
)
from hostel_mess.repositories.room import SeatRepository
from hostel_mess.repositories.user import UserRepository
from hostel_mess.repositories.mess import (
    BazarRepository,
    BillingPeriodRepository,
    GroceryItemRepository,
    MarketRepository,
    MealRecordRepository,
    PresetGroceryItemRepository,
)

__all__ = [
    "BaseRepository",
    "HostelRepository",
    "HostelRuleRepository",
    "MembershipRepository",
    "FineRepository",
    "SeatRepository",
    "UserRepository",
    "MealRecordRepository",
    "BazarRepository",
    "GroceryItemRepository",
    "MarketRepository",
    "PresetGroceryItemRepository",
    "BillingPeriodRepository",
]
