"""
Service layer.

Every public operation returns a ``ServiceResult`` and runs in a single
transaction that is rolled back on any failure.
"""

from hostel_mess.services.base import BaseService, ServiceError, ServiceResult
from hostel_mess.services.room import SeatLedgerService
from hostel_mess.services.hostel import HostelService, MembershipService
from hostel_mess.services.mess import (
    BillingService,
    GroceryCatalogService,
    GroceryLedgerService,
    MealLedgerService,
)

__all__ = [
    "BaseService",
    "ServiceError",
    "ServiceResult",
    "SeatLedgerService",
    "HostelService",
    "MembershipService",
    "MealLedgerService",
    "GroceryLedgerService",
    "GroceryCatalogService",
    "BillingService",
]
