"""
FastAPI dependencies: database session, clock, caller identity and
service factories.

Example usage in a router:
    @router.get("/hostels/{hostel_id}")
    def read_hostel(hostel_id: str, service: HostelService = Depends(deps.get_hostel_service)):
        ...
"""
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from hostel_mess.core.logging import user_id as user_id_var
from hostel_mess.db.session import get_db
from hostel_mess.services import (
    BillingService,
    GroceryCatalogService,
    GroceryLedgerService,
    HostelService,
    MealLedgerService,
    MembershipService,
    SeatLedgerService,
)
from hostel_mess.utils.date_utils import Clock, SystemClock

_system_clock = SystemClock()


# ------------------------------------------------------------------ #
# Context
# ------------------------------------------------------------------ #
def get_clock() -> Clock:
    """Overridden in tests with a ``FixedClock``."""
    return _system_clock


def get_current_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> str:
    """
    Authenticated user id forwarded by the upstream gateway.

    Raises 401 when the header is missing or blank.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id header is required",
        )
    current = x_user_id.strip()
    user_id_var.set(current)
    return current


# ------------------------------------------------------------------ #
# Service factories
# ------------------------------------------------------------------ #
def get_seat_ledger_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> SeatLedgerService:
    return SeatLedgerService(db, clock)


def get_hostel_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> HostelService:
    return HostelService(db, clock)


def get_membership_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> MembershipService:
    return MembershipService(db, clock)


def get_meal_ledger_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> MealLedgerService:
    return MealLedgerService(db, clock)


def get_grocery_ledger_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> GroceryLedgerService:
    return GroceryLedgerService(db, clock)


def get_grocery_catalog_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> GroceryCatalogService:
    return GroceryCatalogService(db, clock)


def get_billing_service(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> BillingService:
    return BillingService(db, clock)


__all__ = [
    "get_db",
    "get_clock",
    "get_current_user_id",
    "get_seat_ledger_service",
    "get_hostel_service",
    "get_membership_service",
    "get_meal_ledger_service",
    "get_grocery_ledger_service",
    "get_grocery_catalog_service",
    "get_billing_service",
]
