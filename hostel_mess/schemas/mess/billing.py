"""
Billing period and bill report schemas.

``BillReport`` carries no timestamps of its own, so computing the same
range twice over unchanged data yields equal reports.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from hostel_mess.schemas.common.base import BaseCreateSchema, BaseResponseSchema, BaseSchema

__all__ = [
    "BillingPeriodCreate",
    "BillingPeriodResponse",
    "MemberBill",
    "BillReport",
]


class BillingPeriodCreate(BaseCreateSchema):
    start_date: date
    end_date: date


class BillingPeriodResponse(BaseResponseSchema):
    hostel_id: str
    start_date: date
    end_date: date
    closed_at: datetime
    closed_by: Optional[str] = None


class MemberBill(BaseSchema):
    user_id: str
    meal_units: Decimal
    meal_cost: Decimal
    seat_rent: Decimal
    fines: Decimal
    total: Decimal


class BillReport(BaseSchema):
    hostel_id: str
    start_date: date
    end_date: date
    currency: str
    total_grocery_cost: Decimal
    total_meal_units: Decimal
    cost_per_meal_unit: Decimal = Field(..., description="Unrounded ratio, for display")
    is_closed: bool
    members: List[MemberBill] = Field(default_factory=list)
    total_meal_cost: Decimal
    total_billed: Decimal
