"""
Membership schemas.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from hostel_mess.schemas.common.base import BaseCreateSchema, BaseResponseSchema, BaseSchema

__all__ = [
    "JoinHostelRequest",
    "LeaveHostelRequest",
    "SecurityDepositRequest",
    "MembershipResponse",
]


class JoinHostelRequest(BaseCreateSchema):
    short_code: str = Field(..., min_length=2, max_length=10)
    join_date: date
    seat_id: Optional[str] = None


class LeaveHostelRequest(BaseSchema):
    leaving_date: date


class SecurityDepositRequest(BaseSchema):
    amount: Decimal
    paid_at: Optional[datetime] = None


class MembershipResponse(BaseResponseSchema):
    hostel_id: str
    user_id: str
    joined_on: date
    leaving_date: Optional[date] = None
    seat_id: Optional[str] = None
    security_paid: bool
    security_amount: Optional[Decimal] = None
    agreed_at: Optional[datetime] = None
