"""
Seat schemas.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import Field

from hostel_mess.models.base.enums import SeatStatus
from hostel_mess.schemas.common.base import BaseCreateSchema, BaseResponseSchema, BaseSchema
from hostel_mess.schemas.hostel.hostel import SeatSummary

__all__ = [
    "SeatCreate",
    "SeatStatusUpdate",
    "SeatTotalUpdate",
    "SeatResponse",
    "SeatReconcileReport",
]


class SeatCreate(BaseCreateSchema):
    seat_number: str = Field(..., min_length=1, max_length=20)
    room_number: str = Field(..., min_length=1, max_length=20)
    rent: Decimal = Field(Decimal("0"), ge=0)


class SeatStatusUpdate(BaseSchema):
    status: SeatStatus
    occupant_id: Optional[str] = None
    expected_version: Optional[int] = Field(None, ge=1)


class SeatTotalUpdate(BaseSchema):
    total: int = Field(..., ge=0)


class SeatResponse(BaseResponseSchema):
    hostel_id: str
    seat_number: str
    room_number: str
    status: SeatStatus
    rent: Decimal
    occupant_id: Optional[str] = None
    version: int


class SeatReconcileReport(BaseSchema):
    hostel_id: str
    before: SeatSummary
    after: SeatSummary
    drift: bool
