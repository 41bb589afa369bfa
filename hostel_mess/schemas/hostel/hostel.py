"""
Hostel, rule, suspension and fine schemas.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import Field, field_validator

from hostel_mess.models.base.enums import HostelType, RuleLevel
from hostel_mess.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)

__all__ = [
    "LocationSchema",
    "HostelCreate",
    "SeatSummary",
    "HostelResponse",
    "HostelRuleCreate",
    "HostelRuleResponse",
    "MealWeightsUpdate",
    "SuspensionRequest",
    "FineCreate",
    "FineResponse",
]


class LocationSchema(BaseSchema):
    """GeoJSON-style point: [longitude, latitude]."""

    coordinates: List[Decimal] = Field(..., min_length=2, max_length=2)


class HostelCreate(BaseCreateSchema):
    name: str = Field(..., min_length=2, max_length=255)
    short_code: str = Field(..., min_length=2, max_length=10, description="Join code")
    hostel_type: HostelType
    address: Optional[str] = Field(None, max_length=500)
    total_seats: int = Field(..., ge=1)
    location: Optional[LocationSchema] = None
    manager_id: Optional[str] = None

    @field_validator("short_code")
    @classmethod
    def upper_short_code(cls, v: str) -> str:
        return v.upper()


class SeatSummary(BaseSchema):
    total: int
    occupied: int
    available_for_rent: int
    in_maintenance: int


class HostelResponse(BaseResponseSchema):
    name: str
    short_code: str
    hostel_type: HostelType
    address: Optional[str] = None
    owner_id: str
    manager_id: Optional[str] = None
    longitude: Optional[Decimal] = None
    latitude: Optional[Decimal] = None
    seat_summary: SeatSummary
    service_suspended_at: Optional[datetime] = None
    service_suspended_until: Optional[datetime] = None
    service_suspension_reason: Optional[str] = None
    breakfast_weight: Decimal
    lunch_weight: Decimal
    dinner_weight: Decimal
    version: int


class HostelRuleCreate(BaseCreateSchema):
    order: int = Field(..., ge=1)
    level: RuleLevel = RuleLevel.INFO
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    fine: Optional[str] = Field(None, max_length=100)


class HostelRuleResponse(BaseResponseSchema):
    hostel_id: str
    order: int
    level: RuleLevel
    title: str
    description: Optional[str] = None
    fine: Optional[str] = None


class MealWeightsUpdate(BaseUpdateSchema):
    breakfast: Decimal
    lunch: Decimal
    dinner: Decimal


class SuspensionRequest(BaseSchema):
    until: datetime
    reason: Optional[str] = Field(None, max_length=500)


class FineCreate(BaseCreateSchema):
    user_id: str
    amount: Decimal
    issued_on: date
    reason: Optional[str] = None
    rule_id: Optional[str] = None


class FineResponse(BaseResponseSchema):
    hostel_id: str
    user_id: str
    rule_id: Optional[str] = None
    amount: Decimal
    issued_on: date
    reason: Optional[str] = None
    issued_by: Optional[str] = None
