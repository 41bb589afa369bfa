"""
Market and preset grocery item schemas.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import Field

from hostel_mess.models.base.enums import GroceryCategory, GroceryUnit
from hostel_mess.schemas.common.base import BaseCreateSchema, BaseResponseSchema, BaseSchema
from hostel_mess.schemas.hostel.hostel import LocationSchema

__all__ = [
    "MarketCreate",
    "MarketActiveUpdate",
    "MarketResponse",
    "PresetCreate",
    "PresetResponse",
]


class MarketCreate(BaseCreateSchema):
    name: str = Field(..., min_length=1, max_length=120)
    location: Optional[LocationSchema] = None
    description: Optional[str] = None


class MarketActiveUpdate(BaseSchema):
    is_active: bool


class MarketResponse(BaseResponseSchema):
    name: str
    description: Optional[str] = None
    longitude: Optional[Decimal] = None
    latitude: Optional[Decimal] = None
    is_active: bool


class PresetCreate(BaseCreateSchema):
    name: str = Field(..., min_length=1, max_length=120)
    category: GroceryCategory
    default_unit: GroceryUnit


class PresetResponse(BaseResponseSchema):
    name: str
    category: GroceryCategory
    default_unit: GroceryUnit
    is_custom: bool
    is_active: bool
