"""
Bazar (grocery run) and grocery item schemas.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from hostel_mess.models.base.enums import GroceryCategory, GroceryUnit
from hostel_mess.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)

__all__ = [
    "BazarCreate",
    "GroceryItemCreate",
    "GroceryItemUpdate",
    "GroceryItemResponse",
    "BazarResponse",
    "PricePoint",
]


class BazarCreate(BaseCreateSchema):
    bazar_date: date
    receipts: List[str] = Field(default_factory=list)


class GroceryItemCreate(BaseCreateSchema):
    name: str
    category: GroceryCategory = GroceryCategory.OTHER
    quantity: Decimal
    unit: GroceryUnit
    price_per_unit: Decimal
    market_id: Optional[str] = None


class GroceryItemUpdate(BaseUpdateSchema):
    name: Optional[str] = None
    category: Optional[GroceryCategory] = None
    quantity: Optional[Decimal] = None
    unit: Optional[GroceryUnit] = None
    price_per_unit: Optional[Decimal] = None
    market_id: Optional[str] = None


class GroceryItemResponse(BaseResponseSchema):
    bazar_id: str
    market_id: Optional[str] = None
    name: str
    category: GroceryCategory
    quantity: Decimal
    unit: GroceryUnit
    price_per_unit: Decimal
    total_cost: Decimal


class BazarResponse(BaseResponseSchema):
    hostel_id: str
    added_by: str
    bazar_date: date
    grand_total: Decimal
    receipts: List[str] = Field(default_factory=list)
    version: int
    items: List[GroceryItemResponse] = Field(default_factory=list)


class PricePoint(BaseSchema):
    bazar_date: date
    price_per_unit: Decimal
