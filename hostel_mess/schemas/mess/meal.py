"""
Meal record schemas.
"""

from __future__ import annotations

from datetime import date

from hostel_mess.schemas.common.base import BaseResponseSchema, BaseSchema

__all__ = ["MealCounts", "MealRecordResponse"]


class MealCounts(BaseSchema):
    """
    Own and guest meal counts for one day.

    Omitted counts are stored as zero. Range checks happen in the meal
    ledger so that failures carry the INVALID_MEAL_COUNTS tag.
    """

    breakfast: int = 0
    lunch: int = 0
    dinner: int = 0
    breakfast_guests: int = 0
    lunch_guests: int = 0
    dinner_guests: int = 0


class MealRecordResponse(BaseResponseSchema):
    hostel_id: str
    user_id: str
    meal_date: date
    breakfast: int
    lunch: int
    dinner: int
    breakfast_guests: int
    lunch_guests: int
    dinner_guests: int
