"""
Per-user, per-day meal counts.
"""

from datetime import date
from decimal import Decimal
from typing import Dict

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hostel_mess.models.base.base_model import TenantModel
from hostel_mess.models.base.enums import MealType

MEAL_COUNT_FIELDS = (
    "breakfast",
    "lunch",
    "dinner",
    "breakfast_guests",
    "lunch_guests",
    "dinner_guests",
)


class MealRecord(TenantModel):
    """
    One row per (user, meal_date); edits update it in place.
    """

    __tablename__ = "meal_records"
    __table_args__ = (
        UniqueConstraint("user_id", "meal_date", name="uq_meal_records_user_date"),
        CheckConstraint(
            "breakfast >= 0 AND lunch >= 0 AND dinner >= 0 "
            "AND breakfast_guests >= 0 AND lunch_guests >= 0 AND dinner_guests >= 0",
            name="ck_meal_records_counts_non_negative",
        ),
        Index("ix_meal_records_hostel_date", "hostel_id", "meal_date"),
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    meal_date: Mapped[date] = mapped_column(Date, nullable=False)

    breakfast: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    lunch: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    dinner: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    breakfast_guests: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    lunch_guests: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    dinner_guests: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def counts(self) -> Dict[str, int]:
        return {name: getattr(self, name) or 0 for name in MEAL_COUNT_FIELDS}

    def meal_units(self, weights: Dict[MealType, Decimal]) -> Decimal:
        """Own plus guest meals, weighted per meal type."""
        return (
            weights[MealType.BREAKFAST] * ((self.breakfast or 0) + (self.breakfast_guests or 0))
            + weights[MealType.LUNCH] * ((self.lunch or 0) + (self.lunch_guests or 0))
            + weights[MealType.DINNER] * ((self.dinner or 0) + (self.dinner_guests or 0))
        )

    def __repr__(self) -> str:
        return f"<MealRecord(user_id={self.user_id}, meal_date={self.meal_date})>"
