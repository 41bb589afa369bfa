"""
Hostel core model with seat summary, suspension window and meal weights.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Dict, List, Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostel_mess.models.base.base_model import TimestampModel
from hostel_mess.models.base.enums import HostelType, MealType
from hostel_mess.models.base.mixins import LocationMixin

if TYPE_CHECKING:
    from hostel_mess.models.hostel.hostel_rule import HostelRule


class Hostel(TimestampModel, LocationMixin):
    """
    Core hostel entity.

    The ``seats_*`` counters are a cached projection of the hostel's Seat
    records; only the seat ledger writes them.
    """

    __tablename__ = "hostels"
    __table_args__ = (
        CheckConstraint("seats_total >= 0", name="ck_hostels_seats_total_non_negative"),
        CheckConstraint(
            "seats_occupied >= 0 AND seats_available_for_rent >= 0 AND seats_in_maintenance >= 0",
            name="ck_hostels_seat_counts_non_negative",
        ),
        CheckConstraint(
            "seats_occupied + seats_available_for_rent + seats_in_maintenance <= seats_total",
            name="ck_hostels_seat_sum_within_total",
        ),
    )

    # Basic Information
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Hostel name",
    )
    short_code: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        unique=True,
        index=True,
        comment="Shareable join code, stored uppercase",
    )
    hostel_type: Mapped[HostelType] = mapped_column(
        nullable=False,
        index=True,
        comment="Hostel type (boys/girls)",
    )
    address: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Street address",
    )

    # Ownership
    owner_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        comment="Owner (manager) who created the hostel",
    )
    manager_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=True,
        comment="Delegated manager",
    )

    # Seat summary
    seats_total: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Manager-set seat capacity",
    )
    seats_occupied: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Seats with an occupant",
    )
    seats_available_for_rent: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Vacant rentable seats",
    )
    seats_in_maintenance: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Seats out of service",
    )

    # Panic lock
    service_suspended_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Start of the current service suspension",
    )
    service_suspended_until: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="End of the current service suspension",
    )
    service_suspension_reason: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Why service was suspended",
    )

    # Meal unit weights used for billing
    breakfast_weight: Mapped[Decimal] = mapped_column(
        Numeric(6, 3),
        nullable=False,
        default=Decimal("0.5"),
    )
    lunch_weight: Mapped[Decimal] = mapped_column(
        Numeric(6, 3),
        nullable=False,
        default=Decimal("1"),
    )
    dinner_weight: Mapped[Decimal] = mapped_column(
        Numeric(6, 3),
        nullable=False,
        default=Decimal("1"),
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    rules: Mapped[List["HostelRule"]] = relationship(
        "HostelRule",
        back_populates="hostel",
        order_by="HostelRule.order",
        cascade="all, delete-orphan",
    )

    @property
    def seat_summary(self) -> Dict[str, int]:
        return {
            "total": self.seats_total,
            "occupied": self.seats_occupied,
            "available_for_rent": self.seats_available_for_rent,
            "in_maintenance": self.seats_in_maintenance,
        }

    @property
    def meal_weights(self) -> Dict[MealType, Decimal]:
        return {
            MealType.BREAKFAST: Decimal(self.breakfast_weight),
            MealType.LUNCH: Decimal(self.lunch_weight),
            MealType.DINNER: Decimal(self.dinner_weight),
        }

    def __repr__(self) -> str:
        return f"<Hostel(id={self.id}, short_code={self.short_code})>"
