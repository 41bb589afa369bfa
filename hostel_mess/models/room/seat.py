"""
Seat inventory model.

Seat rows are the source of truth for occupancy; the hostel's
``seats_*`` counters are derived from them.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from hostel_mess.models.base.base_model import TenantModel
from hostel_mess.models.base.enums import SeatStatus


class Seat(TenantModel):
    """
    A single rentable seat.

    ``status`` is OCCUPIED exactly when ``occupant_id`` is set.
    """

    __tablename__ = "seats"
    __table_args__ = (
        UniqueConstraint("seat_number", "hostel_id", name="uq_seats_number_hostel"),
        CheckConstraint(
            "(status = 'OCCUPIED' AND occupant_id IS NOT NULL) "
            "OR (status != 'OCCUPIED' AND occupant_id IS NULL)",
            name="ck_seats_occupant_binding",
        ),
        CheckConstraint("rent >= 0", name="ck_seats_rent_non_negative"),
    )

    seat_number: Mapped[str] = mapped_column(String(20), nullable=False)
    room_number: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[SeatStatus] = mapped_column(
        nullable=False,
        default=SeatStatus.AVAILABLE_FOR_RENT,
        index=True,
    )
    rent: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0"),
        comment="Flat rent per billing period",
    )
    occupant_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=True,
        index=True,
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    @property
    def is_occupied(self) -> bool:
        return self.status == SeatStatus.OCCUPIED

    def __repr__(self) -> str:
        return (
            f"<Seat(hostel_id={self.hostel_id}, seat_number={self.seat_number}, "
            f"status={self.status})>"
        )
