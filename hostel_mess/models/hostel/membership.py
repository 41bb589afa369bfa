"""
Hostel membership: the (hostel, user) relation with its own lifecycle.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from hostel_mess.models.base.base_model import TenantModel


class HostelMembership(TenantModel):
    """
    A user's stay in a hostel.

    Covers days from ``joined_on`` up to but not including ``leaving_date``.
    At most one open (no leaving date) membership exists per user.
    """

    __tablename__ = "hostel_memberships"
    __table_args__ = (
        CheckConstraint(
            "leaving_date IS NULL OR leaving_date >= joined_on",
            name="ck_hostel_memberships_leaving_after_join",
        ),
        Index(
            "uq_hostel_memberships_open_user",
            "user_id",
            unique=True,
            sqlite_where=text("leaving_date IS NULL"),
            postgresql_where=text("leaving_date IS NULL"),
        ),
        Index("ix_hostel_memberships_hostel_user", "hostel_id", "user_id"),
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    joined_on: Mapped[date] = mapped_column(Date, nullable=False)
    leaving_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    seat_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("seats.id", ondelete="SET NULL"),
        nullable=True,
        comment="Seat assigned on joining",
    )

    # Security deposit
    security_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    security_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    agreed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="When the member accepted the agreement / paid the deposit",
    )

    def __repr__(self) -> str:
        return (
            f"<HostelMembership(hostel_id={self.hostel_id}, user_id={self.user_id}, "
            f"joined_on={self.joined_on}, leaving_date={self.leaving_date})>"
        )
