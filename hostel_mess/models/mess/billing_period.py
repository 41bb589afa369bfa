"""
Closed billing periods.

Once a period is closed, meal and bazar edits dated inside it are
rejected. Closed periods of one hostel never overlap.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from hostel_mess.models.base.base_model import TenantModel


class BillingPeriod(TenantModel):
    __tablename__ = "billing_periods"
    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="ck_billing_periods_range"),
        Index("ix_billing_periods_hostel_range", "hostel_id", "start_date", "end_date"),
    )

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    closed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    closed_by: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=True,
    )

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def __repr__(self) -> str:
        return f"<BillingPeriod(hostel_id={self.hostel_id}, {self.start_date}..{self.end_date})>"
