"""
Fines issued to members for rule violations.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Date, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hostel_mess.models.base.base_model import TenantModel


class Fine(TenantModel):
    """Manually issued fine; billed in the period containing ``issued_on``."""

    __tablename__ = "fines"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_fines_amount_positive"),
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rule_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("hostel_rules.id", ondelete="SET NULL"),
        nullable=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    issued_on: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    issued_by: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=True,
    )
