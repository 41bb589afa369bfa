"""
Ordered hostel rules with severity and fine text.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostel_mess.models.base.base_model import TenantModel
from hostel_mess.models.base.enums import RuleLevel

if TYPE_CHECKING:
    from hostel_mess.models.hostel.hostel import Hostel


class HostelRule(TenantModel):
    """A single house rule; rules are shown in ``order``."""

    __tablename__ = "hostel_rules"
    __table_args__ = (
        UniqueConstraint("hostel_id", "order", name="uq_hostel_rules_hostel_order"),
    )

    order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Display position within the hostel",
    )
    level: Mapped[RuleLevel] = mapped_column(
        nullable=False,
        default=RuleLevel.INFO,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    fine: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        comment="Fine as free text, e.g. '200 per incident'",
    )

    hostel: Mapped["Hostel"] = relationship("Hostel", back_populates="rules")
