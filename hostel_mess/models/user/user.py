"""
User identity model.

Authentication happens upstream; this table only carries the identity
fields the ledgers reference and the cached current-hostel pointer.
"""

from typing import Optional

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from hostel_mess.models.base.base_model import TimestampModel


class User(TimestampModel):
    """Hostel resident, manager or owner."""

    __tablename__ = "users"

    name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Display name",
    )
    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        unique=True,
        comment="Email address",
    )
    phone: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
        unique=True,
        comment="Phone number",
    )
    image: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
        comment="Avatar URL",
    )

    # Cached pointer kept in sync with the active membership
    current_hostel_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey(
            "hostels.id",
            ondelete="SET NULL",
            use_alter=True,
            name="fk_users_current_hostel_id",
        ),
        nullable=True,
        index=True,
        comment="Hostel of the active membership",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name={self.name})>"
