"""
Declarative base and abstract models shared by every ledger table.

Every row has a string UUID primary key. Hostel-scoped rows carry a
``hostel_id`` that cascades on hostel deletion.
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, declarative_base, mapped_column
from sqlalchemy.sql import func

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())


class BaseModel(Base):
    """Abstract root: UUID key and a readable repr."""

    __abstract__ = True

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=new_id,
        comment="Primary key (UUID)",
    )

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id})>"


class TimestampModel(BaseModel):
    """Adds ``created_at`` and an ``updated_at`` refreshed on every UPDATE."""

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
    )


class TenantModel(TimestampModel):
    """A record that belongs to exactly one hostel."""

    __abstract__ = True

    hostel_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("hostels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
