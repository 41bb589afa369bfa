"""
Markets where groceries are bought.
"""

from typing import Optional

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hostel_mess.models.base.base_model import TimestampModel
from hostel_mess.models.base.mixins import LocationMixin


class Market(TimestampModel, LocationMixin):
    __tablename__ = "markets"

    name: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    def __repr__(self) -> str:
        return f"<Market(name={self.name})>"
