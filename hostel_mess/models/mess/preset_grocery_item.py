"""
Preset grocery names offered when recording bazar items.
"""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from hostel_mess.models.base.base_model import TimestampModel
from hostel_mess.models.base.enums import GroceryCategory, GroceryUnit


class PresetGroceryItem(TimestampModel):
    """System (``is_custom=False``) or manager-added preset."""

    __tablename__ = "preset_grocery_items"

    name: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    category: Mapped[GroceryCategory] = mapped_column(nullable=False, index=True)
    default_unit: Mapped[GroceryUnit] = mapped_column(nullable=False)
    is_custom: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
