"""
Grocery runs ("bazar") and their line items.
"""

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostel_mess.models.base.base_model import TenantModel, TimestampModel
from hostel_mess.models.base.enums import GroceryCategory, GroceryUnit

if TYPE_CHECKING:
    from hostel_mess.models.mess.market import Market


class Bazar(TenantModel):
    """
    A single shopping run.

    ``grand_total`` always equals the sum of its items' ``total_cost``;
    it is recomputed from the items on every item mutation.
    """

    __tablename__ = "bazars"
    __table_args__ = (
        CheckConstraint("grand_total >= 0", name="ck_bazars_grand_total_non_negative"),
        Index("ix_bazars_hostel_date", "hostel_id", "bazar_date"),
    )

    added_by: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
    )
    bazar_date: Mapped[date] = mapped_column(Date, nullable=False)
    grand_total: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0"),
    )
    receipts: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Receipt image URLs",
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    items: Mapped[List["GroceryItem"]] = relationship(
        "GroceryItem",
        back_populates="bazar",
        order_by="GroceryItem.created_at",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Bazar(id={self.id}, bazar_date={self.bazar_date}, grand_total={self.grand_total})>"


class GroceryItem(TimestampModel):
    """Line item of a bazar."""

    __tablename__ = "grocery_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_grocery_items_quantity_positive"),
        CheckConstraint("price_per_unit >= 0", name="ck_grocery_items_price_non_negative"),
        Index("ix_grocery_items_name", "name"),
    )

    bazar_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("bazars.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    market_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("markets.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    category: Mapped[GroceryCategory] = mapped_column(
        nullable=False,
        default=GroceryCategory.OTHER,
    )
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    unit: Mapped[GroceryUnit] = mapped_column(nullable=False)
    price_per_unit: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    total_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    bazar: Mapped["Bazar"] = relationship("Bazar", back_populates="items")
    market: Mapped[Optional["Market"]] = relationship("Market")

    def __repr__(self) -> str:
        return f"<GroceryItem(name={self.name}, total_cost={self.total_cost})>"
