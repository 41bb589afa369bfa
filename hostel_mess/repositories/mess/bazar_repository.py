"""
Bazar and grocery item repositories.
"""

from datetime import date
from decimal import Decimal
from typing import Iterator, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from hostel_mess.core.exceptions import BazarNotFoundError, GroceryItemNotFoundError
from hostel_mess.models.mess import Bazar, GroceryItem
from hostel_mess.repositories.base import BaseRepository


class BazarRepository(BaseRepository[Bazar]):

    def __init__(self, db: Session):
        super().__init__(Bazar, db)

    def get_with_items(self, bazar_id: str) -> Bazar:
        stmt = (
            select(Bazar)
            .where(Bazar.id == bazar_id)
            .options(selectinload(Bazar.items))
        )
        bazar = self.db.execute(stmt).scalar_one_or_none()
        if bazar is None:
            raise BazarNotFoundError(bazar_id)
        return bazar

    def list_for_hostel(
        self,
        hostel_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[Bazar]:
        stmt = select(Bazar).where(Bazar.hostel_id == hostel_id)
        if start is not None:
            stmt = stmt.where(Bazar.bazar_date >= start)
        if end is not None:
            stmt = stmt.where(Bazar.bazar_date <= end)
        stmt = stmt.order_by(Bazar.bazar_date, Bazar.created_at)
        return list(self.db.execute(stmt).scalars().all())

    def sum_grand_total(self, hostel_id: str, start: date, end: date) -> Decimal:
        stmt = select(func.coalesce(func.sum(Bazar.grand_total), 0)).where(
            Bazar.hostel_id == hostel_id,
            Bazar.bazar_date >= start,
            Bazar.bazar_date <= end,
        )
        return Decimal(str(self.db.execute(stmt).scalar_one()))

    def _not_found(self, id: str) -> BazarNotFoundError:
        return BazarNotFoundError(id)


class GroceryItemRepository(BaseRepository[GroceryItem]):

    def __init__(self, db: Session):
        super().__init__(GroceryItem, db)

    def sum_for_bazar(self, bazar_id: str) -> Decimal:
        """Live sum of ``total_cost`` over the bazar's items."""
        stmt = select(func.coalesce(func.sum(GroceryItem.total_cost), 0)).where(
            GroceryItem.bazar_id == bazar_id
        )
        return Decimal(str(self.db.execute(stmt).scalar_one()))

    def iter_price_history(
        self,
        name: str,
        hostel_id: Optional[str] = None,
        market_id: Optional[str] = None,
        batch_size: int = 200,
    ) -> Iterator[Tuple[date, Decimal]]:
        """(bazar_date, price_per_unit) pairs, oldest first."""
        stmt = (
            select(Bazar.bazar_date, GroceryItem.price_per_unit)
            .join(Bazar, GroceryItem.bazar_id == Bazar.id)
            .where(GroceryItem.name == name)
        )
        if hostel_id is not None:
            stmt = stmt.where(Bazar.hostel_id == hostel_id)
        if market_id is not None:
            stmt = stmt.where(GroceryItem.market_id == market_id)
        stmt = stmt.order_by(
            Bazar.bazar_date,
            GroceryItem.created_at,
            GroceryItem.id,
        ).execution_options(yield_per=batch_size)

        for bazar_date, price in self.db.execute(stmt):
            yield bazar_date, Decimal(str(price))

    def _not_found(self, id: str) -> GroceryItemNotFoundError:
        return GroceryItemNotFoundError(id)
