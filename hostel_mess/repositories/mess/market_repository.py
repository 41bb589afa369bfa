"""
Market and preset grocery item repositories.
"""

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hostel_mess.core.exceptions import MarketNotFoundError
from hostel_mess.models.base.enums import GroceryCategory
from hostel_mess.models.mess import Market, PresetGroceryItem
from hostel_mess.repositories.base import BaseRepository


class MarketRepository(BaseRepository[Market]):

    def __init__(self, db: Session):
        super().__init__(Market, db)

    def find_by_name(self, name: str) -> Optional[Market]:
        stmt = select(Market).where(func.lower(Market.name) == name.strip().lower())
        return self.db.execute(stmt).scalar_one_or_none()

    def list_markets(self, active_only: bool = True) -> List[Market]:
        stmt = select(Market)
        if active_only:
            stmt = stmt.where(Market.is_active.is_(True))
        return list(self.db.execute(stmt.order_by(Market.name)).scalars().all())

    def _not_found(self, id: str) -> MarketNotFoundError:
        return MarketNotFoundError(id)


class PresetGroceryItemRepository(BaseRepository[PresetGroceryItem]):

    def __init__(self, db: Session):
        super().__init__(PresetGroceryItem, db)

    def find_by_name(self, name: str) -> Optional[PresetGroceryItem]:
        return self.find_one_by_criteria({"name": name.strip().lower()})

    def list_presets(
        self,
        category: Optional[GroceryCategory] = None,
        active_only: bool = True,
    ) -> List[PresetGroceryItem]:
        stmt = select(PresetGroceryItem)
        if category is not None:
            stmt = stmt.where(PresetGroceryItem.category == category)
        if active_only:
            stmt = stmt.where(PresetGroceryItem.is_active.is_(True))
        stmt = stmt.order_by(PresetGroceryItem.category, PresetGroceryItem.name)
        return list(self.db.execute(stmt).scalars().all())
