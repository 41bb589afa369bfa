"""
Meal record repository.
"""

from datetime import date
from typing import Iterator, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from hostel_mess.models.mess import MealRecord
from hostel_mess.repositories.base import BaseRepository


class MealRecordRepository(BaseRepository[MealRecord]):

    def __init__(self, db: Session):
        super().__init__(MealRecord, db)

    def find_for_user_date(
        self,
        user_id: str,
        meal_date: date,
        for_update: bool = False,
    ) -> Optional[MealRecord]:
        stmt = select(MealRecord).where(
            MealRecord.user_id == user_id,
            MealRecord.meal_date == meal_date,
        )
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalar_one_or_none()

    def iter_for_period(
        self,
        hostel_id: str,
        start: date,
        end: date,
        batch_size: int = 500,
    ) -> Iterator[MealRecord]:
        """Stream records in the closed range, ordered by date then user."""
        stmt = (
            select(MealRecord)
            .where(
                MealRecord.hostel_id == hostel_id,
                MealRecord.meal_date >= start,
                MealRecord.meal_date <= end,
            )
            .order_by(MealRecord.meal_date, MealRecord.user_id)
            .execution_options(yield_per=batch_size)
        )
        for record in self.db.execute(stmt).scalars():
            yield record
