"""
Billing period repository.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from hostel_mess.models.mess import BillingPeriod
from hostel_mess.repositories.base import BaseRepository


class BillingPeriodRepository(BaseRepository[BillingPeriod]):

    def __init__(self, db: Session):
        super().__init__(BillingPeriod, db)

    def find_covering(self, hostel_id: str, day: date) -> Optional[BillingPeriod]:
        stmt = select(BillingPeriod).where(
            BillingPeriod.hostel_id == hostel_id,
            BillingPeriod.start_date <= day,
            BillingPeriod.end_date >= day,
        )
        return self.db.execute(stmt).scalars().first()

    def find_overlapping(self, hostel_id: str, start: date, end: date) -> Optional[BillingPeriod]:
        stmt = select(BillingPeriod).where(
            BillingPeriod.hostel_id == hostel_id,
            BillingPeriod.start_date <= end,
            BillingPeriod.end_date >= start,
        )
        return self.db.execute(stmt).scalars().first()

    def list_for_hostel(self, hostel_id: str) -> List[BillingPeriod]:
        return self.find_by_criteria({"hostel_id": hostel_id}, order_by=["start_date"])
