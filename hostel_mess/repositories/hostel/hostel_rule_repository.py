"""
Hostel rule repository.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from hostel_mess.models.hostel import HostelRule
from hostel_mess.repositories.base import BaseRepository


class HostelRuleRepository(BaseRepository[HostelRule]):

    def __init__(self, db: Session):
        super().__init__(HostelRule, db)

    def list_for_hostel(self, hostel_id: str) -> List[HostelRule]:
        stmt = (
            select(HostelRule)
            .where(HostelRule.hostel_id == hostel_id)
            .order_by(HostelRule.order)
        )
        return list(self.db.execute(stmt).scalars().all())

    def find_by_order(self, hostel_id: str, order: int) -> Optional[HostelRule]:
        return self.find_one_by_criteria({"hostel_id": hostel_id, "order": order})
