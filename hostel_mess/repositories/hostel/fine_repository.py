"""
Fine repository.
"""

from datetime import date
from decimal import Decimal
from typing import Dict

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hostel_mess.models.hostel import Fine
from hostel_mess.repositories.base import BaseRepository


class FineRepository(BaseRepository[Fine]):

    def __init__(self, db: Session):
        super().__init__(Fine, db)

    def totals_by_user(self, hostel_id: str, start: date, end: date) -> Dict[str, Decimal]:
        """Sum of fines per user with ``issued_on`` inside the closed range."""
        stmt = (
            select(Fine.user_id, func.sum(Fine.amount))
            .where(
                Fine.hostel_id == hostel_id,
                Fine.issued_on >= start,
                Fine.issued_on <= end,
            )
            .group_by(Fine.user_id)
        )
        return {
            user_id: Decimal(str(total))
            for user_id, total in self.db.execute(stmt).all()
        }
