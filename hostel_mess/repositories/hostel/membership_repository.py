"""
Membership repository.

All date predicates follow the half-open coverage window
``joined_on <= day < leaving_date`` (open-ended when no leaving date).
"""

from datetime import date
from typing import List, Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from hostel_mess.core.exceptions import MembershipNotFoundError
from hostel_mess.models.hostel import HostelMembership
from hostel_mess.repositories.base import BaseRepository


class MembershipRepository(BaseRepository[HostelMembership]):

    def __init__(self, db: Session):
        super().__init__(HostelMembership, db)

    def find_active_for_user(self, user_id: str, today: date) -> Optional[HostelMembership]:
        """Membership whose leaving date is unset or still in the future."""
        stmt = (
            select(HostelMembership)
            .where(
                HostelMembership.user_id == user_id,
                or_(
                    HostelMembership.leaving_date.is_(None),
                    HostelMembership.leaving_date > today,
                ),
            )
            .order_by(HostelMembership.joined_on.desc())
        )
        return self.db.execute(stmt).scalars().first()

    def find_latest_in_hostel(self, user_id: str, hostel_id: str) -> Optional[HostelMembership]:
        stmt = (
            select(HostelMembership)
            .where(
                HostelMembership.user_id == user_id,
                HostelMembership.hostel_id == hostel_id,
            )
            .order_by(HostelMembership.joined_on.desc(), HostelMembership.created_at.desc())
        )
        return self.db.execute(stmt).scalars().first()

    def find_blocking_join(self, user_id: str, join_date: date) -> Optional[HostelMembership]:
        """
        Membership that prevents joining on ``join_date``: one still open,
        or one whose window has not ended by that date.
        """
        stmt = select(HostelMembership).where(
            HostelMembership.user_id == user_id,
            or_(
                HostelMembership.leaving_date.is_(None),
                HostelMembership.leaving_date > join_date,
            ),
        )
        return self.db.execute(stmt).scalars().first()

    def find_covering(self, user_id: str, hostel_id: str, day: date) -> Optional[HostelMembership]:
        stmt = select(HostelMembership).where(
            HostelMembership.user_id == user_id,
            HostelMembership.hostel_id == hostel_id,
            HostelMembership.joined_on <= day,
            or_(
                HostelMembership.leaving_date.is_(None),
                HostelMembership.leaving_date > day,
            ),
        )
        return self.db.execute(stmt).scalars().first()

    def list_active_on(self, hostel_id: str, day: date) -> List[HostelMembership]:
        stmt = (
            select(HostelMembership)
            .where(
                HostelMembership.hostel_id == hostel_id,
                HostelMembership.joined_on <= day,
                or_(
                    HostelMembership.leaving_date.is_(None),
                    HostelMembership.leaving_date > day,
                ),
            )
            .order_by(HostelMembership.user_id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_overlapping(self, hostel_id: str, start: date, end: date) -> List[HostelMembership]:
        """Memberships covering at least one day of the closed range."""
        stmt = (
            select(HostelMembership)
            .where(
                HostelMembership.hostel_id == hostel_id,
                HostelMembership.joined_on <= end,
                or_(
                    HostelMembership.leaving_date.is_(None),
                    and_(
                        HostelMembership.leaving_date > start,
                        HostelMembership.leaving_date > HostelMembership.joined_on,
                    ),
                ),
            )
            .order_by(HostelMembership.user_id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def _not_found(self, id: str) -> MembershipNotFoundError:
        return MembershipNotFoundError(id)
