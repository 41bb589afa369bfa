"""
Hostel repository: short-code lookup and seat aggregate access.
"""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hostel_mess.core.exceptions import HostelNotFoundError
from hostel_mess.models.hostel import Hostel
from hostel_mess.repositories.base import BaseRepository


class HostelRepository(BaseRepository[Hostel]):

    def __init__(self, db: Session):
        super().__init__(Hostel, db)

    def find_by_short_code(self, short_code: str) -> Optional[Hostel]:
        """Case-insensitive lookup; codes are stored uppercase."""
        stmt = select(Hostel).where(
            func.upper(Hostel.short_code) == short_code.strip().upper()
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_short_code(self, short_code: str) -> Hostel:
        hostel = self.find_by_short_code(short_code)
        if hostel is None:
            raise HostelNotFoundError(short_code=short_code)
        return hostel

    def short_code_exists(self, short_code: str) -> bool:
        return self.find_by_short_code(short_code) is not None

    def _not_found(self, id: str) -> HostelNotFoundError:
        return HostelNotFoundError(hostel_id=id)
