"""
Seat repository with status tallies used to derive the hostel aggregate.
"""

from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hostel_mess.core.exceptions import SeatNotFoundError
from hostel_mess.models.base.enums import SeatStatus
from hostel_mess.models.room import Seat
from hostel_mess.repositories.base import BaseRepository


class SeatRepository(BaseRepository[Seat]):

    def __init__(self, db: Session):
        super().__init__(Seat, db)

    def find_by_number(self, hostel_id: str, seat_number: str) -> Optional[Seat]:
        return self.find_one_by_criteria(
            {"hostel_id": hostel_id, "seat_number": seat_number}
        )

    def list_for_hostel(self, hostel_id: str, status: Optional[SeatStatus] = None) -> List[Seat]:
        stmt = select(Seat).where(Seat.hostel_id == hostel_id)
        if status is not None:
            stmt = stmt.where(Seat.status == status)
        stmt = stmt.order_by(Seat.room_number, Seat.seat_number)
        return list(self.db.execute(stmt).scalars().all())

    def tally_by_status(self, hostel_id: str) -> Dict[SeatStatus, int]:
        """Live count of seats per status; every status is present."""
        stmt = (
            select(Seat.status, func.count(Seat.id))
            .where(Seat.hostel_id == hostel_id)
            .group_by(Seat.status)
        )
        tally = {status: 0 for status in SeatStatus}
        for status, count in self.db.execute(stmt).all():
            tally[SeatStatus(status)] = int(count)
        return tally

    def find_held_by(self, hostel_id: str, user_id: str) -> List[Seat]:
        return self.find_by_criteria(
            {"hostel_id": hostel_id, "occupant_id": user_id, "status": SeatStatus.OCCUPIED},
            order_by=["seat_number"],
        )

    def rent_by_occupant(self, hostel_id: str) -> Dict[str, List[Seat]]:
        seats = self.find_by_criteria(
            {"hostel_id": hostel_id, "status": SeatStatus.OCCUPIED},
            order_by=["seat_number"],
        )
        held: Dict[str, List[Seat]] = {}
        for seat in seats:
            held.setdefault(seat.occupant_id, []).append(seat)
        return held

    def _not_found(self, id: str) -> SeatNotFoundError:
        return SeatNotFoundError(id)
