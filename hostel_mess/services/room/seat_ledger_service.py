"""
Seat & capacity ledger.

Owns the hostel's seat inventory and is the only writer of the hostel
``seats_*`` counters. Every seat write runs under a row lock on the
hostel, and the counters are recomputed from live Seat rows in the same
transaction, so ``occupied + available_for_rent + in_maintenance`` never
exceeds ``seats_total`` at any committed point.

Public operations return ``ServiceResult``. The ``apply_*`` / ``recount``
methods raise domain errors instead and never commit; other services
call them inside their own transaction.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hostel_mess.core.exceptions import (
    ConcurrentModificationError,
    DuplicateSeatError,
    InvalidOccupantBindingError,
    NotAMemberError,
    SeatAlreadyOccupiedError,
    SeatCapacityExceededError,
    ValidationError,
)
from hostel_mess.models.base.enums import SeatStatus
from hostel_mess.models.hostel import Hostel, HostelMembership
from hostel_mess.models.room import Seat
from hostel_mess.repositories import (
    HostelRepository,
    MembershipRepository,
    SeatRepository,
    UserRepository,
)
from hostel_mess.services.base import BaseService, ServiceResult
from hostel_mess.services.room.constants import (
    MAX_SEAT_NUMBER_LENGTH,
    SUCCESS_SEAT_COUNTS_RECONCILED,
    SUCCESS_SEAT_CREATED,
    SUCCESS_SEAT_STATUS_UPDATED,
    SUCCESS_SEAT_TOTAL_UPDATED,
)
from hostel_mess.utils.date_utils import Clock
from hostel_mess.utils.money import quantize_money


def _summary_from_tally(tally: Dict[SeatStatus, int]) -> Dict[str, int]:
    return {
        "occupied": tally[SeatStatus.OCCUPIED],
        "available_for_rent": tally[SeatStatus.AVAILABLE_FOR_RENT],
        "in_maintenance": tally[SeatStatus.IN_MAINTENANCE],
    }


class SeatLedgerService(BaseService):
    """Seat inventory and the derived hostel seat aggregate."""

    def __init__(self, db_session: Session, clock: Optional[Clock] = None):
        super().__init__(db_session, clock)
        self.hostel_repo = HostelRepository(db_session)
        self.seat_repo = SeatRepository(db_session)
        self.user_repo = UserRepository(db_session)
        self.membership_repo = MembershipRepository(db_session)

    # =========================================================================
    # Operations
    # =========================================================================

    def create_seat(
        self,
        hostel_id: str,
        seat_number: str,
        room_number: str,
        rent: Union[Decimal, int, str] = 0,
    ) -> ServiceResult[Seat]:
        """
        Add a seat as AVAILABLE_FOR_RENT.

        Fails with DUPLICATE_SEAT when the number is taken in the hostel
        and SEAT_CAPACITY_EXCEEDED when the hostel is already full. The
        hostel aggregate is untouched on failure.
        """
        return self._execute(
            "create seat",
            lambda: self._create_seat(hostel_id, seat_number, room_number, rent),
            entity_ref=hostel_id,
            message=SUCCESS_SEAT_CREATED,
        )

    def set_seat_status(
        self,
        seat_id: str,
        status: Union[SeatStatus, str],
        occupant_id: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> ServiceResult[Seat]:
        """
        Move a seat to ``status``.

        ``expected_version`` enables compare-and-swap: the write fails with
        CONCURRENT_MODIFICATION unless the seat is still at that version.
        """
        return self._execute(
            "set seat status",
            lambda: self.apply_status(seat_id, status, occupant_id, expected_version),
            entity_ref=seat_id,
            message=SUCCESS_SEAT_STATUS_UPDATED,
        )

    def reconcile_hostel_seat_counts(self, hostel_id: str) -> ServiceResult[Dict[str, Any]]:
        """
        Recompute the hostel's seat counters from its Seat rows.

        ``seats_total`` is never touched. The report carries the counters
        before and after and whether they had drifted.
        """

        def _reconcile() -> Dict[str, Any]:
            hostel = self.hostel_repo.lock_by_id(hostel_id)
            before = hostel.seat_summary
            self.recount(hostel)
            after = hostel.seat_summary
            drift = before != after
            if drift:
                self._logger.warning(
                    "Seat counters drifted from seat records",
                    extra={"hostel_id": hostel_id, "before": before, "after": after},
                )
            return {
                "hostel_id": hostel_id,
                "before": before,
                "after": after,
                "drift": drift,
            }

        return self._execute(
            "reconcile hostel seat counts",
            _reconcile,
            entity_ref=hostel_id,
            message=SUCCESS_SEAT_COUNTS_RECONCILED,
        )

    def set_seat_total(self, hostel_id: str, total: int) -> ServiceResult[Hostel]:
        """Change seat capacity; cannot go below the seats already recorded."""

        def _set_total() -> Hostel:
            if isinstance(total, bool) or not isinstance(total, int) or total < 0:
                raise ValidationError(
                    "Total seats must be a non-negative integer",
                    field="total",
                    details={"attempted": total},
                )
            hostel = self.hostel_repo.lock_by_id(hostel_id)
            tally = self.seat_repo.tally_by_status(hostel_id)
            if sum(tally.values()) > total:
                raise SeatCapacityExceededError(hostel_id, total, _summary_from_tally(tally))
            hostel.seats_total = total
            self.recount(hostel)
            return hostel

        return self._execute(
            "set seat total",
            _set_total,
            entity_ref=hostel_id,
            message=SUCCESS_SEAT_TOTAL_UPDATED,
        )

    def list_seats(
        self,
        hostel_id: str,
        status: Optional[Union[SeatStatus, str]] = None,
    ) -> ServiceResult[List[Seat]]:
        def _list() -> List[Seat]:
            self.hostel_repo.get_by_id(hostel_id)
            return self.seat_repo.list_for_hostel(
                hostel_id, self._coerce_status(status) if status is not None else None
            )

        return self._execute("list seats", _list, entity_ref=hostel_id)

    # =========================================================================
    # Ledger primitives (no commit)
    # =========================================================================

    def apply_status(
        self,
        seat_id: str,
        status: Union[SeatStatus, str],
        occupant_id: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> Seat:
        status = self._coerce_status(status)
        if (status == SeatStatus.OCCUPIED) != (occupant_id is not None):
            raise InvalidOccupantBindingError(status.value, occupant_id)

        # Lock order: hostel first, then the seat.
        hostel_id = self.seat_repo.get_by_id(seat_id).hostel_id
        hostel = self.hostel_repo.lock_by_id(hostel_id)
        seat = self.seat_repo.lock_by_id(seat_id)

        if expected_version is not None and seat.version != expected_version:
            raise ConcurrentModificationError(
                "Seat", seat_id, expected_version=expected_version, current_version=seat.version
            )

        if (
            status == SeatStatus.OCCUPIED
            and seat.status == SeatStatus.OCCUPIED
            and seat.occupant_id != occupant_id
        ):
            raise SeatAlreadyOccupiedError(seat_id, seat.occupant_id, occupant_id)

        membership = None
        if occupant_id is not None:
            self.user_repo.get_by_id(occupant_id)
            today = self.clock.now().date()
            membership = self.membership_repo.find_active_for_user(occupant_id, today)
            if membership is None or membership.hostel_id != hostel_id:
                raise NotAMemberError(occupant_id, hostel_id)

        previous = seat.status
        previous_occupant = seat.occupant_id
        self.seat_repo.update(seat, {"status": status, "occupant_id": occupant_id})
        self._sync_membership_seat(seat, previous_occupant, membership)
        self.recount(hostel)

        self._log_operation(
            "set seat status",
            seat_id,
            {"hostel_id": hostel_id, "from_status": previous.value, "to_status": status.value},
        )
        return seat

    def vacate_seats_of(self, hostel_id: str, user_id: str) -> List[Seat]:
        """Release every seat the user holds in the hostel."""
        vacated = []
        for seat in self.seat_repo.find_held_by(hostel_id, user_id):
            vacated.append(self.apply_status(seat.id, SeatStatus.AVAILABLE_FOR_RENT))
        return vacated

    def recount(self, hostel: Hostel) -> Dict[str, int]:
        """
        Derive the hostel counters from live Seat rows and persist them.

        The caller must hold the hostel row lock.
        """
        tally = self.seat_repo.tally_by_status(hostel.id)
        summary = _summary_from_tally(tally)
        if sum(summary.values()) > hostel.seats_total:
            raise SeatCapacityExceededError(hostel.id, hostel.seats_total, summary)

        self.hostel_repo.update(
            hostel,
            {
                "seats_occupied": summary["occupied"],
                "seats_available_for_rent": summary["available_for_rent"],
                "seats_in_maintenance": summary["in_maintenance"],
            },
        )
        return summary

    # =========================================================================
    # Helpers
    # =========================================================================

    def _sync_membership_seat(
        self,
        seat: Seat,
        previous_occupant: Optional[str],
        membership: Optional[HostelMembership],
    ) -> None:
        """Point the occupant's membership at the seat; unlink the previous holder."""
        if previous_occupant is not None and previous_occupant != seat.occupant_id:
            held = self.membership_repo.find_latest_in_hostel(previous_occupant, seat.hostel_id)
            if held is not None and held.seat_id == seat.id:
                self.membership_repo.update(held, {"seat_id": None})
        if membership is not None and membership.seat_id != seat.id:
            self.membership_repo.update(membership, {"seat_id": seat.id})

    def _create_seat(
        self,
        hostel_id: str,
        seat_number: str,
        room_number: str,
        rent: Union[Decimal, int, str],
    ) -> Seat:
        seat_number = str(seat_number or "").strip()
        room_number = str(room_number or "").strip()
        if not seat_number or len(seat_number) > MAX_SEAT_NUMBER_LENGTH:
            raise ValidationError(
                f"Seat number must be 1-{MAX_SEAT_NUMBER_LENGTH} characters",
                field="seat_number",
            )
        if not room_number or len(room_number) > MAX_SEAT_NUMBER_LENGTH:
            raise ValidationError(
                f"Room number must be 1-{MAX_SEAT_NUMBER_LENGTH} characters",
                field="room_number",
            )
        try:
            rent = quantize_money(rent)
        except ValueError as e:
            raise ValidationError(str(e), field="rent") from e
        if rent < 0:
            raise ValidationError("Rent cannot be negative", field="rent", details={"attempted": str(rent)})

        hostel = self.hostel_repo.lock_by_id(hostel_id)

        if self.seat_repo.find_by_number(hostel_id, seat_number) is not None:
            raise DuplicateSeatError(hostel_id, seat_number)

        tally = self.seat_repo.tally_by_status(hostel_id)
        attempted = _summary_from_tally(tally)
        attempted["available_for_rent"] += 1
        if sum(attempted.values()) > hostel.seats_total:
            raise SeatCapacityExceededError(hostel_id, hostel.seats_total, attempted)

        seat = Seat(
            hostel_id=hostel_id,
            seat_number=seat_number,
            room_number=room_number,
            rent=rent,
            status=SeatStatus.AVAILABLE_FOR_RENT,
        )
        try:
            self.seat_repo.create(seat)
        except IntegrityError as e:
            raise DuplicateSeatError(hostel_id, seat_number) from e

        self.recount(hostel)
        return seat

    @staticmethod
    def _coerce_status(status: Union[SeatStatus, str]) -> SeatStatus:
        try:
            return SeatStatus(status)
        except ValueError as e:
            raise ValidationError(
                f"Unknown seat status: {status}",
                field="status",
                details={"allowed": [s.value for s in SeatStatus]},
            ) from e
