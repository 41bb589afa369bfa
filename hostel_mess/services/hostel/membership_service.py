"""
Membership registry.

A user holds at most one active membership across all hostels. The
``User.current_hostel_id`` pointer is a cache of the active membership;
memberships whose leaving date has arrived are expired lazily on read.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hostel_mess.core.exceptions import (
    AlreadyMemberError,
    ErrorCode,
    HostelServiceSuspendedError,
    NotAMemberError,
    SeatNotFoundError,
    ValidationError,
)
from hostel_mess.models.base.enums import SeatStatus
from hostel_mess.models.hostel import HostelMembership
from hostel_mess.models.user import User
from hostel_mess.repositories import (
    HostelRepository,
    MembershipRepository,
    SeatRepository,
    UserRepository,
)
from hostel_mess.services.base import BaseService, ServiceResult
from hostel_mess.services.hostel.constants import (
    SUCCESS_DEPOSIT_RECORDED,
    SUCCESS_JOINED_HOSTEL,
    SUCCESS_LEFT_HOSTEL,
)
from hostel_mess.services.room import SeatLedgerService
from hostel_mess.utils.date_utils import Clock, is_suspension_active, to_utc
from hostel_mess.utils.money import quantize_money


class MembershipService(BaseService):
    """Join/leave lifecycle, deposits and the current-hostel pointer."""

    def __init__(
        self,
        db_session: Session,
        clock: Optional[Clock] = None,
        seat_ledger: Optional[SeatLedgerService] = None,
    ):
        super().__init__(db_session, clock)
        self.hostel_repo = HostelRepository(db_session)
        self.membership_repo = MembershipRepository(db_session)
        self.seat_repo = SeatRepository(db_session)
        self.user_repo = UserRepository(db_session)
        self.seat_ledger = seat_ledger or SeatLedgerService(db_session, self.clock)

    # =========================================================================
    # Join / leave
    # =========================================================================

    def join_hostel(
        self,
        user_id: str,
        short_code: str,
        join_date: date,
        seat_id: Optional[str] = None,
    ) -> ServiceResult[HostelMembership]:
        """
        Join the hostel identified by ``short_code`` (case-insensitive).

        When ``seat_id`` is given the seat is occupied by the user in the
        same transaction.
        """

        def _join() -> HostelMembership:
            user = self.user_repo.lock_by_id(user_id)
            hostel = self.hostel_repo.get_by_short_code(short_code)
            now = self.clock.now()
            today = now.date()

            self._expire_if_due(user, today)

            active = self.membership_repo.find_active_for_user(user_id, today)
            blocking = active or self.membership_repo.find_blocking_join(user_id, join_date)
            if blocking is not None:
                raise AlreadyMemberError(user_id, blocking.hostel_id)

            if is_suspension_active(
                hostel.service_suspended_at, hostel.service_suspended_until, now
            ):
                raise HostelServiceSuspendedError(
                    hostel.id,
                    to_utc(hostel.service_suspended_until),
                    hostel.service_suspension_reason,
                )

            if seat_id is not None:
                seat = self.seat_repo.get_by_id(seat_id)
                if seat.hostel_id != hostel.id:
                    raise SeatNotFoundError(seat_id)

            membership = HostelMembership(
                hostel_id=hostel.id,
                user_id=user_id,
                joined_on=join_date,
                seat_id=seat_id,
                security_paid=False,
            )
            try:
                self.membership_repo.create(membership)
            except IntegrityError as e:
                raise AlreadyMemberError(user_id, hostel.id) from e

            self.user_repo.update(user, {"current_hostel_id": hostel.id})

            if seat_id is not None:
                self.seat_ledger.apply_status(seat_id, SeatStatus.OCCUPIED, user_id)

            self._log_operation(
                "join hostel",
                membership.id,
                {"user_id": user_id, "hostel_id": hostel.id, "seat_id": seat_id},
            )
            return membership

        return self._execute(
            "join hostel", _join, entity_ref=user_id, message=SUCCESS_JOINED_HOSTEL
        )

    def leave_hostel(self, user_id: str, leaving_date: date) -> ServiceResult[HostelMembership]:
        """
        Set the leaving date on the user's active membership.

        Meal records are kept. A leaving date that has already arrived
        expires the membership at once.
        """

        def _leave() -> HostelMembership:
            user = self.user_repo.lock_by_id(user_id)
            today = self.clock.now().date()

            membership = self.membership_repo.find_active_for_user(user_id, today)
            if membership is None:
                raise NotAMemberError(user_id)

            if leaving_date < membership.joined_on:
                raise ValidationError(
                    "Leaving date cannot be before the joining date",
                    error_code=ErrorCode.INVALID_LEAVING_DATE,
                    field="leaving_date",
                    details={
                        "joined_on": membership.joined_on.isoformat(),
                        "attempted": leaving_date.isoformat(),
                    },
                )

            self.membership_repo.update(membership, {"leaving_date": leaving_date})
            if leaving_date <= today:
                self._expire(user, membership)
            return membership

        return self._execute(
            "leave hostel", _leave, entity_ref=user_id, message=SUCCESS_LEFT_HOSTEL
        )

    # =========================================================================
    # Reads
    # =========================================================================

    def get_active_membership(self, user_id: str) -> ServiceResult[Optional[HostelMembership]]:
        """
        Return the active membership, or ``None``.

        A membership whose leaving date has arrived is expired here: the
        current-hostel pointer is cleared and the seat is vacated.
        """

        def _get() -> Optional[HostelMembership]:
            user = self.user_repo.lock_by_id(user_id)
            today = self.clock.now().date()
            self._expire_if_due(user, today)
            membership = self.membership_repo.find_active_for_user(user_id, today)
            if membership is not None and user.current_hostel_id != membership.hostel_id:
                self.user_repo.update(user, {"current_hostel_id": membership.hostel_id})
            return membership

        return self._execute("get active membership", _get, entity_ref=user_id)

    def list_members(
        self, hostel_id: str, on: Optional[date] = None
    ) -> ServiceResult[List[HostelMembership]]:
        """Memberships of the hostel covering day ``on`` (today by default)."""

        def _list() -> List[HostelMembership]:
            self.hostel_repo.get_by_id(hostel_id)
            day = on or self.clock.now().date()
            return self.membership_repo.list_active_on(hostel_id, day)

        return self._execute("list members", _list, entity_ref=hostel_id)

    # =========================================================================
    # Deposits
    # =========================================================================

    def record_security_deposit(
        self,
        membership_id: str,
        amount: Union[Decimal, int, str],
        paid_at: Optional[datetime] = None,
    ) -> ServiceResult[HostelMembership]:
        """Mark the deposit as paid; repeating the call overwrites the same fields."""

        def _record() -> HostelMembership:
            try:
                value = quantize_money(amount)
            except ValueError as e:
                raise ValidationError(
                    str(e), error_code=ErrorCode.INVALID_DEPOSIT, field="amount"
                ) from e
            if value <= 0:
                raise ValidationError(
                    "Security deposit must be positive",
                    error_code=ErrorCode.INVALID_DEPOSIT,
                    field="amount",
                    details={"attempted": str(value)},
                )

            membership = self.membership_repo.get_by_id(membership_id)
            return self.membership_repo.update(
                membership,
                {
                    "security_paid": True,
                    "security_amount": value,
                    "agreed_at": to_utc(paid_at) if paid_at else self.clock.now(),
                },
            )

        return self._execute(
            "record security deposit",
            _record,
            entity_ref=membership_id,
            message=SUCCESS_DEPOSIT_RECORDED,
        )

    # =========================================================================
    # Expiry
    # =========================================================================

    def _expire_if_due(self, user: User, today: date) -> None:
        """Expire the membership behind ``current_hostel_id`` once its leaving date arrives."""
        if user.current_hostel_id is None:
            return
        if self.membership_repo.find_active_for_user(user.id, today) is not None:
            return
        latest = self.membership_repo.find_latest_in_hostel(user.id, user.current_hostel_id)
        self._expire(user, latest, hostel_id=user.current_hostel_id)

    def _expire(
        self,
        user: User,
        membership: Optional[HostelMembership],
        hostel_id: Optional[str] = None,
    ) -> None:
        hostel_id = membership.hostel_id if membership is not None else hostel_id
        if user.current_hostel_id == hostel_id:
            self.user_repo.update(user, {"current_hostel_id": None})
        vacated = self.seat_ledger.vacate_seats_of(hostel_id, user.id)
        self._logger.info(
            "Membership expired",
            extra={
                "user_id": user.id,
                "hostel_id": hostel_id,
                "vacated_seats": [seat.id for seat in vacated],
            },
        )
