"""
Meal ledger.

One record per (user, date), edited in place. A day's counts can be
changed until the end of that day plus ``MEAL_EDIT_GRACE_HOURS``; after
that the record is locked. Edits are also refused while the hostel's
service is suspended and once a closed billing period covers the day.
"""

from datetime import date
from typing import Iterator, Mapping, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hostel_mess.config.settings import settings
from hostel_mess.core.exceptions import (
    BillingPeriodClosedError,
    ConcurrentModificationError,
    EditWindowClosedError,
    ErrorCode,
    HostelServiceSuspendedError,
    NotAMemberError,
    ResourceNotFoundError,
    ValidationError,
)
from hostel_mess.models.mess import MEAL_COUNT_FIELDS, MealRecord
from hostel_mess.repositories import (
    BillingPeriodRepository,
    HostelRepository,
    MealRecordRepository,
    MembershipRepository,
)
from hostel_mess.services.base import BaseService, ServiceResult
from hostel_mess.services.mess.constants import SUCCESS_MEAL_COUNTS_SAVED
from hostel_mess.utils.date_utils import (
    Clock,
    is_meal_edit_open,
    meal_edit_deadline,
    suspension_blocks_day,
    to_utc,
)


def validate_meal_counts(counts: Mapping[str, int]) -> dict:
    """
    Normalize a counts mapping to all six fields; omitted fields are 0.

    Raises:
        ValidationError: INVALID_MEAL_COUNTS for unknown keys, non-integers
            or negative values
    """
    unknown = set(counts) - set(MEAL_COUNT_FIELDS)
    if unknown:
        raise ValidationError(
            "Unknown meal count fields",
            error_code=ErrorCode.INVALID_MEAL_COUNTS,
            details={"unknown": sorted(unknown), "allowed": list(MEAL_COUNT_FIELDS)},
        )
    normalized = {}
    for field in MEAL_COUNT_FIELDS:
        value = counts.get(field, 0)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(
                "Meal counts must be whole numbers",
                error_code=ErrorCode.INVALID_MEAL_COUNTS,
                field=field,
                details={"attempted": repr(value)},
            )
        if value < 0:
            raise ValidationError(
                "Meal counts cannot be negative",
                error_code=ErrorCode.INVALID_MEAL_COUNTS,
                field=field,
                details={"attempted": value},
            )
        normalized[field] = value
    return normalized


class MealLedgerService(BaseService):

    def __init__(self, db_session: Session, clock: Optional[Clock] = None):
        super().__init__(db_session, clock)
        self.hostel_repo = HostelRepository(db_session)
        self.membership_repo = MembershipRepository(db_session)
        self.meal_repo = MealRecordRepository(db_session)
        self.billing_period_repo = BillingPeriodRepository(db_session)

    def set_meal_counts(
        self,
        user_id: str,
        hostel_id: str,
        meal_date: date,
        counts: Mapping[str, int],
    ) -> ServiceResult[MealRecord]:
        """
        Upsert the (user, date) record.

        A concurrent first insert for the same key trips the unique
        constraint; the operation is then retried and takes the update path.
        """
        return self.retry_on_conflict(
            self._set_meal_counts_once, user_id, hostel_id, meal_date, counts
        )

    def _set_meal_counts_once(
        self,
        user_id: str,
        hostel_id: str,
        meal_date: date,
        counts: Mapping[str, int],
    ) -> ServiceResult[MealRecord]:

        def _upsert() -> MealRecord:
            values = validate_meal_counts(counts)

            # Same lock as close_billing_period: an edit commits before a
            # close or sees the closed period.
            hostel = self.hostel_repo.lock_by_id(hostel_id)
            now = self.clock.now()

            if self.membership_repo.find_covering(user_id, hostel_id, meal_date) is None:
                raise NotAMemberError(user_id, hostel_id, on=meal_date)

            if suspension_blocks_day(
                hostel.service_suspended_at, hostel.service_suspended_until, meal_date, now
            ):
                raise HostelServiceSuspendedError(
                    hostel_id,
                    to_utc(hostel.service_suspended_until),
                    hostel.service_suspension_reason,
                )

            grace = settings.MEAL_EDIT_GRACE_HOURS
            if not is_meal_edit_open(meal_date, grace, now):
                raise EditWindowClosedError(meal_date, meal_edit_deadline(meal_date, grace))

            period = self.billing_period_repo.find_covering(hostel_id, meal_date)
            if period is not None:
                raise BillingPeriodClosedError(hostel_id, meal_date, period.id)

            record = self.meal_repo.find_for_user_date(user_id, meal_date, for_update=True)
            if record is not None:
                return self.meal_repo.update(record, {"hostel_id": hostel_id, **values})

            record = MealRecord(
                user_id=user_id, hostel_id=hostel_id, meal_date=meal_date, **values
            )
            try:
                return self.meal_repo.create(record)
            except IntegrityError as e:
                raise ConcurrentModificationError("MealRecord", f"{user_id}:{meal_date}") from e

        return self._execute(
            "set meal counts",
            _upsert,
            entity_ref=f"{user_id}:{meal_date}",
            message=SUCCESS_MEAL_COUNTS_SAVED,
        )

    def get_meals_for_period(
        self,
        hostel_id: str,
        start_date: date,
        end_date: date,
    ) -> ServiceResult[Iterator[MealRecord]]:
        """
        Lazy iterator over the hostel's records in [start_date, end_date],
        ordered by date then user. Each call issues a fresh query.

        The result only validates the range and the hostel. Rows are
        fetched while the caller iterates, after this operation's
        transaction has ended, so a storage error during iteration is
        raised to the caller instead of coming back as a failed result.
        """

        def _period() -> Iterator[MealRecord]:
            if start_date > end_date:
                raise ValidationError(
                    "Start date must not be after end date",
                    error_code=ErrorCode.INVALID_DATE_RANGE,
                    field="start_date",
                )
            self.hostel_repo.get_by_id(hostel_id)
            return self.meal_repo.iter_for_period(hostel_id, start_date, end_date)

        return self._execute("get meals for period", _period, entity_ref=hostel_id)

    def get_meal_record(self, user_id: str, meal_date: date) -> ServiceResult[MealRecord]:
        def _get() -> MealRecord:
            record = self.meal_repo.find_for_user_date(user_id, meal_date)
            if record is None:
                raise ResourceNotFoundError("MealRecord", f"{user_id}:{meal_date.isoformat()}")
            return record

        return self._execute("get meal record", _get, entity_ref=user_id)
