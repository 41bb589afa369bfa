"""
Billing aggregator.

Grocery cost in a date range is split across members by weighted meal
units. Each share is rounded half-up to the currency minor unit and the
rounding residue is settled so that meal costs sum exactly to the total
grocery cost. Seat rent and fines are added on top.

The computation reads only ledger data for the range, so repeating it
over unchanged data yields an identical report.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Set

from sqlalchemy.orm import Session

from hostel_mess.config.settings import settings
from hostel_mess.core.exceptions import (
    ConflictError,
    ErrorCode,
    NoMealsRecordedError,
    ValidationError,
)
from hostel_mess.models.mess import BillingPeriod
from hostel_mess.repositories import (
    BazarRepository,
    BillingPeriodRepository,
    FineRepository,
    HostelRepository,
    MealRecordRepository,
    MembershipRepository,
    SeatRepository,
)
from hostel_mess.schemas.mess.billing import BillReport, MemberBill
from hostel_mess.services.base import BaseService, ServiceResult
from hostel_mess.services.mess.constants import SUCCESS_PERIOD_CLOSED
from hostel_mess.utils.date_utils import Clock
from hostel_mess.utils.money import apportion, minor_unit, quantize_money

_RATIO_PLACES = Decimal("0.0001")


def _check_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise ValidationError(
            "Start date must not be after end date",
            error_code=ErrorCode.INVALID_DATE_RANGE,
            field="start_date",
            details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )


class BillingService(BaseService):

    def __init__(self, db_session: Session, clock: Optional[Clock] = None):
        super().__init__(db_session, clock)
        self.hostel_repo = HostelRepository(db_session)
        self.billing_period_repo = BillingPeriodRepository(db_session)
        self.bazar_repo = BazarRepository(db_session)
        self.meal_repo = MealRecordRepository(db_session)
        self.membership_repo = MembershipRepository(db_session)
        self.seat_repo = SeatRepository(db_session)
        self.fine_repo = FineRepository(db_session)

    # =========================================================================
    # Periods
    # =========================================================================

    def close_billing_period(
        self,
        hostel_id: str,
        start_date: date,
        end_date: date,
        closed_by: Optional[str] = None,
    ) -> ServiceResult[BillingPeriod]:
        """
        Close [start_date, end_date] for edits.

        Runs under the hostel row lock that meal and bazar edits also
        take, so an edit either commits first or is rejected.
        """

        def _close() -> BillingPeriod:
            _check_range(start_date, end_date)
            self.hostel_repo.lock_by_id(hostel_id)

            existing = self.billing_period_repo.find_overlapping(hostel_id, start_date, end_date)
            if existing is not None:
                raise ConflictError(
                    "Billing period overlaps an already closed period",
                    error_code=ErrorCode.BILLING_PERIOD_OVERLAP,
                    details={
                        "billing_period_id": existing.id,
                        "existing_start": existing.start_date.isoformat(),
                        "existing_end": existing.end_date.isoformat(),
                        "attempted_start": start_date.isoformat(),
                        "attempted_end": end_date.isoformat(),
                    },
                )

            period = BillingPeriod(
                hostel_id=hostel_id,
                start_date=start_date,
                end_date=end_date,
                closed_at=self.clock.now(),
                closed_by=closed_by,
            )
            self.billing_period_repo.create(period)
            self._log_operation(
                "close billing period",
                period.id,
                {"hostel_id": hostel_id, "start_date": str(start_date), "end_date": str(end_date)},
            )
            return period

        return self._execute(
            "close billing period", _close, entity_ref=hostel_id, message=SUCCESS_PERIOD_CLOSED
        )

    def list_billing_periods(self, hostel_id: str) -> ServiceResult[List[BillingPeriod]]:
        """Closed periods of the hostel, oldest first."""

        def _list() -> List[BillingPeriod]:
            self.hostel_repo.get_by_id(hostel_id)
            return self.billing_period_repo.list_for_hostel(hostel_id)

        return self._execute("list billing periods", _list, entity_ref=hostel_id)

    # =========================================================================
    # Bill
    # =========================================================================

    def compute_bill(
        self,
        hostel_id: str,
        start_date: date,
        end_date: date,
        allow_empty: bool = False,
    ) -> ServiceResult[BillReport]:
        """
        Compute every member's bill for [start_date, end_date].

        Members are users whose membership overlaps the range plus users
        with meal records in it. With no meal units recorded the result is
        NO_MEALS_RECORDED, or a zero meal-cost report when ``allow_empty``.
        """
        return self._execute(
            "compute bill",
            lambda: self._compute(hostel_id, start_date, end_date, allow_empty),
            entity_ref=hostel_id,
        )

    def _compute(
        self,
        hostel_id: str,
        start_date: date,
        end_date: date,
        allow_empty: bool,
    ) -> BillReport:
        _check_range(start_date, end_date)
        hostel = self.hostel_repo.get_by_id(hostel_id)
        weights = hostel.meal_weights
        zero = Decimal(0).quantize(minor_unit())

        total_grocery_cost = quantize_money(
            self.bazar_repo.sum_grand_total(hostel_id, start_date, end_date)
        )

        units: Dict[str, Decimal] = defaultdict(Decimal)
        for record in self.meal_repo.iter_for_period(hostel_id, start_date, end_date):
            units[record.user_id] += record.meal_units(weights)

        members: Set[str] = set(units)
        members.update(
            m.user_id
            for m in self.membership_repo.list_overlapping(hostel_id, start_date, end_date)
        )
        member_units = {user_id: units.get(user_id, Decimal(0)) for user_id in members}
        total_units = sum(member_units.values(), Decimal(0))

        if total_units == 0:
            if not allow_empty:
                raise NoMealsRecordedError(hostel_id, start_date, end_date, total_grocery_cost)
            meal_costs = {user_id: zero for user_id in members}
            cost_per_unit = Decimal(0).quantize(_RATIO_PLACES)
        else:
            meal_costs = apportion(total_grocery_cost, member_units)
            cost_per_unit = (total_grocery_cost / total_units).quantize(_RATIO_PLACES)

        seats_held = self.seat_repo.rent_by_occupant(hostel_id)
        fines = self.fine_repo.totals_by_user(hostel_id, start_date, end_date)

        lines = []
        for user_id in sorted(members):
            rent = quantize_money(
                sum((seat.rent for seat in seats_held.get(user_id, [])), Decimal(0))
            )
            fine_total = quantize_money(fines.get(user_id, Decimal(0)))
            meal_cost = meal_costs[user_id]
            lines.append(
                MemberBill(
                    user_id=user_id,
                    meal_units=member_units[user_id],
                    meal_cost=meal_cost,
                    seat_rent=rent,
                    fines=fine_total,
                    total=meal_cost + rent + fine_total,
                )
            )

        period = self.billing_period_repo.find_covering(hostel_id, start_date)
        is_closed = period is not None and period.end_date >= end_date

        total_meal_cost = sum((line.meal_cost for line in lines), zero)
        return BillReport(
            hostel_id=hostel_id,
            start_date=start_date,
            end_date=end_date,
            currency=settings.CURRENCY,
            total_grocery_cost=total_grocery_cost,
            total_meal_units=total_units,
            cost_per_meal_unit=cost_per_unit,
            is_closed=is_closed,
            members=lines,
            total_meal_cost=total_meal_cost,
            total_billed=sum((line.total for line in lines), zero),
        )
