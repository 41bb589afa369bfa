from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest

from hostel_mess.core.exceptions import ErrorCode
from hostel_mess.models.base.enums import SeatStatus

JAN_1 = date(2025, 1, 1)
JAN_31 = date(2025, 1, 31)


def _days(start, count):
    return [start + timedelta(days=n) for n in range(count)]


@pytest.fixture
def record_meals(meal_ledger, hostel):
    def _record(user, days, **counts):
        for day in days:
            result = meal_ledger.set_meal_counts(user.id, hostel.id, day, counts)
            assert result.is_success, result

    return _record


@pytest.fixture
def spend(grocery_ledger, hostel, owner):
    """Record a bazar of ``amount`` on ``day``."""

    def _spend(amount, day=JAN_1):
        bazar = grocery_ledger.create_bazar(hostel.id, day, added_by=owner.id).data
        result = grocery_ledger.add_item(bazar.id, "rice", "RICE_GRAINS", 1, "KG", amount)
        assert result.is_success, result
        return bazar

    return _spend


def _line(report, user):
    return next(line for line in report.members if line.user_id == user.id)


def test_cost_is_split_by_meal_units(billing_service, hostel, join, make_user, record_meals, spend):
    a, b = make_user("A"), make_user("B")
    join(a)
    join(b)
    record_meals(a, _days(JAN_1, 15), lunch=1, dinner=1)
    record_meals(b, _days(JAN_1, 10), lunch=1, dinner=1)
    spend(500)

    result = billing_service.compute_bill(hostel.id, JAN_1, JAN_31)

    assert result.is_success, result
    report = result.data
    assert report.total_grocery_cost == Decimal("500.00")
    assert report.total_meal_units == Decimal("50")
    assert report.cost_per_meal_unit == Decimal("10")
    assert _line(report, a).meal_units == Decimal("30")
    assert _line(report, a).meal_cost == Decimal("300.00")
    assert _line(report, b).meal_cost == Decimal("200.00")
    assert report.total_meal_cost == Decimal("500.00")


def test_shares_always_sum_to_grocery_cost(billing_service, hostel, join, make_user, record_meals, spend):
    users = [make_user(name) for name in ("A", "B", "C")]
    for user in users:
        join(user)
        record_meals(user, [JAN_1], lunch=1)
    spend(100)

    report = billing_service.compute_bill(hostel.id, JAN_1, JAN_31).data

    costs = {line.user_id: line.meal_cost for line in report.members}
    assert sum(costs.values()) == Decimal("100.00")
    assert sorted(costs.values()) == [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]
    assert costs[min(costs)] == Decimal("33.34")


def test_guests_and_breakfast_weight_count_towards_units(
    billing_service, hostel, join, make_user, record_meals, spend
):
    host, solo = make_user("Host"), make_user("Solo")
    join(host)
    join(solo)
    record_meals(host, [JAN_1], breakfast=1, lunch=1, lunch_guests=2)
    record_meals(solo, [JAN_1], lunch=1, dinner=1)
    spend(110)

    report = billing_service.compute_bill(hostel.id, JAN_1, JAN_1).data

    assert _line(report, host).meal_units == Decimal("3.5")
    assert _line(report, host).meal_cost == Decimal("70.00")
    assert _line(report, solo).meal_cost == Decimal("40.00")


def test_bill_is_idempotent(billing_service, hostel, join, make_user, record_meals, spend):
    user = make_user()
    join(user)
    record_meals(user, [JAN_1], lunch=1)
    spend(90)

    first = billing_service.compute_bill(hostel.id, JAN_1, JAN_31).data
    second = billing_service.compute_bill(hostel.id, JAN_1, JAN_31).data

    assert first == second


def test_rent_and_fines_are_added_per_member(
    billing_service, hostel_service, seat_ledger, hostel, join, make_user, record_meals, spend
):
    seat = seat_ledger.create_seat(hostel.id, "1", "101", rent=3000).data
    renter, fined = make_user("Renter"), make_user("Fined")
    join(renter, seat_id=seat.id)
    join(fined)
    record_meals(renter, [JAN_1], lunch=1)
    record_meals(fined, [JAN_1], lunch=1)
    spend(100)
    assert hostel_service.issue_fine(hostel.id, fined.id, 150, date(2025, 1, 5), "late night").is_success
    assert hostel_service.issue_fine(hostel.id, fined.id, 50, date(2025, 2, 5)).is_success

    report = billing_service.compute_bill(hostel.id, JAN_1, JAN_31).data

    renter_line, fined_line = _line(report, renter), _line(report, fined)
    assert renter_line.seat_rent == Decimal("3000.00")
    assert renter_line.total == Decimal("3050.00")
    assert fined_line.fines == Decimal("150.00")
    assert fined_line.total == Decimal("200.00")
    assert report.total_billed == Decimal("3250.00")


def test_no_meals_is_reported_unless_empty_bills_are_allowed(
    billing_service, hostel, join, make_user, spend
):
    user = make_user()
    join(user)
    spend(300)

    strict = billing_service.compute_bill(hostel.id, JAN_1, JAN_31)
    lenient = billing_service.compute_bill(hostel.id, JAN_1, JAN_31, allow_empty=True)

    assert strict.error_code == ErrorCode.NO_MEALS_RECORDED
    assert strict.error.details["total_grocery_cost"] == "300.00"
    assert lenient.is_success
    assert [line.meal_cost for line in lenient.data.members] == [Decimal("0.00")]


def test_member_without_meals_still_gets_a_line(
    billing_service, hostel, join, make_user, record_meals, spend
):
    eater, absent = make_user("Eater"), make_user("Absent")
    join(eater)
    join(absent)
    record_meals(eater, [JAN_1], dinner=1)
    spend(80)

    report = billing_service.compute_bill(hostel.id, JAN_1, JAN_31).data

    assert _line(report, absent).meal_cost == Decimal("0.00")
    assert _line(report, eater).meal_cost == Decimal("80.00")
    assert [line.user_id for line in report.members] == sorted(line.user_id for line in report.members)


def test_closing_overlapping_period_is_rejected(billing_service, hostel):
    assert billing_service.close_billing_period(hostel.id, JAN_1, date(2025, 1, 15)).is_success

    overlap = billing_service.close_billing_period(hostel.id, date(2025, 1, 10), date(2025, 1, 20))
    adjacent = billing_service.close_billing_period(hostel.id, date(2025, 1, 16), JAN_31)

    assert overlap.error_code == ErrorCode.BILLING_PERIOD_OVERLAP
    assert adjacent.is_success
    periods = billing_service.list_billing_periods(hostel.id).data
    assert [(p.start_date, p.end_date) for p in periods] == [
        (JAN_1, date(2025, 1, 15)),
        (date(2025, 1, 16), JAN_31),
    ]


def test_report_flags_ranges_inside_a_closed_period(
    billing_service, hostel, join, make_user, record_meals, spend
):
    user = make_user()
    join(user)
    record_meals(user, [JAN_1], lunch=1)
    spend(50)
    billing_service.close_billing_period(hostel.id, JAN_1, date(2025, 1, 15))

    inside = billing_service.compute_bill(hostel.id, JAN_1, date(2025, 1, 10)).data
    beyond = billing_service.compute_bill(hostel.id, JAN_1, JAN_31).data

    assert inside.is_closed is True
    assert beyond.is_closed is False


def test_inverted_range_is_invalid(billing_service, hostel):
    bill = billing_service.compute_bill(hostel.id, JAN_31, JAN_1)
    close = billing_service.close_billing_period(hostel.id, JAN_31, JAN_1)

    assert bill.error_code == ErrorCode.INVALID_DATE_RANGE
    assert close.error_code == ErrorCode.INVALID_DATE_RANGE


def test_seat_rent_follows_current_occupant(
    billing_service, seat_ledger, hostel, join, make_user, record_meals, spend
):
    seat = seat_ledger.create_seat(hostel.id, "7", "102", rent=2000).data
    user = make_user()
    join(user, seat_id=seat.id)
    record_meals(user, [JAN_1], lunch=1)
    spend(10)
    seat_ledger.set_seat_status(seat.id, SeatStatus.AVAILABLE_FOR_RENT)

    report = billing_service.compute_bill(hostel.id, JAN_1, JAN_31).data

    assert _line(report, user).seat_rent == Decimal("0.00")
