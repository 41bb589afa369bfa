from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from hostel_mess.config.settings import settings
from hostel_mess.core.exceptions import ErrorCode, ErrorKind
from hostel_mess.services.mess.meal_ledger_service import validate_meal_counts

JAN_1 = date(2025, 1, 1)


def _day(counts):
    base = {
        "breakfast": 0,
        "lunch": 0,
        "dinner": 0,
        "breakfast_guests": 0,
        "lunch_guests": 0,
        "dinner_guests": 0,
    }
    base.update(counts)
    return base


def test_second_call_updates_the_same_record(meal_ledger, hostel, join, make_user):
    user = make_user()
    join(user, join_date=JAN_1)

    first = meal_ledger.set_meal_counts(user.id, hostel.id, JAN_1, _day({"lunch": 1, "dinner": 1}))
    second = meal_ledger.set_meal_counts(user.id, hostel.id, JAN_1, _day({"lunch": 0, "dinner": 1}))

    assert first.is_success, first
    assert second.is_success, second
    assert second.data.id == first.data.id
    records = list(meal_ledger.get_meals_for_period(hostel.id, JAN_1, JAN_1).data)
    assert len(records) == 1
    assert records[0].lunch == 0
    assert records[0].dinner == 1


def test_omitted_counts_are_stored_as_zero(meal_ledger, hostel, join, make_user):
    user = make_user()
    join(user)
    meal_ledger.set_meal_counts(user.id, hostel.id, JAN_1, {"lunch": 2, "lunch_guests": 1})

    record = meal_ledger.set_meal_counts(user.id, hostel.id, JAN_1, {"dinner": 1}).data

    assert record.counts() == _day({"dinner": 1})


def test_meal_edits_blocked_during_suspension(
    meal_ledger, hostel_service, hostel, join, make_user, clock
):
    user = make_user()
    join(user)
    hostel_service.suspend_service(hostel.id, clock.now() + timedelta(days=2), "water outage")

    result = meal_ledger.set_meal_counts(user.id, hostel.id, date(2025, 1, 2), {"lunch": 1})

    assert result.error_code == ErrorCode.HOSTEL_SERVICE_SUSPENDED
    assert result.error.kind == ErrorKind.STATE


def test_meal_edits_resume_after_suspension_is_lifted(
    meal_ledger, hostel_service, hostel, join, make_user, clock
):
    user = make_user()
    join(user)
    hostel_service.suspend_service(hostel.id, clock.now() + timedelta(days=2))
    hostel_service.resume_service(hostel.id)

    result = meal_ledger.set_meal_counts(user.id, hostel.id, date(2025, 1, 2), {"lunch": 1})

    assert result.is_success, result


def test_edit_window_closes_after_grace_period(meal_ledger, hostel, join, make_user, clock):
    user = make_user()
    join(user)
    clock.set(datetime(2025, 1, 2, 23, 59, tzinfo=timezone.utc))
    assert meal_ledger.set_meal_counts(user.id, hostel.id, JAN_1, {"lunch": 1}).is_success

    clock.set(datetime(2025, 1, 3, 0, 0, tzinfo=timezone.utc))
    result = meal_ledger.set_meal_counts(user.id, hostel.id, JAN_1, {"lunch": 2})

    assert result.error_code == ErrorCode.EDIT_WINDOW_CLOSED
    assert result.error.field == "meal_date"


def test_closed_billing_period_rejects_meal_edits(
    meal_ledger, billing_service, hostel, join, make_user
):
    user = make_user()
    join(user, join_date=date(2024, 12, 25))
    assert billing_service.close_billing_period(hostel.id, date(2024, 12, 25), JAN_1).is_success

    result = meal_ledger.set_meal_counts(user.id, hostel.id, JAN_1, {"lunch": 1})

    assert result.error_code == ErrorCode.BILLING_PERIOD_CLOSED


def test_non_member_cannot_record_meals(meal_ledger, hostel, make_user):
    result = meal_ledger.set_meal_counts(make_user().id, hostel.id, JAN_1, {"lunch": 1})

    assert result.error_code == ErrorCode.NOT_A_MEMBER


def test_meals_outside_membership_window_are_rejected(meal_ledger, hostel, join, make_user):
    user = make_user()
    join(user, join_date=date(2025, 1, 2))

    result = meal_ledger.set_meal_counts(user.id, hostel.id, JAN_1, {"lunch": 1})

    assert result.error_code == ErrorCode.NOT_A_MEMBER


@pytest.mark.parametrize(
    "counts",
    [
        {"lunch": -1},
        {"snacks": 1},
        {"dinner": "two"},
        {"breakfast": True},
    ],
)
def test_invalid_counts_are_rejected(counts, meal_ledger, hostel, join, make_user):
    user = make_user()
    join(user)

    result = meal_ledger.set_meal_counts(user.id, hostel.id, JAN_1, counts)

    assert result.error_code == ErrorCode.INVALID_MEAL_COUNTS
    assert result.error.kind == ErrorKind.VALIDATION


def test_validate_meal_counts_fills_missing_fields():
    assert validate_meal_counts({"lunch": 1}) == _day({"lunch": 1})


def test_meals_for_period_are_ordered_by_date_then_user(meal_ledger, hostel, join, make_user, clock):
    users = sorted([make_user("A"), make_user("B")], key=lambda u: u.id)
    for user in users:
        join(user)
    clock.set(datetime(2025, 1, 2, 12, 0, tzinfo=timezone.utc))
    for day in (date(2025, 1, 2), JAN_1):
        for user in reversed(users):
            meal_ledger.set_meal_counts(user.id, hostel.id, day, {"lunch": 1})

    records = list(meal_ledger.get_meals_for_period(hostel.id, JAN_1, date(2025, 1, 2)).data)

    assert [(r.meal_date, r.user_id) for r in records] == [
        (JAN_1, users[0].id),
        (JAN_1, users[1].id),
        (date(2025, 1, 2), users[0].id),
        (date(2025, 1, 2), users[1].id),
    ]


def test_meals_for_period_rejects_inverted_range(meal_ledger, hostel):
    result = meal_ledger.get_meals_for_period(hostel.id, date(2025, 1, 5), JAN_1)

    assert result.error_code == ErrorCode.INVALID_DATE_RANGE


def test_missing_meal_record_is_not_found(meal_ledger, make_user):
    result = meal_ledger.get_meal_record(make_user().id, JAN_1)

    assert result.error.kind == ErrorKind.NOT_FOUND


def test_losing_a_first_insert_race_retries_as_an_update(
    db, meal_ledger, hostel, join, make_user, monkeypatch
):
    user = make_user()
    join(user)
    first = meal_ledger.set_meal_counts(user.id, hostel.id, JAN_1, {"lunch": 1})
    assert first.is_success, first

    # The first attempt misses the existing row, as a concurrent writer's
    # uncommitted insert would be missed, and trips the unique constraint.
    real_find = meal_ledger.meal_repo.find_for_user_date
    lookups = []

    def stale_then_real(*args, **kwargs):
        lookups.append(args)
        if len(lookups) == 1:
            return None
        return real_find(*args, **kwargs)

    monkeypatch.setattr(meal_ledger.meal_repo, "find_for_user_date", stale_then_real)
    monkeypatch.setattr(settings, "CONFLICT_RETRY_BACKOFF_SECONDS", 0)

    result = meal_ledger.set_meal_counts(user.id, hostel.id, JAN_1, {"dinner": 2})

    assert result.is_success, result
    assert len(lookups) == 2
    assert result.data.id == first.data.id
    db.refresh(result.data)
    assert (result.data.lunch, result.data.dinner) == (0, 2)
