from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest

from hostel_mess.core.exceptions import ErrorCode, ErrorKind
from hostel_mess.models.base.enums import MealType, RuleLevel
from hostel_mess.services.base import ServiceError, ServiceResult


def test_created_hostel_starts_with_empty_inventory(hostel):
    assert hostel.short_code == "DH402A"
    assert hostel.seat_summary == {
        "total": 10,
        "occupied": 0,
        "available_for_rent": 0,
        "in_maintenance": 0,
    }
    assert hostel.meal_weights[MealType.BREAKFAST] == Decimal("0.5")


def test_short_code_is_unique_case_insensitively(hostel_service, hostel, owner):
    result = hostel_service.create_hostel(owner.id, "Copy", "dh402a", "BOYS")

    assert result.error_code == ErrorCode.DUPLICATE_SHORT_CODE
    assert result.error.kind == ErrorKind.CONFLICT


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"short_code": "X"}, "short_code"),
        ({"short_code": "BAD-CODE"}, "short_code"),
        ({"name": " "}, "name"),
        ({"total_seats": 0}, "total_seats"),
        ({"hostel_type": "MIXED"}, "hostel_type"),
    ],
)
def test_create_hostel_validates_input(hostel_service, owner, overrides, field):
    arguments = {"name": "North Block", "short_code": "NB01", "hostel_type": "GIRLS"}
    arguments.update(overrides)

    result = hostel_service.create_hostel(owner.id, **arguments)

    assert result.error.kind == ErrorKind.VALIDATION
    assert result.error.field == field


@pytest.mark.parametrize("location", [(200, 23), (90, -91), ("east", "north"), (1,)])
def test_invalid_coordinates_are_rejected(hostel_service, owner, location):
    result = hostel_service.create_hostel(
        owner.id, "North Block", "NB01", "GIRLS", location=location
    )

    assert result.error_code == ErrorCode.INVALID_COORDINATES


def test_valid_coordinates_are_stored(hostel_service, owner):
    hostel = hostel_service.create_hostel(
        owner.id, "North Block", "NB01", "GIRLS", location=("90.4125", "23.8103")
    ).data

    assert hostel.longitude == Decimal("90.4125")
    assert hostel.latitude == Decimal("23.8103")


def test_unknown_owner_is_not_found(hostel_service):
    result = hostel_service.create_hostel("missing", "North Block", "NB01", "GIRLS")

    assert result.error.kind == ErrorKind.NOT_FOUND


def test_rules_are_listed_in_order_and_order_is_unique(hostel_service, hostel):
    hostel_service.add_rule(hostel.id, 2, "No smoking", RuleLevel.CRITICAL, fine="500")
    hostel_service.add_rule(hostel.id, 1, "Gate closes at 11pm")

    duplicate = hostel_service.add_rule(hostel.id, 2, "Quiet hours")
    rules = hostel_service.list_rules(hostel.id).data

    assert duplicate.error_code == ErrorCode.DUPLICATE_RULE_ORDER
    assert [(r.order, r.title) for r in rules] == [(1, "Gate closes at 11pm"), (2, "No smoking")]
    assert rules[1].level == RuleLevel.CRITICAL


def test_meal_weights_can_be_changed(db, hostel_service, hostel):
    result = hostel_service.set_meal_weights(hostel.id, "0.75", 1, "1.25")

    assert result.is_success, result
    db.refresh(hostel)
    assert hostel.meal_weights == {
        MealType.BREAKFAST: Decimal("0.75"),
        MealType.LUNCH: Decimal("1"),
        MealType.DINNER: Decimal("1.25"),
    }


@pytest.mark.parametrize(
    "weights, field",
    [(("-1", 1, 1), "breakfast"), ((1, "heavy", 1), "lunch"), ((0, 0, 0), None)],
)
def test_invalid_meal_weights_are_rejected(hostel_service, hostel, weights, field):
    result = hostel_service.set_meal_weights(hostel.id, *weights)

    assert result.error_code == ErrorCode.INVALID_MEAL_WEIGHTS
    assert result.error.field == field


def test_suspension_must_end_in_the_future(hostel_service, hostel, clock):
    result = hostel_service.suspend_service(hostel.id, clock.now() - timedelta(hours=1))

    assert result.error_code == ErrorCode.INVALID_SUSPENSION
    assert result.error.field == "until"


def test_suspend_and_resume_service(hostel_service, hostel, clock):
    suspended = hostel_service.suspend_service(hostel.id, clock.now() + timedelta(days=1), "pest control")
    assert suspended.is_success
    assert suspended.data.service_suspension_reason == "pest control"

    resumed = hostel_service.resume_service(hostel.id)

    assert resumed.is_success
    assert resumed.data.service_suspended_until is None


def test_fine_must_be_positive(hostel_service, hostel, join, make_user):
    user = make_user()
    join(user)

    zero = hostel_service.issue_fine(hostel.id, user.id, 0, date(2025, 1, 2))
    junk = hostel_service.issue_fine(hostel.id, user.id, "a lot", date(2025, 1, 2))

    assert zero.error_code == ErrorCode.INVALID_FINE
    assert junk.error_code == ErrorCode.INVALID_FINE


def test_fine_requires_membership_on_issue_date(hostel_service, hostel, join, make_user):
    user = make_user()
    join(user, join_date=date(2025, 1, 10))

    result = hostel_service.issue_fine(hostel.id, user.id, 100, date(2025, 1, 5))

    assert result.error_code == ErrorCode.NOT_A_MEMBER


def test_fine_can_reference_a_rule(hostel_service, hostel, owner, join, make_user):
    user = make_user()
    join(user)
    rule = hostel_service.add_rule(hostel.id, 1, "No smoking", fine="500").data

    result = hostel_service.issue_fine(
        hostel.id, user.id, "500", date(2025, 1, 2), rule_id=rule.id, issued_by=owner.id
    )
    missing_rule = hostel_service.issue_fine(
        hostel.id, user.id, "500", date(2025, 1, 2), rule_id="missing"
    )

    assert result.is_success, result
    assert result.data.amount == Decimal("500.00")
    assert missing_rule.error.kind == ErrorKind.NOT_FOUND


def test_fine_in_closed_period_is_rejected(hostel_service, billing_service, hostel, join, make_user):
    user = make_user()
    join(user)
    billing_service.close_billing_period(hostel.id, date(2025, 1, 1), date(2025, 1, 31))

    result = hostel_service.issue_fine(hostel.id, user.id, 100, date(2025, 1, 2))

    assert result.error_code == ErrorCode.BILLING_PERIOD_CLOSED


def test_retry_on_conflict_retries_until_success(hostel_service):
    outcomes = [
        ServiceResult.failure(
            ServiceError(
                code=ErrorCode.CONCURRENT_MODIFICATION,
                message="Seat was modified concurrently",
                kind=ErrorKind.CONFLICT,
            )
        ),
        ServiceResult.success("done"),
    ]
    calls = []

    def operation(value):
        calls.append(value)
        return outcomes[len(calls) - 1]

    result = hostel_service.retry_on_conflict(operation, "seat-1", backoff_seconds=0)

    assert result.is_success
    assert result.data == "done"
    assert calls == ["seat-1", "seat-1"]


def test_retry_on_conflict_does_not_retry_other_failures(hostel_service):
    calls = []

    def operation():
        calls.append(1)
        return ServiceResult.validation_failure("bad input")

    result = hostel_service.retry_on_conflict(operation, backoff_seconds=0)

    assert result.error_code == ErrorCode.VALIDATION_ERROR
    assert len(calls) == 1
