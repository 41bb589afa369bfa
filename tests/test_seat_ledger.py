from __future__ import annotations

from decimal import Decimal

from hostel_mess.core.exceptions import ErrorCode, ErrorKind
from hostel_mess.models.base.enums import SeatStatus


def _create_seats(seat_ledger, hostel, count, start=1):
    seats = []
    for n in range(start, start + count):
        result = seat_ledger.create_seat(hostel.id, str(n), "A", rent=1500)
        assert result.is_success, result
        seats.append(result.data)
    return seats


def _counts(db, hostel):
    db.refresh(hostel)
    return hostel.seat_summary


def test_seat_summary_follows_status_changes(db, seat_ledger, hostel, join, make_user):
    seats = _create_seats(seat_ledger, hostel, 10)
    for seat in seats[:6]:
        occupant = make_user(f"Occupant {seat.seat_number}")
        join(occupant)
        result = seat_ledger.set_seat_status(seat.id, SeatStatus.OCCUPIED, occupant_id=occupant.id)
        assert result.is_success, result

    assert _counts(db, hostel) == {
        "total": 10,
        "occupied": 6,
        "available_for_rent": 4,
        "in_maintenance": 0,
    }


def test_duplicate_seat_number_leaves_summary_unchanged(db, seat_ledger, hostel):
    _create_seats(seat_ledger, hostel, 3)
    before = _counts(db, hostel)

    result = seat_ledger.create_seat(hostel.id, "1", "B")

    assert not result.is_success
    assert result.error_code == ErrorCode.DUPLICATE_SEAT
    assert result.error.kind == ErrorKind.CONFLICT
    assert _counts(db, hostel) == before


def test_seat_creation_beyond_total_is_rejected(db, seat_ledger, make_hostel):
    small = make_hostel(short_code="SMALL1", total_seats=2)
    _create_seats(seat_ledger, small, 2)

    result = seat_ledger.create_seat(small.id, "3", "A")

    assert result.error_code == ErrorCode.SEAT_CAPACITY_EXCEEDED
    assert result.error.details["total"] == 2
    assert _counts(db, small)["available_for_rent"] == 2


def test_occupied_requires_occupant_and_others_forbid_it(seat_ledger, hostel, make_user):
    (seat,) = _create_seats(seat_ledger, hostel, 1)
    user = make_user()

    missing = seat_ledger.set_seat_status(seat.id, SeatStatus.OCCUPIED)
    extra = seat_ledger.set_seat_status(seat.id, SeatStatus.IN_MAINTENANCE, occupant_id=user.id)

    assert missing.error_code == ErrorCode.INVALID_OCCUPANT_BINDING
    assert extra.error_code == ErrorCode.INVALID_OCCUPANT_BINDING


def test_occupied_seat_cannot_be_taken_by_someone_else(seat_ledger, hostel, join, make_user):
    (seat,) = _create_seats(seat_ledger, hostel, 1)
    first, second = make_user("First"), make_user("Second")
    join(first)
    join(second)
    assert seat_ledger.set_seat_status(seat.id, SeatStatus.OCCUPIED, first.id).is_success

    result = seat_ledger.set_seat_status(seat.id, SeatStatus.OCCUPIED, second.id)

    assert result.error_code == ErrorCode.SEAT_ALREADY_OCCUPIED


def test_occupant_must_be_a_member_of_the_seats_hostel(
    db, seat_ledger, make_hostel, hostel, join, make_user
):
    (seat,) = _create_seats(seat_ledger, hostel, 1)
    other = make_hostel(short_code="ZZ1")
    stranger, elsewhere = make_user("Stranger"), make_user("Elsewhere")
    join(elsewhere, short_code=other.short_code)

    for user in (stranger, elsewhere):
        result = seat_ledger.set_seat_status(seat.id, SeatStatus.OCCUPIED, user.id)
        assert result.error_code == ErrorCode.NOT_A_MEMBER
        assert result.error.details["hostel_id"] == hostel.id

    db.refresh(seat)
    assert seat.status == SeatStatus.AVAILABLE_FOR_RENT
    assert _counts(db, hostel)["occupied"] == 0


def test_membership_seat_follows_occupancy(db, seat_ledger, hostel, join, make_user):
    first_seat, second_seat = _create_seats(seat_ledger, hostel, 2)
    user = make_user()
    membership = join(user)

    assert seat_ledger.set_seat_status(first_seat.id, SeatStatus.OCCUPIED, user.id).is_success
    db.refresh(membership)
    assert membership.seat_id == first_seat.id

    assert seat_ledger.set_seat_status(first_seat.id, SeatStatus.IN_MAINTENANCE).is_success
    db.refresh(membership)
    assert membership.seat_id is None

    assert seat_ledger.set_seat_status(second_seat.id, SeatStatus.OCCUPIED, user.id).is_success
    db.refresh(membership)
    assert membership.seat_id == second_seat.id


def test_stale_expected_version_is_a_concurrent_modification(seat_ledger, hostel):
    (seat,) = _create_seats(seat_ledger, hostel, 1)
    version = seat.version
    assert seat_ledger.set_seat_status(
        seat.id, SeatStatus.IN_MAINTENANCE, expected_version=version
    ).is_success

    result = seat_ledger.set_seat_status(
        seat.id, SeatStatus.AVAILABLE_FOR_RENT, expected_version=version
    )

    assert result.error_code == ErrorCode.CONCURRENT_MODIFICATION
    assert result.error.retryable
    assert result.error.details["expected_version"] == version


def test_reconcile_repairs_drifted_counters(db, seat_ledger, hostel):
    _create_seats(seat_ledger, hostel, 3)
    db.refresh(hostel)
    hostel.seats_available_for_rent = 0
    hostel.seats_in_maintenance = 1
    db.commit()

    result = seat_ledger.reconcile_hostel_seat_counts(hostel.id)

    assert result.is_success, result
    report = result.data
    assert report["drift"] is True
    assert report["before"]["in_maintenance"] == 1
    assert report["after"] == {
        "total": 10,
        "occupied": 0,
        "available_for_rent": 3,
        "in_maintenance": 0,
    }
    again = seat_ledger.reconcile_hostel_seat_counts(hostel.id)
    assert again.data["drift"] is False


def test_seat_total_cannot_drop_below_recorded_seats(db, seat_ledger, hostel):
    _create_seats(seat_ledger, hostel, 4)

    too_small = seat_ledger.set_seat_total(hostel.id, 3)
    ok = seat_ledger.set_seat_total(hostel.id, 4)

    assert too_small.error_code == ErrorCode.SEAT_CAPACITY_EXCEEDED
    assert ok.is_success
    assert _counts(db, hostel)["total"] == 4


def test_list_seats_filters_by_status(seat_ledger, hostel):
    seats = _create_seats(seat_ledger, hostel, 3)
    seat_ledger.set_seat_status(seats[0].id, SeatStatus.IN_MAINTENANCE)

    in_maintenance = seat_ledger.list_seats(hostel.id, SeatStatus.IN_MAINTENANCE).data
    every_seat = seat_ledger.list_seats(hostel.id).data

    assert [s.id for s in in_maintenance] == [seats[0].id]
    assert len(every_seat) == 3
    assert every_seat[0].rent == Decimal("1500.00")


def test_invalid_status_value_is_a_validation_error(seat_ledger, hostel):
    (seat,) = _create_seats(seat_ledger, hostel, 1)

    result = seat_ledger.set_seat_status(seat.id, "BROKEN")

    assert result.error.kind == ErrorKind.VALIDATION
    assert result.error.field == "status"
