from __future__ import annotations

from decimal import Decimal

import pytest

API = "/api/v1"


def _headers(user):
    return {"X-User-Id": user.id}


@pytest.fixture
def create_hostel(client, owner):
    def _create(**overrides):
        payload = {
            "name": "Dhanmondi Boys",
            "short_code": "dh402a",
            "hostel_type": "BOYS",
            "total_seats": 10,
        }
        payload.update(overrides)
        return client.post(f"{API}/hostels", json=payload, headers=_headers(owner))

    return _create


def test_health_check(client):
    response = client.get(f"{API}/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Request-ID"]


def test_create_hostel_returns_created_hostel(create_hostel, owner):
    response = create_hostel(location={"coordinates": [90.41, 23.81]})

    assert response.status_code == 201
    body = response.json()
    assert body["short_code"] == "DH402A"
    assert body["owner_id"] == owner.id
    assert body["seat_summary"] == {
        "total": 10,
        "occupied": 0,
        "available_for_rent": 0,
        "in_maintenance": 0,
    }


def test_duplicate_short_code_is_a_conflict_envelope(create_hostel):
    create_hostel()

    response = create_hostel(name="Another")

    assert response.status_code == 409
    error = response.json()["error"]
    assert error["code"] == "DUPLICATE_SHORT_CODE"
    assert error["kind"] == "CONFLICT"
    assert error["field"] == "short_code"


def test_missing_user_header_is_unauthorized(client):
    response = client.post(
        f"{API}/hostels",
        json={"name": "Dhanmondi Boys", "short_code": "DH402A", "hostel_type": "BOYS", "total_seats": 1},
    )

    assert response.status_code == 401


def test_request_validation_uses_error_envelope(create_hostel):
    response = create_hostel(total_seats=0)

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert "body.total_seats" in error["details"]["field_errors"]


def test_unknown_hostel_is_not_found(client):
    response = client.get(f"{API}/hostels/missing")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "HOSTEL_NOT_FOUND"


def test_meal_edit_during_suspension_is_locked(client, create_hostel, make_user):
    hostel = create_hostel().json()
    member = make_user("Member")
    joined = client.post(
        f"{API}/memberships/join",
        json={"short_code": "DH402A", "join_date": "2025-01-01"},
        headers=_headers(member),
    )
    assert joined.status_code == 201
    client.post(
        f"{API}/hostels/{hostel['id']}/suspension",
        json={"until": "2025-01-03T00:00:00Z", "reason": "gas line repair"},
    )

    response = client.put(
        f"{API}/hostels/{hostel['id']}/meals/2025-01-02",
        json={"lunch": 1},
        headers=_headers(member),
    )

    assert response.status_code == 423
    assert response.json()["error"]["code"] == "HOSTEL_SERVICE_SUSPENDED"


def test_meals_and_bazar_roll_up_into_the_bill(client, create_hostel, owner, make_user):
    hostel = create_hostel().json()
    first, second = make_user("First"), make_user("Second")
    for member in (first, second):
        client.post(
            f"{API}/memberships/join",
            json={"short_code": "DH402A", "join_date": "2025-01-01"},
            headers=_headers(member),
        )
    client.put(
        f"{API}/hostels/{hostel['id']}/meals/2025-01-01",
        json={"lunch": 1, "dinner": 2},
        headers=_headers(first),
    )
    record = client.put(
        f"{API}/hostels/{hostel['id']}/meals/2025-01-01",
        json={"dinner": 1},
        headers=_headers(second),
    )
    assert record.status_code == 200
    assert record.json()["lunch"] == 0

    bazar = client.post(
        f"{API}/hostels/{hostel['id']}/bazars",
        json={"bazar_date": "2025-01-01"},
        headers=_headers(owner),
    ).json()
    item = client.post(
        f"{API}/bazars/{bazar['id']}/items",
        json={"name": "Rice", "category": "RICE_GRAINS", "quantity": "5", "unit": "KG", "price_per_unit": "80"},
    )
    assert item.status_code == 201

    response = client.get(
        f"{API}/hostels/{hostel['id']}/bill",
        params={"start": "2025-01-01", "end": "2025-01-31"},
    )

    assert response.status_code == 200
    bill = response.json()
    costs = {line["user_id"]: Decimal(str(line["meal_cost"])) for line in bill["members"]}
    assert costs == {first.id: Decimal("300"), second.id: Decimal("100")}
    assert Decimal(str(bill["total_grocery_cost"])) == Decimal("400")
    assert bill["is_closed"] is False


def test_empty_bill_maps_no_meals_to_conflict(client, create_hostel):
    hostel = create_hostel().json()

    strict = client.get(
        f"{API}/hostels/{hostel['id']}/bill",
        params={"start": "2025-01-01", "end": "2025-01-31"},
    )
    lenient = client.get(
        f"{API}/hostels/{hostel['id']}/bill",
        params={"start": "2025-01-01", "end": "2025-01-31", "allow_empty": "true"},
    )

    assert strict.status_code == 409
    assert strict.json()["error"]["code"] == "NO_MEALS_RECORDED"
    assert lenient.status_code == 200
    assert lenient.json()["members"] == []


def test_closed_period_blocks_meal_edits_with_locked_status(client, create_hostel, owner, make_user):
    hostel = create_hostel().json()
    member = make_user("Member")
    client.post(
        f"{API}/memberships/join",
        json={"short_code": "DH402A", "join_date": "2025-01-01"},
        headers=_headers(member),
    )
    closed = client.post(
        f"{API}/hostels/{hostel['id']}/billing-periods",
        json={"start_date": "2025-01-01", "end_date": "2025-01-31"},
        headers=_headers(owner),
    )
    assert closed.status_code == 201
    assert closed.json()["closed_by"] == owner.id

    response = client.put(
        f"{API}/hostels/{hostel['id']}/meals/2025-01-01",
        json={"lunch": 1},
        headers=_headers(member),
    )

    assert response.status_code == 423
    assert response.json()["error"]["code"] == "BILLING_PERIOD_CLOSED"
