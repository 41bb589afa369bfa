from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hostel_mess.api import deps
from hostel_mess.main import create_app
from hostel_mess.models import Base
from hostel_mess.models.user import User
from hostel_mess.services import (
    BillingService,
    GroceryCatalogService,
    GroceryLedgerService,
    HostelService,
    MealLedgerService,
    MembershipService,
    SeatLedgerService,
)
from hostel_mess.utils.date_utils import FixedClock


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc))


# ------------------------------------------------------------------ #
# Services
# ------------------------------------------------------------------ #
@pytest.fixture
def seat_ledger(db, clock):
    return SeatLedgerService(db, clock)


@pytest.fixture
def hostel_service(db, clock):
    return HostelService(db, clock)


@pytest.fixture
def membership_service(db, clock):
    return MembershipService(db, clock)


@pytest.fixture
def meal_ledger(db, clock):
    return MealLedgerService(db, clock)


@pytest.fixture
def grocery_ledger(db, clock):
    return GroceryLedgerService(db, clock)


@pytest.fixture
def catalog_service(db, clock):
    return GroceryCatalogService(db, clock)


@pytest.fixture
def billing_service(db, clock):
    return BillingService(db, clock)


# ------------------------------------------------------------------ #
# Factories
# ------------------------------------------------------------------ #
@pytest.fixture
def make_user(db):
    def _make(name: str = "Resident") -> User:
        user = User(name=name)
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def owner(make_user):
    return make_user("Owner")


@pytest.fixture
def make_hostel(hostel_service, owner):
    def _make(short_code: str = "DH402A", total_seats: int = 10, **kwargs):
        result = hostel_service.create_hostel(
            owner_id=owner.id,
            name=kwargs.pop("name", f"Hostel {short_code}"),
            short_code=short_code,
            hostel_type=kwargs.pop("hostel_type", "BOYS"),
            total_seats=total_seats,
            **kwargs,
        )
        assert result.is_success, result
        return result.data

    return _make


@pytest.fixture
def hostel(make_hostel):
    return make_hostel()


@pytest.fixture
def join(membership_service, hostel):
    """Join ``hostel`` on the given date and return the membership."""

    def _join(user, join_date=None, seat_id=None, short_code=None):
        result = membership_service.join_hostel(
            user.id,
            short_code or hostel.short_code,
            join_date or datetime(2025, 1, 1).date(),
            seat_id=seat_id,
        )
        assert result.is_success, result
        return result.data

    return _join


# ------------------------------------------------------------------ #
# API
# ------------------------------------------------------------------ #
@pytest.fixture
def client(db, clock):
    app = create_app(create_schema=False)

    def _get_db():
        yield db

    app.dependency_overrides[deps.get_db] = _get_db
    app.dependency_overrides[deps.get_clock] = lambda: clock
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
