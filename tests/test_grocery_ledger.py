from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from hostel_mess.core.exceptions import ErrorCode
from hostel_mess.models.base.enums import GroceryCategory, GroceryUnit

JAN_1 = date(2025, 1, 1)


@pytest.fixture
def bazar(grocery_ledger, hostel, owner):
    result = grocery_ledger.create_bazar(hostel.id, JAN_1, added_by=owner.id)
    assert result.is_success, result
    return result.data


def _add(grocery_ledger, bazar, name, quantity, price, **kwargs):
    result = grocery_ledger.add_item(
        bazar.id,
        name=name,
        category=kwargs.pop("category", GroceryCategory.OTHER),
        quantity=quantity,
        unit=kwargs.pop("unit", GroceryUnit.KG),
        price_per_unit=price,
        **kwargs,
    )
    assert result.is_success, result
    return result.data


def _grand_total(db, bazar):
    db.refresh(bazar)
    return bazar.grand_total


def test_grand_total_tracks_items(db, grocery_ledger, bazar):
    assert _grand_total(db, bazar) == Decimal("0")

    rice = _add(grocery_ledger, bazar, "Rice", 10, 60, category=GroceryCategory.RICE_GRAINS)
    assert rice.total_cost == Decimal("600")
    assert _grand_total(db, bazar) == Decimal("600")

    onion = _add(grocery_ledger, bazar, "onion", 5, 40, category=GroceryCategory.VEGETABLE)
    assert onion.total_cost == Decimal("200")
    assert _grand_total(db, bazar) == Decimal("800")

    removed = grocery_ledger.remove_item(rice.id)
    assert removed.is_success, removed
    assert _grand_total(db, bazar) == Decimal("200")


def test_update_item_recomputes_totals(db, grocery_ledger, bazar):
    item = _add(grocery_ledger, bazar, "chicken", 2, 250)

    result = grocery_ledger.update_item(item.id, quantity="1.5", price_per_unit="260")

    assert result.is_success, result
    assert result.data.total_cost == Decimal("390.00")
    assert _grand_total(db, bazar) == Decimal("390.00")


def test_update_rejects_unknown_fields(grocery_ledger, bazar):
    item = _add(grocery_ledger, bazar, "salt", 1, 35)

    result = grocery_ledger.update_item(item.id, colour="white")

    assert result.error_code == ErrorCode.VALIDATION_ERROR
    assert result.error.details["unknown"] == ["colour"]


@pytest.mark.parametrize(
    "name, quantity, price, field",
    [
        ("  ", 1, 10, "name"),
        ("rice", 0, 10, "quantity"),
        ("rice", -2, 10, "quantity"),
        ("rice", 1, -1, "price_per_unit"),
        ("rice", "lots", 10, "quantity"),
        ("rice", "0.0004", 10, "quantity"),
        ("rice", "1.2345", 10, "quantity"),
        ("rice", 1, "0.12345", "price_per_unit"),
    ],
)
def test_invalid_items_are_rejected_and_total_untouched(
    db, grocery_ledger, bazar, name, quantity, price, field
):
    _add(grocery_ledger, bazar, "egg", 2, 150, unit=GroceryUnit.DOZEN)

    result = grocery_ledger.add_item(
        bazar.id, name, GroceryCategory.OTHER, quantity, GroceryUnit.KG, price
    )

    assert result.error_code == ErrorCode.INVALID_GROCERY_ITEM
    assert result.error.field == field
    assert _grand_total(db, bazar) == Decimal("300")


def test_unknown_unit_is_rejected(grocery_ledger, bazar):
    result = grocery_ledger.add_item(bazar.id, "rice", "RICE_GRAINS", 1, "SACK", 10)

    assert result.error_code == ErrorCode.INVALID_GROCERY_ITEM
    assert result.error.field == "unit"


def test_fine_unit_prices_are_stored_unrounded(db, grocery_ledger, bazar):
    chili = _add(
        grocery_ledger, bazar, "green chili", "1000", "0.125",
        category=GroceryCategory.VEGETABLE, unit=GroceryUnit.GM,
    )
    db.refresh(chili)

    assert chili.price_per_unit == Decimal("0.125")
    assert chili.total_cost == Decimal("125.00")
    assert _grand_total(db, bazar) == Decimal("125.00")


def test_total_cost_rounds_half_up_to_the_cent(grocery_ledger, bazar):
    item = _add(grocery_ledger, bazar, "ginger", "0.333", "15")

    assert item.total_cost == Decimal("5.00")
    assert item.quantity == Decimal("0.333")


def test_zero_price_is_allowed(grocery_ledger, bazar):
    item = _add(grocery_ledger, bazar, "donated rice", 5, 0)

    assert item.total_cost == Decimal("0")


def test_items_in_closed_period_cannot_change(grocery_ledger, billing_service, hostel, bazar):
    item = _add(grocery_ledger, bazar, "rice", 1, 60)
    assert billing_service.close_billing_period(hostel.id, JAN_1, date(2025, 1, 31)).is_success

    added = grocery_ledger.add_item(bazar.id, "dal", "RICE_GRAINS", 1, "KG", 120)
    updated = grocery_ledger.update_item(item.id, quantity=2)
    removed = grocery_ledger.remove_item(item.id)
    created = grocery_ledger.create_bazar(hostel.id, date(2025, 1, 15), added_by=bazar.added_by)

    for result in (added, updated, removed, created):
        assert result.error_code == ErrorCode.BILLING_PERIOD_CLOSED


def test_price_history_is_oldest_first_and_name_insensitive(
    grocery_ledger, catalog_service, hostel, owner
):
    market = catalog_service.create_market("Kawran Bazar").data
    prices = [(date(2025, 1, 3), 65), (date(2025, 1, 1), 60), (date(2025, 1, 2), 62)]
    for day, price in prices:
        bazar = grocery_ledger.create_bazar(hostel.id, day, added_by=owner.id).data
        _add(grocery_ledger, bazar, "Rice", 1, price, market_id=market.id)
    other = grocery_ledger.create_bazar(hostel.id, date(2025, 1, 4), added_by=owner.id).data
    _add(grocery_ledger, other, "rice", 1, 70)

    everywhere = list(grocery_ledger.price_history("  RICE ", hostel_id=hostel.id).data)
    at_market = list(grocery_ledger.price_history("rice", market_id=market.id).data)

    assert everywhere == [
        (date(2025, 1, 1), Decimal("60.00")),
        (date(2025, 1, 2), Decimal("62.00")),
        (date(2025, 1, 3), Decimal("65.00")),
        (date(2025, 1, 4), Decimal("70.00")),
    ]
    assert [price for _, price in at_market] == [Decimal("60"), Decimal("62"), Decimal("65")]


def test_unknown_market_is_not_found(grocery_ledger, bazar):
    result = grocery_ledger.add_item(bazar.id, "rice", "RICE_GRAINS", 1, "KG", 60, market_id="missing")

    assert result.error_code == ErrorCode.MARKET_NOT_FOUND


def test_get_bazar_includes_items(grocery_ledger, bazar):
    _add(grocery_ledger, bazar, "rice", 10, 60)
    _add(grocery_ledger, bazar, "onion", 5, 40)

    loaded = grocery_ledger.get_bazar(bazar.id).data

    assert [i.name for i in loaded.items] == ["rice", "onion"]
    assert loaded.grand_total == Decimal("800")
