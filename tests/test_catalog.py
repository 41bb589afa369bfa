from __future__ import annotations

from hostel_mess.core.exceptions import ErrorCode, ErrorKind
from hostel_mess.models.base.enums import GroceryCategory, GroceryUnit
from hostel_mess.services.mess.constants import DEFAULT_PRESETS


def test_market_names_are_unique_ignoring_case(catalog_service):
    assert catalog_service.create_market("Kawran Bazar", location=(90.39, 23.75)).is_success

    result = catalog_service.create_market("kawran bazar")

    assert result.error_code == ErrorCode.DUPLICATE_MARKET


def test_inactive_markets_are_hidden_by_default(catalog_service):
    kawran = catalog_service.create_market("Kawran Bazar").data
    catalog_service.create_market("Mohakhali Kacha Bazar")

    assert catalog_service.set_market_active(kawran.id, False).is_success

    active = catalog_service.list_markets().data
    every = catalog_service.list_markets(active_only=False).data
    assert [m.name for m in active] == ["Mohakhali Kacha Bazar"]
    assert [m.name for m in every] == ["Kawran Bazar", "Mohakhali Kacha Bazar"]


def test_unknown_market_cannot_be_toggled(catalog_service):
    result = catalog_service.set_market_active("missing", True)

    assert result.error_code == ErrorCode.MARKET_NOT_FOUND


def test_seeding_presets_is_idempotent(catalog_service):
    first = catalog_service.seed_default_presets()
    second = catalog_service.seed_default_presets()

    assert len(first.data) == len(DEFAULT_PRESETS)
    assert second.data == []
    assert all(not preset.is_custom for preset in first.data)


def test_custom_preset_names_are_normalized_and_unique(catalog_service):
    created = catalog_service.create_preset("  Hilsa Fish ", "PROTEIN", "KG")
    duplicate = catalog_service.create_preset("hilsa fish", GroceryCategory.PROTEIN, GroceryUnit.KG)

    assert created.data.name == "hilsa fish"
    assert created.data.is_custom is True
    assert duplicate.error_code == ErrorCode.DUPLICATE_PRESET


def test_presets_filter_by_category(catalog_service):
    catalog_service.seed_default_presets()

    vegetables = catalog_service.list_presets(GroceryCategory.VEGETABLE).data

    assert [p.name for p in vegetables] == ["green chili", "onion", "potato", "tomato"]


def test_preset_rejects_unknown_category_and_unit(catalog_service):
    bad_category = catalog_service.create_preset("tea", "DRINKS", "KG")
    bad_unit = catalog_service.create_preset("tea", "OTHER", "CUP")

    assert bad_category.error.kind == ErrorKind.VALIDATION
    assert bad_category.error.field == "category"
    assert bad_unit.error.field == "default_unit"
