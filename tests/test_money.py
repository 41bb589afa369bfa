from __future__ import annotations

from decimal import Decimal

import pytest

from hostel_mess.utils.money import apportion, minor_unit, quantize_money, to_decimal


def test_quantize_rounds_half_up():
    assert quantize_money("2.345") == Decimal("2.35")
    assert quantize_money("2.344") == Decimal("2.34")
    assert quantize_money(0.1) == Decimal("0.10")
    assert quantize_money("2.5", places=0) == Decimal("3")


@pytest.mark.parametrize("value", ["abc", None, True, "NaN", "Infinity"])
def test_to_decimal_rejects_non_numbers(value):
    with pytest.raises(ValueError):
        to_decimal(value)


def test_minor_unit_follows_places():
    assert minor_unit(2) == Decimal("0.01")
    assert minor_unit(0) == Decimal("1")


def test_apportion_gives_residue_to_largest_loss():
    shares = apportion(Decimal("10"), {"a": Decimal(1), "b": Decimal(1), "c": Decimal(1)})

    assert shares == {"a": Decimal("3.34"), "b": Decimal("3.33"), "c": Decimal("3.33")}


def test_apportion_takes_back_negative_residue():
    # 1/6 each rounds up to 0.17, six times overshoots 1.00 by 0.02
    weights = {key: Decimal(1) for key in "abcdef"}

    shares = apportion(Decimal("1"), weights)

    assert sum(shares.values()) == Decimal("1.00")
    assert sorted(shares.values()) == [Decimal("0.16")] * 2 + [Decimal("0.17")] * 4
    assert shares["a"] == shares["b"] == Decimal("0.16")


def test_apportion_is_proportional_and_exact():
    shares = apportion(Decimal("500"), {"a": Decimal(30), "b": Decimal(20)})

    assert shares == {"a": Decimal("300.00"), "b": Decimal("200.00")}


def test_apportion_with_zero_weights_is_all_zero():
    assert apportion(Decimal("90"), {"a": Decimal(0)}) == {"a": Decimal("0.00")}
    assert apportion(Decimal("90"), {}) == {}
