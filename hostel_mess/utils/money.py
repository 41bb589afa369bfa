"""
Money helpers.

Amounts are ``Decimal`` throughout; rounding is half-up to the currency
minor unit configured in settings.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional

from hostel_mess.config.settings import settings


def minor_unit(places: Optional[int] = None) -> Decimal:
    """Smallest currency unit, e.g. Decimal('0.01') for two places."""
    if places is None:
        places = settings.CURRENCY_DECIMAL_PLACES
    return Decimal(1).scaleb(-places)


def quantize_money(value: Any, places: Optional[int] = None) -> Decimal:
    """Round half-up to the minor unit."""
    return to_decimal(value).quantize(minor_unit(places), rounding=ROUND_HALF_UP)


def to_decimal(value: Any) -> Decimal:
    """
    Convert ints, strings, floats and Decimals to Decimal.

    Floats go through ``str`` so 0.1 stays 0.1.

    Raises:
        ValueError: for non-numeric or non-finite input
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, TypeError) as e:
            raise ValueError(f"Not a number: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def apportion(
    total: Decimal,
    weights: Mapping[str, Decimal],
    places: Optional[int] = None,
) -> Dict[str, Decimal]:
    """
    Split ``total`` across keys in proportion to ``weights``.

    Each share is rounded half-up to the minor unit, then the residue
    is settled one minor unit at a time: a positive residue goes to the
    keys with the largest rounding loss, a negative one is taken from the
    keys with the largest rounding gain, ties broken by key. The shares
    always sum exactly to the quantized total and the result depends only
    on the inputs.
    """
    unit = minor_unit(places)
    total = quantize_money(total, places)
    weight_sum = sum(weights.values(), Decimal(0))
    if not weights or weight_sum == 0:
        return {key: Decimal(0).quantize(unit) for key in weights}

    exact = {key: total * weight / weight_sum for key, weight in weights.items()}
    shares = {
        key: value.quantize(unit, rounding=ROUND_HALF_UP) for key, value in exact.items()
    }

    residue_units = int((total - sum(shares.values(), Decimal(0))) / unit)
    if residue_units > 0:
        order = sorted(exact, key=lambda k: (-(exact[k] - shares[k]), k))
        step = unit
    elif residue_units < 0:
        order = sorted(exact, key=lambda k: (exact[k] - shares[k], k))
        step = -unit
    else:
        return shares

    for i in range(abs(residue_units)):
        shares[order[i % len(order)]] += step
    return shares
