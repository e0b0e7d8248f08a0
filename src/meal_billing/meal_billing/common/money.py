from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable

from ..core.constants import MONEY_PLACES, ZERO


def to_decimal(value: Any) -> Decimal:
    """Coerce a driver value (Decimal, int, str, None) to Decimal.

    Floats go through ``str`` so binary noise never enters a sum.
    """

    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        value = repr(value)
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError):
        raise ValueError(f"Not a decimal amount: {value!r}")


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def sum_money(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def format_money(value: Decimal) -> str:
    return f"{quantize_money(value):.2f}"
