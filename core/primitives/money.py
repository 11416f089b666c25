"""
POS Money Primitive
===================
All amounts are Decimal, quantized to two places with half-up
rounding. Floats never enter the pricing path.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

MONEY_QUANT = Decimal("0.01")
ZERO = Decimal("0.00")

MoneyLike = Union[Decimal, int, str]


def to_money(value: MoneyLike) -> Decimal:
    """Coerce to a two-place Decimal. Floats are refused."""
    if isinstance(value, float):
        raise TypeError("Money amounts must not be floats; use Decimal or str.")
    if isinstance(value, bool):
        raise TypeError("Money amount must be numeric.")
    try:
        amount = Decimal(value) if not isinstance(value, Decimal) else value
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Invalid money amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Invalid money amount: {value!r}")
    return amount.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def money_str(value: Decimal) -> str:
    """Serialize for JSON snapshots (lossless, fixed two places)."""
    return str(to_money(value))
