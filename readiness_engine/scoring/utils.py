"""
Decimal Utilities
readiness_engine/scoring/utils.py

Precision-safe decimal math for the scoring stages. All "round(x)" in the
scoring formulas is round-half-up, never Python's banker's rounding.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Union

Number = Union[int, float, Decimal]


def clamp(
    value: Decimal,
    min_val: Decimal = Decimal("0"),
    max_val: Decimal = Decimal("100"),
) -> Decimal:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def round_half_up(value: Number) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def mean(values: Iterable[Number]) -> Decimal:
    """
    Arithmetic mean as an exact Decimal.

    Raises ValueError on an empty sequence; callers decide the default.
    """
    items = [Decimal(str(v)) for v in values]
    if not items:
        raise ValueError("mean() of an empty sequence")
    return sum(items, Decimal("0")) / Decimal(len(items))
