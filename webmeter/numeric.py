"""
Numeric helpers shared by the aggregators and response formatting.

CHANGELOG:
- 2026-10-19: Aggregates skip NaN and infinite values
- 2026-10-19: Initial creation
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal


def as_number(value: float | None) -> float:
    """Coerce a possibly-missing value to a finite float.

    ``None``, NaN and infinities become ``0.0``. Only call this at the
    output boundary; aggregation code must keep ``None`` as "no value".
    """
    if value is None:
        return 0.0
    value = float(value)
    if not math.isfinite(value):
        return 0.0
    return value


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round *value* to *ndigits* decimals, halves away from zero.

    The builtin :func:`round` uses banker's rounding, which makes
    ``round(0.125, 2) == 0.12``; invoices expect ``0.13``.
    """
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _finite(values: list[float | None]) -> list[float]:
    return [v for v in values if v is not None and math.isfinite(v)]


def max_of(values: list[float | None]) -> float | None:
    """Maximum of the finite *values*, or ``None`` if there are none."""
    present = _finite(values)
    return max(present) if present else None


def min_of(values: list[float | None]) -> float | None:
    """Minimum of the finite *values*, or ``None`` if there are none."""
    present = _finite(values)
    return min(present) if present else None


def spread(values: list[float | None]) -> float:
    """Return ``max - min`` of the finite *values* (0.0 when there are none)."""
    high = max_of(values)
    low = min_of(values)
    if high is None or low is None:
        return 0.0
    return high - low
