"""
Last-N sparkline samples of the total power quantities.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from __future__ import annotations

from collections.abc import Sequence

from webmeter.models import Reading
from webmeter.numeric import as_number
from webmeter.parameters import SPARKLINE_PARAMETERS

SPARKLINE_POINTS = 6


def sample_sparklines(
    readings: Sequence[Reading],
    points: int = SPARKLINE_POINTS,
) -> dict[str, list[float]]:
    """Return the last *points* values of watt, var, va and powerFactor.

    All four sequences have length ``min(points, len(readings))``; missing
    values become 0.
    """
    recent = readings[-points:] if points > 0 else []
    return {
        param.field: [as_number(r.value(param.key)) for r in recent]
        for param in SPARKLINE_PARAMETERS
    }


def empty_sparklines(points: int = SPARKLINE_POINTS) -> dict[str, list[float]]:
    """Zero-filled sparklines for a window with no readings."""
    return {param.field: [0.0] * points for param in SPARKLINE_PARAMETERS}
