"""
Per-minute demand series with forward-fill gap policy.

Builds one ``DemandPoint`` for every whole minute of the requested window
from the instantaneous demand parameters (W, var, VA), then pads the
series with zero-valued points on each whole hour after the window so a
chart axis always closes at 24:00.

Rows are bucketed by ``(hour, minute)`` in a single pass before the
series is generated; within a minute the latest row wins. Minutes with no
row repeat the previous point (all-zero before the first row).

CHANGELOG:
- 2026-10-19: Initial creation
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from functools import reduce

from webmeter.models import Reading
from webmeter.services.window import TimeWindow

logger = logging.getLogger(__name__)

LAST_HOUR = 24


@dataclass(frozen=True, slots=True)
class DemandPoint:
    """Demand values at one tick of the dashboard chart.

    Attributes:
        hour_of_day: Fractional hour in [0, 24]; 14.5 is 14:30.
        watt: Active power demand, ``None`` when the reading had no value.
        var: Reactive power demand.
        va: Apparent power demand.
    """

    hour_of_day: float
    watt: float | None = None
    var: float | None = None
    va: float | None = None


def index_by_minute(readings: Sequence[Reading]) -> dict[tuple[int, int], Reading]:
    """Map ``(hour, minute)`` to the last reading observed in that minute.

    *readings* must be in ascending timestamp order; seconds are ignored.
    """
    index: dict[tuple[int, int], Reading] = {}
    for reading in readings:
        ts = reading.timestamp
        index[(ts.hour, ts.minute)] = reading
    return index


def _minute_point(
    series: list[DemandPoint],
    minute_of_day: int,
    index: dict[tuple[int, int], Reading],
) -> list[DemandPoint]:
    """Fold step: append the point for *minute_of_day* to *series*."""
    hour, minute = divmod(minute_of_day, 60)
    tick = hour + minute / 60
    reading = index.get((hour, minute))
    if reading is not None:
        point = DemandPoint(tick, reading.demand_w, reading.demand_var, reading.demand_va)
    elif series:
        previous = series[-1]
        point = DemandPoint(tick, previous.watt, previous.var, previous.va)
    else:
        point = DemandPoint(tick, 0.0, 0.0, 0.0)
    series.append(point)
    return series


def hourly_padding(to_hour: int) -> list[DemandPoint]:
    """Zero-valued points on each whole hour from ``to_hour + 1`` to 24."""
    return [DemandPoint(float(hour), 0.0, 0.0, 0.0) for hour in range(to_hour + 1, LAST_HOUR + 1)]


def build_demand_series(readings: Sequence[Reading], window: TimeWindow) -> list[DemandPoint]:
    """Build the gap-filled per-minute demand series for *window*.

    Args:
        readings: Readings inside the window, ascending by timestamp.
        window: Resolved window; only its minute-of-day span is used.

    Returns:
        list[DemandPoint]: ``to_total - from_total + 1`` minute points
        followed by the trailing hourly padding, non-decreasing in
        ``hour_of_day``.
    """
    index = index_by_minute(readings)
    minutes = range(window.from_total_minutes, window.to_total_minutes + 1)
    series = reduce(lambda acc, m: _minute_point(acc, m, index), minutes, [])

    logger.debug(
        "Demand series: %d minute point(s) from %d reading(s), padding after hour %d",
        len(series),
        len(readings),
        window.to_hour,
    )
    return series + hourly_padding(window.to_hour)
