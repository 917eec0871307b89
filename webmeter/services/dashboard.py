"""
Dashboard payload assembly.

Combines the latest reading of the window (current values and energy
registers), the per-minute demand series, the 25-bucket TOU profile and
the sparklines into the JSON-ready structure returned by
``GET /dashboard``. Missing values become 0 here and nowhere earlier.

A window with no readings still yields the full structure: zero current
values, a zero-valued demand series covering the requested minutes plus
padding, 25 zero TOU buckets and six-point zero sparklines.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from webmeter.models import Reading
from webmeter.numeric import as_number
from webmeter.parameters import CURRENT_VALUE_PARAMETERS, ENERGY_PARAMETERS
from webmeter.services.demand import DemandPoint, build_demand_series
from webmeter.services.sparkline import empty_sparklines, sample_sparklines
from webmeter.services.tou import TouBucket, build_tou_profile
from webmeter.services.window import TimeWindow

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No data available"

# Fields compared against the previous day on the dashboard cards.
YESTERDAY_FIELDS = ("watt", "var", "va", "powerFactor")


def current_values(latest: Reading | None) -> dict[str, float]:
    """Instantaneous values of the latest reading keyed by dashboard field."""
    return {
        param.field: as_number(latest.value(param.key) if latest else None)
        for param in CURRENT_VALUE_PARAMETERS
    }


def energy_values(latest: Reading | None) -> dict[str, float]:
    """Cumulative energy registers of the latest reading."""
    return {
        param.field: as_number(latest.value(param.key) if latest else None)
        for param in ENERGY_PARAMETERS
    }


def yesterday_values() -> dict[str, float]:
    """Previous-day comparison values.

    Always zero: there is no previous-day query yet.
    """
    return {name: 0.0 for name in YESTERDAY_FIELDS}


def demand_point_out(point: DemandPoint) -> dict[str, float]:
    return {
        "hour": point.hour_of_day,
        "watt": as_number(point.watt),
        "var": as_number(point.var),
        "va": as_number(point.va),
    }


def tou_bucket_out(bucket: TouBucket) -> dict[str, float]:
    return {
        "hour": bucket.hour,
        "demandW": as_number(bucket.demand_w),
        "demandVar": as_number(bucket.demand_var),
        "demandVA": as_number(bucket.demand_va),
        "importKwh": as_number(bucket.import_kwh),
        "exportKwh": as_number(bucket.export_kwh),
        "importKvarh": as_number(bucket.import_kvarh),
        "exportKvarh": as_number(bucket.export_kvarh),
    }


def build_dashboard(readings: Sequence[Reading], window: TimeWindow) -> dict[str, Any]:
    """Assemble the dashboard ``data`` object for *window*.

    Args:
        readings: Readings inside the window in ascending timestamp order.
        window: The resolved request window.

    Returns:
        dict: ``currentValues``, ``energyData``, ``demandData``,
        ``touData``, ``chartData`` and ``yesterdayData``.
    """
    latest = readings[-1] if readings else None

    demand = build_demand_series(readings, window)
    tou = build_tou_profile(readings)
    chart = sample_sparklines(readings) if readings else empty_sparklines()

    logger.debug(
        "Dashboard assembled: readings=%d demand_points=%d tou_buckets=%d",
        len(readings),
        len(demand),
        len(tou),
    )

    return {
        "currentValues": current_values(latest),
        "energyData": energy_values(latest),
        "demandData": [demand_point_out(p) for p in demand],
        "touData": [tou_bucket_out(b) for b in tou],
        "chartData": chart,
        "yesterdayData": yesterday_values(),
    }
