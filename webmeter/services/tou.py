"""
Time-of-use hourly profile.

Produces exactly 25 buckets, hours 0 through 24. Each bucket carries the
latest reading of its hour: instantaneous W and var demand, the apparent
demand derived as ``sqrt(W^2 + var^2)``, and the four cumulative energy
registers copied verbatim. Bucket 24 never matches a reading; it exists so
a rendered chart axis closes at the 24-hour mark.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from webmeter.models import Reading

HOURS_IN_PROFILE = 25


@dataclass(frozen=True, slots=True)
class TouBucket:
    """Latest-in-hour values for one hour of the TOU profile.

    Energy fields are meter register values, not deltas within the hour.
    """

    hour: int
    demand_w: float = 0.0
    demand_var: float = 0.0
    demand_va: float = 0.0
    import_kwh: float | None = 0.0
    export_kwh: float | None = 0.0
    import_kvarh: float | None = 0.0
    export_kvarh: float | None = 0.0


def index_by_hour(readings: Sequence[Reading]) -> dict[int, Reading]:
    """Map hour of day to the last reading observed in that hour."""
    index: dict[int, Reading] = {}
    for reading in readings:
        index[reading.timestamp.hour] = reading
    return index


def _bucket(hour: int, reading: Reading | None) -> TouBucket:
    if reading is None:
        return TouBucket(hour)
    # Missing demand counts as zero so the derived VA stays consistent
    # with the W and var shown beside it.
    demand_w = reading.demand_w or 0.0
    demand_var = reading.demand_var or 0.0
    return TouBucket(
        hour=hour,
        demand_w=demand_w,
        demand_var=demand_var,
        demand_va=math.hypot(demand_w, demand_var),
        import_kwh=reading.import_kwh,
        export_kwh=reading.export_kwh,
        import_kvarh=reading.import_kvarh,
        export_kvarh=reading.export_kvarh,
    )


def build_tou_profile(readings: Sequence[Reading]) -> list[TouBucket]:
    """Return the 25-bucket TOU profile for *readings* (ascending order)."""
    index = index_by_hour(readings)
    return [_bucket(hour, index.get(hour)) for hour in range(HOURS_IN_PROFILE)]
