"""
GET /dashboard endpoint for the single-meter (or site-wide) live view.

Returns the latest instantaneous values, the cumulative energy registers,
a per-minute gap-filled demand series, the 25-bucket TOU profile and the
six-point sparklines for one day's time window. A window with no readings
returns the same structure filled with zeros, never an error.

CHANGELOG:
- 2026-10-19: Initial creation
"""

import logging
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel, ConfigDict, Field

from webmeter.api.deps import AppSettings, DbSession
from webmeter.cache.redis_client import get_cached, is_cacheable, make_cache_key, set_cached
from webmeter.services.dashboard import NO_DATA_MESSAGE, build_dashboard
from webmeter.services.store import fetch_readings
from webmeter.services.window import resolve_day_window

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])

DATA_MESSAGE = "Dashboard data retrieved successfully"


# ---------------------------------------------------------------------------
# Pydantic response models
# ---------------------------------------------------------------------------


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class EnergyOut(_CamelModel):
    """Cumulative energy registers of the latest reading."""

    import_kwh: float = Field(alias="importKwh")
    export_kwh: float = Field(alias="exportKwh")
    import_kvarh: float = Field(alias="importKvarh")
    export_kvarh: float = Field(alias="exportKvarh")


class DemandPointOut(_CamelModel):
    """One tick of the demand chart; ``hour`` is fractional (14.5 = 14:30)."""

    hour: float
    watt: float
    var: float
    va: float


class TouBucketOut(_CamelModel):
    """Latest-in-hour demand and energy values for one TOU hour."""

    hour: int
    demand_w: float = Field(alias="demandW")
    demand_var: float = Field(alias="demandVar")
    demand_va: float = Field(alias="demandVA")
    import_kwh: float = Field(alias="importKwh")
    export_kwh: float = Field(alias="exportKwh")
    import_kvarh: float = Field(alias="importKvarh")
    export_kvarh: float = Field(alias="exportKvarh")


class ChartOut(_CamelModel):
    """Sparkline samples of the total power quantities."""

    watt: list[float]
    var: list[float]
    va: list[float]
    power_factor: list[float] = Field(alias="powerFactor")


class YesterdayOut(_CamelModel):
    """Previous-day comparison values."""

    watt: float
    var: float
    va: float
    power_factor: float = Field(alias="powerFactor")


class DashboardData(_CamelModel):
    """The dashboard ``data`` object.

    Attributes:
        current_values: Latest instantaneous values keyed by field name
            (``watt``, ``voltLN``, ``pfA``, ...).
    """

    current_values: dict[str, float] = Field(alias="currentValues")
    energy_data: EnergyOut = Field(alias="energyData")
    demand_data: list[DemandPointOut] = Field(alias="demandData")
    tou_data: list[TouBucketOut] = Field(alias="touData")
    chart_data: ChartOut = Field(alias="chartData")
    yesterday_data: YesterdayOut = Field(alias="yesterdayData")


class DashboardResponse(BaseModel):
    """Response envelope for the dashboard endpoint."""

    success: bool = True
    data: DashboardData
    message: str


# ---------------------------------------------------------------------------
# Route
# ---------------------------------------------------------------------------


def _now() -> datetime:
    """Wall-clock time of the metering site."""
    return datetime.now()


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    db: DbSession,
    settings: AppSettings,
    from_time: Annotated[
        str | None, Query(alias="from", description="Window start, HH:MM (default 00:00).")
    ] = None,
    to_time: Annotated[
        str | None, Query(alias="to", description="Window end, HH:MM (default now).")
    ] = None,
    slave_id: Annotated[
        int | None, Query(alias="slaveId", ge=1, description="Meter to show; all when omitted.")
    ] = None,
    day: Annotated[
        str | None, Query(alias="date", description="Day to show, YYYY-MM-DD (default today).")
    ] = None,
) -> dict:
    """Return the dashboard payload for one day's time window.

    Args:
        db: Async database session.
        settings: Application settings.
        from_time: Window start as ``HH:MM``.
        to_time: Window end as ``HH:MM``.
        slave_id: Optional meter filter.
        day: Optional calendar day.

    Returns:
        dict: ``{"success": true, "data": {...}, "message": ...}``.

    Raises:
        QueryValidationError: Malformed times/date or ``from`` after ``to``.
        StoreUnavailableError: Reading Store failure or timeout.
    """
    now = _now()
    window = resolve_day_window(
        now=now,
        day=day,
        from_time=from_time,
        to_time=to_time,
        slave_ids=(slave_id,) if slave_id is not None else (),
    )

    cacheable = is_cacheable(window.end, now)
    cache_key = make_cache_key("dashboard", window.slave_ids, window.start, window.end)
    if cacheable:
        cached = await get_cached(settings.redis_url, cache_key)
        if cached is not None:
            return cached

    readings = await fetch_readings(
        db,
        window.start,
        window.end,
        window.slave_ids,
        timeout_s=settings.store_timeout_s,
    )
    logger.debug(
        "Dashboard query: window=%s..%s slave_id=%s rows=%d",
        window.start,
        window.end,
        slave_id,
        len(readings),
    )

    body = {
        "success": True,
        "data": build_dashboard(readings, window),
        "message": DATA_MESSAGE if readings else NO_DATA_MESSAGE,
    }
    if cacheable:
        await set_cached(settings.redis_url, cache_key, body, settings.cache_ttl_s)
    return body
