"""
GET /charge endpoint for per-meter electricity tariff charges.

Computes, for each requested meter (or every meter with readings), the
energy charge, demand charge, power-factor surcharge, fuel adjustment and
VAT over a billing window. Full precision is kept through the calculation;
values are rounded only when building the response records here.

CHANGELOG:
- 2026-10-19: Non-finite values are reported as 0
- 2026-10-19: Initial creation
"""

import logging
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel, ConfigDict, Field

from webmeter.api.deps import AppSettings, DbSession
from webmeter.cache.redis_client import get_cached, is_cacheable, make_cache_key, set_cached
from webmeter.numeric import as_number, round_half_up
from webmeter.services.charge import MeterCharge, Tariff, build_charge_report
from webmeter.services.store import fetch_meters, fetch_readings
from webmeter.services.window import parse_slave_ids, resolve_range_window

logger = logging.getLogger(__name__)

router = APIRouter(tags=["charge"])

DATA_MESSAGE = "Charge data retrieved successfully"


def _whole(value: float) -> int:
    return int(round_half_up(as_number(value)))


def _money(value: float) -> float:
    return round_half_up(as_number(value), 2)


# ---------------------------------------------------------------------------
# Pydantic response models
# ---------------------------------------------------------------------------


class ChargeRecordOut(BaseModel):
    """Rounded tariff breakdown for one meter.

    Demand and energy quantities are whole numbers; monetary values have
    two decimals.
    """

    model_config = ConfigDict(populate_by_name=True)

    meter_name: str = Field(alias="meterName")
    meter_class: str = Field(alias="class")
    demand_w: int = Field(alias="demandW")
    demand_var: int = Field(alias="demandVar")
    demand_va: int = Field(alias="demandVA")
    off_peak_kwh: int = Field(alias="offPeakKWh")
    on_peak_kwh: int = Field(alias="onPeakKWh")
    total_kwh: int = Field(alias="totalKWh")
    wh_charge: float = Field(alias="whCharge")
    ft: float
    demand_charge: float = Field(alias="demandCharge")
    surcharge: float
    total: float
    vat: float
    grand_total: float = Field(alias="grandTotal")

    @classmethod
    def from_meter_charge(cls, item: MeterCharge) -> "ChargeRecordOut":
        """Round a full-precision record for presentation."""
        record = item.record
        inputs = record.inputs
        return cls(
            meter_name=item.meter.name,
            meter_class=item.meter.meter_class,
            demand_w=_whole(inputs.demand_w),
            demand_var=_whole(inputs.demand_var),
            demand_va=_whole(inputs.demand_va),
            off_peak_kwh=_whole(inputs.off_peak_kwh),
            on_peak_kwh=_whole(inputs.on_peak_kwh),
            total_kwh=_whole(inputs.total_kwh),
            wh_charge=_money(record.wh_charge),
            ft=_money(record.ft),
            demand_charge=_money(record.demand_charge),
            surcharge=_money(record.surcharge),
            total=_money(record.total),
            vat=_money(record.vat),
            grand_total=_money(record.grand_total),
        )


class ChargeResponse(BaseModel):
    """Response envelope for the charge endpoint."""

    success: bool = True
    data: list[ChargeRecordOut]
    message: str


# ---------------------------------------------------------------------------
# Route
# ---------------------------------------------------------------------------


@router.get("/charge", response_model=ChargeResponse)
async def get_charge(
    db: DbSession,
    settings: AppSettings,
    date_from: Annotated[str | None, Query(alias="dateFrom", description="YYYY-MM-DD")] = None,
    date_to: Annotated[str | None, Query(alias="dateTo", description="YYYY-MM-DD")] = None,
    time_from: Annotated[
        str | None, Query(alias="timeFrom", description="HH:MM (default 00:00)")
    ] = None,
    time_to: Annotated[str | None, Query(alias="timeTo", description="HH:MM (default 23:59)")] = None,
    slave_ids: Annotated[
        list[str] | None, Query(alias="slaveIds", description="Comma-separated slave ids.")
    ] = None,
) -> dict:
    """Return one tariff charge record per meter for a billing window.

    Raises:
        QueryValidationError: Missing ``dateFrom``/``dateTo``, malformed
            dates, times or slave ids, or an inverted window.
        StoreUnavailableError: Reading Store failure or timeout.
    """
    window = resolve_range_window(
        date_from=date_from,
        date_to=date_to,
        time_from=time_from,
        time_to=time_to,
        slave_ids=parse_slave_ids(slave_ids),
    )

    cacheable = is_cacheable(window.end, datetime.now())
    cache_key = make_cache_key("charge", window.slave_ids, window.start, window.end)
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
    meter_ids = set(window.slave_ids) | {r.slave_id for r in readings}
    meters = await fetch_meters(db, meter_ids, timeout_s=settings.store_timeout_s)

    report = build_charge_report(
        readings,
        meters,
        Tariff.from_settings(settings),
        requested_ids=window.slave_ids,
    )

    body = {
        "success": True,
        "data": [
            ChargeRecordOut.from_meter_charge(item).model_dump(by_alias=True) for item in report
        ],
        "message": DATA_MESSAGE,
    }
    if cacheable:
        await set_cached(settings.redis_url, cache_key, body, settings.cache_ttl_s)
    return body
