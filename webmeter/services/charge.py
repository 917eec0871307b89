"""
Electricity tariff charge calculation.

For each meter and billing window this module derives the window inputs
(maximum demand, total and on/off-peak energy) from raw readings and
computes the tariff breakdown:

    energy charge   on-peak kWh x on-peak rate + off-peak kWh x off-peak rate
    demand charge   (0.2 x demand W + 0.8 x demand W) x demand rate
    surcharge       (VA/W - threshold) x penalty rate, when VA/W > threshold
    ft              (demand W + total kWh) x ft rate
    total           energy charge + demand charge + surcharge
    vat             (total - ft) x vat rate
    grand total     vat + (total - ft)

All arithmetic runs at full float precision; rounding happens in the API
response models.

On-peak is 09:00 (inclusive) to 22:00 (exclusive) by hour of the reading.
Demand is split between on- and off-peak by a fixed 20/80 ratio rather
than by measured on/off-peak demand. The surcharge threshold is compared
against a VA/W ratio near 1.0, so with the default threshold it never
applies; both rules are kept as the current tariff schedule defines them.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from webmeter.config import Settings
from webmeter.models import Reading
from webmeter.numeric import max_of, spread
from webmeter.services.store import MeterInfo

logger = logging.getLogger(__name__)

ON_PEAK_START_HOUR = 9
ON_PEAK_END_HOUR = 22
ON_PEAK_DEMAND_SHARE = 0.2
OFF_PEAK_DEMAND_SHARE = 0.8


@dataclass(frozen=True)
class Tariff:
    """Tariff rates applied by :func:`calculate_charge`."""

    rate_on_peak: float = 4.1839
    rate_off_peak: float = 2.6037
    demand_rate: float = 132.93
    pf_threshold: float = 728.0
    pf_penalty_rate: float = 56.07
    ft_rate: float = -0.147
    vat_rate: float = 0.07

    @classmethod
    def from_settings(cls, settings: Settings) -> "Tariff":
        """Build the tariff from deployment settings."""
        return cls(
            rate_on_peak=settings.rate_on_peak,
            rate_off_peak=settings.rate_off_peak,
            demand_rate=settings.demand_rate,
            pf_threshold=settings.pf_threshold,
            pf_penalty_rate=settings.pf_penalty_rate,
            ft_rate=settings.ft_rate,
            vat_rate=settings.vat_rate,
        )


@dataclass(frozen=True)
class ChargeInputs:
    """Per-meter quantities observed over a billing window.

    Attributes:
        demand_w: Maximum active power demand.
        demand_var: Maximum reactive power demand.
        demand_va: Maximum apparent power demand.
        total_kwh: Import register spread over the whole window.
        on_peak_kwh: Import register spread over on-peak readings.
        off_peak_kwh: Import register spread over off-peak readings.
    """

    demand_w: float = 0.0
    demand_var: float = 0.0
    demand_va: float = 0.0
    total_kwh: float = 0.0
    on_peak_kwh: float = 0.0
    off_peak_kwh: float = 0.0


@dataclass(frozen=True)
class ChargeRecord:
    """Full-precision tariff breakdown for one meter."""

    inputs: ChargeInputs
    on_peak_demand_w: float
    off_peak_demand_w: float
    on_peak_wh_charge: float
    off_peak_wh_charge: float
    wh_charge: float
    on_peak_demand_charge: float
    off_peak_demand_charge: float
    demand_charge: float
    power_factor_ratio: float
    surcharge: float
    ft: float
    total: float
    vat: float
    grand_total: float


@dataclass(frozen=True)
class MeterCharge:
    """A charge record labelled with its meter."""

    meter: MeterInfo
    record: ChargeRecord


def is_on_peak(reading: Reading) -> bool:
    """True when the reading's hour lies in the on-peak window [9, 22)."""
    return ON_PEAK_START_HOUR <= reading.timestamp.hour < ON_PEAK_END_HOUR


def summarize_window(readings: Sequence[Reading]) -> ChargeInputs:
    """Derive :class:`ChargeInputs` from one meter's readings.

    Missing values are skipped; a quantity with no values at all is 0.
    """
    on_peak = [r.import_kwh for r in readings if is_on_peak(r)]
    off_peak = [r.import_kwh for r in readings if not is_on_peak(r)]
    return ChargeInputs(
        demand_w=max_of([r.demand_w for r in readings]) or 0.0,
        demand_var=max_of([r.demand_var for r in readings]) or 0.0,
        demand_va=max_of([r.demand_va for r in readings]) or 0.0,
        total_kwh=spread([r.import_kwh for r in readings]),
        on_peak_kwh=spread(on_peak),
        off_peak_kwh=spread(off_peak),
    )


def power_factor_ratio(demand_va: float, demand_w: float) -> float:
    """VA/W ratio, or 0.0 when there is no active demand."""
    if demand_w == 0:
        return 0.0
    return demand_va / demand_w


def calculate_charge(inputs: ChargeInputs, tariff: Tariff) -> ChargeRecord:
    """Compute the tariff breakdown for one meter's window inputs."""
    on_peak_demand_w = inputs.demand_w * ON_PEAK_DEMAND_SHARE
    off_peak_demand_w = inputs.demand_w * OFF_PEAK_DEMAND_SHARE

    on_peak_wh_charge = inputs.on_peak_kwh * tariff.rate_on_peak
    off_peak_wh_charge = inputs.off_peak_kwh * tariff.rate_off_peak
    wh_charge = on_peak_wh_charge + off_peak_wh_charge

    on_peak_demand_charge = on_peak_demand_w * tariff.demand_rate
    off_peak_demand_charge = off_peak_demand_w * tariff.demand_rate
    demand_charge = on_peak_demand_charge + off_peak_demand_charge

    ratio = power_factor_ratio(inputs.demand_va, inputs.demand_w)
    if ratio > tariff.pf_threshold:
        surcharge = (ratio - tariff.pf_threshold) * tariff.pf_penalty_rate
    else:
        surcharge = 0.0

    ft = (inputs.demand_w + inputs.total_kwh) * tariff.ft_rate
    total = wh_charge + demand_charge + surcharge
    net = total - ft
    vat = net * tariff.vat_rate

    return ChargeRecord(
        inputs=inputs,
        on_peak_demand_w=on_peak_demand_w,
        off_peak_demand_w=off_peak_demand_w,
        on_peak_wh_charge=on_peak_wh_charge,
        off_peak_wh_charge=off_peak_wh_charge,
        wh_charge=wh_charge,
        on_peak_demand_charge=on_peak_demand_charge,
        off_peak_demand_charge=off_peak_demand_charge,
        demand_charge=demand_charge,
        power_factor_ratio=ratio,
        surcharge=surcharge,
        ft=ft,
        total=total,
        vat=vat,
        grand_total=vat + net,
    )


def group_by_meter(readings: Iterable[Reading]) -> dict[int, list[Reading]]:
    """Split readings per slave id, preserving their order."""
    grouped: dict[int, list[Reading]] = defaultdict(list)
    for reading in readings:
        grouped[reading.slave_id].append(reading)
    return dict(grouped)


def build_charge_report(
    readings: Sequence[Reading],
    meters: Mapping[int, MeterInfo],
    tariff: Tariff,
    requested_ids: Sequence[int] = (),
) -> list[MeterCharge]:
    """Compute one charge record per meter, ordered by meter name.

    Args:
        readings: Readings of all meters in the billing window.
        meters: Directory info by slave id; missing ids use fallbacks.
        tariff: Rates to apply.
        requested_ids: Meters explicitly requested. Requested meters with
            no readings get an all-zero record. When empty, only meters
            present in *readings* are reported.

    Returns:
        list[MeterCharge]: Records sorted by meter name, then slave id.
    """
    grouped = group_by_meter(readings)
    slave_ids = set(grouped) | set(requested_ids)

    report = []
    for slave_id in slave_ids:
        meter = meters.get(slave_id) or MeterInfo.fallback(slave_id)
        inputs = summarize_window(grouped.get(slave_id, []))
        report.append(MeterCharge(meter=meter, record=calculate_charge(inputs, tariff)))

    report.sort(key=lambda mc: (mc.meter.name, mc.meter.slave_id))
    logger.info(
        "Charge report: %d meter(s) from %d reading(s)",
        len(report),
        len(readings),
    )
    return report
