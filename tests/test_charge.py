"""
Tests for window summarization and the tariff charge calculator.

CHANGELOG:
- 2026-10-19: Cover non-finite register values
- 2026-10-19: Initial creation
"""

import math

import pytest

from tests.factories import make_reading
from webmeter.config import Settings
from webmeter.services.charge import (
    ChargeInputs,
    Tariff,
    build_charge_report,
    calculate_charge,
    is_on_peak,
    summarize_window,
)
from webmeter.services.store import MeterInfo

_TARIFF = Tariff()


class TestSummarizeWindow:
    """Maximum demand and energy spreads per window."""

    def test_on_off_peak_split(self) -> None:
        """09:00 is on-peak, 22:00 is off-peak."""
        readings = [
            make_reading("2026-10-19T09:00:00", import_kwh=100.0),
            make_reading("2026-10-19T21:59:00", import_kwh=140.0),
            make_reading("2026-10-19T22:00:00", import_kwh=142.0),
            make_reading("2026-10-19T23:00:00", import_kwh=150.0),
        ]
        inputs = summarize_window(readings)
        assert inputs.on_peak_kwh == 40.0
        assert inputs.off_peak_kwh == 8.0
        assert inputs.total_kwh == 50.0

    @pytest.mark.parametrize(
        ("hour", "expected"), [(0, False), (8, False), (9, True), (21, True), (22, False), (23, False)]
    )
    def test_is_on_peak(self, hour: int, expected: bool) -> None:
        assert is_on_peak(make_reading(f"2026-10-19T{hour:02d}:30:00")) is expected

    def test_demand_maxima(self) -> None:
        readings = [
            make_reading("2026-10-19T01:00:00", demand_w=10.0, demand_var=7.0, demand_va=None),
            make_reading("2026-10-19T02:00:00", demand_w=None, demand_var=3.0, demand_va=12.0),
            make_reading("2026-10-19T03:00:00", demand_w=25.0, demand_var=1.0, demand_va=11.0),
        ]
        inputs = summarize_window(readings)
        assert (inputs.demand_w, inputs.demand_var, inputs.demand_va) == (25.0, 7.0, 12.0)

    def test_subset_without_readings_is_zero(self) -> None:
        """Only off-peak readings: on-peak energy is 0, not a negative spread."""
        readings = [
            make_reading("2026-10-19T01:00:00", import_kwh=10.0),
            make_reading("2026-10-19T02:00:00", import_kwh=13.0),
        ]
        inputs = summarize_window(readings)
        assert inputs.on_peak_kwh == 0.0
        assert inputs.off_peak_kwh == 3.0

    def test_non_finite_registers_are_skipped(self) -> None:
        readings = [
            make_reading("2026-10-19T10:00:00", demand_w=math.nan, import_kwh=100.0),
            make_reading("2026-10-19T11:00:00", demand_w=42.0, import_kwh=math.nan),
            make_reading("2026-10-19T12:00:00", demand_w=math.inf, import_kwh=104.0),
        ]
        inputs = summarize_window(readings)
        assert inputs.demand_w == 42.0
        assert inputs.total_kwh == 4.0
        assert inputs.on_peak_kwh == 4.0

    def test_no_readings(self) -> None:
        assert summarize_window([]) == ChargeInputs()


class TestCalculateCharge:
    """Tariff arithmetic."""

    def test_demand_split_and_apparent(self) -> None:
        """W=100, var=0: VA=100, split 20/80."""
        record = calculate_charge(ChargeInputs(demand_w=100.0, demand_va=100.0), _TARIFF)
        assert record.on_peak_demand_w == pytest.approx(20.0)
        assert record.off_peak_demand_w == pytest.approx(80.0)
        assert record.demand_charge == pytest.approx(100.0 * 132.93)
        assert record.power_factor_ratio == 1.0
        assert record.surcharge == 0.0

    def test_full_breakdown(self) -> None:
        inputs = ChargeInputs(
            demand_w=100.0, demand_var=0.0, demand_va=100.0,
            total_kwh=50.0, on_peak_kwh=40.0, off_peak_kwh=8.0,
        )
        record = calculate_charge(inputs, _TARIFF)

        wh_charge = 40.0 * 4.1839 + 8.0 * 2.6037
        demand_charge = 20.0 * 132.93 + 80.0 * 132.93
        ft = (100.0 + 50.0) * -0.147
        total = wh_charge + demand_charge
        vat = (total - ft) * 0.07

        assert record.wh_charge == pytest.approx(wh_charge)
        assert record.demand_charge == pytest.approx(demand_charge)
        assert record.ft == pytest.approx(ft)
        assert record.total == pytest.approx(total)
        assert record.vat == pytest.approx(vat)
        assert record.grand_total == pytest.approx(vat + total - ft)

    def test_zero_demand_has_no_surcharge(self) -> None:
        record = calculate_charge(ChargeInputs(demand_w=0.0, demand_va=500.0), _TARIFF)
        assert record.power_factor_ratio == 0.0
        assert record.surcharge == 0.0
        assert all(
            math.isfinite(v)
            for v in (record.total, record.vat, record.grand_total, record.ft)
        )

    def test_surcharge_above_threshold(self) -> None:
        tariff = Tariff(pf_threshold=1.1, pf_penalty_rate=50.0)
        record = calculate_charge(ChargeInputs(demand_w=100.0, demand_va=125.0), tariff)
        assert record.surcharge == pytest.approx((1.25 - 1.1) * 50.0)
        assert record.total == pytest.approx(record.wh_charge + record.demand_charge + record.surcharge)

    def test_default_threshold_never_triggers_for_realistic_ratio(self) -> None:
        record = calculate_charge(ChargeInputs(demand_w=10.0, demand_va=30.0), _TARIFF)
        assert record.surcharge == 0.0

    def test_idempotent(self) -> None:
        inputs = ChargeInputs(demand_w=57.3, demand_va=61.2, total_kwh=812.9, on_peak_kwh=500.1)
        assert calculate_charge(inputs, _TARIFF) == calculate_charge(inputs, _TARIFF)

    def test_vat_backs_out_to_net(self) -> None:
        inputs = ChargeInputs(demand_w=57.3, demand_va=61.2, total_kwh=812.9, on_peak_kwh=500.1)
        record = calculate_charge(inputs, _TARIFF)
        assert record.vat / _TARIFF.vat_rate == pytest.approx(record.total - record.ft)

    def test_tariff_from_settings(self) -> None:
        settings = Settings(database_url="sqlite+aiosqlite://", rate_on_peak=5.0, vat_rate=0.1)
        tariff = Tariff.from_settings(settings)
        assert tariff.rate_on_peak == 5.0
        assert tariff.vat_rate == 0.1
        assert tariff.demand_rate == 132.93


class TestChargeReport:
    """Per-meter grouping, labelling and ordering."""

    def test_one_record_per_meter_sorted_by_name(self) -> None:
        readings = [
            make_reading("2026-10-19T10:00:00", slave_id=1, import_kwh=10.0),
            make_reading("2026-10-19T10:00:00", slave_id=2, import_kwh=500.0),
            make_reading("2026-10-19T11:00:00", slave_id=1, import_kwh=15.0),
            make_reading("2026-10-19T11:00:00", slave_id=2, import_kwh=520.0),
        ]
        meters = {
            1: MeterInfo(1, "Zone B", "3.2"),
            2: MeterInfo(2, "Zone A", "4.1"),
        }
        report = build_charge_report(readings, meters, _TARIFF)
        assert [item.meter.name for item in report] == ["Zone A", "Zone B"]
        assert report[0].record.inputs.total_kwh == 20.0
        assert report[1].record.inputs.total_kwh == 5.0

    def test_requested_meter_without_readings_gets_zero_record(self) -> None:
        report = build_charge_report([], {}, _TARIFF, requested_ids=[9])
        assert len(report) == 1
        assert report[0].meter == MeterInfo(9, "Meter-9", "3.1")
        assert report[0].record.grand_total == 0.0

    def test_no_readings_no_request_is_empty(self) -> None:
        assert build_charge_report([], {}, _TARIFF) == []
