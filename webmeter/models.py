"""
Pydantic model for a single power meter reading.

A ``Reading`` is one row of the Reading Store: the originating meter
(``slave_id``), the sampling instant and the 39 meter parameters listed in
:mod:`webmeter.parameters`. Every parameter is nullable; a missing value
stays ``None`` until the response-formatting boundary.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Reading(BaseModel):
    """A single timestamped reading from one power meter.

    Field names match the ``key`` column of :data:`webmeter.parameters.PARAMETERS`.
    Built from ORM rows via ``Reading.model_validate(row)``.

    Attributes:
        slave_id: Modbus slave id of the originating meter.
        timestamp: Wall-clock sampling instant (second precision).
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    slave_id: int
    timestamp: datetime

    frequency: float | None = None
    volt_an: float | None = None
    volt_bn: float | None = None
    volt_cn: float | None = None
    volt_ln_avg: float | None = None
    volt_ab: float | None = None
    volt_bc: float | None = None
    volt_ca: float | None = None
    volt_ll_avg: float | None = None
    current_a: float | None = None
    current_b: float | None = None
    current_c: float | None = None
    current_avg: float | None = None
    current_n: float | None = None
    watt_a: float | None = None
    watt_b: float | None = None
    watt_c: float | None = None
    watt_total: float | None = None
    var_a: float | None = None
    var_b: float | None = None
    var_c: float | None = None
    var_total: float | None = None
    va_a: float | None = None
    va_b: float | None = None
    va_c: float | None = None
    va_total: float | None = None
    pf_a: float | None = None
    pf_b: float | None = None
    pf_c: float | None = None
    pf_total: float | None = None
    demand_w: float | None = None
    demand_var: float | None = None
    demand_va: float | None = None
    import_kwh: float | None = None
    export_kwh: float | None = None
    import_kvarh: float | None = None
    export_kvarh: float | None = None
    thdv: float | None = None
    thdi: float | None = None

    def value(self, key: str) -> float | None:
        """Return the raw value of parameter *key* (``None`` when missing)."""
        return getattr(self, key)
