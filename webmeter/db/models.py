"""
SQLAlchemy ORM models for the Reading Store.

Defines ``ParameterValue`` (one row per meter per sampling instant in the
``parameters_value`` table) and ``Meter`` (the meter directory used to
label charge reports). Parameter column names come from
:mod:`webmeter.parameters`, so the ORM attribute names match the keys of
the pydantic ``Reading`` model and rows convert with ``from_attributes``.

CHANGELOG:
- 2026-10-19: Initial creation
"""

import datetime

from sqlalchemy import DateTime, Double, Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from webmeter.parameters import column_for


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all webmeter ORM models."""

    pass


def _param(key: str) -> Mapped[float | None]:
    """Nullable double column for meter parameter *key*."""
    return mapped_column(column_for(key), Double, nullable=True)


class ParameterValue(Base):
    """A single reading of all 39 parameters from one power meter.

    Composite primary key on (slave_id, reading_timestamp). Timestamps are
    naive wall-clock times of the metering site.

    Attributes:
        slave_id: Modbus slave id of the meter.
        timestamp: Sampling instant (column ``reading_timestamp``).
    """

    __tablename__ = "parameters_value"

    slave_id: Mapped[int] = mapped_column(Integer, primary_key=True, nullable=False)
    timestamp: Mapped[datetime.datetime] = mapped_column(
        "reading_timestamp",
        DateTime(timezone=False),
        primary_key=True,
        nullable=False,
    )

    frequency: Mapped[float | None] = _param("frequency")
    volt_an: Mapped[float | None] = _param("volt_an")
    volt_bn: Mapped[float | None] = _param("volt_bn")
    volt_cn: Mapped[float | None] = _param("volt_cn")
    volt_ln_avg: Mapped[float | None] = _param("volt_ln_avg")
    volt_ab: Mapped[float | None] = _param("volt_ab")
    volt_bc: Mapped[float | None] = _param("volt_bc")
    volt_ca: Mapped[float | None] = _param("volt_ca")
    volt_ll_avg: Mapped[float | None] = _param("volt_ll_avg")
    current_a: Mapped[float | None] = _param("current_a")
    current_b: Mapped[float | None] = _param("current_b")
    current_c: Mapped[float | None] = _param("current_c")
    current_avg: Mapped[float | None] = _param("current_avg")
    current_n: Mapped[float | None] = _param("current_n")
    watt_a: Mapped[float | None] = _param("watt_a")
    watt_b: Mapped[float | None] = _param("watt_b")
    watt_c: Mapped[float | None] = _param("watt_c")
    watt_total: Mapped[float | None] = _param("watt_total")
    var_a: Mapped[float | None] = _param("var_a")
    var_b: Mapped[float | None] = _param("var_b")
    var_c: Mapped[float | None] = _param("var_c")
    var_total: Mapped[float | None] = _param("var_total")
    va_a: Mapped[float | None] = _param("va_a")
    va_b: Mapped[float | None] = _param("va_b")
    va_c: Mapped[float | None] = _param("va_c")
    va_total: Mapped[float | None] = _param("va_total")
    pf_a: Mapped[float | None] = _param("pf_a")
    pf_b: Mapped[float | None] = _param("pf_b")
    pf_c: Mapped[float | None] = _param("pf_c")
    pf_total: Mapped[float | None] = _param("pf_total")
    demand_w: Mapped[float | None] = _param("demand_w")
    demand_var: Mapped[float | None] = _param("demand_var")
    demand_va: Mapped[float | None] = _param("demand_va")
    import_kwh: Mapped[float | None] = _param("import_kwh")
    export_kwh: Mapped[float | None] = _param("export_kwh")
    import_kvarh: Mapped[float | None] = _param("import_kvarh")
    export_kvarh: Mapped[float | None] = _param("export_kvarh")
    thdv: Mapped[float | None] = _param("thdv")
    thdi: Mapped[float | None] = _param("thdi")

    def __repr__(self) -> str:
        """Return string representation of the ParameterValue."""
        return (
            f"ParameterValue(slave_id={self.slave_id!r}, "
            f"timestamp={self.timestamp!r}, demand_w={self.demand_w!r})"
        )


class Meter(Base):
    """Directory entry for a power meter.

    Attributes:
        slave_id: Modbus slave id, shared with ``parameters_value``.
        name: Display name of the meter (nullable).
        meter_class: Tariff class code of the meter (nullable).
    """

    __tablename__ = "meters"

    slave_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    meter_class: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        """Return string representation of the Meter."""
        return f"Meter(slave_id={self.slave_id!r}, name={self.name!r})"
