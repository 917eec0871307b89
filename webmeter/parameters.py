"""
Meter parameter table -- single source of truth for the 39 reading fields.

Every power meter reading carries the same 39 numeric parameters. This
module maps each one to its storage column in the ``parameters_value``
table and to the camelCase field name used in dashboard responses. The
ORM model, the pydantic ``Reading`` model and the dashboard assembly all
read from this table instead of keeping their own column lists.

Parameters are grouped so callers can select a family (e.g. all voltage
fields) without listing keys by hand.

CHANGELOG:
- 2026-10-19: Initial creation
"""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Data definitions
# ---------------------------------------------------------------------------

GROUP_FREQUENCY = "frequency"
GROUP_VOLTAGE = "voltage"
GROUP_CURRENT = "current"
GROUP_POWER = "power"
GROUP_REACTIVE = "reactive"
GROUP_APPARENT = "apparent"
GROUP_POWER_FACTOR = "power_factor"
GROUP_DEMAND = "demand"
GROUP_ENERGY = "energy"
GROUP_THD = "thd"


@dataclass(frozen=True, slots=True)
class ParameterDef:
    """Definition of a single meter parameter.

    Attributes:
        number: Position of the parameter on the meter (1-39).
        key: Python attribute name used on ``Reading`` and the ORM model.
        column: Column name in the ``parameters_value`` table.
        field: camelCase name used in dashboard JSON responses.
        group: Parameter family, one of the ``GROUP_*`` constants.
    """

    number: int
    key: str
    column: str
    field: str
    group: str


PARAMETERS: tuple[ParameterDef, ...] = (
    ParameterDef(1, "frequency", "param_01_freqency", "frequency", GROUP_FREQUENCY),
    ParameterDef(2, "volt_an", "param_02_voltage_phase_1", "voltAN", GROUP_VOLTAGE),
    ParameterDef(3, "volt_bn", "param_03_voltage_phase_2", "voltBN", GROUP_VOLTAGE),
    ParameterDef(4, "volt_cn", "param_04_voltage_phase_3", "voltCN", GROUP_VOLTAGE),
    ParameterDef(5, "volt_ln_avg", "param_05_voltage_avg_phase", "voltLN", GROUP_VOLTAGE),
    ParameterDef(6, "volt_ab", "param_06_voltage_line_1_2", "voltAB", GROUP_VOLTAGE),
    ParameterDef(7, "volt_bc", "param_07_voltage_line_2_3", "voltBC", GROUP_VOLTAGE),
    ParameterDef(8, "volt_ca", "param_08_voltage_line_3_1", "voltCA", GROUP_VOLTAGE),
    ParameterDef(9, "volt_ll_avg", "param_09_voltage_avg_line", "voltLL", GROUP_VOLTAGE),
    ParameterDef(10, "current_a", "param_10_current_phase_a", "currentA", GROUP_CURRENT),
    ParameterDef(11, "current_b", "param_11_current_phase_b", "currentB", GROUP_CURRENT),
    ParameterDef(12, "current_c", "param_12_current_phase_c", "currentC", GROUP_CURRENT),
    ParameterDef(13, "current_avg", "param_13_current_avg_phase", "currentAvg", GROUP_CURRENT),
    ParameterDef(14, "current_n", "param_14_current_neutral", "currentN", GROUP_CURRENT),
    ParameterDef(15, "watt_a", "param_15_power_phase_a", "wattA", GROUP_POWER),
    ParameterDef(16, "watt_b", "param_16_power_phase_b", "wattB", GROUP_POWER),
    ParameterDef(17, "watt_c", "param_17_power_phase_c", "wattC", GROUP_POWER),
    ParameterDef(18, "watt_total", "param_18_power_total_system", "watt", GROUP_POWER),
    ParameterDef(19, "var_a", "param_19_reactive_power_phase_a", "varA", GROUP_REACTIVE),
    ParameterDef(20, "var_b", "param_20_reactive_power_phase_b", "varB", GROUP_REACTIVE),
    ParameterDef(21, "var_c", "param_21_reactive_power_phase_c", "varC", GROUP_REACTIVE),
    ParameterDef(22, "var_total", "param_22_reactive_power_total", "var", GROUP_REACTIVE),
    ParameterDef(23, "va_a", "param_23_apparent_power_phase_a", "vaA", GROUP_APPARENT),
    ParameterDef(24, "va_b", "param_24_apparent_power_phase_b", "vaB", GROUP_APPARENT),
    ParameterDef(25, "va_c", "param_25_apparent_power_phase_c", "vaC", GROUP_APPARENT),
    ParameterDef(26, "va_total", "param_26_apparent_power_total", "va", GROUP_APPARENT),
    ParameterDef(27, "pf_a", "param_27_power_factor_phase_a", "pfA", GROUP_POWER_FACTOR),
    ParameterDef(28, "pf_b", "param_28_power_factor_phase_b", "pfB", GROUP_POWER_FACTOR),
    ParameterDef(29, "pf_c", "param_29_power_factor_phase_c", "pfC", GROUP_POWER_FACTOR),
    ParameterDef(30, "pf_total", "param_30_power_factor_total", "powerFactor", GROUP_POWER_FACTOR),
    ParameterDef(31, "demand_w", "param_31_power_demand", "demandW", GROUP_DEMAND),
    ParameterDef(32, "demand_var", "param_32_reactive_power_demand", "demandVar", GROUP_DEMAND),
    ParameterDef(33, "demand_va", "param_33_apparent_power_demand", "demandVA", GROUP_DEMAND),
    ParameterDef(34, "import_kwh", "param_34_import_kwh", "importKwh", GROUP_ENERGY),
    ParameterDef(35, "export_kwh", "param_35_export_kwh", "exportKwh", GROUP_ENERGY),
    ParameterDef(36, "import_kvarh", "param_36_import_kvarh", "importKvarh", GROUP_ENERGY),
    ParameterDef(37, "export_kvarh", "param_37_export_kvarh", "exportKvarh", GROUP_ENERGY),
    ParameterDef(38, "thdv", "param_38_thdv", "thdv", GROUP_THD),
    ParameterDef(39, "thdi", "param_39_thdi", "thdi", GROUP_THD),
)

PARAMETERS_BY_KEY: dict[str, ParameterDef] = {p.key: p for p in PARAMETERS}
"""Lookup by Python attribute name."""


def column_for(key: str) -> str:
    """Return the storage column name for a parameter key.

    Raises:
        KeyError: If *key* is not a known parameter.
    """
    return PARAMETERS_BY_KEY[key].column


def parameters_in(*groups: str) -> tuple[ParameterDef, ...]:
    """Return the parameters belonging to any of *groups*, in meter order."""
    return tuple(p for p in PARAMETERS if p.group in groups)


# ---------------------------------------------------------------------------
# Views used by the aggregators
# ---------------------------------------------------------------------------

# Instantaneous values shown on the dashboard (everything except demand
# and cumulative energy registers).
CURRENT_VALUE_PARAMETERS: tuple[ParameterDef, ...] = tuple(
    p for p in PARAMETERS if p.group not in (GROUP_DEMAND, GROUP_ENERGY)
)

ENERGY_PARAMETERS: tuple[ParameterDef, ...] = parameters_in(GROUP_ENERGY)

# Totals tracked by the sparkline, in response order.
SPARKLINE_PARAMETERS: tuple[ParameterDef, ...] = (
    PARAMETERS_BY_KEY["watt_total"],
    PARAMETERS_BY_KEY["var_total"],
    PARAMETERS_BY_KEY["va_total"],
    PARAMETERS_BY_KEY["pf_total"],
)
