"""
Precondition checks for combustion calculations.

Everything here runs before any derived value is computed. The first
failed check raises the matching EngineError; nothing is partially
calculated.
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Any

from combustion_calc.combustion.air import MIN_HUMID_AIR_TEMPERATURE
from combustion_calc.combustion.config import DEFAULT_CONFIG, EngineConfig, PhasePolicy
from combustion_calc.core.conditions import ProcessConditions
from combustion_calc.core.errors import (
    IncompatibleFuelPhases,
    InvalidFuelData,
    InvalidProcessConditions,
    MixtureImbalance,
)
from combustion_calc.core.fuels import Fuel
from combustion_calc.core.mixture import Mixture

ABSOLUTE_ZERO_C = -273.15


def is_finite_number(value: Any) -> bool:
    """True for finite real numbers (bools excluded)."""
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _require_number(name: str, value: Any) -> float:
    if not is_finite_number(value):
        raise InvalidProcessConditions(f"{name} must be a finite number, got {value!r}")
    return float(value)


# =============================================================================
# Mixture
# =============================================================================

def _check_fuel(fuel: Any, position: int) -> None:
    if not isinstance(fuel, Fuel):
        raise InvalidFuelData(f"Component {position} does not reference a fuel")

    label = f"Fuel '{fuel.name}'"
    if not is_finite_number(fuel.molar_mass) or fuel.molar_mass <= 0:
        raise InvalidFuelData(f"{label}: molar mass must be > 0, got {fuel.molar_mass!r}")

    for element in ("c", "h", "o", "n", "s"):
        count = getattr(fuel, element)
        if not is_finite_number(count) or count < 0:
            raise InvalidFuelData(
                f"{label}: {element.upper()} count must be >= 0, got {count!r}"
            )

    for attr in ("heating_value", "hhv"):
        value = getattr(fuel, attr)
        if not is_finite_number(value) or value < 0:
            raise InvalidFuelData(f"{label}: {attr} must be >= 0, got {value!r}")

    for attr in ("ash_content", "moisture_content"):
        value = getattr(fuel, attr)
        if not is_finite_number(value) or not 0 <= value <= 100:
            raise InvalidFuelData(f"{label}: {attr} must be within 0-100 %, got {value!r}")

    if fuel.ash_content + fuel.moisture_content >= 100:
        raise InvalidFuelData(f"{label}: ash and moisture leave no combustible matter")


def validate_mixture(mixture: Mixture, config: EngineConfig = DEFAULT_CONFIG) -> None:
    """
    Check the fuel data and percentage balance of a mixture.

    Raises:
        InvalidFuelData: Empty mixture or bad fuel fields
        IncompatibleFuelPhases: Mixed phases under PhasePolicy.REJECT
        MixtureImbalance: Percentages out of range or not summing to 100
    """
    if not mixture.components:
        raise InvalidFuelData("Mixture has no fuels")

    for position, component in enumerate(mixture.components, start=1):
        _check_fuel(component.fuel, position)

    if config.phase_policy is PhasePolicy.REJECT and mixture.is_mixed_phase:
        phases = ", ".join(sorted(p.value for p in mixture.phases))
        raise IncompatibleFuelPhases(f"Mixture combines fuel phases: {phases}")

    for component in mixture.components:
        pct = component.percentage
        if not is_finite_number(pct) or not 0 <= pct <= 100:
            raise MixtureImbalance(
                f"Percentage of '{component.fuel.name}' must be within 0-100, got {pct!r}"
            )

    total = mixture.total_percentage
    if abs(total - 100.0) > config.percentage_tolerance:
        raise MixtureImbalance(f"Fuel percentages sum to {total:.4g} %, not 100 %")


# =============================================================================
# Process conditions
# =============================================================================

def validate_conditions(
    conditions: ProcessConditions,
    config: EngineConfig = DEFAULT_CONFIG,
) -> None:
    """
    Check that every process-condition field is finite and in range.

    Raises:
        InvalidProcessConditions: On the first offending field
    """
    fuel_t = _require_number("Fuel temperature", conditions.fuel_temperature)
    air_t = _require_number("Inlet air temperature", conditions.inlet_air_temperature)
    pressure = _require_number("Pressure", conditions.pressure)
    excess_air = _require_number("Excess air", conditions.excess_air)
    flue_t = _require_number("Flue gas temperature", conditions.flue_gas_temperature)
    ref_o2 = _require_number("Reference O2", conditions.reference_o2)
    flow = _require_number("Fuel flow rate", conditions.flow_rate)

    if fuel_t <= ABSOLUTE_ZERO_C or air_t <= ABSOLUTE_ZERO_C:
        raise InvalidProcessConditions("Temperatures must be above absolute zero")
    if flue_t <= -config.normalization_temperature:
        raise InvalidProcessConditions(
            f"Flue gas temperature must be above {-config.normalization_temperature} °C"
        )
    if pressure <= 0:
        raise InvalidProcessConditions(f"Pressure must be > 0 bar, got {pressure}")
    if flow <= 0:
        raise InvalidProcessConditions(f"Fuel flow rate must be > 0, got {flow}")
    if excess_air < -100:
        raise InvalidProcessConditions(
            f"Excess air cannot be below -100 %, got {excess_air}"
        )
    if not 0 <= ref_o2 < config.ambient_o2_percent:
        raise InvalidProcessConditions(
            f"Reference O2 must be within 0-{config.ambient_o2_percent} %, got {ref_o2}"
        )

    if conditions.relative_humidity is not None:
        rh = _require_number("Relative humidity", conditions.relative_humidity)
        if not 0 <= rh <= 100:
            raise InvalidProcessConditions(
                f"Relative humidity must be within 0-100 %, got {rh}"
            )
        if rh > 0 and air_t < MIN_HUMID_AIR_TEMPERATURE:
            raise InvalidProcessConditions(
                f"Humid air below {MIN_HUMID_AIR_TEMPERATURE} °C is not supported"
            )

    if conditions.cost is not None:
        _validate_cost(conditions, config)


def _validate_cost(conditions: ProcessConditions, config: EngineConfig) -> None:
    cost = conditions.cost
    unit_cost = _require_number("Fuel cost", cost.fuel_unit_cost)
    low = _require_number("Minimum flow rate", cost.min_flow_rate)
    high = _require_number("Maximum flow rate", cost.max_flow_rate)

    if unit_cost < 0:
        raise InvalidProcessConditions(f"Fuel cost must be >= 0, got {unit_cost}")
    if low <= 0:
        raise InvalidProcessConditions(f"Minimum flow rate must be > 0, got {low}")
    if high <= low:
        raise InvalidProcessConditions(
            f"Maximum flow rate ({high}) must exceed minimum flow rate ({low})"
        )

    readings = cost.readings or ()
    if len(readings) != config.cost_point_count:
        raise InvalidProcessConditions(
            f"Cost analysis needs exactly {config.cost_point_count} readings, "
            f"got {len(readings)}"
        )
    for i, reading in enumerate(readings, start=1):
        o2 = _require_number(f"O2 reading {i}", reading.o2_percent)
        co2 = _require_number(f"CO2 reading {i}", reading.co2_percent)
        if not (0 <= o2 <= 100 and 0 <= co2 <= 100):
            raise InvalidProcessConditions(
                f"Reading {i}: O2 and CO2 must be within 0-100 %, got ({o2}, {co2})"
            )


def validate_request(
    mixture: Mixture,
    conditions: ProcessConditions,
    config: EngineConfig = DEFAULT_CONFIG,
) -> None:
    """Run all precondition checks in order."""
    validate_mixture(mixture, config)
    validate_conditions(conditions, config)
