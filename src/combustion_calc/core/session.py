"""
Calculation session - the editable state behind an interactive front end.

Holds the fuel rows, process conditions and cost-analysis settings a user
builds up step by step, and turns them into an immutable request for the
engine on demand.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from combustion_calc.combustion.config import DEFAULT_CONFIG, EngineConfig
from combustion_calc.combustion.engine import compute
from combustion_calc.combustion.results import CombustionResult
from combustion_calc.core.conditions import (
    CombustionReading,
    CostAnalysisParameters,
    ProcessConditions,
)
from combustion_calc.core.errors import EngineError, InvalidProcessConditions
from combustion_calc.core.fuels import Fuel, FuelCatalog, FuelType, make_custom_fuel
from combustion_calc.core.mixture import FlowBasis, Mixture, MixtureComponent

logger = logging.getLogger(__name__)

CONDITION_NAMES = (
    "fuel_temperature",
    "inlet_air_temperature",
    "pressure",
    "excess_air",
    "flue_gas_temperature",
    "reference_o2",
    "flow_rate",
    "relative_humidity",
)


@dataclass
class CostSettings:
    """Cost-analysis inputs while they are being entered."""

    fuel_unit_cost: float
    min_flow_rate: float
    max_flow_rate: float
    readings: list[Optional[CombustionReading]]


@dataclass
class CalculationSession:
    """
    Mutable calculation setup.

    Fuel rows keep their insertion order. Nothing is validated until
    ``calculate()``, so partially entered setups are fine.

    Example:
        >>> session = CalculationSession()
        >>> session.add_fuel("Methane", 80)
        >>> session.add_fuel("Hydrogen", 20)
        >>> session.set_condition("excess_air", 15)
        >>> result = session.calculate()
        >>> round(result.combustion_efficiency)
        100
    """

    catalog: FuelCatalog = field(default_factory=FuelCatalog.with_builtin_fuels)
    config: EngineConfig = DEFAULT_CONFIG
    conditions: ProcessConditions = field(default_factory=ProcessConditions)
    cost: Optional[CostSettings] = None
    last_result: Optional[CombustionResult] = field(default=None, repr=False)
    _rows: dict[str, float] = field(default_factory=dict, repr=False)

    # =========================================================================
    # Fuel rows
    # =========================================================================

    def add_fuel(self, name: str, percentage: float = 0.0) -> Fuel:
        """
        Add a catalog fuel to the mixture.

        Raises:
            KeyError: If the fuel is not in the catalog
            ValueError: If the fuel is already in the mixture
        """
        fuel = self.catalog.get(name)
        if fuel.name in self._rows:
            raise ValueError(f"'{fuel.name}' is already in the mixture")
        self._rows[fuel.name] = float(percentage)
        logger.info(f"Added {fuel.name} ({percentage} %)")
        return fuel

    def remove_fuel(self, name: str) -> None:
        key = self._row_key(name)
        del self._rows[key]
        logger.info(f"Removed {key}")

    def set_percentage(self, name: str, percentage: float) -> None:
        self._rows[self._row_key(name)] = float(percentage)

    def clear_fuels(self) -> None:
        self._rows.clear()

    def fuel_rows(self) -> list[tuple[Fuel, float]]:
        """(fuel, percentage) in insertion order."""
        return [(self.catalog.get(name), pct) for name, pct in self._rows.items()]

    @property
    def total_percentage(self) -> float:
        return sum(self._rows.values())

    def _row_key(self, name: str) -> str:
        for key in self._rows:
            if key.lower() == name.strip().lower():
                return key
        available = ", ".join(self._rows) or "(none)"
        raise KeyError(f"'{name}' is not in the mixture. Current: {available}")

    def create_custom_fuel(
        self,
        name: str,
        formula: str,
        fuel_type: str | FuelType,
        heating_value: float,
        hhv: float,
        molar_mass: Optional[float] = None,
        ash_content: float = 0.0,
        moisture_content: float = 0.0,
    ) -> Fuel:
        """
        Define a fuel from its formula and register it in the catalog.

        Raises:
            ValueError: Bad formula, empty name or duplicate name
        """
        fuel = make_custom_fuel(
            name,
            formula,
            fuel_type,
            heating_value,
            hhv,
            molar_mass=molar_mass,
            ash_content=ash_content,
            moisture_content=moisture_content,
        )
        return self.catalog.register(fuel)

    # =========================================================================
    # Conditions
    # =========================================================================

    @property
    def flow_basis(self) -> FlowBasis:
        """Basis of the current rows; volumetric while the mixture is empty."""
        if not self._rows:
            return FlowBasis.VOLUMETRIC
        return self.build_mixture().flow_basis

    @property
    def flow_unit(self) -> str:
        return self.flow_basis.fuel_unit

    def set_condition(self, name: str, value: Optional[float]) -> None:
        """
        Change one process condition.

        Raises:
            KeyError: Unknown condition name
        """
        if name not in CONDITION_NAMES:
            raise KeyError(
                f"Unknown condition '{name}'. Available: {', '.join(CONDITION_NAMES)}"
            )
        if value is not None:
            value = float(value)
        elif name != "relative_humidity":
            raise ValueError(f"'{name}' needs a value")
        self.conditions = dataclasses.replace(self.conditions, **{name: value})
        logger.debug(f"Set {name} = {value}")

    # =========================================================================
    # Cost analysis
    # =========================================================================

    def enable_cost_analysis(
        self,
        fuel_unit_cost: float,
        min_flow_rate: float,
        max_flow_rate: float,
    ) -> None:
        """Turn on the cost sweep; readings entered earlier are kept."""
        count = self.config.cost_point_count
        readings: list[Optional[CombustionReading]] = [None] * count
        if self.cost is not None and len(self.cost.readings) == count:
            readings = self.cost.readings
        self.cost = CostSettings(
            float(fuel_unit_cost), float(min_flow_rate), float(max_flow_rate), readings
        )
        logger.info(
            f"Cost analysis enabled: {min_flow_rate}-{max_flow_rate} {self.flow_unit}, "
            f"unit cost {fuel_unit_cost}"
        )

    def disable_cost_analysis(self) -> None:
        self.cost = None

    def set_reading(self, index: int, o2_percent: float, co2_percent: float) -> None:
        """
        Record the analyser reading of one sweep point (0-based).

        Raises:
            RuntimeError: Cost analysis is not enabled
            IndexError: No such sweep point
        """
        if self.cost is None:
            raise RuntimeError("Cost analysis is not enabled")
        if not 0 <= index < len(self.cost.readings):
            raise IndexError(
                f"Reading index must be 0-{len(self.cost.readings) - 1}, got {index}"
            )
        self.cost.readings[index] = CombustionReading(float(o2_percent), float(co2_percent))

    def cost_flow_points(self) -> list[float]:
        """Flow rate of each sweep point, lowest first."""
        if self.cost is None:
            return []
        points = np.linspace(
            self.cost.min_flow_rate, self.cost.max_flow_rate, len(self.cost.readings)
        )
        return [float(p) for p in points]

    # =========================================================================
    # Request building
    # =========================================================================

    def build_mixture(self) -> Mixture:
        return Mixture(
            tuple(MixtureComponent(fuel, pct) for fuel, pct in self.fuel_rows())
        )

    def build_conditions(self) -> ProcessConditions:
        """
        Conditions including the cost sweep, if enabled.

        Raises:
            InvalidProcessConditions: A sweep reading has not been entered
        """
        if self.cost is None:
            return dataclasses.replace(self.conditions, cost=None)

        missing = [str(i + 1) for i, r in enumerate(self.cost.readings) if r is None]
        if missing:
            raise InvalidProcessConditions(
                f"Cost analysis readings missing for point(s) {', '.join(missing)}"
            )
        params = CostAnalysisParameters(
            fuel_unit_cost=self.cost.fuel_unit_cost,
            min_flow_rate=self.cost.min_flow_rate,
            max_flow_rate=self.cost.max_flow_rate,
            readings=tuple(self.cost.readings),
        )
        return dataclasses.replace(self.conditions, cost=params)

    def calculate(self) -> CombustionResult:
        """
        Run the engine on the current setup.

        Raises:
            EngineError: The setup is invalid or the calculation degenerate
        """
        mixture = self.build_mixture()
        conditions = self.build_conditions()
        try:
            result = compute(mixture, conditions, self.config)
        except EngineError as e:
            logger.warning(f"Calculation rejected: [{e.code}] {e}")
            raise
        self.last_result = result
        logger.info(
            f"Calculated {len(mixture)} fuel(s): flame {result.flame_temperature:.0f} K, "
            f"efficiency {result.combustion_efficiency:.1f} %"
        )
        return result
