"""
Process conditions for a combustion calculation.

All temperatures are in °C and pressure is absolute, in bar. The fuel flow
rate is in m³/h or kg/h depending on the mixture's flow basis.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional


@dataclass(frozen=True)
class CombustionReading:
    """Flue-gas analyser reading at one operating point (dry volume %)."""

    o2_percent: float
    co2_percent: float


@dataclass(frozen=True)
class CostAnalysisParameters:
    """
    Inputs of the fuel-cost sweep.

    Attributes:
        fuel_unit_cost: Cost per m³ or kg of fuel (currency units)
        min_flow_rate: Lowest flow of the sweep
        max_flow_rate: Highest flow of the sweep
        readings: One analyser reading per sweep point, lowest flow first
    """

    fuel_unit_cost: float
    min_flow_rate: float
    max_flow_rate: float
    readings: tuple[CombustionReading, ...] = field(default=())

    @classmethod
    def from_readings(
        cls,
        fuel_unit_cost: float,
        min_flow_rate: float,
        max_flow_rate: float,
        readings: Iterable[tuple[float, float]],
    ) -> CostAnalysisParameters:
        """Build from plain (O2 %, CO2 %) pairs."""
        return cls(
            fuel_unit_cost=fuel_unit_cost,
            min_flow_rate=min_flow_rate,
            max_flow_rate=max_flow_rate,
            readings=tuple(CombustionReading(o2, co2) for o2, co2 in readings),
        )


@dataclass(frozen=True)
class ProcessConditions:
    """
    Operating conditions of the burner.

    Attributes:
        fuel_temperature: Ambient/fuel temperature (°C)
        inlet_air_temperature: Combustion air temperature (°C)
        pressure: Absolute pressure (bar)
        excess_air: Excess air (%); negative means air-starved
        flue_gas_temperature: Flue-gas temperature (°C)
        reference_o2: Reference O2 for emission correction (%)
        flow_rate: Fuel flow rate (m³/h or kg/h)
        relative_humidity: Relative humidity of the inlet air (%), optional
        cost: Cost-analysis inputs, None to skip the sweep
    """

    fuel_temperature: float = 25.0
    inlet_air_temperature: float = 25.0
    pressure: float = 1.01325
    excess_air: float = 10.0
    flue_gas_temperature: float = 150.0
    reference_o2: float = 3.0
    flow_rate: float = 10.0
    relative_humidity: Optional[float] = None
    cost: Optional[CostAnalysisParameters] = None

    @property
    def cost_analysis_enabled(self) -> bool:
        return self.cost is not None
