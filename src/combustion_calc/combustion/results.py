"""
Result records of a combustion calculation.

All records are frozen and built fresh for every calculation. Molar flows
are in mol/s, percentages are volume (= mole) percent.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, is_dataclass
from enum import Enum
from typing import Any, Iterator, Optional

import numpy as np

from combustion_calc.core.errors import ComputationDegenerate
from combustion_calc.core.mixture import FlowBasis


@dataclass(frozen=True)
class SpeciesBreakdown:
    """
    Amount of each flue-gas species.

    Used for molar flows (mol/s) as well as wet and dry volume percentages.
    On a dry basis ``h2o`` is 0.
    """

    co2: float = 0.0
    h2o: float = 0.0
    so2: float = 0.0
    co: float = 0.0
    h2: float = 0.0
    o2: float = 0.0
    n2: float = 0.0
    nox: float = 0.0
    ash: float = 0.0

    def total(self) -> float:
        return sum(getattr(self, f.name) for f in fields(self))

    def as_dict(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def wet_percentages(self) -> SpeciesBreakdown:
        """Share of every species in the total, in %."""
        return self._percentages(self.total(), include_water=True)

    def dry_percentages(self) -> SpeciesBreakdown:
        """Share of every species except H2O in the dry total, in %."""
        return self._percentages(self.total() - self.h2o, include_water=False)

    def _percentages(self, total: float, include_water: bool) -> SpeciesBreakdown:
        if total <= 0:
            basis = "wet" if include_water else "dry"
            raise ComputationDegenerate(f"Total {basis} flue-gas flow is zero")
        values = {
            name: (value / total * 100.0 if include_water or name != "h2o" else 0.0)
            for name, value in self.as_dict().items()
        }
        return SpeciesBreakdown(**values)


@dataclass(frozen=True)
class EmissionFigures:
    """
    Emission concentrations.

    Attributes:
        nox_ppm: NOx, wet basis (ppm)
        nox_normalized: NOx as NO2 at normal conditions (mg/Nm³)
        nox_flue_gas_temp: NOx at flue-gas temperature (mg/m³)
        nox_corrected_normalized: nox_normalized at reference O2
        nox_corrected_flue_gas_temp: nox_flue_gas_temp at reference O2
        sox_ppm, sox_normalized, sox_corrected: SO2 (ppm, mg/Nm³, at ref. O2)
        co_ppm, co_normalized, co_corrected: CO (ppm, mg/Nm³, at ref. O2)
        measured_dry_o2: O2 in the dry flue gas (%)
        o2_correction_factor: Factor applied for the reference O2
    """

    nox_ppm: float
    nox_normalized: float
    nox_flue_gas_temp: float
    nox_corrected_normalized: float
    nox_corrected_flue_gas_temp: float
    sox_ppm: float
    sox_normalized: float
    sox_corrected: float
    co_ppm: float
    co_normalized: float
    co_corrected: float
    measured_dry_o2: float
    o2_correction_factor: float


@dataclass(frozen=True)
class CostPoint:
    """One operating point of the cost sweep."""

    flow_rate: float
    o2_percent: float
    co2_percent: float
    excess_air: float  # % implied by the O2 reading
    fuel_molar_flow: float  # mol/s
    stoich_co2_flow: float  # mol/s
    stoich_co2_percent: float  # dry %
    efficiency: float  # %
    hourly_cost: float
    weekly_cost: float


@dataclass(frozen=True)
class CostAnalysis:
    """
    Fuel-cost sweep over the measured operating range.

    ``weekly_savings`` is the projection: the sum of the point costs times
    the weekly hours. ``best_efficiency_savings`` is what running every
    point at the best measured efficiency would save per week.
    """

    points: tuple[CostPoint, ...]
    fuel_unit_cost: float
    flow_unit: str
    hours_per_week: float
    best_efficiency: float
    weekly_savings: float
    best_efficiency_savings: float


@dataclass(frozen=True)
class CombustionResult:
    """
    Complete mass/mole balance of one calculation.

    Attributes:
        flow_basis: Volumetric (gas) or mass (liquid/solid present)
        fuel_flow_unit: Unit of the fuel flow rate ("m³/h" or "kg/h")
        air_flow_unit: Unit of ``air_flow_rate``
        average_molar_mass: Weight-averaged molar mass (g/mol)
        lhv: Weighted, moisture-discounted lower heating value (MJ/kg)
        hhv: Weighted higher heating value (MJ/kg)
        stoichiometric_o2: O2 demand (mol O2 / mol fuel mixture)
        air_per_mol_fuel: Stoichiometric air (mol air / mol fuel mixture)
        n_fuel: Fuel molar flow (mol/s)
        n_air: Air molar flow incl. excess (mol/s)
        air_flow_rate: Air flow in ``air_flow_unit``
        combustion_efficiency: Share of the fuel that burns (%)
        n_fuel_combusted: Burnt fuel (mol/s)
        n_unburned_fuel: Unburnt fuel (mol/s)
        flame_temperature: Adiabatic flame temperature (K)
        fuel_gas_density: Fuel density at fuel conditions (kg/m³), None
            unless the mixture is all gas
        air_water_fraction: Water vapour mole fraction of the inlet air
        co2_max_dry_percent: Dry CO2 % of stoichiometric products
        products: Molar flow of each product species (mol/s)
        volume_wet: Wet-basis volume %
        volume_dry: Dry-basis volume %
        emissions: NOx/SOx/CO concentrations
        cost_analysis: Cost sweep, None unless requested
    """

    flow_basis: FlowBasis
    fuel_flow_unit: str
    air_flow_unit: str
    average_molar_mass: float
    lhv: float
    hhv: float
    stoichiometric_o2: float
    air_per_mol_fuel: float
    n_fuel: float
    n_air: float
    air_flow_rate: float
    combustion_efficiency: float
    n_fuel_combusted: float
    n_unburned_fuel: float
    flame_temperature: float
    fuel_gas_density: Optional[float]
    air_water_fraction: float
    co2_max_dry_percent: float
    products: SpeciesBreakdown
    volume_wet: SpeciesBreakdown
    volume_dry: SpeciesBreakdown
    emissions: EmissionFigures
    cost_analysis: Optional[CostAnalysis] = None

    @property
    def total_moles_products(self) -> float:
        return self.products.total()

    @property
    def nox_ppm(self) -> float:
        return self.emissions.nox_ppm

    @property
    def sox_ppm(self) -> float:
        return self.emissions.sox_ppm

    @property
    def co_ppm(self) -> float:
        return self.emissions.co_ppm

    def to_dict(self) -> dict[str, Any]:
        """Plain nested dict (enums as their values)."""
        return _plain(asdict(self))


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def iter_numbers(record: Any, prefix: str = "") -> Iterator[tuple[str, float]]:
    """Yield (dotted path, value) for every float field of a result record."""
    for f in fields(record):
        value = getattr(record, f.name)
        path = f"{prefix}{f.name}"
        if is_dataclass(value):
            yield from iter_numbers(value, path + ".")
        elif isinstance(value, tuple):
            for i, item in enumerate(value):
                if is_dataclass(item):
                    yield from iter_numbers(item, f"{path}[{i}].")
        elif isinstance(value, (int, float)) and not isinstance(value, (bool, Enum)):
            yield path, float(value)


def ensure_finite(record: Any) -> None:
    """
    Reject records that carry NaN or infinite values.

    Raises:
        ComputationDegenerate: Naming the first non-finite field
    """
    items = list(iter_numbers(record))
    if not items:
        return
    values = np.array([v for _, v in items], dtype=float)
    bad = np.flatnonzero(~np.isfinite(values))
    if bad.size:
        path, value = items[bad[0]]
        raise ComputationDegenerate(f"Result field '{path}' is not finite ({value})")
