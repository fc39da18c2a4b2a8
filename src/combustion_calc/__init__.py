"""
Combustion Calculator

Flue-gas balance, adiabatic flame temperature, emissions and fuel-cost
analysis for gas, liquid and solid fuel mixtures.

Example usage:
    >>> from combustion_calc import Mixture, ProcessConditions, compute, default_catalog
    >>>
    >>> catalog = default_catalog()
    >>> mixture = Mixture.from_pairs([
    ...     (catalog.get("Methane"), 90),
    ...     (catalog.get("Hydrogen"), 10),
    ... ])
    >>> result = compute(mixture, ProcessConditions(excess_air=15, flow_rate=20))
    >>> print(f"{result.flame_temperature:.0f} K, NOx {result.nox_ppm:.1f} ppm")
"""

from combustion_calc.core.conditions import (
    CombustionReading,
    CostAnalysisParameters,
    ProcessConditions,
)
from combustion_calc.core.errors import (
    ComputationDegenerate,
    EngineError,
    IncompatibleFuelPhases,
    InvalidFuelComposition,
    InvalidFuelData,
    InvalidProcessConditions,
    MixtureImbalance,
)
from combustion_calc.core.fuels import (
    Fuel,
    FuelCatalog,
    FuelType,
    default_catalog,
    make_custom_fuel,
)
from combustion_calc.core.mixture import FlowBasis, Mixture, MixtureComponent
from combustion_calc.combustion.config import DEFAULT_CONFIG, EngineConfig, PhasePolicy
from combustion_calc.combustion.engine import CombustionEngine, compute
from combustion_calc.combustion.results import CombustionResult, CostAnalysis
from combustion_calc.io.catalog import load_catalog, save_catalog
from combustion_calc.io.serialization import request_from_json, result_to_json
from combustion_calc.core.session import CalculationSession
from combustion_calc.core.dispatch import CalculationDispatcher

__version__ = "0.1.0"

__all__ = [
    # Inputs
    "Fuel",
    "FuelCatalog",
    "FuelType",
    "default_catalog",
    "make_custom_fuel",
    "FlowBasis",
    "Mixture",
    "MixtureComponent",
    "CombustionReading",
    "CostAnalysisParameters",
    "ProcessConditions",
    # Engine
    "DEFAULT_CONFIG",
    "EngineConfig",
    "PhasePolicy",
    "CombustionEngine",
    "compute",
    "CombustionResult",
    "CostAnalysis",
    # Errors
    "EngineError",
    "InvalidFuelData",
    "IncompatibleFuelPhases",
    "MixtureImbalance",
    "InvalidProcessConditions",
    "InvalidFuelComposition",
    "ComputationDegenerate",
    # Files
    "load_catalog",
    "save_catalog",
    "request_from_json",
    "result_to_json",
    # Front-end support
    "CalculationSession",
    "CalculationDispatcher",
]
