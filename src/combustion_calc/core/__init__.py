"""Fuel data, mixtures, process conditions and errors."""

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
from combustion_calc.core.fuels import Fuel, FuelCatalog, FuelType, default_catalog, make_custom_fuel
from combustion_calc.core.mixture import FlowBasis, Mixture, MixtureComponent

__all__ = [
    "CombustionReading",
    "CostAnalysisParameters",
    "ProcessConditions",
    "ComputationDegenerate",
    "EngineError",
    "IncompatibleFuelPhases",
    "InvalidFuelComposition",
    "InvalidFuelData",
    "InvalidProcessConditions",
    "MixtureImbalance",
    "Fuel",
    "FuelCatalog",
    "FuelType",
    "default_catalog",
    "make_custom_fuel",
    "FlowBasis",
    "Mixture",
    "MixtureComponent",
]
