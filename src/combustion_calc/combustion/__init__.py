"""Combustion engine, configuration and result records."""

from combustion_calc.combustion.config import DEFAULT_CONFIG, EngineConfig, PhasePolicy
from combustion_calc.combustion.engine import CombustionEngine, combustion_efficiency, compute
from combustion_calc.combustion.results import (
    CombustionResult,
    CostAnalysis,
    CostPoint,
    EmissionFigures,
    SpeciesBreakdown,
)

__all__ = [
    "DEFAULT_CONFIG",
    "EngineConfig",
    "PhasePolicy",
    "CombustionEngine",
    "combustion_efficiency",
    "compute",
    "CombustionResult",
    "CostAnalysis",
    "CostPoint",
    "EmissionFigures",
    "SpeciesBreakdown",
]
