"""
Engine configuration.

Physical constants and empirical correlation coefficients used by the
engine. The NOx correlation coefficients and the operating-hours figure of
the cost projection are placeholders that have not been validated against
measured emissions; override them per site.
"""

from __future__ import annotations

import dataclasses
import json
from dataclasses import asdict, dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Mapping


class PhasePolicy(str, Enum):
    """What to do with mixtures that combine gas, liquid and solid fuels."""

    CLASSIFY = "classify"  # any solid/liquid -> mass flow
    REJECT = "reject"


@dataclass(frozen=True)
class EngineConfig:
    """
    Constants used by the combustion engine.

    Attributes:
        o2_fraction_in_air: O2 mole fraction of dry air
        gas_constant: Universal gas constant (J/(mol·K))
        air_molar_mass: Molar mass of dry air (g/mol)
        flue_gas_cp: Mean molar heat capacity of the products (J/(mol·K))
        nox_a, nox_b, nox_c: NOx correlation coefficients
        nox_reference_temperature: Temperature offset of the NOx correlation (K)
        nox_ppm_scale: Converts the correlation's fraction to ppm
        no2_mg_per_ppm: NOx (as NO2) mg/Nm³ per ppm
        so2_mg_per_ppm: SO2 mg/Nm³ per ppm
        co_mg_per_ppm: CO mg/Nm³ per ppm
        normalization_temperature: Normal temperature for Nm³ (K)
        ambient_o2_percent: O2 % used in the reference-O2 correction
        percentage_tolerance: Allowed deviation of the mixture sum from 100
        cost_point_count: Number of readings in a cost sweep
        hours_per_week: Operating hours assumed by the weekly projection
        phase_policy: Handling of cross-phase mixtures
    """

    o2_fraction_in_air: float = 0.2095
    gas_constant: float = 8.314
    air_molar_mass: float = 28.97
    flue_gas_cp: float = 37.0
    nox_a: float = 1e-5
    nox_b: float = 0.0006
    nox_c: float = 0.5
    nox_reference_temperature: float = 2000.0
    nox_ppm_scale: float = 1e6
    no2_mg_per_ppm: float = 2.0536
    so2_mg_per_ppm: float = 2.86
    co_mg_per_ppm: float = 1.25
    normalization_temperature: float = 273.0
    ambient_o2_percent: float = 21.0
    percentage_tolerance: float = 0.01
    cost_point_count: int = 10
    hours_per_week: float = 40.0
    phase_policy: PhasePolicy = PhasePolicy.CLASSIFY

    def __post_init__(self) -> None:
        object.__setattr__(self, "phase_policy", PhasePolicy(self.phase_policy))
        if not 0 < self.o2_fraction_in_air < 1:
            raise ValueError("o2_fraction_in_air must be between 0 and 1")
        if self.flue_gas_cp <= 0:
            raise ValueError("flue_gas_cp must be positive")
        if self.cost_point_count < 2:
            raise ValueError("cost_point_count must be at least 2")
        if self.hours_per_week < 0:
            raise ValueError("hours_per_week must not be negative")

    @property
    def n2_fraction_in_air(self) -> float:
        return 1.0 - self.o2_fraction_in_air

    def replace(self, **overrides: Any) -> EngineConfig:
        """Copy with some constants changed."""
        return dataclasses.replace(self, **overrides)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["phase_policy"] = self.phase_policy.value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EngineConfig:
        """
        Build a config from a mapping, starting from the defaults.

        Raises:
            ValueError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**dict(data))

    @classmethod
    def from_json(cls, filepath: str | Path) -> EngineConfig:
        """Load overrides from a JSON object file."""
        with open(filepath, encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"{filepath}: expected a JSON object")
        return cls.from_dict(data)


DEFAULT_CONFIG = EngineConfig()
