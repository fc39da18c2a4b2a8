"""
Combustion air composition.

Dry air is treated as O2 plus an inert remainder lumped into N2. When the
relative humidity of the inlet air is known, the water vapour it carries
dilutes both and enters the flue gas as H2O.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from combustion_calc.combustion.config import DEFAULT_CONFIG, EngineConfig

# Water mole fraction is capped below 1 so the O2 fraction stays positive
MAX_WATER_FRACTION = 0.99

# Lowest air temperature (°C) the saturation correlation is used at
MIN_HUMID_AIR_TEMPERATURE = -80.0


def saturation_pressure_kpa(temperature_c: float) -> float:
    """Saturation vapour pressure of water in kPa (Buck 1981, over water)."""
    return 0.61121 * math.exp(
        (18.678 - temperature_c / 234.5) * (temperature_c / (257.14 + temperature_c))
    )


@dataclass(frozen=True)
class AirComposition:
    """Mole fractions of the inlet air."""

    o2: float
    n2: float
    h2o: float = 0.0


def air_composition(
    temperature_c: float,
    pressure_bar: float,
    relative_humidity: Optional[float] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> AirComposition:
    """
    Mole fractions of the inlet air at the given humidity.

    Args:
        temperature_c: Inlet air temperature (°C)
        pressure_bar: Absolute pressure (bar)
        relative_humidity: Relative humidity (%), None or 0 for dry air
        config: Engine constants

    Returns:
        AirComposition; equal to dry air when there is no humidity
    """
    if not relative_humidity:
        return AirComposition(o2=config.o2_fraction_in_air, n2=config.n2_fraction_in_air)

    p_vapour_kpa = relative_humidity / 100.0 * saturation_pressure_kpa(temperature_c)
    h2o = min(MAX_WATER_FRACTION, p_vapour_kpa / (pressure_bar * 100.0))
    return AirComposition(
        o2=config.o2_fraction_in_air * (1.0 - h2o),
        n2=config.n2_fraction_in_air * (1.0 - h2o),
        h2o=h2o,
    )
