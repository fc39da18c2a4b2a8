"""
Pollutant emission estimates.

NOx is estimated from an empirical flame-temperature correlation:

    NOx [ppm] = A * exp(B * (T_flame - T_ref)) * (excess_air + 1)^C * scale

The coefficients come from EngineConfig and are unvalidated placeholders.
Concentrations are converted to mg/Nm³ with fixed per-ppm factors and
corrected to a reference O2 level:

    corrected = value * (21 - O2_ref) / (21 - O2_measured_dry)
"""

from __future__ import annotations

import math

from combustion_calc.combustion.config import DEFAULT_CONFIG, EngineConfig
from combustion_calc.combustion.results import EmissionFigures
from combustion_calc.core.errors import ComputationDegenerate


def nox_ppm(
    flame_temperature: float,
    excess_air: float,
    config: EngineConfig = DEFAULT_CONFIG,
) -> float:
    """
    Estimate NOx concentration from flame temperature and excess air.

    Args:
        flame_temperature: Adiabatic flame temperature (K)
        excess_air: Excess air (%)
        config: Correlation coefficients

    Returns:
        NOx in ppm; 0 when the air deficit is so deep that
        (excess_air + 1) is not positive

    Raises:
        ComputationDegenerate: If the exponential overflows
    """
    base = max(excess_air + 1.0, 0.0)
    if base == 0.0:
        return 0.0
    try:
        growth = math.exp(config.nox_b * (flame_temperature - config.nox_reference_temperature))
    except OverflowError:
        raise ComputationDegenerate(
            f"NOx correlation overflows at flame temperature {flame_temperature:.4g} K"
        ) from None
    return config.nox_a * growth * base ** config.nox_c * config.nox_ppm_scale


def at_flue_gas_temperature(
    value: float,
    flue_gas_temperature: float,
    config: EngineConfig = DEFAULT_CONFIG,
) -> float:
    """Scale a normal-condition concentration to the flue-gas temperature (°C)."""
    t_norm = config.normalization_temperature
    return value * t_norm / (t_norm + flue_gas_temperature)


def o2_correction_factor(
    reference_o2: float,
    measured_dry_o2: float,
    config: EngineConfig = DEFAULT_CONFIG,
) -> float:
    """
    Factor that converts a concentration to the reference O2 level.

    Raises:
        ComputationDegenerate: If the measured O2 leaves no margin below
            ambient O2
    """
    margin = config.ambient_o2_percent - measured_dry_o2
    if margin <= 0:
        raise ComputationDegenerate(
            f"Dry flue-gas O2 ({measured_dry_o2:.4g} %) leaves no margin for "
            f"O2 correction"
        )
    return (config.ambient_o2_percent - reference_o2) / margin


def emission_figures(
    nox: float,
    sox: float,
    co: float,
    measured_dry_o2: float,
    reference_o2: float,
    flue_gas_temperature: float,
    config: EngineConfig = DEFAULT_CONFIG,
) -> EmissionFigures:
    """
    Collect ppm, mg/Nm³ and O2-corrected forms of the emissions.

    Args:
        nox, sox, co: Wet-basis concentrations (ppm)
        measured_dry_o2: O2 in the dry flue gas (%)
        reference_o2: Reference O2 for the correction (%)
        flue_gas_temperature: Flue-gas temperature (°C)
        config: Conversion factors
    """
    factor = o2_correction_factor(reference_o2, measured_dry_o2, config)

    nox_normalized = nox * config.no2_mg_per_ppm
    nox_flue = at_flue_gas_temperature(nox_normalized, flue_gas_temperature, config)
    sox_normalized = sox * config.so2_mg_per_ppm
    co_normalized = co * config.co_mg_per_ppm

    return EmissionFigures(
        nox_ppm=nox,
        nox_normalized=nox_normalized,
        nox_flue_gas_temp=nox_flue,
        nox_corrected_normalized=nox_normalized * factor,
        nox_corrected_flue_gas_temp=nox_flue * factor,
        sox_ppm=sox,
        sox_normalized=sox_normalized,
        sox_corrected=sox_normalized * factor,
        co_ppm=co,
        co_normalized=co_normalized,
        co_corrected=co_normalized * factor,
        measured_dry_o2=measured_dry_o2,
        o2_correction_factor=factor,
    )
