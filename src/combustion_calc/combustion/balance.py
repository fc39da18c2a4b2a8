"""
Elemental balance of a fuel mixture.

Mixture percentages are weight fractions. Element totals per mole of
mixture must be weighted by mole fractions, so the weights are first
converted using each fuel's combustible (ash- and moisture-free) moles
per kg:

    moles_per_kg_i = w_i * (1 - (ash_i + moisture_i)/100) * 1000 / M_i
    x_i = moles_per_kg_i / sum(moles_per_kg)
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from combustion_calc.combustion.config import DEFAULT_CONFIG, EngineConfig
from combustion_calc.core.errors import ComputationDegenerate, InvalidFuelComposition
from combustion_calc.core.mixture import FlowBasis, Mixture


@dataclass(frozen=True)
class MixtureBalance:
    """
    Per-mole properties of a fuel mixture.

    Attributes:
        average_molar_mass: Weight-averaged molar mass (g/mol)
        lhv: Weighted LHV, each fuel discounted by its moisture (MJ/kg)
        hhv: Weighted HHV (MJ/kg)
        mole_fractions: Mole fraction of each component, in mixture order
        c, h, o, n, s: Mole-fraction-weighted element counts per mole
        ash_percent: Weighted ash content (wt %)
        stoichiometric_o2: O2 demand (mol O2 / mol mixture)
    """

    average_molar_mass: float
    lhv: float
    hhv: float
    mole_fractions: tuple[float, ...]
    c: float
    h: float
    o: float
    n: float
    s: float
    ash_percent: float
    stoichiometric_o2: float


def mixture_balance(mixture: Mixture) -> MixtureBalance:
    """
    Average the fuels of a validated mixture.

    Raises:
        ComputationDegenerate: If the mixture holds no combustible moles
        InvalidFuelComposition: If the O2 demand is not positive
    """
    fuels = [c.fuel for c in mixture.components]
    w = np.array([c.weight_fraction for c in mixture.components], dtype=float)
    molar_mass = np.array([f.molar_mass for f in fuels], dtype=float)
    combustible = np.array([f.combustible_fraction for f in fuels], dtype=float)

    moles_per_kg = w * combustible * 1000.0 / molar_mass
    total_moles = float(moles_per_kg.sum())
    if total_moles <= 0:
        raise ComputationDegenerate("Mixture contains no combustible moles")
    x = moles_per_kg / total_moles

    def weighted(attr: str) -> float:
        return float(np.dot(x, [getattr(f, attr) for f in fuels]))

    c, h, o, n, s = (weighted(el) for el in ("c", "h", "o", "n", "s"))
    stoichiometric_o2 = c + h / 4.0 + s - o / 2.0
    if stoichiometric_o2 <= 0:
        raise InvalidFuelComposition(
            f"Stoichiometric O2 demand is {stoichiometric_o2:.4g} mol/mol; "
            f"the mixture's oxygen content exceeds its combustible content"
        )

    return MixtureBalance(
        average_molar_mass=float(np.dot(w, molar_mass)),
        lhv=float(np.dot(w, [f.effective_lhv for f in fuels])),
        hhv=float(np.dot(w, [f.hhv for f in fuels])),
        mole_fractions=tuple(float(v) for v in x),
        c=c,
        h=h,
        o=o,
        n=n,
        s=s,
        ash_percent=float(np.dot(w, [f.ash_content for f in fuels])),
        stoichiometric_o2=stoichiometric_o2,
    )


def fuel_molar_flow(
    flow_rate,
    flow_basis: FlowBasis,
    average_molar_mass: float,
    temperature_c: float,
    pressure_bar: float,
    config: EngineConfig = DEFAULT_CONFIG,
):
    """
    Convert a fuel flow rate to mol/s.

    Mass flow (kg/h) uses the mixture molar mass; volumetric flow (m³/h)
    uses the ideal-gas law at the fuel temperature and pressure. Accepts
    scalars or numpy arrays.
    """
    if flow_basis is FlowBasis.MASS:
        return (flow_rate / 3600.0) / (average_molar_mass / 1000.0)
    temperature_k = temperature_c + 273.15
    return pressure_bar * 1e5 * (flow_rate / 3600.0) / (config.gas_constant * temperature_k)
