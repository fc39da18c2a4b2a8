"""
Fuel-cost sweep over measured operating points.

The flow range [min, max] is split into evenly spaced points, one per
analyser reading. At each point the measured dry CO2 is compared with the
CO2 of stoichiometric combustion at that flow:

    efficiency = CO2_measured / CO2_stoich * 100
    cost = flow / efficiency * unit_cost

with efficiency in percent. The weekly projection is the sum of the point
costs times ``EngineConfig.hours_per_week`` (40 by default, an unvalidated
assumption). Readings above the stoichiometric CO2 give efficiencies over
100 % and are reported as measured; a cost below ``flow / 100 * unit_cost``
points at an analyser reading that needs checking.
"""

from __future__ import annotations

import numpy as np

from combustion_calc.combustion.air import AirComposition
from combustion_calc.combustion.balance import MixtureBalance, fuel_molar_flow
from combustion_calc.combustion.config import DEFAULT_CONFIG, EngineConfig
from combustion_calc.combustion.results import CostAnalysis, CostPoint
from combustion_calc.core.conditions import CostAnalysisParameters
from combustion_calc.core.errors import ComputationDegenerate
from combustion_calc.core.mixture import FlowBasis


def stoichiometric_dry_flue_per_mol(balance: MixtureBalance, air: AirComposition) -> float:
    """Dry flue-gas moles per mole of fuel at zero excess air."""
    n2_from_air = balance.stoichiometric_o2 * air.n2 / air.o2
    return balance.c + balance.s + n2_from_air + balance.n + balance.ash_percent / 100.0


def co2_max_dry_percent(balance: MixtureBalance, air: AirComposition) -> float:
    """Dry CO2 % of stoichiometric combustion products."""
    return balance.c / stoichiometric_dry_flue_per_mol(balance, air) * 100.0


def excess_air_from_o2(o2_percent, config: EngineConfig = DEFAULT_CONFIG):
    """Excess air (%) implied by a dry flue-gas O2 reading."""
    return o2_percent / (config.ambient_o2_percent - o2_percent) * 100.0


def cost_sweep(
    params: CostAnalysisParameters,
    balance: MixtureBalance,
    air: AirComposition,
    flow_basis: FlowBasis,
    fuel_temperature: float,
    pressure: float,
    config: EngineConfig = DEFAULT_CONFIG,
) -> CostAnalysis:
    """
    Evaluate cost and efficiency at every reading of a validated sweep.

    Raises:
        ComputationDegenerate: If the fuel has no carbon, a reading has no
            CO2, or an O2 reading is at or above ambient O2
    """
    flows = np.linspace(params.min_flow_rate, params.max_flow_rate, len(params.readings))
    o2 = np.array([r.o2_percent for r in params.readings], dtype=float)
    co2 = np.array([r.co2_percent for r in params.readings], dtype=float)

    if np.any(o2 >= config.ambient_o2_percent):
        raise ComputationDegenerate(
            f"O2 readings must stay below {config.ambient_o2_percent} % for a cost sweep"
        )
    if np.any(co2 <= 0):
        raise ComputationDegenerate("CO2 readings of 0 % give zero efficiency")

    n_fuel = fuel_molar_flow(
        flows, flow_basis, balance.average_molar_mass, fuel_temperature, pressure, config
    )
    stoich_co2_flow = balance.c * n_fuel
    if np.any(stoich_co2_flow <= 0):
        raise ComputationDegenerate("Stoichiometric CO2 is zero; the fuel has no carbon")
    stoich_co2_pct = stoich_co2_flow / (stoichiometric_dry_flue_per_mol(balance, air) * n_fuel) * 100.0

    efficiency = co2 / stoich_co2_pct * 100.0
    hourly = flows / efficiency * params.fuel_unit_cost
    weekly = hourly * config.hours_per_week

    best = float(efficiency.max())
    ideal_hourly = flows / best * params.fuel_unit_cost
    savings = float(np.sum(hourly - ideal_hourly) * config.hours_per_week)

    excess_air = excess_air_from_o2(o2, config)
    points = tuple(
        CostPoint(
            flow_rate=float(flows[i]),
            o2_percent=float(o2[i]),
            co2_percent=float(co2[i]),
            excess_air=float(excess_air[i]),
            fuel_molar_flow=float(n_fuel[i]),
            stoich_co2_flow=float(stoich_co2_flow[i]),
            stoich_co2_percent=float(stoich_co2_pct[i]),
            efficiency=float(efficiency[i]),
            hourly_cost=float(hourly[i]),
            weekly_cost=float(weekly[i]),
        )
        for i in range(len(flows))
    )

    return CostAnalysis(
        points=points,
        fuel_unit_cost=float(params.fuel_unit_cost),
        flow_unit=flow_basis.fuel_unit,
        hours_per_week=config.hours_per_week,
        best_efficiency=best,
        weekly_savings=float(weekly.sum()),
        best_efficiency_savings=max(savings, 0.0),
    )
