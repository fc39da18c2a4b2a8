"""
Combustion calculation engine.

Maps a fuel mixture and process conditions to a complete balance of the
combustion products, flame temperature, efficiency and emissions.

Procedure (per calculation):
    1. Validate mixture and conditions (no arithmetic before this)
    2. Mixture averages and mole-fraction-weighted element totals
    3. Stoichiometric O2:  O2_req = C + H/4 + S - O/2   (per mol mixture)
    4. Fuel molar flow from mass or volumetric flow rate
    5. Air:  n_air = n_fuel * O2_req / x_O2 * (1 + excess_air/100)
    6. Efficiency 100 % with excess air >= 0, else max(0, 100 + excess_air)
    7. Products of the burnt fraction; unburnt carbon reports as CO and
       unburnt hydrogen as H2
    8. Flame temperature:  T = T_fuel + Q / (n_products * cp)
    9. NOx from flame temperature, taken out of the N2
   10. Wet/dry composition, ppm and normalized emissions
   11. Optional cost sweep

The calculation is deterministic and keeps no state between calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from combustion_calc.combustion.air import air_composition
from combustion_calc.combustion.balance import fuel_molar_flow, mixture_balance
from combustion_calc.combustion.config import DEFAULT_CONFIG, EngineConfig
from combustion_calc.combustion.cost import co2_max_dry_percent, cost_sweep
from combustion_calc.combustion.emissions import emission_figures, nox_ppm
from combustion_calc.combustion.results import (
    CombustionResult,
    SpeciesBreakdown,
    ensure_finite,
)
from combustion_calc.combustion.validation import validate_request
from combustion_calc.core.conditions import ProcessConditions
from combustion_calc.core.errors import ComputationDegenerate
from combustion_calc.core.mixture import FlowBasis, Mixture


def combustion_efficiency(excess_air: float) -> float:
    """
    Share of the fuel that burns (%), from the air supply.

    Examples:
        >>> combustion_efficiency(10.0)
        100.0
        >>> combustion_efficiency(-20.0)
        80.0
    """
    if excess_air >= 0:
        return 100.0
    return max(0.0, 100.0 + excess_air)


def compute(
    mixture: Mixture,
    conditions: ProcessConditions,
    config: EngineConfig = DEFAULT_CONFIG,
) -> CombustionResult:
    """
    Run one combustion calculation.

    Args:
        mixture: Fuels with weight percentages summing to 100
        conditions: Process conditions (flow rate in the mixture's unit)
        config: Engine constants

    Returns:
        CombustionResult with finite values only

    Raises:
        InvalidFuelData: Missing or out-of-range fuel fields
        MixtureImbalance: Percentages do not sum to 100
        InvalidProcessConditions: Bad condition or cost-analysis fields
        InvalidFuelComposition: O2 demand is not positive
        ComputationDegenerate: A zero divisor or non-finite value
    """
    validate_request(mixture, conditions, config)

    balance = mixture_balance(mixture)
    basis = mixture.flow_basis
    air = air_composition(
        conditions.inlet_air_temperature,
        conditions.pressure,
        conditions.relative_humidity,
        config,
    )
    pressure_pa = conditions.pressure * 1e5
    fuel_temperature_k = conditions.fuel_temperature + 273.15
    excess_air = conditions.excess_air

    # Fuel and air flows (mol/s)
    n_fuel = fuel_molar_flow(
        conditions.flow_rate,
        basis,
        balance.average_molar_mass,
        conditions.fuel_temperature,
        conditions.pressure,
        config,
    )
    air_per_mol_fuel = balance.stoichiometric_o2 / air.o2
    n_air = n_fuel * air_per_mol_fuel * (1.0 + excess_air / 100.0)

    if basis is FlowBasis.VOLUMETRIC:
        air_temperature_k = conditions.inlet_air_temperature + 273.15
        air_flow_rate = n_air * config.gas_constant * air_temperature_k / pressure_pa * 3600.0
    else:
        air_flow_rate = n_air * config.air_molar_mass / 1000.0 * 3600.0

    efficiency = combustion_efficiency(excess_air)
    if efficiency >= 100.0:
        n_combusted, n_unburned = n_fuel, 0.0
    else:
        n_unburned = max(0.0, n_fuel * (100.0 - efficiency) / 100.0)
        n_combusted = n_fuel - n_unburned

    # Products of the burnt fuel
    co2 = balance.c * n_combusted
    h2o = balance.h * n_combusted / 2.0 + n_air * air.h2o
    so2 = balance.s * n_combusted
    co = balance.c * n_unburned
    h2 = balance.h * n_unburned / 2.0
    ash = n_fuel * balance.ash_percent / 100.0
    o2 = max(0.0, n_air * air.o2 - n_combusted * balance.stoichiometric_o2)
    n2 = n_air * air.n2 + balance.n * n_combusted

    n_products = co2 + h2o + so2 + co + h2 + o2 + n2 + ash
    if n_products <= 0:
        raise ComputationDegenerate("Combustion products have zero molar flow")

    heat_release = n_combusted * (balance.lhv * balance.average_molar_mass / 1000.0) * 1e6
    flame_temperature = fuel_temperature_k + heat_release / (n_products * config.flue_gas_cp)

    nox = nox_ppm(flame_temperature, excess_air, config)
    n_nox = min(n2, n2 * nox / 1e6)
    n2 -= n_nox

    products = SpeciesBreakdown(
        co2=co2, h2o=h2o, so2=so2, co=co, h2=h2, o2=o2, n2=n2, nox=n_nox, ash=ash,
    )
    volume_wet = products.wet_percentages()
    volume_dry = products.dry_percentages()
    wet_total = products.total()

    sox = so2 / wet_total * 1e6
    co_ppm = 0.0 if efficiency >= 100.0 else co / wet_total * 1e6

    emissions = emission_figures(
        nox=nox,
        sox=sox,
        co=co_ppm,
        measured_dry_o2=volume_dry.o2,
        reference_o2=conditions.reference_o2,
        flue_gas_temperature=conditions.flue_gas_temperature,
        config=config,
    )

    density = None
    if basis is FlowBasis.VOLUMETRIC:
        density = (
            pressure_pa * (balance.average_molar_mass / 1000.0)
            / (config.gas_constant * fuel_temperature_k)
        )

    cost_analysis = None
    if conditions.cost is not None:
        cost_analysis = cost_sweep(
            conditions.cost,
            balance,
            air,
            basis,
            conditions.fuel_temperature,
            conditions.pressure,
            config,
        )

    result = CombustionResult(
        flow_basis=basis,
        fuel_flow_unit=basis.fuel_unit,
        air_flow_unit=basis.fuel_unit,
        average_molar_mass=balance.average_molar_mass,
        lhv=balance.lhv,
        hhv=balance.hhv,
        stoichiometric_o2=balance.stoichiometric_o2,
        air_per_mol_fuel=air_per_mol_fuel,
        n_fuel=n_fuel,
        n_air=n_air,
        air_flow_rate=air_flow_rate,
        combustion_efficiency=efficiency,
        n_fuel_combusted=n_combusted,
        n_unburned_fuel=n_unburned,
        flame_temperature=flame_temperature,
        fuel_gas_density=density,
        air_water_fraction=air.h2o,
        co2_max_dry_percent=co2_max_dry_percent(balance, air),
        products=products,
        volume_wet=volume_wet,
        volume_dry=volume_dry,
        emissions=emissions,
        cost_analysis=cost_analysis,
    )
    ensure_finite(result)
    return result


@dataclass(frozen=True)
class CombustionEngine:
    """
    Calculation engine bound to one configuration.

    Holds no state besides its configuration, so one instance can serve
    concurrent calls.

    Example:
        >>> engine = CombustionEngine()
        >>> result = engine.compute(Mixture.single(METHANE), ProcessConditions())
        >>> result.combustion_efficiency
        100.0
    """

    config: EngineConfig = field(default=DEFAULT_CONFIG)

    def compute(self, mixture: Mixture, conditions: ProcessConditions) -> CombustionResult:
        return compute(mixture, conditions, self.config)
