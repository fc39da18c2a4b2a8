"""Plain-text rendering of calculation results."""

from __future__ import annotations

from combustion_calc.combustion.results import CombustionResult, CostAnalysis
from combustion_calc.core.mixture import Mixture

RULE = "─" * 60

SPECIES_LABELS = (
    ("co2", "CO₂"),
    ("h2o", "H₂O"),
    ("so2", "SO₂"),
    ("co", "CO"),
    ("h2", "H₂"),
    ("o2", "O₂"),
    ("n2", "N₂"),
    ("nox", "NOx"),
    ("ash", "Ash"),
)


def format_mixture(mixture: Mixture) -> list[str]:
    lines = []
    for component in mixture:
        fuel = component.fuel
        lines.append(
            f"    {fuel.name:18} {fuel.symbol:12} {fuel.fuel_type.value:7} "
            f"{component.percentage:6.2f} %"
        )
    return lines


def format_cost_analysis(cost: CostAnalysis) -> list[str]:
    lines = [
        "",
        f"  Cost Analysis (unit cost {cost.fuel_unit_cost:.4g}, "
        f"{cost.hours_per_week:g} h/week):",
        f"    {'Flow':>10} {'O2 %':>6} {'CO2 %':>6} {'EA %':>7} "
        f"{'Eff %':>7} {'Cost/h':>10} {'Cost/week':>11}",
    ]
    for p in cost.points:
        lines.append(
            f"    {p.flow_rate:10.3f} {p.o2_percent:6.2f} {p.co2_percent:6.2f} "
            f"{p.excess_air:7.1f} {p.efficiency:7.2f} {p.hourly_cost:10.2f} "
            f"{p.weekly_cost:11.2f}"
        )
    lines += [
        f"    Flow unit:            {cost.flow_unit}",
        f"    Best efficiency:      {cost.best_efficiency:.2f} %",
        f"    Weekly projection:    {cost.weekly_savings:.2f}",
        f"    Potential savings:    {cost.best_efficiency_savings:.2f} per week "
        f"at best efficiency",
    ]
    return lines


def format_report(result: CombustionResult, mixture: Mixture | None = None) -> str:
    """
    Human-readable summary of a result.

    Args:
        result: Calculation result
        mixture: Mixture to list at the top, optional

    Returns:
        Multi-line report without a trailing newline
    """
    lines = ["", "  Combustion Results", "  " + RULE]

    if mixture is not None:
        lines.append("  Fuel Mixture:")
        lines += format_mixture(mixture)
        lines.append("")

    lines += [
        "  Mixture Properties:",
        f"    Average molar mass:   {result.average_molar_mass:.3f} g/mol",
        f"    LHV / HHV:            {result.lhv:.2f} / {result.hhv:.2f} MJ/kg",
        f"    Stoichiometric O₂:    {result.stoichiometric_o2:.4f} mol/mol fuel",
        f"    Stoichiometric air:   {result.air_per_mol_fuel:.4f} mol/mol fuel",
    ]
    if result.fuel_gas_density is not None:
        lines.append(f"    Fuel gas density:     {result.fuel_gas_density:.4f} kg/m³")

    lines += [
        "",
        "  Flows:",
        f"    Fuel:                 {result.n_fuel:.5f} mol/s",
        f"    Air:                  {result.n_air:.5f} mol/s "
        f"({result.air_flow_rate:.3f} {result.air_flow_unit})",
        f"    Combustion efficiency:{result.combustion_efficiency:7.1f} %",
        f"    Unburnt fuel:         {result.n_unburned_fuel:.5f} mol/s",
        f"    Flame temperature:    {result.flame_temperature:.1f} K "
        f"({result.flame_temperature - 273.15:.1f} °C)",
    ]
    if result.air_water_fraction > 0:
        lines.append(f"    Air moisture:         {result.air_water_fraction * 100:.2f} mol %")

    lines += [
        "",
        "  Flue Gas Composition:",
        f"    {'Species':8} {'mol/s':>12} {'Wet %':>9} {'Dry %':>9}",
    ]
    for key, label in SPECIES_LABELS:
        lines.append(
            f"    {label:8} {getattr(result.products, key):12.6f} "
            f"{getattr(result.volume_wet, key):9.3f} {getattr(result.volume_dry, key):9.3f}"
        )
    lines.append(f"    CO₂ max (dry):        {result.co2_max_dry_percent:.2f} %")

    e = result.emissions
    lines += [
        "",
        f"  Emissions (measured O₂ {e.measured_dry_o2:.2f} % dry, "
        f"correction x{e.o2_correction_factor:.3f}):",
        f"    NOx: {e.nox_ppm:10.2f} ppm  {e.nox_normalized:10.2f} mg/Nm³  "
        f"{e.nox_corrected_normalized:10.2f} mg/Nm³ @ ref O₂",
        f"         {e.nox_flue_gas_temp:10.2f} mg/m³ at flue temp  "
        f"{e.nox_corrected_flue_gas_temp:10.2f} mg/m³ @ ref O₂",
        f"    SOx: {e.sox_ppm:10.2f} ppm  {e.sox_normalized:10.2f} mg/Nm³  "
        f"{e.sox_corrected:10.2f} mg/Nm³ @ ref O₂",
        f"    CO:  {e.co_ppm:10.2f} ppm  {e.co_normalized:10.2f} mg/Nm³  "
        f"{e.co_corrected:10.2f} mg/Nm³ @ ref O₂",
    ]

    if result.cost_analysis is not None:
        lines += format_cost_analysis(result.cost_analysis)

    lines.append("  " + RULE)
    return "\n".join(lines)
