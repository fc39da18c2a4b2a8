#!/usr/bin/env python3
"""
Command-line interface for the combustion calculator.

Runs a single JSON request in batch mode, or an interactive shell for
building a fuel mixture and process conditions step by step.

Usage:
    combustion-calc                          # Interactive shell
    combustion-calc --request run.json       # Print a text report
    combustion-calc --request run.json --json
    combustion-calc --list-fuels
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

from combustion_calc.cli.report import format_report
from combustion_calc.combustion.config import DEFAULT_CONFIG, EngineConfig, PhasePolicy
from combustion_calc.combustion.engine import compute
from combustion_calc.core.errors import EngineError
from combustion_calc.core.fuels import FuelCatalog
from combustion_calc.core.session import CONDITION_NAMES, CalculationSession
from combustion_calc.io.catalog import load_catalog
from combustion_calc.io.serialization import (
    error_to_json,
    request_from_json,
    result_to_json,
)

logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def print_banner() -> None:
    """Print welcome banner."""
    print("""
╔═══════════════════════════════════════════════════════════╗
║             Combustion Calculator v0.1.0                  ║
║      Flue gas, flame temperature, emissions and cost      ║
╚═══════════════════════════════════════════════════════════╝
    """)


def print_help() -> None:
    """Print available commands."""
    print("""
Available Commands:
-------------------------------------------------------------------
  fuels                  List the fuels in the catalog
  add <fuel> [pct]       Add a fuel to the mixture (e.g., add Methane 80)
  remove <fuel>          Remove a fuel from the mixture
  pct <fuel> <pct>       Change a fuel's weight percentage
  clear                  Remove all fuels
  custom <name> <formula> <Gas|Liquid|Solid> <LHV> <HHV> [molar_mass]
                         Define a fuel (heating values in MJ/kg)

  set <field> <value>    Set a process condition ('none' clears humidity)
  show                   Show mixture, conditions and cost settings

  cost <unit> <min> <max>   Enable cost analysis over a flow range
  reading <n> <O2> <CO2>    Enter analyser reading n (dry %)
  nocost                 Disable cost analysis

  calc                   Run the calculation
  json                   Print the last result as JSON

  help                   Show this help
  quit / exit            Exit the program
-------------------------------------------------------------------
Fields: """ + ", ".join(CONDITION_NAMES) + "\n")


def print_fuels(catalog: FuelCatalog) -> None:
    print(f"\n  {'Name':20} {'Formula':24} {'Type':7} {'M g/mol':>8} {'LHV':>6}")
    print("  " + "─" * 70)
    for fuel in catalog:
        marker = " *" if catalog.is_custom(fuel.name) else ""
        print(
            f"  {fuel.name:20} {fuel.symbol:24} {fuel.fuel_type.value:7} "
            f"{fuel.molar_mass:8.3f} {fuel.heating_value:6.1f}{marker}"
        )
    if catalog.custom_fuels():
        print("  (* custom fuel)")
    print()


def _split_name_value(args: list[str]) -> tuple[str, Optional[float]]:
    """Split 'Carbon Monoxide 20' into ('Carbon Monoxide', 20.0)."""
    if len(args) > 1:
        try:
            return " ".join(args[:-1]), float(args[-1])
        except ValueError:
            pass
    return " ".join(args), None


def cmd_show(session: CalculationSession) -> None:
    """Show the current setup."""
    print("\n  Fuel Mixture:")
    rows = session.fuel_rows()
    if not rows:
        print("    (empty)")
    for fuel, pct in rows:
        print(f"    {fuel.name:20} {fuel.symbol:16} {fuel.fuel_type.value:7} {pct:6.2f} %")
    if rows:
        print(f"    {'Total':45} {session.total_percentage:6.2f} %")

    c = session.conditions
    unit = session.flow_unit
    humidity = "dry air" if c.relative_humidity is None else f"{c.relative_humidity:g} %"
    print("\n  Process Conditions:")
    print(f"    Fuel temperature:       {c.fuel_temperature:g} °C")
    print(f"    Inlet air temperature:  {c.inlet_air_temperature:g} °C")
    print(f"    Pressure:               {c.pressure:g} bar")
    print(f"    Excess air:             {c.excess_air:g} %")
    print(f"    Flue gas temperature:   {c.flue_gas_temperature:g} °C")
    print(f"    Reference O₂:           {c.reference_o2:g} %")
    print(f"    Fuel flow rate:         {c.flow_rate:g} {unit}")
    print(f"    Relative humidity:      {humidity}")

    if session.cost is None:
        print("\n  Cost analysis: off")
    else:
        cost = session.cost
        print(f"\n  Cost analysis: unit cost {cost.fuel_unit_cost:g} per {unit.split('/')[0]}")
        for i, (flow, reading) in enumerate(zip(session.cost_flow_points(), cost.readings), 1):
            entered = (
                "-" if reading is None
                else f"O₂ {reading.o2_percent:g} %  CO₂ {reading.co2_percent:g} %"
            )
            print(f"    {i:2d}. {flow:10.3f} {unit:5}  {entered}")
    print()


def cmd_custom(session: CalculationSession, args: list[str]) -> None:
    """Define a custom fuel."""
    if len(args) < 5:
        print("  Usage: custom <name> <formula> <Gas|Liquid|Solid> <LHV> <HHV> [molar_mass]")
        print("  Example: custom Propene C3H6 Gas 45.8 48.9")
        return
    name, formula, fuel_type = args[:3]
    try:
        lhv, hhv = float(args[3]), float(args[4])
        molar_mass = float(args[5]) if len(args) > 5 else None
    except ValueError:
        print("  Error: Invalid numeric values")
        return
    fuel = session.create_custom_fuel(name, formula, fuel_type, lhv, hhv, molar_mass)
    print(f"  Created {fuel.name} ({fuel.symbol}, {fuel.molar_mass:.3f} g/mol)")


def cmd_calc(session: CalculationSession) -> None:
    result = session.calculate()
    print(format_report(result, session.build_mixture()))
    print()


def run_interactive(session: CalculationSession) -> None:
    """Run interactive command loop."""
    print_help()

    while True:
        try:
            line = input("calc> ").strip()
            if not line:
                continue

            parts = line.split()
            cmd = parts[0].lower()
            args = parts[1:]

            # ─────────────────────────────────────────────────────────────
            # Navigation commands
            # ─────────────────────────────────────────────────────────────
            if cmd in ("quit", "exit", "q"):
                print("Bye.")
                break

            elif cmd in ("help", "h", "?"):
                print_help()

            # ─────────────────────────────────────────────────────────────
            # Mixture commands
            # ─────────────────────────────────────────────────────────────
            elif cmd == "fuels":
                print_fuels(session.catalog)

            elif cmd == "add":
                if not args:
                    print("  Usage: add <fuel> [pct]")
                else:
                    name, pct = _split_name_value(args)
                    fuel = session.add_fuel(name, pct or 0.0)
                    print(f"  Added {fuel.name} ({pct or 0.0:g} %), "
                          f"total {session.total_percentage:g} %")

            elif cmd == "remove":
                if not args:
                    print("  Usage: remove <fuel>")
                else:
                    session.remove_fuel(" ".join(args))
                    print(f"  Removed {' '.join(args)}")

            elif cmd == "pct":
                name, pct = _split_name_value(args)
                if not name or pct is None:
                    print("  Usage: pct <fuel> <pct>")
                else:
                    session.set_percentage(name, pct)
                    print(f"  {name}: {pct:g} %, total {session.total_percentage:g} %")

            elif cmd == "clear":
                session.clear_fuels()
                print("  Mixture cleared")

            elif cmd == "custom":
                cmd_custom(session, args)

            # ─────────────────────────────────────────────────────────────
            # Conditions
            # ─────────────────────────────────────────────────────────────
            elif cmd == "set":
                if len(args) < 2:
                    print("  Usage: set <field> <value>")
                else:
                    value = None if args[1].lower() == "none" else float(args[1])
                    session.set_condition(args[0], value)
                    print(f"  {args[0]} = {args[1]}")

            elif cmd == "show":
                cmd_show(session)

            # ─────────────────────────────────────────────────────────────
            # Cost analysis
            # ─────────────────────────────────────────────────────────────
            elif cmd == "cost":
                if len(args) < 3:
                    print("  Usage: cost <unit_cost> <min_flow> <max_flow>")
                else:
                    session.enable_cost_analysis(*(float(a) for a in args[:3]))
                    count = len(session.cost.readings)
                    print(f"  Cost analysis on; enter {count} readings with "
                          f"'reading <1-{count}> <O2> <CO2>'")

            elif cmd == "reading":
                if len(args) < 3:
                    print("  Usage: reading <n> <O2> <CO2>")
                else:
                    session.set_reading(int(args[0]) - 1, float(args[1]), float(args[2]))
                    print(f"  Reading {args[0]} stored")

            elif cmd == "nocost":
                session.disable_cost_analysis()
                print("  Cost analysis off")

            # ─────────────────────────────────────────────────────────────
            # Calculation
            # ─────────────────────────────────────────────────────────────
            elif cmd == "calc":
                cmd_calc(session)

            elif cmd == "json":
                if session.last_result is None:
                    print("  No result yet; run 'calc' first")
                else:
                    print(result_to_json(session.last_result))

            # ─────────────────────────────────────────────────────────────
            # Unknown command
            # ─────────────────────────────────────────────────────────────
            else:
                print(f"  Unknown command: {cmd}")
                print("  Type 'help' for available commands")

        except KeyboardInterrupt:
            print("\n  Use 'quit' to exit")

        except EOFError:
            print("\nBye.")
            break

        except EngineError as e:
            print(f"  Calculation error [{e.code}]: {e}")

        except KeyError as e:
            print(f"  Error: {e.args[0]}")

        except (ValueError, IndexError, RuntimeError) as e:
            print(f"  Error: {e}")


def run_batch(
    request_path: str,
    catalog: FuelCatalog,
    config: EngineConfig,
    as_json: bool = False,
) -> int:
    """
    Calculate one request file and print the outcome.

    Returns:
        Exit code: 0 on success, 1 on a rejected request
    """
    try:
        mixture, conditions = request_from_json(request_path, catalog)
        result = compute(mixture, conditions, config)
    except EngineError as e:
        logger.error(f"Request rejected: [{e.code}] {e}")
        if as_json:
            print(error_to_json(e))
        else:
            print(f"Error [{e.code}]: {e}")
        return 1

    if as_json:
        print(result_to_json(result))
    else:
        print(format_report(result, mixture))
    return 0


def build_config(args: argparse.Namespace) -> EngineConfig:
    config = EngineConfig.from_json(args.config) if args.config else DEFAULT_CONFIG
    overrides = {}
    if args.hours_per_week is not None:
        overrides["hours_per_week"] = args.hours_per_week
    if args.reject_mixed_phases:
        overrides["phase_policy"] = PhasePolicy.REJECT
    return config.replace(**overrides) if overrides else config


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Combustion Calculator - Command Line Interface",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  combustion-calc                              Interactive shell
  combustion-calc --request run.json           Text report for a request
  combustion-calc --request run.json --json    JSON result
  combustion-calc --catalog fuels.json --list-fuels
        """,
    )

    parser.add_argument(
        "--request",
        type=str,
        help="JSON request file to calculate (batch mode)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the batch result as JSON",
    )
    parser.add_argument(
        "--list-fuels",
        action="store_true",
        help="List the fuel catalog and exit",
    )
    parser.add_argument(
        "--catalog",
        type=str,
        help="Additional JSON fuel catalog",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="JSON file overriding engine constants",
    )
    parser.add_argument(
        "--hours-per-week",
        type=float,
        default=None,
        help="Operating hours for weekly cost figures (default: 40)",
    )
    parser.add_argument(
        "--reject-mixed-phases",
        action="store_true",
        help="Reject mixtures combining gas, liquid and solid fuels",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)
    configure_logging(args.debug)

    try:
        config = build_config(args)
        catalog = load_catalog(args.catalog) if args.catalog else FuelCatalog.with_builtin_fuels()
    except (OSError, ValueError) as e:
        # json.JSONDecodeError and EngineError are ValueErrors
        print(f"Error: {e}")
        return 1

    if args.list_fuels:
        print_fuels(catalog)
        return 0

    if args.request:
        try:
            return run_batch(args.request, catalog, config, as_json=args.json)
        except (OSError, json.JSONDecodeError) as e:
            print(f"Error reading {args.request}: {e}")
            return 1

    print_banner()
    run_interactive(CalculationSession(catalog=catalog, config=config))
    return 0


if __name__ == "__main__":
    sys.exit(main())
