"""
Fuel catalog files.

A catalog file is a JSON list of fuel records:

    [
      {"Name": "Methane", "Type": "Gas", "Formula": "CH4", "Symbol": "CH₄",
       "MolarMass": 16.04, "C": 1, "H": 4, "O": 0, "N": 0, "S": 0,
       "AshContent": 0, "MoistureContent": 0,
       "HeatingValue": 50.0, "HHV": 55.5}
    ]

When all element counts are missing they are taken from the formula.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from combustion_calc.core.errors import InvalidFuelData
from combustion_calc.core.fuels import Fuel, FuelCatalog, FuelType, parse_formula

logger = logging.getLogger(__name__)

ELEMENT_KEYS = ("C", "H", "O", "N", "S")


def _number(record: Mapping[str, Any], key: str, default: float | None = None) -> float:
    value = record.get(key, default)
    if value is None:
        raise InvalidFuelData(f"Fuel record '{record.get('Name', '?')}' is missing '{key}'")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidFuelData(
            f"Fuel record '{record.get('Name', '?')}': '{key}' is not a number ({value!r})"
        ) from None


def fuel_from_dict(record: Mapping[str, Any]) -> Fuel:
    """
    Build a Fuel from a catalog record.

    Raises:
        InvalidFuelData: If a required field is missing or malformed
    """
    if not isinstance(record, Mapping):
        raise InvalidFuelData(f"Fuel record must be an object, got {type(record).__name__}")

    name = str(record.get("Name", "")).strip()
    formula = str(record.get("Formula", "")).strip()
    if not name or not formula:
        raise InvalidFuelData("Fuel record needs 'Name' and 'Formula'")

    try:
        fuel_type = FuelType.parse(record.get("Type", ""))
    except ValueError as e:
        raise InvalidFuelData(f"Fuel record '{name}': {e}") from None

    if any(key in record for key in ELEMENT_KEYS):
        counts = {key: _number(record, key, 0.0) for key in ELEMENT_KEYS}
    else:
        try:
            parsed = parse_formula(formula)
        except ValueError as e:
            raise InvalidFuelData(f"Fuel record '{name}': {e}") from None
        counts = {key: parsed.get(key, 0.0) for key in ELEMENT_KEYS}

    return Fuel(
        name=name,
        formula=formula,
        fuel_type=fuel_type,
        molar_mass=_number(record, "MolarMass"),
        c=counts["C"],
        h=counts["H"],
        o=counts["O"],
        n=counts["N"],
        s=counts["S"],
        ash_content=_number(record, "AshContent", 0.0),
        moisture_content=_number(record, "MoistureContent", 0.0),
        heating_value=_number(record, "HeatingValue"),
        hhv=_number(record, "HHV", 0.0),
        symbol=str(record.get("Symbol") or ""),
    )


def fuel_to_dict(fuel: Fuel) -> dict[str, Any]:
    """Catalog record of a fuel."""
    return {
        "Name": fuel.name,
        "Type": fuel.fuel_type.value,
        "Formula": fuel.formula,
        "Symbol": fuel.symbol,
        "MolarMass": fuel.molar_mass,
        "C": fuel.c,
        "H": fuel.h,
        "O": fuel.o,
        "N": fuel.n,
        "S": fuel.s,
        "AshContent": fuel.ash_content,
        "MoistureContent": fuel.moisture_content,
        "HeatingValue": fuel.heating_value,
        "HHV": fuel.hhv,
    }


def load_catalog(filepath: str | Path, include_builtin: bool = True) -> FuelCatalog:
    """
    Load fuels from a JSON catalog file.

    Args:
        filepath: Path to the JSON file
        include_builtin: Start from the built-in fuels

    Returns:
        FuelCatalog; file fuels are registered as custom fuels

    Raises:
        InvalidFuelData: If the file is not a list of valid records or
            repeats a fuel name
    """
    with open(filepath, encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, list):
        raise InvalidFuelData(f"{filepath}: expected a JSON list of fuel records")

    catalog = FuelCatalog.with_builtin_fuels() if include_builtin else FuelCatalog()
    extend_catalog(catalog, data)
    logger.info(f"Loaded {len(data)} fuel(s) from {filepath}")
    return catalog


def extend_catalog(catalog: FuelCatalog, records: list[Mapping[str, Any]]) -> list[Fuel]:
    """Register every record of a parsed catalog document."""
    added = []
    for record in records:
        fuel = fuel_from_dict(record)
        try:
            added.append(catalog.register(fuel))
        except ValueError as e:
            raise InvalidFuelData(str(e)) from None
    return added


def save_catalog(catalog: FuelCatalog, filepath: str | Path, custom_only: bool = False) -> None:
    """Write a catalog (or only its custom fuels) as JSON."""
    fuels = catalog.custom_fuels() if custom_only else catalog.fuels()
    with open(filepath, "w", encoding="utf-8") as fh:
        json.dump([fuel_to_dict(f) for f in fuels], fh, indent=2, ensure_ascii=False)
    logger.info(f"Saved {len(fuels)} fuel(s) to {filepath}")
