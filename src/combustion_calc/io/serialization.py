"""
JSON encoding of calculation requests and responses.

Request document:

    {
      "mixture": [
        {"fuel": "Methane", "percentage": 90},
        {"fuel": {"Name": "Biogas", "Type": "Gas", ...}, "percentage": 10}
      ],
      "conditions": {
        "fuel_temperature": 25, "inlet_air_temperature": 25,
        "pressure": 1.013, "excess_air": 10, "flue_gas_temperature": 150,
        "reference_o2": 3, "flow_rate": 10, "relative_humidity": 60,
        "cost": {"fuel_unit_cost": 0.5, "min_flow_rate": 5,
                 "max_flow_rate": 15, "readings": [[3.0, 9.5], ...]}
      }
    }

A fuel given by name is looked up in the catalog; an object is read as a
catalog record. Responses are ``{"result": {...}}`` or
``{"error": {"code": ..., "message": ...}}``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from combustion_calc.combustion.results import CombustionResult
from combustion_calc.core.conditions import (
    CombustionReading,
    CostAnalysisParameters,
    ProcessConditions,
)
from combustion_calc.core.errors import (
    EngineError,
    InvalidFuelData,
    InvalidProcessConditions,
    MixtureImbalance,
)
from combustion_calc.core.fuels import FuelCatalog
from combustion_calc.core.mixture import Mixture, MixtureComponent
from combustion_calc.io.catalog import fuel_from_dict

CONDITION_FIELDS = (
    "fuel_temperature",
    "inlet_air_temperature",
    "pressure",
    "excess_air",
    "flue_gas_temperature",
    "reference_o2",
    "flow_rate",
)


def _to_float(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidProcessConditions(f"'{name}' must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidProcessConditions(f"'{name}' must be a number, got {value!r}") from None


def mixture_from_dict(data: Any, catalog: FuelCatalog) -> Mixture:
    """
    Read the ``mixture`` list of a request.

    Raises:
        InvalidFuelData: Unknown fuel name or malformed fuel record
        MixtureImbalance: Missing or non-numeric percentage
    """
    if not isinstance(data, list):
        raise InvalidFuelData("'mixture' must be a list of components")

    components = []
    for i, item in enumerate(data, start=1):
        if not isinstance(item, Mapping) or "fuel" not in item:
            raise InvalidFuelData(f"Mixture component {i} needs a 'fuel'")

        ref = item["fuel"]
        if isinstance(ref, Mapping):
            fuel = fuel_from_dict(ref)
        else:
            try:
                fuel = catalog.get(str(ref))
            except KeyError as e:
                raise InvalidFuelData(e.args[0]) from None

        try:
            percentage = float(item.get("percentage"))
        except (TypeError, ValueError):
            raise MixtureImbalance(
                f"Mixture component {i} ('{fuel.name}') needs a numeric percentage"
            ) from None
        components.append(MixtureComponent(fuel, percentage))
    return Mixture(tuple(components))


def _readings_from_list(data: Any) -> tuple[CombustionReading, ...]:
    if not isinstance(data, list):
        raise InvalidProcessConditions("'readings' must be a list")
    readings = []
    for i, item in enumerate(data, start=1):
        if isinstance(item, Mapping):
            o2, co2 = item.get("o2"), item.get("co2")
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            o2, co2 = item
        else:
            raise InvalidProcessConditions(f"Reading {i} must be [o2, co2] or an object")
        readings.append(
            CombustionReading(_to_float(f"reading {i} o2", o2), _to_float(f"reading {i} co2", co2))
        )
    return tuple(readings)


def cost_from_dict(data: Mapping[str, Any]) -> CostAnalysisParameters:
    """Read the optional ``cost`` object of the conditions."""
    for key in ("fuel_unit_cost", "min_flow_rate", "max_flow_rate"):
        if key not in data:
            raise InvalidProcessConditions(f"Cost analysis is missing '{key}'")
    return CostAnalysisParameters(
        fuel_unit_cost=_to_float("fuel_unit_cost", data["fuel_unit_cost"]),
        min_flow_rate=_to_float("min_flow_rate", data["min_flow_rate"]),
        max_flow_rate=_to_float("max_flow_rate", data["max_flow_rate"]),
        readings=_readings_from_list(data.get("readings", [])),
    )


def conditions_from_dict(data: Any) -> ProcessConditions:
    """
    Read the ``conditions`` object of a request.

    Raises:
        InvalidProcessConditions: Missing or non-numeric field
    """
    if not isinstance(data, Mapping):
        raise InvalidProcessConditions("'conditions' must be an object")

    missing = [key for key in CONDITION_FIELDS if data.get(key) is None]
    if missing:
        raise InvalidProcessConditions(f"Missing process conditions: {', '.join(missing)}")

    values = {key: _to_float(key, data[key]) for key in CONDITION_FIELDS}

    humidity = data.get("relative_humidity")
    if humidity is not None:
        humidity = _to_float("relative_humidity", humidity)

    cost = data.get("cost")
    if cost is not None:
        if not isinstance(cost, Mapping):
            raise InvalidProcessConditions("'cost' must be an object")
        cost = cost_from_dict(cost)

    return ProcessConditions(**values, relative_humidity=humidity, cost=cost)


def conditions_to_dict(conditions: ProcessConditions) -> dict[str, Any]:
    data: dict[str, Any] = {key: getattr(conditions, key) for key in CONDITION_FIELDS}
    data["relative_humidity"] = conditions.relative_humidity
    if conditions.cost is not None:
        cost = conditions.cost
        data["cost"] = {
            "fuel_unit_cost": cost.fuel_unit_cost,
            "min_flow_rate": cost.min_flow_rate,
            "max_flow_rate": cost.max_flow_rate,
            "readings": [[r.o2_percent, r.co2_percent] for r in cost.readings],
        }
    return data


def request_from_dict(
    data: Any,
    catalog: FuelCatalog,
) -> tuple[Mixture, ProcessConditions]:
    """Read a full request document."""
    if not isinstance(data, Mapping):
        raise InvalidProcessConditions("Request must be a JSON object")
    if "mixture" not in data:
        raise InvalidFuelData("Request has no 'mixture'")
    if "conditions" not in data:
        raise InvalidProcessConditions("Request has no 'conditions'")
    return mixture_from_dict(data["mixture"], catalog), conditions_from_dict(data["conditions"])


def request_from_json(
    filepath: str | Path,
    catalog: FuelCatalog,
) -> tuple[Mixture, ProcessConditions]:
    """Read a request document from a JSON file."""
    with open(filepath, encoding="utf-8") as fh:
        data = json.load(fh)
    return request_from_dict(data, catalog)


def request_to_dict(mixture: Mixture, conditions: ProcessConditions) -> dict[str, Any]:
    """Request document with fuels referenced by name."""
    return {
        "mixture": [
            {"fuel": c.fuel.name, "percentage": c.percentage} for c in mixture.components
        ],
        "conditions": conditions_to_dict(conditions),
    }


def result_to_dict(result: CombustionResult) -> dict[str, Any]:
    return {"result": result.to_dict()}


def error_to_dict(error: EngineError) -> dict[str, Any]:
    return {"error": error.to_dict()}


def result_to_json(result: CombustionResult, indent: int | None = 2) -> str:
    return json.dumps(result_to_dict(result), indent=indent, ensure_ascii=False)


def error_to_json(error: EngineError, indent: int | None = 2) -> str:
    return json.dumps(error_to_dict(error), indent=indent, ensure_ascii=False)
