"""Reading and writing fuel catalogs, requests and results."""

from combustion_calc.io.catalog import (
    fuel_from_dict,
    fuel_to_dict,
    load_catalog,
    save_catalog,
)
from combustion_calc.io.serialization import (
    error_to_dict,
    request_from_dict,
    request_from_json,
    request_to_dict,
    result_to_dict,
    result_to_json,
)

__all__ = [
    "fuel_from_dict",
    "fuel_to_dict",
    "load_catalog",
    "save_catalog",
    "error_to_dict",
    "request_from_dict",
    "request_from_json",
    "request_to_dict",
    "result_to_dict",
    "result_to_json",
]
