"""Tests for catalog files and request/result serialization."""

import json

import pytest

from combustion_calc.combustion.engine import compute
from combustion_calc.core.conditions import ProcessConditions
from combustion_calc.core.errors import (
    InvalidFuelData,
    InvalidProcessConditions,
    MixtureImbalance,
)
from combustion_calc.core.fuels import METHANE, FuelCatalog, FuelType, make_custom_fuel
from combustion_calc.core.mixture import Mixture
from combustion_calc.io.catalog import (
    fuel_from_dict,
    fuel_to_dict,
    load_catalog,
    save_catalog,
)
from combustion_calc.io.serialization import (
    conditions_from_dict,
    error_to_dict,
    mixture_from_dict,
    request_from_dict,
    request_from_json,
    request_to_dict,
    result_to_dict,
    result_to_json,
)

BIOGAS = {
    "Name": "Biogas",
    "Type": "Gas",
    "Formula": "CH4",
    "MolarMass": 16.04,
    "HeatingValue": 30.0,
    "HHV": 33.0,
}

CONDITIONS = {
    "fuel_temperature": 25,
    "inlet_air_temperature": 25,
    "pressure": 1.013,
    "excess_air": 10,
    "flue_gas_temperature": 150,
    "reference_o2": 3,
    "flow_rate": 10,
}


@pytest.fixture
def catalog():
    return FuelCatalog.with_builtin_fuels()


class TestFuelRecords:
    """Tests for catalog records."""

    def test_elements_from_formula(self):
        """Test counts are parsed when no element keys are given."""
        fuel = fuel_from_dict(BIOGAS)
        assert (fuel.c, fuel.h, fuel.s) == (1.0, 4.0, 0.0)
        assert fuel.fuel_type is FuelType.GAS
        assert fuel.symbol == "CH₄"

    def test_explicit_elements_win(self):
        """Test given element counts are used as-is."""
        fuel = fuel_from_dict({**BIOGAS, "C": 0.6, "H": 2.4, "O": 0.8})
        assert (fuel.c, fuel.h, fuel.o, fuel.n) == (0.6, 2.4, 0.8, 0.0)

    def test_record_roundtrip(self):
        """Test a built-in fuel survives to_dict/from_dict."""
        assert fuel_from_dict(fuel_to_dict(METHANE)) == METHANE

    @pytest.mark.parametrize(
        "change",
        [
            {"Name": ""},
            {"Type": "Plasma"},
            {"MolarMass": None},
            {"HeatingValue": "lots"},
            {"Formula": "NaCl"},
        ],
    )
    def test_bad_records(self, change):
        """Test malformed records raise InvalidFuelData."""
        with pytest.raises(InvalidFuelData):
            fuel_from_dict({**BIOGAS, **change})


class TestCatalogFiles:
    """Tests for loading and saving catalog files."""

    def test_load_extends_builtins(self, tmp_path):
        """Test file fuels are added as custom fuels."""
        path = tmp_path / "fuels.json"
        path.write_text(json.dumps([BIOGAS]), encoding="utf-8")
        catalog = load_catalog(path)
        assert catalog.get("Biogas").heating_value == 30.0
        assert catalog.is_custom("Biogas")
        assert "Methane" in catalog

    def test_load_without_builtins(self, tmp_path):
        """Test a file can replace the built-in fuels."""
        path = tmp_path / "fuels.json"
        path.write_text(json.dumps([BIOGAS]), encoding="utf-8")
        catalog = load_catalog(path, include_builtin=False)
        assert catalog.names() == ["Biogas"]

    def test_duplicate_name(self, tmp_path):
        """Test a file cannot redefine a fuel."""
        path = tmp_path / "fuels.json"
        path.write_text(json.dumps([{**BIOGAS, "Name": "Methane"}]), encoding="utf-8")
        with pytest.raises(InvalidFuelData):
            load_catalog(path)

    def test_not_a_list(self, tmp_path):
        """Test the file must hold a list."""
        path = tmp_path / "fuels.json"
        path.write_text(json.dumps(BIOGAS), encoding="utf-8")
        with pytest.raises(InvalidFuelData):
            load_catalog(path)

    def test_save_custom_only(self, tmp_path, catalog):
        """Test saving only user-defined fuels and loading them back."""
        catalog.register(make_custom_fuel("Propene", "C3H6", "Gas", 45.8, 48.9))
        path = tmp_path / "custom.json"
        save_catalog(catalog, path, custom_only=True)

        records = json.loads(path.read_text(encoding="utf-8"))
        assert [r["Name"] for r in records] == ["Propene"]
        reloaded = load_catalog(path)
        assert reloaded.get("Propene") == catalog.get("Propene")


class TestRequests:
    """Tests for request documents."""

    def test_named_and_inline_fuels(self, catalog):
        """Test fuels by name and by inline record."""
        mixture = mixture_from_dict(
            [
                {"fuel": "methane", "percentage": 90},
                {"fuel": BIOGAS, "percentage": 10},
            ],
            catalog,
        )
        assert [c.fuel.name for c in mixture] == ["Methane", "Biogas"]
        assert mixture.total_percentage == pytest.approx(100.0)

    def test_unknown_fuel(self, catalog):
        """Test unknown names are fuel-data errors."""
        with pytest.raises(InvalidFuelData):
            mixture_from_dict([{"fuel": "Unobtainium", "percentage": 100}], catalog)

    def test_missing_percentage(self, catalog):
        """Test a component needs a percentage."""
        with pytest.raises(MixtureImbalance):
            mixture_from_dict([{"fuel": "Methane"}], catalog)

    def test_missing_condition(self):
        """Test every condition field is required."""
        data = dict(CONDITIONS)
        del data["flow_rate"]
        with pytest.raises(InvalidProcessConditions, match="flow_rate"):
            conditions_from_dict(data)

    def test_non_numeric_condition(self):
        """Test condition values must be numbers."""
        with pytest.raises(InvalidProcessConditions):
            conditions_from_dict({**CONDITIONS, "pressure": "high"})

    def test_cost_readings(self):
        """Test readings as pairs or objects."""
        readings = [[3.0, 9.0]] * 9 + [{"o2": 4.0, "co2": 8.5}]
        conditions = conditions_from_dict(
            {
                **CONDITIONS,
                "relative_humidity": 40,
                "cost": {
                    "fuel_unit_cost": 0.5,
                    "min_flow_rate": 5,
                    "max_flow_rate": 15,
                    "readings": readings,
                },
            }
        )
        assert conditions.relative_humidity == 40.0
        assert len(conditions.cost.readings) == 10
        assert conditions.cost.readings[-1].co2_percent == 8.5

    def test_request_roundtrip(self, catalog):
        """Test request_to_dict output reads back."""
        mixture = Mixture.single(METHANE)
        conditions = ProcessConditions(excess_air=15.0)
        data = json.loads(json.dumps(request_to_dict(mixture, conditions)))
        assert request_from_dict(data, catalog) == (mixture, conditions)

    def test_request_file(self, tmp_path, catalog):
        """Test reading a request from disk."""
        path = tmp_path / "request.json"
        path.write_text(
            json.dumps(
                {"mixture": [{"fuel": "Methane", "percentage": 100}], "conditions": CONDITIONS}
            ),
            encoding="utf-8",
        )
        mixture, conditions = request_from_json(path, catalog)
        assert conditions.pressure == 1.013
        assert mixture.components[0].fuel is METHANE

    def test_request_without_mixture(self, catalog):
        """Test a request must carry a mixture."""
        with pytest.raises(InvalidFuelData):
            request_from_dict({"conditions": CONDITIONS}, catalog)


class TestResponses:
    """Tests for result and error documents."""

    def test_result_document(self):
        """Test results serialize to plain JSON."""
        result = compute(Mixture.single(METHANE), ProcessConditions())
        data = json.loads(result_to_json(result))["result"]
        assert data["flow_basis"] == "volumetric"
        assert data["flame_temperature"] == pytest.approx(result.flame_temperature)
        assert data["volume_dry"]["h2o"] == 0.0
        assert data["cost_analysis"] is None
        assert result_to_dict(result)["result"]["emissions"]["nox_ppm"] == result.nox_ppm

    def test_mass_result_has_null_density(self):
        """Test missing density is written as null."""
        catalog = FuelCatalog.with_builtin_fuels()
        result = compute(Mixture.single(catalog.get("Diesel")), ProcessConditions())
        assert json.loads(result_to_json(result))["result"]["fuel_gas_density"] is None

    def test_error_document(self):
        """Test errors serialize with their code."""
        data = error_to_dict(MixtureImbalance("Fuel percentages sum to 90 %"))
        assert data == {
            "error": {"code": "MixtureImbalance", "message": "Fuel percentages sum to 90 %"}
        }
