"""Tests for calculation preconditions and the error taxonomy."""

import math
from dataclasses import replace

import pytest

from combustion_calc.combustion.config import EngineConfig, PhasePolicy
from combustion_calc.combustion.engine import compute
from combustion_calc.core.conditions import CostAnalysisParameters, ProcessConditions
from combustion_calc.core.errors import (
    ERROR_TYPES,
    ComputationDegenerate,
    EngineError,
    IncompatibleFuelPhases,
    InvalidFuelComposition,
    InvalidFuelData,
    InvalidProcessConditions,
    MixtureImbalance,
)
from combustion_calc.core.fuels import (
    DIESEL,
    HYDROGEN,
    METHANE,
    PROPANE,
    WOOD,
    make_custom_fuel,
)
from combustion_calc.core.mixture import Mixture


@pytest.fixture
def methane():
    return Mixture.single(METHANE)


def readings(count=10):
    return [(3.0, 9.0)] * count


class TestErrorTypes:
    """Tests for the error classes themselves."""

    def test_codes_are_registered(self):
        """Test every error code maps back to its class."""
        for code, cls in ERROR_TYPES.items():
            assert cls.code == code
            assert issubclass(cls, EngineError)

    def test_to_dict(self):
        """Test errors serialize to code and message."""
        error = MixtureImbalance("sum is 90")
        assert error.to_dict() == {"code": "MixtureImbalance", "message": "sum is 90"}

    def test_phase_error_is_fuel_data_error(self):
        """Test phase rejection can be caught as InvalidFuelData."""
        assert issubclass(IncompatibleFuelPhases, InvalidFuelData)

    def test_errors_are_value_errors(self):
        """Test callers can catch ValueError."""
        assert issubclass(EngineError, ValueError)


class TestMixtureValidation:
    """Tests for fuel and percentage checks."""

    def test_empty_mixture(self):
        """Test an empty mixture is rejected."""
        with pytest.raises(InvalidFuelData):
            compute(Mixture(), ProcessConditions())

    def test_percentages_short_of_100(self):
        """Test 60 + 30 does not balance."""
        mix = Mixture.from_pairs([(METHANE, 60.0), (PROPANE, 30.0)])
        with pytest.raises(MixtureImbalance):
            compute(mix, ProcessConditions())

    def test_percentages_within_tolerance(self):
        """Test a rounding error under the tolerance is accepted."""
        mix = Mixture.from_pairs([(METHANE, 33.333), (PROPANE, 33.333), (HYDROGEN, 33.333)])
        compute(mix, ProcessConditions())

    def test_percentage_out_of_range(self):
        """Test negative percentages are rejected even if the sum is 100."""
        mix = Mixture.from_pairs([(METHANE, 120.0), (PROPANE, -20.0)])
        with pytest.raises(MixtureImbalance):
            compute(mix, ProcessConditions())

    def test_zero_molar_mass(self):
        """Test a fuel without molar mass is rejected."""
        bad = replace(METHANE, name="Broken", molar_mass=0.0)
        with pytest.raises(InvalidFuelData):
            compute(Mixture.single(bad), ProcessConditions())

    def test_negative_element_count(self):
        """Test negative element counts are rejected."""
        bad = replace(METHANE, name="Broken", h=-1.0)
        with pytest.raises(InvalidFuelData):
            compute(Mixture.single(bad), ProcessConditions())

    def test_ash_and_moisture_leave_nothing(self):
        """Test ash plus moisture of 100 % is rejected."""
        bad = replace(WOOD, name="Mud", ash_content=60.0, moisture_content=40.0)
        with pytest.raises(InvalidFuelData):
            compute(Mixture.single(bad), ProcessConditions())

    def test_no_oxygen_demand(self):
        """Test a fuel that needs no oxygen is rejected."""
        co2 = make_custom_fuel("Carbon Dioxide", "CO2", "Gas", 0.0, 0.0)
        with pytest.raises(InvalidFuelComposition):
            compute(Mixture.single(co2), ProcessConditions())

    def test_mixed_phases_rejected_by_policy(self):
        """Test the reject policy refuses gas plus liquid."""
        config = EngineConfig(phase_policy=PhasePolicy.REJECT)
        mix = Mixture.from_pairs([(METHANE, 50.0), (DIESEL, 50.0)])
        with pytest.raises(IncompatibleFuelPhases):
            compute(mix, ProcessConditions(), config)

    def test_single_phase_allowed_by_policy(self, methane):
        """Test the reject policy still accepts single-phase mixtures."""
        config = EngineConfig(phase_policy="reject")
        compute(methane, ProcessConditions(), config)


class TestConditionValidation:
    """Tests for process-condition checks."""

    @pytest.mark.parametrize(
        "field,value",
        [
            ("flow_rate", 0.0),
            ("flow_rate", -5.0),
            ("pressure", 0.0),
            ("fuel_temperature", -300.0),
            ("inlet_air_temperature", -273.15),
            ("flue_gas_temperature", -300.0),
            ("excess_air", -150.0),
            ("reference_o2", 21.0),
            ("reference_o2", -1.0),
            ("relative_humidity", 120.0),
            ("excess_air", math.nan),
            ("pressure", math.inf),
            ("flow_rate", None),
        ],
    )
    def test_out_of_range(self, methane, field, value):
        """Test each bad field raises InvalidProcessConditions."""
        conditions = replace(ProcessConditions(), **{field: value})
        with pytest.raises(InvalidProcessConditions):
            compute(methane, conditions)

    def test_cold_humid_air(self, methane):
        """Test humid air below the correlation range is rejected."""
        conditions = ProcessConditions(inlet_air_temperature=-90.0, relative_humidity=50.0)
        with pytest.raises(InvalidProcessConditions):
            compute(methane, conditions)

    def test_cold_dry_air_is_fine(self, methane):
        """Test dry air has no lower limit besides absolute zero."""
        compute(methane, ProcessConditions(inlet_air_temperature=-90.0))


class TestCostValidation:
    """Tests for cost-analysis input checks."""

    def conditions(self, **overrides):
        params = dict(fuel_unit_cost=0.5, min_flow_rate=5.0, max_flow_rate=15.0)
        params.update(overrides)
        pts = params.pop("readings", readings())
        cost = CostAnalysisParameters.from_readings(readings=pts, **params)
        return ProcessConditions(cost=cost)

    def test_valid(self, methane):
        """Test a complete sweep is accepted."""
        result = compute(methane, self.conditions())
        assert result.cost_analysis is not None

    def test_max_not_above_min(self, methane):
        """Test max flow must exceed min flow."""
        with pytest.raises(InvalidProcessConditions):
            compute(methane, self.conditions(max_flow_rate=5.0))

    def test_min_not_positive(self, methane):
        """Test min flow must be positive."""
        with pytest.raises(InvalidProcessConditions):
            compute(methane, self.conditions(min_flow_rate=0.0))

    def test_negative_cost(self, methane):
        """Test fuel cost cannot be negative."""
        with pytest.raises(InvalidProcessConditions):
            compute(methane, self.conditions(fuel_unit_cost=-1.0))

    def test_wrong_reading_count(self, methane):
        """Test exactly ten readings are required."""
        with pytest.raises(InvalidProcessConditions):
            compute(methane, self.conditions(readings=readings(9)))

    def test_reading_out_of_range(self, methane):
        """Test readings must be percentages."""
        pts = readings()
        pts[4] = (3.0, 120.0)
        with pytest.raises(InvalidProcessConditions):
            compute(methane, self.conditions(readings=pts))

    def test_hydrogen_has_no_co2(self):
        """Test a carbon-free fuel cannot be costed from CO2."""
        with pytest.raises(ComputationDegenerate):
            compute(Mixture.single(HYDROGEN), self.conditions())

    def test_zero_co2_reading(self, methane):
        """Test a 0 % CO2 reading is degenerate."""
        pts = readings()
        pts[0] = (3.0, 0.0)
        with pytest.raises(ComputationDegenerate):
            compute(methane, self.conditions(readings=pts))
