"""Tests for the interactive calculation session and the dispatcher."""

import threading
from concurrent.futures import CancelledError

import pytest

from combustion_calc.combustion.config import EngineConfig
from combustion_calc.core.conditions import ProcessConditions
from combustion_calc.core.dispatch import CalculationDispatcher
from combustion_calc.core.errors import InvalidProcessConditions, MixtureImbalance
from combustion_calc.core.fuels import METHANE
from combustion_calc.core.mixture import FlowBasis, Mixture
from combustion_calc.core.session import CalculationSession


class TestCalculationSession:
    """Tests for CalculationSession."""

    @pytest.fixture
    def session(self):
        return CalculationSession()

    def test_add_and_total(self, session):
        """Test fuels keep insertion order and percentages add up."""
        session.add_fuel("Methane", 70)
        session.add_fuel("hydrogen", 30)
        assert [f.name for f, _ in session.fuel_rows()] == ["Methane", "Hydrogen"]
        assert session.total_percentage == pytest.approx(100.0)

    def test_add_duplicate(self, session):
        """Test a fuel can only be added once."""
        session.add_fuel("Methane", 50)
        with pytest.raises(ValueError):
            session.add_fuel("METHANE", 50)

    def test_add_unknown(self, session):
        """Test unknown fuels raise KeyError."""
        with pytest.raises(KeyError):
            session.add_fuel("Unobtainium", 100)

    def test_remove_and_percentage(self, session):
        """Test editing rows by case-insensitive name."""
        session.add_fuel("Methane", 50)
        session.add_fuel("Propane", 50)
        session.remove_fuel("propane")
        session.set_percentage("methane", 100)
        assert session.fuel_rows() == [(METHANE, 100.0)]
        with pytest.raises(KeyError):
            session.remove_fuel("Propane")

    def test_clear(self, session):
        """Test clearing the mixture."""
        session.add_fuel("Methane", 100)
        session.clear_fuels()
        assert session.fuel_rows() == []

    def test_flow_unit_follows_fuels(self, session):
        """Test the unit label switches when a liquid is added."""
        assert session.flow_unit == "m³/h"
        session.add_fuel("Methane", 50)
        assert session.flow_basis is FlowBasis.VOLUMETRIC
        session.add_fuel("Diesel", 50)
        assert session.flow_basis is FlowBasis.MASS
        assert session.flow_unit == "kg/h"

    def test_custom_fuel(self, session):
        """Test custom fuels become available for the mixture."""
        fuel = session.create_custom_fuel("Propene", "C3H6", "Gas", 45.8, 48.9)
        assert session.catalog.is_custom("Propene")
        session.add_fuel("Propene", 100)
        assert session.build_mixture() == Mixture.single(fuel)

    def test_set_condition(self, session):
        """Test changing process conditions."""
        session.set_condition("excess_air", 25)
        session.set_condition("relative_humidity", 50)
        assert session.conditions.excess_air == 25.0
        session.set_condition("relative_humidity", None)
        assert session.conditions.relative_humidity is None

    def test_set_unknown_condition(self, session):
        """Test unknown condition names raise KeyError."""
        with pytest.raises(KeyError):
            session.set_condition("altitude", 100)
        with pytest.raises(ValueError):
            session.set_condition("flow_rate", None)

    def test_calculate(self, session):
        """Test a complete session calculates and keeps the result."""
        session.add_fuel("Methane", 100)
        result = session.calculate()
        assert result.combustion_efficiency == 100.0
        assert session.last_result is result

    def test_calculate_rejected(self, session):
        """Test engine errors propagate and keep the old result."""
        session.add_fuel("Methane", 60)
        session.add_fuel("Propane", 30)
        with pytest.raises(MixtureImbalance):
            session.calculate()
        assert session.last_result is None

    def test_uses_config(self):
        """Test the session passes its config to the engine."""
        session = CalculationSession(config=EngineConfig(o2_fraction_in_air=0.21))
        session.add_fuel("Methane", 100)
        assert session.calculate().air_per_mol_fuel == pytest.approx(2.0 / 0.21)


class TestSessionCostAnalysis:
    """Tests for entering a cost sweep."""

    @pytest.fixture
    def session(self):
        session = CalculationSession()
        session.add_fuel("Methane", 100)
        session.enable_cost_analysis(0.5, 5.0, 14.0)
        return session

    def test_flow_points(self, session):
        """Test ten sweep flows between min and max."""
        points = session.cost_flow_points()
        assert len(points) == 10
        assert points[0] == pytest.approx(5.0)
        assert points[1] == pytest.approx(6.0)
        assert points[-1] == pytest.approx(14.0)

    def test_missing_readings(self, session):
        """Test all readings must be entered."""
        session.set_reading(0, 3.0, 9.0)
        with pytest.raises(InvalidProcessConditions, match="2, 3"):
            session.build_conditions()

    def test_reading_index(self, session):
        """Test readings are addressed 0-9."""
        with pytest.raises(IndexError):
            session.set_reading(10, 3.0, 9.0)

    def test_complete_sweep(self, session):
        """Test a fully entered sweep is calculated."""
        for i in range(10):
            session.set_reading(i, 3.0 + 0.1 * i, 9.5 - 0.1 * i)
        result = session.calculate()
        assert len(result.cost_analysis.points) == 10
        assert result.cost_analysis.weekly_savings > 0.0

    def test_readings_survive_range_change(self, session):
        """Test re-enabling with a new range keeps readings."""
        session.set_reading(0, 3.0, 9.0)
        session.enable_cost_analysis(0.6, 4.0, 13.0)
        assert session.cost.readings[0].o2_percent == 3.0

    def test_disable(self, session):
        """Test turning the sweep off."""
        session.disable_cost_analysis()
        assert session.build_conditions().cost is None
        assert session.cost_flow_points() == []
        with pytest.raises(RuntimeError):
            session.set_reading(0, 3.0, 9.0)


class TestCalculationDispatcher:
    """Tests for background calculations."""

    def test_future_result(self):
        """Test a submitted calculation resolves to its result."""
        with CalculationDispatcher() as dispatcher:
            future = dispatcher.submit(Mixture.single(METHANE), ProcessConditions())
            result = future.result(timeout=10)
        assert result.combustion_efficiency == 100.0

    def test_future_error(self):
        """Test engine errors surface from the future."""
        mixture = Mixture.from_pairs([(METHANE, 90.0)])
        with CalculationDispatcher() as dispatcher:
            future = dispatcher.submit(mixture, ProcessConditions())
            with pytest.raises(MixtureImbalance):
                future.result(timeout=10)

    def test_callbacks(self):
        """Test results and errors reach their callbacks."""
        done = threading.Event()
        outcomes = []

        def on_result(result):
            outcomes.append(("result", result.combustion_efficiency))

        def on_error(error):
            outcomes.append(("error", error.code))
            done.set()

        with CalculationDispatcher() as dispatcher:
            dispatcher.submit_with_callbacks(
                Mixture.single(METHANE), ProcessConditions(), on_result, on_error
            )
            dispatcher.submit_with_callbacks(
                Mixture.from_pairs([(METHANE, 90.0)]), ProcessConditions(), on_result, on_error
            )
            assert done.wait(timeout=10)

        assert outcomes == [("result", 100.0), ("error", "MixtureImbalance")]

    def test_cancelled_reaches_on_error(self):
        """Test a calculation cancelled in the queue is reported to on_error."""
        release = threading.Event()
        outcomes = []

        class BlockingEngine:
            def compute(self, mixture, conditions):
                release.wait(timeout=10)
                return None

        dispatcher = CalculationDispatcher(engine=BlockingEngine())
        try:
            dispatcher.submit(Mixture.single(METHANE), ProcessConditions())
            queued = dispatcher.submit_with_callbacks(
                Mixture.single(METHANE),
                ProcessConditions(),
                lambda result: outcomes.append(("result", result)),
                lambda error: outcomes.append(("error", type(error))),
            )
            assert queued.cancel()
        finally:
            release.set()
            dispatcher.shutdown()

        assert outcomes == [("error", CancelledError)]
