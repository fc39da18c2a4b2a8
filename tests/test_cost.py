"""Tests for the fuel-cost sweep."""

import numpy as np
import pytest

from combustion_calc.combustion.config import EngineConfig
from combustion_calc.combustion.cost import excess_air_from_o2
from combustion_calc.combustion.engine import compute
from combustion_calc.core.conditions import CostAnalysisParameters, ProcessConditions
from combustion_calc.core.fuels import DIESEL, METHANE
from combustion_calc.core.mixture import Mixture

X_O2 = 0.2095
METHANE_CO2_MAX = 100.0 / (1.0 + 2.0 * (1 - X_O2) / X_O2)

READINGS = [
    (2.0, 10.5),
    (2.5, 10.2),
    (3.0, 9.9),
    (3.5, 9.6),
    (4.0, 9.3),
    (4.5, 9.0),
    (5.0, 8.7),
    (5.5, 8.4),
    (6.0, 8.1),
    (6.5, 7.8),
]


def cost_conditions(readings=READINGS, unit_cost=0.5, low=5.0, high=14.0):
    params = CostAnalysisParameters.from_readings(unit_cost, low, high, readings)
    return ProcessConditions(cost=params)


class TestCostSweep:
    """Tests for a methane sweep."""

    @pytest.fixture
    def analysis(self):
        return compute(Mixture.single(METHANE), cost_conditions()).cost_analysis

    def test_flow_points(self, analysis):
        """Test ten evenly spaced flows from min to max."""
        flows = [p.flow_rate for p in analysis.points]
        assert flows == pytest.approx(list(np.linspace(5.0, 14.0, 10)))
        assert analysis.flow_unit == "m³/h"

    def test_stoichiometric_co2(self, analysis):
        """Test CO2max does not depend on the flow."""
        for point in analysis.points:
            assert point.stoich_co2_percent == pytest.approx(METHANE_CO2_MAX)
            assert point.stoich_co2_flow == pytest.approx(point.fuel_molar_flow)

    def test_efficiency(self, analysis):
        """Test efficiency is measured over stoichiometric CO2."""
        first = analysis.points[0]
        assert first.efficiency == pytest.approx(10.5 / METHANE_CO2_MAX * 100.0)
        assert analysis.best_efficiency == pytest.approx(first.efficiency)

    def test_costs(self, analysis):
        """Test point cost is flow over efficiency (in %) times unit cost."""
        for point in analysis.points:
            expected = point.flow_rate / point.efficiency * 0.5
            assert point.hourly_cost == pytest.approx(expected)
            assert point.weekly_cost == pytest.approx(expected * 40.0)
        first = analysis.points[0]
        assert first.hourly_cost == pytest.approx(5.0 / (10.5 / METHANE_CO2_MAX * 100.0) * 0.5)

    def test_weekly_projection(self, analysis):
        """Test the weekly projection sums the point costs over 40 hours."""
        total = sum(p.hourly_cost for p in analysis.points) * 40.0
        assert analysis.weekly_savings == pytest.approx(total)
        assert analysis.weekly_savings == pytest.approx(
            sum(p.weekly_cost for p in analysis.points)
        )

    def test_savings(self, analysis):
        """Test savings against running every point at the best efficiency."""
        best = analysis.best_efficiency
        ideal = sum(p.flow_rate / best * 0.5 for p in analysis.points) * 40.0
        assert analysis.best_efficiency_savings == pytest.approx(analysis.weekly_savings - ideal)
        assert analysis.best_efficiency_savings > 0.0

    def test_excess_air_from_o2(self, analysis):
        """Test the excess air implied by each O2 reading."""
        assert analysis.points[0].excess_air == pytest.approx(2.0 / 19.0 * 100.0)
        assert excess_air_from_o2(0.0) == 0.0

    def test_uniform_readings_save_nothing(self):
        """Test identical readings give zero savings."""
        analysis = compute(
            Mixture.single(METHANE), cost_conditions(readings=[(3.0, 9.0)] * 10)
        ).cost_analysis
        assert analysis.best_efficiency_savings == pytest.approx(0.0, abs=1e-9)
        assert analysis.weekly_savings > 0.0

    def test_hours_per_week(self):
        """Test weekly figures follow the configured hours."""
        config = EngineConfig(hours_per_week=168.0)
        analysis = compute(Mixture.single(METHANE), cost_conditions(), config).cost_analysis
        assert analysis.hours_per_week == 168.0
        point = analysis.points[3]
        assert point.weekly_cost == pytest.approx(point.hourly_cost * 168.0)


class TestMassBasisSweep:
    """Tests for a liquid-fuel sweep."""

    def test_mass_flow_units(self):
        """Test the sweep follows the mixture's flow basis."""
        analysis = compute(Mixture.single(DIESEL), cost_conditions()).cost_analysis
        assert analysis.flow_unit == "kg/h"
        first = analysis.points[0]
        assert first.fuel_molar_flow == pytest.approx((5.0 / 3600.0) / 0.1673)
        assert first.stoich_co2_flow == pytest.approx(12.0 * first.fuel_molar_flow)


class TestReadingsAboveStoichiometric:
    """Tests for CO2 readings higher than stoichiometric combustion allows."""

    def test_reported_as_measured(self):
        """Test efficiency goes over 100 % and cost below flow/100 per unit."""
        readings = [(0.5, METHANE_CO2_MAX + 1.0)] + READINGS[1:]
        analysis = compute(Mixture.single(METHANE), cost_conditions(readings)).cost_analysis
        first = analysis.points[0]
        assert first.efficiency == pytest.approx((METHANE_CO2_MAX + 1.0) / METHANE_CO2_MAX * 100.0)
        assert first.efficiency > 100.0
        assert first.hourly_cost < first.flow_rate / 100.0 * 0.5
        assert analysis.best_efficiency == pytest.approx(first.efficiency)
