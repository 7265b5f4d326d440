"""
Tests for the composed simulation run.
"""

import pytest

from investment_simulator.models.inputs import SimulationInputs
from investment_simulator.models.projection import ProjectionSimulator, round_currency
from investment_simulator.models.rates import RateSnapshot
from investment_simulator.models.simulation.engine import run_simulation
from investment_simulator.models.simulation.result import SimulationResult

SNAPSHOT = RateSnapshot(current_rate=13.65, historical_rate=12.4, source="BCB")


class TestRunSimulation:
    """Test run_simulation end to end."""

    def test_one_year_quick_projection(self, quick_inputs):
        """Test 5000 + 500/month at 12% a year for one year."""
        result = run_simulation(quick_inputs)

        assert isinstance(result, SimulationResult)
        assert result.months == 12
        assert len(result.chart_data) == 13

        r = ProjectionSimulator.monthly_rate(12.0)
        expected_total = 5000.0
        for _ in range(12):
            expected_total = round_currency((expected_total + 500) * (1 + r))

        final = result.chart_data[12]
        assert final.invested == 11000
        assert final.total == expected_total
        assert final.interest == round_currency(expected_total - 11000)

        interest = result.raw_totals.total_interest
        assert interest == final.interest
        assert result.tax_rate == 20.0
        assert result.tax_amount == round_currency(interest * 0.2)
        assert result.net_interest == round_currency(
            interest - round_currency(interest * 0.2)
        )
        assert result.net_total == round_currency(
            expected_total - round_currency(interest * 0.2)
        )
        assert result.iof_rate == 0.0

    def test_totals_match_last_point(self, quick_inputs):
        result = run_simulation(quick_inputs)
        final = result.get_final_point()

        assert result.raw_totals.total_invested == final.invested
        assert result.raw_totals.total_interest == final.interest
        assert result.raw_totals.total_amount == final.total

    def test_zero_years(self):
        """Test the degenerate horizon with the short-term penalty flag."""
        result = run_simulation(SimulationInputs(years=0))

        assert result.months == 0
        assert len(result.chart_data) == 1
        assert result.raw_totals.total_amount == 5000
        assert result.tax_amount == 0.0
        assert result.tax_rate == 22.5
        assert result.iof_rate == 50.0

    def test_cdi_projection_uses_snapshot(self, cdi_inputs):
        """Test that AUTO CDI drives both series from the snapshot."""
        result = run_simulation(cdi_inputs, SNAPSHOT)

        assert result.effective_annual_rate == pytest.approx(13.65 * 1.1)
        assert result.comparison_annual_rate == pytest.approx(12.4 * 1.1)
        assert result.tax_rate == 17.5

        expected = ProjectionSimulator.simulate(
            10000, 1000, 13.65 * 1.1, 24, comparison_annual_rate=12.4 * 1.1
        )
        assert result.chart_data == expected
        assert result.chart_data[-1].total > result.chart_data[-1].comparison_total

    def test_missing_snapshot_reads_as_zero(self, cdi_inputs):
        """Test that an unresolved feed projects at a zero rate."""
        result = run_simulation(cdi_inputs)

        assert result.effective_annual_rate == 0.0
        assert result.raw_totals.total_interest == 0.0
        assert result.raw_totals.total_amount == result.raw_totals.total_invested

    def test_is_pure(self, quick_inputs):
        """Test that the inputs are not mutated and runs are repeatable."""
        before = quick_inputs.model_dump()

        first = run_simulation(quick_inputs, SNAPSHOT)
        second = run_simulation(quick_inputs, SNAPSHOT)

        assert first == second
        assert quick_inputs.model_dump() == before
