"""
Composition of the three pure stages: rate resolution, projection and tax.
"""

from typing import Optional

from investment_simulator.models.inputs import SimulationInputs
from investment_simulator.models.projection import ProjectionSimulator
from investment_simulator.models.rates import RateResolver, RateSnapshot
from investment_simulator.models.simulation.result import SimulationResult
from investment_simulator.models.tax import TaxEngine


def run_simulation(
    inputs: SimulationInputs, snapshot: Optional[RateSnapshot] = None
) -> SimulationResult:
    """
    Rebuild the full projection from the current inputs and rate snapshot.

    Every call is independent: nothing is cached or carried between calls.

    Args:
        inputs: Simulation inputs owned by the caller
        snapshot: Last resolved benchmark snapshot; zeros when omitted

    Returns:
        SimulationResult with the series, totals and tax figures
    """
    snapshot = snapshot or RateSnapshot()
    effective_rate = RateResolver.effective_annual_rate(inputs, snapshot)
    comparison_rate = RateResolver.comparison_annual_rate(inputs, snapshot)
    months = inputs.months

    chart_data = ProjectionSimulator.simulate(
        initial_amount=inputs.initial_amount,
        monthly_contribution=inputs.monthly_contribution,
        effective_annual_rate=effective_rate,
        months=months,
        comparison_annual_rate=comparison_rate,
    )
    totals = ProjectionSimulator.totals_from(chart_data)
    final = chart_data[-1]
    tax = TaxEngine.calculate(months, final.interest, final.total)

    return SimulationResult(
        chart_data=chart_data,
        raw_totals=totals,
        tax_rate=tax.tax_rate,
        tax_amount=tax.tax_amount,
        net_total=tax.net_total,
        net_interest=tax.net_interest,
        iof_rate=tax.iof_rate,
        effective_annual_rate=effective_rate,
        comparison_annual_rate=comparison_rate,
        months=months,
    )
