"""
Benchmark rate snapshot and effective-rate resolution.

The resolver turns the active mode, rate regime and benchmark strategy into a
single annual percentage that drives monthly compounding.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .inputs import CdiStrategy, SimulationInputs


class RateSnapshot(BaseModel):
    """Last resolved reading of the benchmark feed.

    Snapshots are read-only values: a newer fetch replaces the whole
    snapshot rather than updating it in place.
    """

    current_rate: float = Field(default=0.0, description="Spot CDI, percent p.a.")
    historical_rate: float = Field(
        default=0.0, description="Trailing 24-month CDI average, percent p.a."
    )
    source: str = Field(default="UNKNOWN", description="Raw feed source label")
    fetched_at: Optional[datetime] = Field(
        default=None, description="When the feed was read"
    )

    def benchmark_for(self, strategy: CdiStrategy) -> float:
        """Get the benchmark reading used by a CDI strategy."""
        return self.current_rate if strategy == "SPOT" else self.historical_rate


def opposite_strategy(strategy: CdiStrategy) -> CdiStrategy:
    """SPOT <-> AVERAGE."""
    return "AVERAGE" if strategy == "SPOT" else "SPOT"


class RateResolver:
    """Resolves the effective annual rate for a set of inputs."""

    @staticmethod
    def annualize_monthly_rate(monthly_rate: float) -> float:
        """
        Convert a monthly percentage into its compounded annual equivalent.

        Args:
            monthly_rate: Monthly rate in percent (e.g. 1.0 for 1% a month)

        Returns:
            Annual rate in percent
        """
        return ((1 + monthly_rate / 100) ** 12 - 1) * 100

    @staticmethod
    def fixed_annual_rate(inputs: SimulationInputs) -> float:
        """Annual rate of the FIXED regime in advanced mode."""
        if inputs.rate_type == "MONTHLY":
            return RateResolver.annualize_monthly_rate(inputs.annual_interest_rate)
        return inputs.annual_interest_rate

    @staticmethod
    def effective_annual_rate(
        inputs: SimulationInputs, snapshot: Optional[RateSnapshot] = None
    ) -> float:
        """
        Resolve the annual rate actually used for compounding.

        Args:
            inputs: Current simulation inputs
            snapshot: Latest benchmark snapshot (zeros when not yet fetched)

        Returns:
            Effective annual rate in percent
        """
        if inputs.simulation_mode == "QUICK":
            return inputs.annual_interest_rate
        if inputs.rate_mode == "FIXED":
            return RateResolver.fixed_annual_rate(inputs)

        snapshot = snapshot or RateSnapshot()
        if inputs.rate_source == "MANUAL":
            base = inputs.cdi_value
        else:
            base = snapshot.benchmark_for(inputs.cdi_strategy)
        return base * (inputs.cdi_percent / 100)

    @staticmethod
    def comparison_annual_rate(
        inputs: SimulationInputs, snapshot: Optional[RateSnapshot] = None
    ) -> float:
        """
        Resolve the rate of the benchmark-comparison series.

        In CDI mode the comparison always reads the feed's opposite strategy,
        whatever the rate source; otherwise it equals the effective rate.
        """
        if inputs.simulation_mode == "QUICK" or inputs.rate_mode == "FIXED":
            return RateResolver.effective_annual_rate(inputs, snapshot)

        snapshot = snapshot or RateSnapshot()
        base = snapshot.benchmark_for(opposite_strategy(inputs.cdi_strategy))
        return base * (inputs.cdi_percent / 100)
