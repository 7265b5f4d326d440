"""
Simulation inputs for the investment simulator.

This module defines the input bundle consumed by the projection engine and the
quick/advanced mode state machine that keeps the quick-mode rate field
internally consistent.
"""

import math
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

RateType = Literal["MONTHLY", "YEARLY"]
RateMode = Literal["FIXED", "CDI"]
CdiStrategy = Literal["SPOT", "AVERAGE"]
RateSource = Literal["MANUAL", "AUTO"]
SimulationMode = Literal["QUICK", "ADVANCED"]
ProfitabilityType = Literal["NOMINAL", "REAL"]

DEFAULT_CDI_RATE = 12.15


class SimulationInputs(BaseModel):
    """Everything the engine reads to build a projection.

    The engine performs no validation of its own: numeric fields are expected
    to be finite, and coercion of user edits is the caller's job.
    """

    initial_amount: float = Field(default=5000.0, description="Starting balance")
    monthly_contribution: float = Field(
        default=500.0, description="Amount added at the start of every month"
    )
    annual_interest_rate: float = Field(
        default=12.0, description="Fixed rate in percent (per rate_type period)"
    )
    years: float = Field(default=5, description="Simulation horizon in years")
    rate_type: RateType = Field(
        default="YEARLY", description="Period the fixed rate is quoted in"
    )
    profitability_type: ProfitabilityType = Field(
        default="NOMINAL", description="Display preference; does not alter math"
    )
    rate_mode: RateMode = Field(
        default="FIXED", description="Fixed rate or benchmark-indexed (CDI)"
    )
    cdi_value: float = Field(
        default=DEFAULT_CDI_RATE, description="Manual CDI benchmark in percent"
    )
    cdi_percent: float = Field(
        default=100.0, description="Share of the benchmark earned, in percent"
    )
    cdi_strategy: CdiStrategy = Field(
        default="SPOT", description="Benchmark reading: spot or 24m average"
    )
    rate_source: RateSource = Field(
        default="MANUAL", description="Use manual cdi_value or the live feed"
    )
    simulation_mode: SimulationMode = Field(
        default="QUICK", description="Quick single-rate mode or advanced mode"
    )

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    @property
    def months(self) -> int:
        """Number of monthly periods in the horizon, clamped at zero."""
        return max(0, math.floor(self.years * 12))

    def with_changes(self, **changes: Any) -> "SimulationInputs":
        """Return a validated copy with the given fields replaced."""
        data = self.model_dump()
        data.update(changes)
        return SimulationInputs.model_validate(data)

    def with_mode(self, mode: SimulationMode) -> "SimulationInputs":
        """
        Transition the simulation mode.

        Entering QUICK (including re-entering it) resets the advanced fields
        that quick mode cannot display: rate_mode, cdi_strategy and rate_type.
        Entering ADVANCED changes nothing else.

        Args:
            mode: Target simulation mode

        Returns:
            New inputs in the requested mode
        """
        if mode == "QUICK":
            return self.with_changes(
                simulation_mode="QUICK",
                rate_mode="FIXED",
                cdi_strategy="SPOT",
                rate_type="YEARLY",
            )
        return self.with_changes(simulation_mode=mode)
