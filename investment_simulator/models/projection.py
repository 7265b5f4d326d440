"""
Month-by-month compound interest projection.

This module builds the chronological wealth series shown by the simulator:
invested capital, accrued interest and total balance for every month of the
horizon, plus a parallel total compounded at a comparison rate.
"""

import math
from typing import List, Optional

from pydantic import BaseModel, Field


def round_currency(value: float) -> float:
    """
    Round to cents with halves going up (toward positive infinity).

    Non-finite values collapse to 0.0 so a degenerate rate can never leak
    NaN or infinity into the series.
    """
    if not math.isfinite(value):
        return 0.0
    return math.floor(value * 100 + 0.5) / 100


class ChartPoint(BaseModel):
    """One month of the projection."""

    month: int = Field(..., ge=1, le=12, description="Month within the year (1-12)")
    year: int = Field(..., ge=0, description="Year offset from the start (0-based)")
    invested: float = Field(..., description="Capital contributed so far")
    interest: float = Field(..., description="Total minus invested")
    total: float = Field(..., description="Balance at the end of the month")
    comparison_total: float = Field(
        ..., description="Balance under the comparison rate"
    )


class Totals(BaseModel):
    """Final figures of a projection, taken from its last point."""

    total_invested: float = Field(..., description="Total capital contributed")
    total_interest: float = Field(..., description="Total interest earned")
    total_amount: float = Field(..., description="Final balance")


class ProjectionSimulator:
    """Compounds a balance monthly over a fixed horizon."""

    @staticmethod
    def monthly_rate(annual_rate: float) -> float:
        """
        Convert an annual percentage into the equivalent monthly factor.

        Uses true compounding, (1 + annual)^(1/12) - 1, not annual / 12.
        Rates below -100% have no real monthly equivalent and yield NaN.

        Args:
            annual_rate: Annual rate in percent

        Returns:
            Monthly rate as a decimal (0.01 for 1%)
        """
        growth = 1 + annual_rate / 100
        if growth < 0:
            return math.nan
        return growth ** (1 / 12) - 1

    @staticmethod
    def _compound_series(
        initial_amount: float,
        monthly_contribution: float,
        monthly_rate: float,
        months: int,
    ) -> List[float]:
        """Balances for months 0..months under one monthly rate."""
        totals = [initial_amount]
        last_total = initial_amount
        for m in range(1, months + 1):
            if monthly_rate == 0:
                total = initial_amount + monthly_contribution * m
            else:
                base = last_total + monthly_contribution
                total = round_currency(base * (1 + monthly_rate))
            totals.append(total)
            last_total = total
        return totals

    @staticmethod
    def simulate(
        initial_amount: float,
        monthly_contribution: float,
        effective_annual_rate: float,
        months: int,
        comparison_annual_rate: Optional[float] = None,
    ) -> List[ChartPoint]:
        """
        Build the projection series.

        Args:
            initial_amount: Balance at month 0
            monthly_contribution: Amount added before each month compounds
            effective_annual_rate: Annual rate in percent for the main series
            months: Horizon length in months (negative values are clamped)
            comparison_annual_rate: Annual rate for comparison_total; defaults
                to the effective rate

        Returns:
            months + 1 chart points in chronological order
        """
        months = max(0, months)
        if comparison_annual_rate is None:
            comparison_annual_rate = effective_annual_rate

        r = ProjectionSimulator.monthly_rate(effective_annual_rate)
        r_comp = ProjectionSimulator.monthly_rate(comparison_annual_rate)

        totals = ProjectionSimulator._compound_series(
            initial_amount, monthly_contribution, r, months
        )
        comparison_totals = ProjectionSimulator._compound_series(
            initial_amount, monthly_contribution, r_comp, months
        )

        points = []
        for m in range(months + 1):
            # Direct formula so contributions carry no rounding drift
            invested = initial_amount + monthly_contribution * m
            total = totals[m]
            points.append(
                ChartPoint(
                    month=(m % 12) + 1,
                    year=m // 12,
                    invested=round_currency(invested),
                    interest=round_currency(total - invested),
                    total=round_currency(total),
                    comparison_total=round_currency(comparison_totals[m]),
                )
            )
        return points

    @staticmethod
    def totals_from(points: List[ChartPoint]) -> Totals:
        """Extract the final totals of a series."""
        if not points:
            return Totals(total_invested=0.0, total_interest=0.0, total_amount=0.0)
        last = points[-1]
        return Totals(
            total_invested=round_currency(last.invested),
            total_interest=round_currency(last.interest),
            total_amount=round_currency(last.total),
        )
