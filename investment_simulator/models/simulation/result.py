"""
Simulation result model.

The SimulationResult is the entire public surface of the engine: the chart
series, the final totals, the tax figures and the rates that produced them.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, model_validator

from investment_simulator.models.projection import ChartPoint, Totals


class SimulationResult(BaseModel):
    """
    Output of one full projection run.

    Example:
        ```python
        result = run_simulation(inputs, snapshot)
        result.chart_data[-1].total == result.raw_totals.total_amount
        result.net_total  # final balance after withholding tax
        ```
    """

    chart_data: List[ChartPoint] = Field(
        ..., description="Monthly points, month 0 through the horizon"
    )
    raw_totals: Totals = Field(..., description="Totals of the last point")

    tax_rate: float = Field(..., description="Income tax bracket, percent")
    tax_amount: float = Field(..., description="Tax withheld on final interest")
    net_total: float = Field(..., description="Final balance after tax")
    net_interest: float = Field(..., description="Final interest after tax")
    iof_rate: float = Field(
        default=0.0, description="Short-term penalty rate (informational)"
    )

    effective_annual_rate: float = Field(
        ..., description="Annual rate driving the main series, percent"
    )
    comparison_annual_rate: float = Field(
        ..., description="Annual rate driving comparison_total, percent"
    )
    months: int = Field(..., ge=0, description="Horizon length in months")

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def validate_series_length(self) -> "SimulationResult":
        """The series always holds one point per month plus month 0."""
        if len(self.chart_data) != self.months + 1:
            raise ValueError(
                f"chart_data must have {self.months + 1} points, "
                f"got {len(self.chart_data)}"
            )
        return self

    def get_final_point(self) -> ChartPoint:
        """Get the last point of the series."""
        return self.chart_data[-1]

    def get_year_end_points(self) -> List[ChartPoint]:
        """Get month 0 and the point closing each full year."""
        return [
            point
            for index, point in enumerate(self.chart_data)
            if index % 12 == 0
        ]

    def create_summary(self) -> Dict[str, Any]:
        """Create a flat summary of the run."""
        return {
            "months": self.months,
            "effective_annual_rate": self.effective_annual_rate,
            "comparison_annual_rate": self.comparison_annual_rate,
            "total_invested": self.raw_totals.total_invested,
            "total_interest": self.raw_totals.total_interest,
            "total_amount": self.raw_totals.total_amount,
            "tax_rate": self.tax_rate,
            "tax_amount": self.tax_amount,
            "net_total": self.net_total,
            "net_interest": self.net_interest,
        }
