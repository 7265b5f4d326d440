"""
Regressive withholding tax on the projected gain.

The bracket is chosen once from the whole horizon and applied to the final
interest; contributions are not tracked as separate lots.
"""

from typing import Tuple

from pydantic import BaseModel, Field

from .projection import round_currency

DAYS_PER_MONTH = 30

# (max holding days, income tax rate in percent)
INCOME_TAX_BRACKETS: Tuple[Tuple[int, float], ...] = (
    (180, 22.5),
    (360, 20.0),
    (720, 17.5),
)
LONG_TERM_TAX_RATE = 15.0

SHORT_TERM_PENALTY_RATE = 50.0


class TaxResult(BaseModel):
    """Tax due on the final interest of a projection."""

    tax_rate: float = Field(..., description="Income tax rate applied, percent")
    tax_amount: float = Field(..., description="Tax withheld on the interest")
    net_total: float = Field(..., description="Final balance after tax")
    net_interest: float = Field(..., description="Interest after tax")
    iof_rate: float = Field(
        default=0.0,
        description="Short-term penalty rate; computed but not applied",
    )


class TaxEngine:
    """Maps a holding period to its bracket and computes net figures."""

    @staticmethod
    def holding_days(months: int) -> int:
        """Approximate holding period in days (30-day months)."""
        return months * DAYS_PER_MONTH

    @staticmethod
    def income_tax_rate(months: int) -> float:
        """
        Get the income tax rate for a holding period.

        Args:
            months: Horizon length in months

        Returns:
            Tax rate in percent: 22.5 up to 180 days, 20 up to 360,
            17.5 up to 720 and 15 beyond
        """
        days = TaxEngine.holding_days(months)
        for max_days, rate in INCOME_TAX_BRACKETS:
            if days <= max_days:
                return rate
        return LONG_TERM_TAX_RATE

    @staticmethod
    def short_term_penalty_rate(months: int) -> float:
        """Penalty rate for redemptions inside the first 30 days."""
        if TaxEngine.holding_days(months) < DAYS_PER_MONTH:
            return SHORT_TERM_PENALTY_RATE
        return 0.0

    @staticmethod
    def calculate(months: int, final_interest: float, final_total: float) -> TaxResult:
        """
        Compute the tax on a projection's final interest.

        The short-term penalty rate is reported in the result but does not
        enter tax_amount.

        Args:
            months: Horizon length in months
            final_interest: Interest of the last chart point
            final_total: Total of the last chart point

        Returns:
            TaxResult with the bracket rate and net figures
        """
        tax_rate = TaxEngine.income_tax_rate(months)
        tax_amount = round_currency(final_interest * (tax_rate / 100))
        return TaxResult(
            tax_rate=tax_rate,
            tax_amount=tax_amount,
            net_total=round_currency(final_total - tax_amount),
            net_interest=round_currency(final_interest - tax_amount),
            iof_rate=TaxEngine.short_term_penalty_rate(months),
        )
