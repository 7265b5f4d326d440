"""Domain models for the investment simulator."""

from .inputs import SimulationInputs
from .presets import Preset, PresetLibrary
from .projection import ChartPoint, ProjectionSimulator, Totals, round_currency
from .rates import RateResolver, RateSnapshot, opposite_strategy
from .tax import TaxEngine, TaxResult

__all__ = [
    "SimulationInputs",
    "Preset",
    "PresetLibrary",
    "ChartPoint",
    "ProjectionSimulator",
    "Totals",
    "round_currency",
    "RateResolver",
    "RateSnapshot",
    "opposite_strategy",
    "TaxEngine",
    "TaxResult",
]
