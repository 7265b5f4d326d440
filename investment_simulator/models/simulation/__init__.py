"""
Simulation composition module.

Key Components:
- protocols: Protocol interfaces for collaborators the engine depends on
- result: Result model exposed to the rest of the application
- engine: Pure composition of rate resolution, projection and tax
"""

from .engine import run_simulation
from .protocols import RateProvider
from .result import SimulationResult

__all__ = [
    "RateProvider",
    "SimulationResult",
    "run_simulation",
]
