"""
Quick-start scenarios for the simulator.

Presets only overwrite input fields; they do no computation of their own.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .inputs import SimulationInputs


class Preset(BaseModel):
    """A named bundle of input values."""

    key: str = Field(..., description="Preset identifier")
    label: str = Field(..., description="Human-readable name")
    initial_amount: float = Field(..., ge=0, description="Starting balance")
    monthly_contribution: float = Field(..., ge=0, description="Monthly deposit")
    annual_interest_rate: float = Field(..., description="Annual rate, percent")
    years: int = Field(..., ge=0, description="Horizon in years")


class PresetLibrary:
    """Registry of the built-in presets."""

    PRESETS: Dict[str, Preset] = {
        "MILLION": Preset(
            key="MILLION",
            label="First million",
            initial_amount=10000,
            monthly_contribution=2500,
            annual_interest_rate=12,
            years=15,
        ),
        "HOUSE": Preset(
            key="HOUSE",
            label="House",
            initial_amount=20000,
            monthly_contribution=3000,
            annual_interest_rate=10,
            years=8,
        ),
        "RETIRE": Preset(
            key="RETIRE",
            label="Retirement income",
            initial_amount=0,
            monthly_contribution=1000,
            annual_interest_rate=12,
            years=30,
        ),
    }

    @classmethod
    def list_presets(cls) -> List[Preset]:
        """Get all presets in display order."""
        return list(cls.PRESETS.values())

    @classmethod
    def get(cls, key: str) -> Optional[Preset]:
        """Look up a preset by key (case-insensitive)."""
        return cls.PRESETS.get(key.upper())

    @classmethod
    def apply(cls, inputs: SimulationInputs, key: str) -> SimulationInputs:
        """
        Apply a preset to a set of inputs.

        Args:
            inputs: Inputs to start from
            key: Preset identifier (MILLION, HOUSE or RETIRE)

        Returns:
            New inputs with the preset values and a YEARLY rate type

        Raises:
            ValueError: If the preset does not exist
        """
        preset = cls.get(key)
        if preset is None:
            raise ValueError(f"Unknown preset: {key}")
        return inputs.with_changes(
            initial_amount=preset.initial_amount,
            monthly_contribution=preset.monthly_contribution,
            annual_interest_rate=preset.annual_interest_rate,
            years=preset.years,
            rate_type="YEARLY",
        )
