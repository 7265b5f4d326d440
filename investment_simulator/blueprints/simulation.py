"""
Simulation blueprint for the investment simulator.

This module exposes the projection engine, the benchmark rate service and the
preset catalogue as JSON endpoints.
"""

from http import HTTPStatus
from typing import Any, Dict, Optional

from flask import Blueprint, current_app, jsonify, request
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from investment_simulator.models.inputs import SimulationInputs
from investment_simulator.models.presets import PresetLibrary
from investment_simulator.models.rates import RateSnapshot
from investment_simulator.models.simulation.engine import run_simulation

simulation_bp = Blueprint("simulation", __name__, url_prefix="/api")


class SimulationRequest(BaseModel):
    """Body of a simulation request."""

    inputs: SimulationInputs = Field(default_factory=SimulationInputs)
    rates: Optional[RateSnapshot] = Field(
        default=None, description="Resolved benchmark snapshot; zeros when omitted"
    )

    model_config = ConfigDict(extra="forbid")


@simulation_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return (
        jsonify({"detail": exc.errors(include_url=False, include_context=False)}),
        HTTPStatus.UNPROCESSABLE_ENTITY,
    )


@simulation_bp.route("/simulation", methods=["POST"])
def simulate() -> Any:
    """Run a projection for the posted inputs.

    Returns:
        JSON SimulationResult
    """
    raw_payload: Dict[str, Any] = request.get_json(silent=True) or {}
    payload = SimulationRequest.model_validate(raw_payload)
    result = run_simulation(payload.inputs, payload.rates)
    return jsonify(result.model_dump(mode="json"))


@simulation_bp.route("/rates", methods=["GET"])
def get_rates() -> Any:
    """Read the benchmark feed.

    The default provider degrades to the fallback rate, so this endpoint
    answers 200 even when every upstream source is down.
    """
    provider = current_app.extensions["rate_provider"]
    try:
        snapshot = provider.fetch_rates()
    except Exception as e:
        current_app.logger.error(f"Error reading rate feed: {str(e)}")
        return (
            jsonify({"error": "Rate feed unavailable"}),
            HTTPStatus.SERVICE_UNAVAILABLE,
        )

    return jsonify(
        {
            "current_rate": snapshot.current_rate,
            "historical_average_24m": snapshot.historical_rate,
            "source": snapshot.source,
            "last_update": (
                snapshot.fetched_at.isoformat() if snapshot.fetched_at else None
            ),
        }
    )


@simulation_bp.route("/presets", methods=["GET"])
def list_presets() -> Any:
    """List the quick-start presets."""
    return jsonify([preset.model_dump() for preset in PresetLibrary.list_presets()])


@simulation_bp.route("/presets/<string:key>/apply", methods=["POST"])
def apply_preset(key: str) -> Any:
    """Apply a preset to the posted inputs and return the new inputs."""
    if PresetLibrary.get(key) is None:
        return jsonify({"error": f"Unknown preset: {key}"}), HTTPStatus.NOT_FOUND

    raw_payload: Dict[str, Any] = request.get_json(silent=True) or {}
    inputs = SimulationInputs.model_validate(raw_payload)
    return jsonify(PresetLibrary.apply(inputs, key).model_dump())
