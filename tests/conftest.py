"""
Pytest configuration and shared fixtures for the investment simulator tests.
"""

import os
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from investment_simulator import create_app
from investment_simulator.config import reset_global_settings
from investment_simulator.models.inputs import SimulationInputs
from investment_simulator.models.rate_feed import RateFeedError
from investment_simulator.models.rates import RateSnapshot


class FakeRateProvider:
    """RateProvider returning canned snapshots, or raising on demand."""

    def __init__(self, snapshot=None, error=None):
        self.snapshot = snapshot or RateSnapshot(
            current_rate=13.65,
            historical_rate=12.4,
            source="BCB",
            fetched_at=datetime(2025, 1, 15, tzinfo=timezone.utc),
        )
        self.error = error
        self.calls = 0

    def fetch_rates(self) -> RateSnapshot:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.snapshot


@pytest.fixture(autouse=True)
def app_env():
    """Provide a valid environment and a fresh settings singleton."""
    reset_global_settings()
    with patch.dict(
        os.environ, {"SECRET_KEY": "test-secret-key-123", "APP_ENV": "testing"}
    ):
        yield
    reset_global_settings()


@pytest.fixture
def rate_provider():
    """Provider reporting spot 13.65% and 24m average 12.40%."""
    return FakeRateProvider()


@pytest.fixture
def failing_rate_provider():
    """Provider whose every fetch fails."""
    return FakeRateProvider(error=RateFeedError("connection refused"))


@pytest.fixture
def app(rate_provider):
    """Flask app wired to the fake rate provider."""
    return create_app("testing", rate_provider=rate_provider)


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def quick_inputs():
    """The documented quick-mode example: 5000 + 500/month at 12% for 1 year."""
    return SimulationInputs(
        initial_amount=5000,
        monthly_contribution=500,
        annual_interest_rate=12,
        years=1,
    )


@pytest.fixture
def cdi_inputs():
    """Advanced CDI inputs reading the live feed."""
    return SimulationInputs(
        initial_amount=10000,
        monthly_contribution=1000,
        years=2,
        simulation_mode="ADVANCED",
        rate_mode="CDI",
        cdi_value=11.0,
        cdi_percent=110,
        cdi_strategy="SPOT",
        rate_source="AUTO",
    )
