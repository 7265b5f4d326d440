"""
Benchmark rate acquisition for the investment simulator.

This module reads the CDI benchmark from public Brazilian sources (BrasilAPI
for the spot rate, the Central Bank SGS series for the trailing 24-month
history) and degrades to a fixed fallback rate when they are unreachable.
"""

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

import numpy as np
import requests
from pydantic import BaseModel, Field
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from investment_simulator.config import Settings
from investment_simulator.models.projection import round_currency
from investment_simulator.models.rates import RateSnapshot

logger = logging.getLogger(__name__)

SOURCE_BRASILAPI = "BrasilAPI"
SOURCE_BCB = "BCB"
SOURCE_FALLBACK = "Fallback"
SOURCE_HYBRID = "Híbrido (Real)"
SOURCE_BRASILAPI_ESTIMATED = "BrasilAPI (Estimado)"

BRASILAPI_URL = "https://brasilapi.com.br/api/taxas/v1"
BCB_CDI_SERIES_URL = (
    "https://api.bcb.gov.br/dados/serie/bcdata.sgs.4389/dados/ultimos/24?formato=json"
)

# Historical average estimate when only the spot rate is known
HISTORICAL_ESTIMATE_FACTOR = 0.96


class RateFeedError(Exception):
    """Raised when a rate source cannot produce a reading."""


class DataSourceConfig(BaseModel):
    """Configuration for a rate source."""

    name: str = Field(..., description="Source name")
    base_url: str = Field(..., description="Endpoint URL")
    timeout: float = Field(default=3.0, gt=0, description="Request timeout in seconds")
    retries: int = Field(default=2, ge=0, description="Retries on transient errors")


class RateFeedResponse(BaseModel):
    """Payload of the benchmark rate service."""

    current_rate: float = Field(..., description="Spot CDI, percent p.a.")
    historical_average_24m: float = Field(
        ..., description="Trailing 24-month CDI average, percent p.a."
    )
    source: str = Field(..., description="Which sources produced the numbers")
    last_update: datetime = Field(..., description="When the reading was taken")

    def to_snapshot(self) -> RateSnapshot:
        """Convert the payload into the snapshot the engine consumes."""
        return RateSnapshot(
            current_rate=self.current_rate,
            historical_rate=self.historical_average_24m,
            source=self.source,
            fetched_at=self.last_update,
        )


class _HTTPRateSource:
    """Shared session handling for HTTP rate sources."""

    headers: dict = {"Accept": "application/json"}

    def __init__(self, config: DataSourceConfig):
        self.config = config
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create a requests session with retry strategy."""
        session = requests.Session()

        retry_strategy = Retry(
            total=self.config.retries,
            backoff_factor=0.5,
            status_forcelist=[429, 500, 502, 503, 504],
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.headers.update(self.headers)

        return session

    def _get_json(self) -> Any:
        response = self.session.get(self.config.base_url, timeout=self.config.timeout)
        response.raise_for_status()
        return response.json()


class BrasilAPISource(_HTTPRateSource):
    """Spot CDI rate from BrasilAPI's rates endpoint."""

    def fetch_cdi_rate(self) -> float:
        """
        Fetch the latest CDI rate.

        Returns:
            CDI in percent per year

        Raises:
            RateFeedError: If the request fails or the payload has no CDI entry
        """
        try:
            data = self._get_json()
            if not isinstance(data, list):
                raise RateFeedError("BrasilAPI returned an unexpected payload")

            entry = next((item for item in data if item.get("nome") == "CDI"), None)
            if entry is None:
                raise RateFeedError("BrasilAPI payload has no CDI entry")

            return float(entry["valor"])

        except RateFeedError:
            raise
        except (
            requests.RequestException,
            ValueError,
            KeyError,
            TypeError,
            AttributeError,
        ) as e:
            logger.error(f"Error fetching CDI from BrasilAPI: {e}")
            raise RateFeedError(f"Failed to fetch CDI from BrasilAPI: {e}")


class BCBSource(_HTTPRateSource):
    """Recent CDI history from the Central Bank SGS series 4389."""

    headers = {
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/58.0.3029.110 Safari/537.36"
        ),
        "Accept": "application/json",
    }

    def fetch_cdi_history(self) -> List[float]:
        """
        Fetch the recent CDI observations.

        Returns:
            Observed annual CDI values in percent, oldest first. Empty when
            the series answered without observations.

        Raises:
            RateFeedError: If the request fails or an observation is malformed
        """
        try:
            data = self._get_json()
            if not isinstance(data, list):
                logger.warning("BCB returned no observations")
                return []

            return [float(str(item["valor"])) for item in data]

        except (
            requests.RequestException,
            ValueError,
            KeyError,
            TypeError,
            AttributeError,
        ) as e:
            logger.error(f"Error fetching CDI history from BCB: {e}")
            raise RateFeedError(f"Failed to fetch CDI history from BCB: {e}")


class FinancialRatesProvider:
    """
    Blends the rate sources into one reading.

    The spot rate comes from BrasilAPI and the historical average from BCB.
    When BCB is down the average is estimated from the spot rate, and when
    both are down the configured fallback rate is used for both numbers.
    Source failures never escape this class.
    """

    def __init__(
        self,
        brasilapi_source: BrasilAPISource,
        bcb_source: BCBSource,
        fallback_rate: float = 12.15,
    ):
        self.brasilapi_source = brasilapi_source
        self.bcb_source = bcb_source
        self.fallback_rate = fallback_rate

    def get_financial_rates(self) -> RateFeedResponse:
        """Read both sources and build the service payload."""
        current_rate = self.fallback_rate
        historical_average = self.fallback_rate
        source = SOURCE_FALLBACK

        try:
            current_rate = self.brasilapi_source.fetch_cdi_rate()
            historical_average = current_rate * HISTORICAL_ESTIMATE_FACTOR
            source = SOURCE_BRASILAPI
        except RateFeedError as e:
            logger.warning(f"BrasilAPI unavailable: {e}")

        try:
            history = self.bcb_source.fetch_cdi_history()
            # An empty series keeps the current estimate and label
            if history:
                historical_average = float(np.mean(history))
                source = SOURCE_HYBRID if source == SOURCE_BRASILAPI else SOURCE_BCB
        except RateFeedError as e:
            logger.warning(f"BCB unavailable, using estimate: {e}")
            if source == SOURCE_BRASILAPI:
                source = SOURCE_BRASILAPI_ESTIMATED

        if source == SOURCE_FALLBACK:
            logger.warning(f"Using fallback CDI rate ({self.fallback_rate}%)")

        return RateFeedResponse(
            current_rate=round_currency(current_rate),
            historical_average_24m=round_currency(historical_average),
            source=source,
            last_update=datetime.now(timezone.utc),
        )

    def fetch_rates(self) -> RateSnapshot:
        """RateProvider implementation."""
        return self.get_financial_rates().to_snapshot()


def create_default_rate_provider(
    settings: Optional[Settings] = None,
) -> FinancialRatesProvider:
    """Create a rate provider wired to the public endpoints.

    Args:
        settings: Application settings; module defaults are used when omitted

    Returns:
        Configured FinancialRatesProvider instance
    """
    if settings is None:
        return FinancialRatesProvider(
            BrasilAPISource(DataSourceConfig(name="brasilapi", base_url=BRASILAPI_URL)),
            BCBSource(DataSourceConfig(name="bcb", base_url=BCB_CDI_SERIES_URL)),
        )

    brasilapi_config = DataSourceConfig(
        name="brasilapi",
        base_url=settings.brasilapi_url,
        timeout=settings.rate_feed_timeout,
        retries=settings.rate_feed_retries,
    )
    bcb_config = DataSourceConfig(
        name="bcb",
        base_url=settings.bcb_cdi_series_url,
        timeout=settings.rate_feed_timeout,
        retries=settings.rate_feed_retries,
    )
    return FinancialRatesProvider(
        BrasilAPISource(brasilapi_config),
        BCBSource(bcb_config),
        fallback_rate=settings.fallback_cdi_rate,
    )
