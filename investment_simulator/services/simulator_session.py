"""
Simulator session for a single user of the investment simulator.

The session owns the mutable state around the pure engine: the current
inputs, the last benchmark snapshot and the flags describing the rate feed.
It sequences rate refreshes and rebuilds the projection on demand.
"""

import logging
import math
import threading
from concurrent.futures import Executor, Future
from typing import Any, Literal, Optional

from investment_simulator.models.inputs import (
    CdiStrategy,
    SimulationInputs,
    SimulationMode,
)
from investment_simulator.models.presets import PresetLibrary
from investment_simulator.models.rate_feed import SOURCE_FALLBACK
from investment_simulator.models.rates import RateResolver, RateSnapshot
from investment_simulator.models.simulation.engine import run_simulation
from investment_simulator.models.simulation.protocols import RateProvider
from investment_simulator.models.simulation.result import SimulationResult

DataSource = Literal["BCB", "BrasilAPI", "Fallback", "UNKNOWN"]
KNOWN_DATA_SOURCES = {"BCB", "BrasilAPI", "Fallback"}


class SimulatorSession:
    """
    State holder for one simulator screen.

    Rate refreshes are last-request-wins: each refresh takes a generation
    number and results from an older generation are discarded. While the
    latest refresh is in flight the engine keeps using the previous snapshot.
    """

    def __init__(
        self,
        inputs: Optional[SimulationInputs] = None,
        rate_provider: Optional[RateProvider] = None,
        executor: Optional[Executor] = None,
        auto_refresh: bool = True,
    ) -> None:
        """Initialize the session.

        Args:
            inputs: Starting inputs (defaults to the quick-mode defaults)
            rate_provider: Benchmark feed; without one the snapshot stays at zero
            executor: When given, refreshes run on it instead of inline
            auto_refresh: Refresh rates on creation and whenever the CDI
                strategy changes
        """
        self.inputs = inputs or SimulationInputs()
        self.snapshot = RateSnapshot()
        self.rate_provider = rate_provider
        self.executor = executor
        self.auto_refresh = auto_refresh

        self.is_rate_loading = False
        self.fetch_error = False
        self.data_source: DataSource = "UNKNOWN"
        self.api_source = ""

        self._generation = 0
        self._lock = threading.Lock()
        self.logger = logging.getLogger(__name__)

        if self.auto_refresh:
            self.start_rate_refresh()

    # Inputs

    def update_inputs(self, **changes: Any) -> SimulationInputs:
        """Replace input fields; a CDI strategy change triggers a refresh."""
        with self._lock:
            previous_strategy = self.inputs.cdi_strategy
            inputs = self.inputs = self.inputs.with_changes(**changes)
        self._refresh_if_strategy_changed(previous_strategy, inputs.cdi_strategy)
        return self.inputs

    def set_mode(self, mode: SimulationMode) -> SimulationInputs:
        """Switch between QUICK and ADVANCED mode."""
        with self._lock:
            previous_strategy = self.inputs.cdi_strategy
            inputs = self.inputs = self.inputs.with_mode(mode)
        self._refresh_if_strategy_changed(previous_strategy, inputs.cdi_strategy)
        return self.inputs

    def set_cdi_strategy(self, strategy: CdiStrategy) -> SimulationInputs:
        """Switch between the spot and the 24-month average benchmark."""
        return self.update_inputs(cdi_strategy=strategy)

    def apply_preset(self, key: str) -> SimulationInputs:
        """Load one of the quick-start presets."""
        with self._lock:
            inputs = self.inputs = PresetLibrary.apply(self.inputs, key)
        return inputs

    def _refresh_if_strategy_changed(
        self, previous: CdiStrategy, current: CdiStrategy
    ) -> None:
        # Runs outside the lock; _begin_refresh takes it
        if self.auto_refresh and current != previous:
            self.start_rate_refresh()

    # Rate feed

    def start_rate_refresh(self) -> Optional[Future]:
        """
        Refresh the snapshot, in the background when an executor is set.

        Returns:
            The Future of the background refresh, or None when it ran inline
            or there is no provider
        """
        if self.executor is not None:
            return self.refresh_rates_in_background(self.executor)
        self.refresh_rates()
        return None

    def refresh_rates(self) -> None:
        """Fetch a new snapshot inline."""
        generation = self._begin_refresh()
        if generation is None:
            return
        self._run_refresh(generation)

    def refresh_rates_in_background(self, executor: Executor) -> Optional[Future]:
        """Fetch a new snapshot on the given executor."""
        generation = self._begin_refresh()
        if generation is None:
            return None
        return executor.submit(self._run_refresh, generation)

    def _begin_refresh(self) -> Optional[int]:
        if self.rate_provider is None:
            return None
        with self._lock:
            self._generation += 1
            self.is_rate_loading = True
            generation = self._generation
        self.logger.info(f"Starting rate refresh {generation}")
        return generation

    def _run_refresh(self, generation: int) -> None:
        try:
            snapshot = self.rate_provider.fetch_rates()
        except Exception as e:
            self.logger.error(f"Rate refresh {generation} failed: {e}")
            self._apply_failure(generation)
            return
        self._apply_snapshot(generation, snapshot)

    def _apply_snapshot(self, generation: int, snapshot: RateSnapshot) -> None:
        with self._lock:
            if generation != self._generation:
                self.logger.debug(f"Discarding stale rate refresh {generation}")
                return

            # Non-finite readings keep the previous values
            current = snapshot.current_rate
            historical = snapshot.historical_rate
            self.snapshot = RateSnapshot(
                current_rate=(
                    current if math.isfinite(current) else self.snapshot.current_rate
                ),
                historical_rate=(
                    historical
                    if math.isfinite(historical)
                    else self.snapshot.historical_rate
                ),
                source=snapshot.source,
                fetched_at=snapshot.fetched_at,
            )

            changes = {}
            if self.inputs.cdi_strategy == "SPOT" and math.isfinite(current):
                changes["cdi_value"] = current
            changes["rate_source"] = (
                "MANUAL" if snapshot.source == SOURCE_FALLBACK else "AUTO"
            )
            self.inputs = self.inputs.with_changes(**changes)

            if snapshot.source == SOURCE_FALLBACK:
                self.logger.warning(
                    f"Rate feed returned fallback rate ({self.snapshot.current_rate}%)"
                )

            self.api_source = snapshot.source
            self.data_source = (
                snapshot.source
                if snapshot.source in KNOWN_DATA_SOURCES
                else "UNKNOWN"
            )
            self.fetch_error = False
            self.is_rate_loading = False
        self.logger.info(f"Completed rate refresh {generation} from {snapshot.source}")

    def _apply_failure(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                self.logger.debug(f"Discarding stale rate failure {generation}")
                return
            self.inputs = self.inputs.with_changes(rate_source="MANUAL")
            self.data_source = "Fallback"
            self.api_source = SOURCE_FALLBACK
            self.fetch_error = True
            self.is_rate_loading = False

    # Outputs

    @property
    def effective_annual_rate(self) -> float:
        """Annual rate currently driving the projection."""
        return RateResolver.effective_annual_rate(self.inputs, self.snapshot)

    def simulate(self) -> SimulationResult:
        """Rebuild the projection from the current inputs and snapshot."""
        return run_simulation(self.inputs, self.snapshot)
