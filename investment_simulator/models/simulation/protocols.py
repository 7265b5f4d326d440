"""
Protocol interfaces for simulation collaborators.

The projection engine never performs I/O. Anything that has to reach the
outside world, such as the benchmark rate feed, is injected through one of
these protocols and sequenced by the presentation layer.
"""

from typing import Protocol, runtime_checkable

from investment_simulator.models.rates import RateSnapshot


@runtime_checkable
class RateProvider(Protocol):
    """
    Supplies the current and historical-average benchmark rate.

    Implementations may block on network calls; callers decide whether to run
    them inline or on a worker thread.
    """

    def fetch_rates(self) -> RateSnapshot:
        """
        Fetch a fresh benchmark snapshot.

        Returns:
            RateSnapshot whose source is the raw feed label
            ("BCB", "BrasilAPI", "Fallback", ...)

        Raises:
            RateFeedError: If no reading could be produced at all
        """
        ...
