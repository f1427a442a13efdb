"""Selection of the forecast sample that represents an event time."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta

from outdoor_advisory.exceptions import NoForecastInWindowError
from outdoor_advisory.models.advisory import MatchResult
from outdoor_advisory.models.weather import ForecastSample

logger = logging.getLogger(__name__)

DEFAULT_MATCH_WINDOW = timedelta(hours=8)


def time_delta_minutes(sample_time: datetime, event_time: datetime) -> int:
    """Signed whole minutes from the event to the sample (truncated toward zero)."""
    return int((sample_time - event_time).total_seconds() / 60)


class WindowMatcher:
    """Picks the single sample closest to an event time.

    Only samples within ``[T - window, T + window]`` are considered; samples
    further away are not used as a fallback. When two samples are equally
    close, the later one wins: forecasts for the hours after an event's
    start are revised as it approaches, so they are preferred.

    Example:
        ```python
        matcher = WindowMatcher(window=timedelta(hours=8))
        match = matcher.select(event_time, bundle.samples)
        match.sample, match.time_delta_minutes
        ```
    """

    def __init__(self, window: timedelta = DEFAULT_MATCH_WINDOW):
        if window < timedelta(0):
            raise ValueError("Match window must not be negative")
        self.window = window

    def candidates(
        self, event_time: datetime, samples: Sequence[ForecastSample]
    ) -> list[ForecastSample]:
        """Get the samples inside the match window (inclusive)."""
        return [
            sample
            for sample in samples
            if abs(sample.sample_time - event_time) <= self.window
        ]

    def select(
        self, event_time: datetime, samples: Sequence[ForecastSample]
    ) -> MatchResult:
        """Select the sample representing conditions at ``event_time``.

        Args:
            event_time: Timezone-aware event start time
            samples: Samples ordered by sample_time

        Returns:
            MatchResult with the chosen sample and its signed offset

        Raises:
            NoForecastInWindowError: If no sample lies within the window
            ValueError: If event_time is naive
        """
        if event_time.tzinfo is None or event_time.utcoffset() is None:
            raise ValueError("event_time must be timezone-aware")

        candidates = self.candidates(event_time, samples)
        if not candidates:
            raise NoForecastInWindowError(event_time, self.window)

        # Ties on distance go to the later sample (smaller event_time - sample_time)
        best = min(
            candidates,
            key=lambda s: (abs(s.sample_time - event_time), event_time - s.sample_time),
        )
        delta = time_delta_minutes(best.sample_time, event_time)

        logger.debug(
            f"Matched sample at {best.sample_time.isoformat()} for event at "
            f"{event_time.isoformat()} ({delta:+d} min, {len(candidates)} candidates)"
        )
        return MatchResult(sample=best, time_delta_minutes=delta)
