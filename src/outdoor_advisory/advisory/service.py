"""Advisory service: event in, suitability verdict out.

The service composes the forecast cache, the window matcher and the
classifier:

    cache.get(coordinate) -> matcher.select(event_time) -> classifier.classify

It never guesses. When no forecast can be obtained or none lies close enough
to the event, the typed `AdvisoryError` propagates to the caller, who decides
how to present "advisory unavailable".
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from outdoor_advisory.config import AdvisoryConfig
from outdoor_advisory.exceptions import AdvisoryError, UnknownActivityError
from outdoor_advisory.forecasts.cache import ForecastCache
from outdoor_advisory.forecasts.matching import WindowMatcher
from outdoor_advisory.models.activity import ActivityProfile
from outdoor_advisory.models.advisory import Verdict
from outdoor_advisory.models.event import EventRecord
from outdoor_advisory.models.location import Coordinate
from outdoor_advisory.providers.base import ForecastClient
from outdoor_advisory.rules.classifier import SuitabilityClassifier

logger = logging.getLogger(__name__)


@dataclass
class AdvisoryOutcome:
    """Result of advising one event in a batch: a verdict or the error."""

    event_id: str
    verdict: Verdict | None = None
    error: AdvisoryError | None = None

    @property
    def ok(self) -> bool:
        return self.verdict is not None


class AdvisoryService:
    """Produces suitability verdicts for scheduled outdoor events.

    Example:
        ```python
        async with AdvisoryService.from_config(client, config) as service:
            verdict = await service.advise("evt-1", event_time, coordinate)
        ```
    """

    def __init__(
        self,
        cache: ForecastCache,
        matcher: WindowMatcher | None = None,
        classifier: SuitabilityClassifier | None = None,
        profiles: Mapping[str, ActivityProfile] | None = None,
    ):
        """Initialize the service.

        Args:
            cache: Forecast cache shared by all callers
            matcher: Sample matcher (default 8 hour window)
            classifier: Classifier holding the default activity profile
            profiles: Additional activity profiles by name
        """
        self.cache = cache
        self.matcher = matcher or WindowMatcher()
        self.classifier = classifier or SuitabilityClassifier()
        self.profiles: dict[str, ActivityProfile] = dict(profiles or {})

    @classmethod
    def from_config(cls, client: ForecastClient, config: AdvisoryConfig) -> AdvisoryService:
        """Build a service and its cache from static configuration."""
        cache = ForecastCache(
            client,
            freshness_window=config.freshness_window,
            max_age=config.max_cache_age,
            fetch_timeout=config.fetch_timeout_seconds,
            precision=config.coordinate_precision,
        )
        return cls(
            cache,
            matcher=WindowMatcher(config.match_window),
            classifier=SuitabilityClassifier(config.default_profile),
            profiles=config.profiles,
        )

    async def __aenter__(self) -> AdvisoryService:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the cache and its forecast client."""
        await self.cache.aclose()

    def resolve_profile(self, activity: str | None) -> ActivityProfile:
        """Get the activity profile for a name.

        Raises:
            UnknownActivityError: If the name is not configured
        """
        default = self.classifier.profile
        if activity is None or activity == default.name:
            return default
        try:
            return self.profiles[activity]
        except KeyError:
            raise UnknownActivityError(activity) from None

    async def advise(
        self,
        event_id: str | None,
        event_time: datetime,
        coordinate: Coordinate,
        activity: str | None = None,
    ) -> Verdict:
        """Produce a suitability verdict for one event.

        Args:
            event_id: Identifier carried on the verdict
            event_time: Timezone-aware event start time
            coordinate: Event location
            activity: Activity profile name (default profile when None)

        Returns:
            Verdict for the sample nearest the event time

        Raises:
            ProviderUnavailableError: If no forecast could be obtained
            NoForecastInWindowError: If no sample is close enough to the event
            UnknownActivityError: If the activity is not configured
        """
        profile = self.resolve_profile(activity)

        try:
            bundle = await self.cache.get(coordinate)
            match = self.matcher.select(event_time, bundle.samples)
        except AdvisoryError as e:
            logger.warning(f"Advisory unavailable for event {event_id}: {e}")
            raise

        verdict = self.classifier.classify(
            match.sample,
            bundle.alerts,
            event_time,
            profile,
            time_delta_minutes=match.time_delta_minutes,
            event_id=event_id,
        )
        verdict = verdict.model_copy(
            update={"stale": bundle.is_stale, "fetched_at": bundle.fetched_at}
        )

        if verdict.suitable:
            summary = "suitable"
        else:
            summary = f"unsuitable ({', '.join(verdict.reasons)})"
        if verdict.stale:
            summary += ", stale forecast"
        logger.info(f"Event {event_id} at {coordinate}: {summary}")
        return verdict

    async def advise_event(self, event: EventRecord) -> Verdict:
        """Produce a verdict for an event record."""
        return await self.advise(
            event.id, event.scheduled_time, event.coordinate, event.activity
        )

    async def advise_many(self, events: Iterable[EventRecord]) -> list[AdvisoryOutcome]:
        """Advise several events concurrently.

        Events at the same location share one forecast fetch. Each outcome
        carries either a verdict or the advisory error for that event, in the
        order the events were given.
        """
        events = list(events)
        results = await asyncio.gather(
            *(self.advise_event(event) for event in events),
            return_exceptions=True,
        )

        outcomes: list[AdvisoryOutcome] = []
        for event, result in zip(events, results):
            if isinstance(result, AdvisoryError):
                outcomes.append(AdvisoryOutcome(event_id=event.id, error=result))
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes.append(AdvisoryOutcome(event_id=event.id, verdict=result))
        return outcomes
