"""Suitability classifier turning a matched sample into a verdict.

The classifier evaluates every rule for the activity profile and collects all
failures instead of stopping at the first one, so a caller can present every
contributing factor.

Alerts are an overlay: those in effect at the event time are attached to the
verdict but never change `suitable`. Categories such as coastal flood or
tidal surge rarely describe conditions at the venue, so consumers judge them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from outdoor_advisory.forecasts.matching import time_delta_minutes as minutes_between
from outdoor_advisory.models.activity import DEFAULT_PROFILE, ActivityProfile
from outdoor_advisory.models.advisory import Verdict
from outdoor_advisory.models.weather import Alert, ForecastSample
from outdoor_advisory.rules.conditions import RuleResult, rules_for_profile

logger = logging.getLogger(__name__)


@dataclass
class EvaluationResult:
    """Result of evaluating all rules for a sample."""

    sample: ForecastSample
    profile: ActivityProfile
    results: list[RuleResult] = field(default_factory=list)

    @property
    def failed(self) -> list[RuleResult]:
        """Get failed rules in evaluation order."""
        return [r for r in self.results if not r.passed]

    @property
    def passed(self) -> bool:
        """True if every rule passed."""
        return not self.failed

    @property
    def reasons(self) -> tuple[str, ...]:
        return tuple(r.reason for r in self.failed)


def evaluate_sample(
    sample: ForecastSample,
    profile: ActivityProfile = DEFAULT_PROFILE,
) -> EvaluationResult:
    """Evaluate a sample against every rule of a profile.

    Args:
        sample: Forecast sample to evaluate
        profile: Activity thresholds

    Returns:
        EvaluationResult holding one RuleResult per rule
    """
    results = [rule(sample, profile) for rule in rules_for_profile(profile)]
    return EvaluationResult(sample=sample, profile=profile, results=results)


def active_alerts(alerts: Iterable[Alert], event_time: datetime) -> tuple[Alert, ...]:
    """Get the alerts in effect at the event time, without duplicates."""
    active: list[Alert] = []
    for alert in alerts:
        if alert.is_active_at(event_time) and alert not in active:
            active.append(alert)
    return tuple(active)


class SuitabilityClassifier:
    """Classifies forecast samples for an activity.

    Example:
        ```python
        classifier = SuitabilityClassifier()
        verdict = classifier.classify(match.sample, bundle.alerts, event_time)
        if not verdict.suitable:
            print(verdict.reasons)
        ```
    """

    def __init__(self, profile: ActivityProfile = DEFAULT_PROFILE):
        """Initialize the classifier.

        Args:
            profile: Profile used when classify() is not given one
        """
        self.profile = profile

    def classify(
        self,
        sample: ForecastSample,
        alerts: Iterable[Alert],
        event_time: datetime,
        profile: ActivityProfile | None = None,
        *,
        time_delta_minutes: int | None = None,
        event_id: str | None = None,
    ) -> Verdict:
        """Produce a suitability verdict for one sample.

        Args:
            sample: Matched forecast sample
            alerts: Alerts for the forecast region
            event_time: Scheduled event time, used for the alert overlay
            profile: Activity thresholds (defaults to the classifier's profile)
            time_delta_minutes: Offset of the sample from the event; computed
                from the two times when omitted
            event_id: Event identifier to carry on the verdict

        Returns:
            Verdict listing every failed rule
        """
        profile = profile or self.profile
        evaluation = evaluate_sample(sample, profile)
        overlay = active_alerts(alerts, event_time)

        if time_delta_minutes is None:
            time_delta_minutes = minutes_between(sample.sample_time, event_time)

        for result in evaluation.failed:
            logger.debug(f"Rule failed for {profile.name}: {result.message}")

        return Verdict(
            event_id=event_id,
            event_time=event_time,
            matched_sample=sample,
            time_delta_minutes=time_delta_minutes,
            suitable=evaluation.passed,
            reasons=evaluation.reasons,
            active_alerts=overlay,
            activity=profile.name,
        )
