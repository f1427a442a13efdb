"""Errors surfaced to advisory callers.

Every failure that reaches a caller of the advisory service is an
``AdvisoryError``. Callers should show "advisory unavailable" rather than
guess a verdict.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from outdoor_advisory.models.location import CoordinateBucket


class AdvisoryError(Exception):
    """Base exception for advisory failures."""


class ProviderUnavailableError(AdvisoryError):
    """Raised when the forecast provider failed and no cached bundle can stand in."""

    def __init__(self, bucket: CoordinateBucket, provider: str | None = None):
        super().__init__(f"No forecast available for {bucket}")
        self.bucket = bucket
        self.provider = provider


class NoForecastInWindowError(AdvisoryError):
    """Raised when no forecast sample is close enough to the event time."""

    def __init__(self, event_time: datetime, window: timedelta):
        hours = window.total_seconds() / 3600
        super().__init__(
            f"No forecast sample within {hours:g}h of {event_time.isoformat()}"
        )
        self.event_time = event_time
        self.window = window


class UnknownActivityError(AdvisoryError):
    """Raised when an event names an activity profile that is not configured."""

    def __init__(self, activity: str):
        super().__init__(f"Unknown activity profile: {activity}")
        self.activity = activity
