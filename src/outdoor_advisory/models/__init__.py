"""Domain models for outdoor activity advisories."""

from outdoor_advisory.models.location import Coordinate, CoordinateBucket
from outdoor_advisory.models.weather import (
    Alert,
    AlertSeverity,
    ForecastBundle,
    ForecastSample,
)
from outdoor_advisory.models.activity import ActivityProfile, DEFAULT_PROFILE
from outdoor_advisory.models.event import EventRecord
from outdoor_advisory.models.advisory import MatchResult, Verdict

__all__ = [
    # Location
    "Coordinate",
    "CoordinateBucket",
    # Weather
    "Alert",
    "AlertSeverity",
    "ForecastBundle",
    "ForecastSample",
    # Activity
    "ActivityProfile",
    "DEFAULT_PROFILE",
    # Event
    "EventRecord",
    # Advisory
    "MatchResult",
    "Verdict",
]
