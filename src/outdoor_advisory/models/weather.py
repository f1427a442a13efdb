"""Forecast sample, alert and bundle models.

All values are in US customary units, the units the advisory thresholds are
written in:
- Temperature: Fahrenheit (°F)
- Wind speed: miles per hour (mph)
- Precipitation amount: inches (in)
- Precipitation probability: integer percentage (0-100)
"""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Self

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator

from outdoor_advisory.models.location import CoordinateBucket


class AlertSeverity(str, Enum):
    """Severity of a government/provider weather alert."""

    MINOR = "minor"
    MODERATE = "moderate"
    SEVERE = "severe"
    EXTREME = "extreme"


class ForecastSample(BaseModel):
    """One discrete forecast reading, valid at ``sample_time``."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    sample_time: AwareDatetime = Field(
        ..., description="Forecast validity time (not fetch time)"
    )
    temperature_f: float = Field(..., description="Temperature in Fahrenheit")
    feels_like_f: float = Field(..., description="Feels-like temperature in Fahrenheit")
    wind_speed_mph: float = Field(..., ge=0, description="Wind speed in miles per hour")
    precipitation_probability_pct: int = Field(
        ..., ge=0, le=100, description="Probability of precipitation (%)"
    )
    precipitation_amount_in: float = Field(
        ..., ge=0, description="Expected precipitation amount in inches"
    )
    condition_text: str = Field(
        ..., description="Provider condition description, e.g. 'Light rain'"
    )


class Alert(BaseModel):
    """An active weather alert for the forecast region.

    Alerts are informational: they are reported next to a verdict but never
    decide suitability on their own.
    """

    model_config = ConfigDict(frozen=True)

    severity: AlertSeverity
    category: str
    effective_from: AwareDatetime
    effective_until: AwareDatetime
    headline: str

    @model_validator(mode="after")
    def validate_interval(self) -> Self:
        if self.effective_until < self.effective_from:
            raise ValueError("Alert effective_until precedes effective_from")
        return self

    def is_active_at(self, time: datetime) -> bool:
        """Check whether the alert interval contains ``time`` (inclusive)."""
        return self.effective_from <= time <= self.effective_until


class ForecastBundle(BaseModel):
    """All samples and alerts for one coordinate bucket, as of one fetch.

    Bundles are never mutated. The cache replaces them wholesale on refresh
    and derives stale copies with :meth:`as_stale`.
    """

    model_config = ConfigDict(frozen=True)

    bucket: CoordinateBucket | None = Field(
        default=None, description="Cache bucket, stamped by the cache on store"
    )
    samples: tuple[ForecastSample, ...] = Field(
        default=(), description="Samples ordered by sample_time"
    )
    alerts: tuple[Alert, ...] = Field(default=(), description="Active alerts")
    fetched_at: AwareDatetime = Field(..., description="When the bundle was fetched")
    provider: str = Field(default="unknown", description="Weather data provider name")
    is_stale: bool = Field(
        default=False, description="Served past the freshness window after a failed refresh"
    )

    @model_validator(mode="after")
    def validate_sample_order(self) -> Self:
        """Samples must be strictly increasing in time (no duplicates)."""
        for previous, current in zip(self.samples, self.samples[1:]):
            if current.sample_time <= previous.sample_time:
                raise ValueError(
                    f"Samples out of order or duplicated at {current.sample_time.isoformat()}"
                )
        return self

    def as_stale(self) -> ForecastBundle:
        """Return a copy of this bundle marked as stale."""
        return self.model_copy(update={"is_stale": True})

    def age_at(self, now: datetime) -> timedelta:
        """Age of this bundle at ``now``."""
        return now - self.fetched_at
