"""Advisory result models."""

from __future__ import annotations

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from outdoor_advisory.models.weather import Alert, AlertSeverity, ForecastSample


class MatchResult(BaseModel):
    """The forecast sample chosen to represent conditions at an event time."""

    model_config = ConfigDict(frozen=True)

    sample: ForecastSample
    time_delta_minutes: int = Field(
        ..., description="sample_time minus event time, in minutes (signed)"
    )


class Verdict(BaseModel):
    """Suitability verdict for one event.

    ``reasons`` lists every failed rule in evaluation order and is empty when
    ``suitable`` is True. ``active_alerts`` is informational only.
    """

    model_config = ConfigDict(frozen=True)

    event_id: str | None = Field(default=None, description="Event this verdict is for")
    event_time: AwareDatetime = Field(..., description="Scheduled event time")
    matched_sample: ForecastSample = Field(..., description="Sample used for the verdict")
    time_delta_minutes: int = Field(
        ..., description="matched_sample.sample_time minus event_time, in minutes"
    )
    suitable: bool = Field(..., description="Whether conditions suit the activity")
    reasons: tuple[str, ...] = Field(default=(), description="Failed rules")
    active_alerts: tuple[Alert, ...] = Field(
        default=(), description="Alerts in effect at the event time"
    )
    activity: str = Field(default="outdoor", description="Activity profile used")

    # Provenance of the forecast data
    stale: bool = Field(
        default=False, description="Built from a bundle past its freshness window"
    )
    fetched_at: AwareDatetime | None = Field(
        default=None, description="When the underlying forecast was fetched"
    )

    @property
    def has_severe_alert(self) -> bool:
        """Check if any active alert is severe or extreme."""
        return any(
            alert.severity in (AlertSeverity.SEVERE, AlertSeverity.EXTREME)
            for alert in self.active_alerts
        )
