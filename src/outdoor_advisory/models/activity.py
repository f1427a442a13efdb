"""Activity profiles defining the suitability thresholds for an activity."""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


DEFAULT_CONDITION_KEYWORDS: tuple[str, ...] = (
    "rain",
    "storm",
    "snow",
    "thunder",
    "drizzle",
    "sleet",
    "hail",
)


class ActivityProfile(BaseModel):
    """Suitability thresholds for one kind of outdoor activity.

    The defaults describe general outdoor sports: comfortable between 40°F
    and 90°F, wind at most 25 mph, and no rain/storm/snow in the provider's
    condition text. Precipitation probability and amount checks are opt-in.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    name: str = Field(default="outdoor", description="Profile name")
    min_temperature_f: float = Field(
        default=40.0, description="Minimum acceptable temperature in Fahrenheit"
    )
    max_temperature_f: float = Field(
        default=90.0, description="Maximum acceptable temperature in Fahrenheit"
    )
    max_wind_mph: float = Field(
        default=25.0, ge=0, description="Maximum acceptable wind speed in mph"
    )
    condition_keywords: tuple[str, ...] = Field(
        default=DEFAULT_CONDITION_KEYWORDS,
        description="Condition text keywords that exclude the activity",
    )
    max_precipitation_probability_pct: int | None = Field(
        default=None,
        ge=0,
        le=100,
        description="Maximum precipitation probability (None = not checked)",
    )
    max_precipitation_amount_in: float | None = Field(
        default=None,
        ge=0,
        description="Maximum precipitation amount in inches (None = not checked)",
    )

    @field_validator("condition_keywords", mode="after")
    @classmethod
    def normalize_keywords(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Lower-case keywords and drop blanks and duplicates."""
        normalized: list[str] = []
        for keyword in v:
            keyword = keyword.strip().lower()
            if keyword and keyword not in normalized:
                normalized.append(keyword)
        return tuple(normalized)

    @model_validator(mode="after")
    def validate_temperature_range(self) -> Self:
        if self.min_temperature_f > self.max_temperature_f:
            raise ValueError("min_temperature_f must not exceed max_temperature_f")
        return self

    def is_temperature_acceptable(self, temperature_f: float) -> bool:
        """Check if temperature is within the acceptable range (inclusive)."""
        return self.min_temperature_f <= temperature_f <= self.max_temperature_f

    def is_wind_acceptable(self, wind_speed_mph: float) -> bool:
        """Check if wind speed is at or below the limit."""
        return wind_speed_mph <= self.max_wind_mph

    def matching_keywords(self, condition_text: str) -> list[str]:
        """Get the exclusion keywords found in a condition description."""
        text = condition_text.lower()
        return [keyword for keyword in self.condition_keywords if keyword in text]


DEFAULT_PROFILE = ActivityProfile()
