"""Application configuration.

Configuration is loaded from environment variables using pydantic-settings
and turned into a static `AdvisoryConfig` object that the advisory service
receives at construction time. Thresholds live only here; no other module
hard-codes them.

## Environment Variables

- WEATHERAPI_API_KEY: WeatherAPI.com API key (required to fetch forecasts)
- WEATHERAPI_BASE_URL: Override the WeatherAPI base URL
- WEATHERAPI_FORECAST_DAYS: Days of forecast to request (default: 3)
- PROVIDER_TIMEOUT_SECONDS: Bound on one provider fetch (default: 5)
- FRESHNESS_WINDOW_MINUTES: Cache freshness window (default: 30)
- MAX_CACHE_AGE_HOURS: Hard ceiling on cached bundle age (default: 6)
- MATCH_WINDOW_HOURS: Max distance between event and sample (default: 8)
- COORDINATE_PRECISION: Decimal places for cache buckets (default: 3)
- MIN_TEMPERATURE_F / MAX_TEMPERATURE_F: Default profile range (40 / 90)
- MAX_WIND_MPH: Default profile wind limit (default: 25)
- CONDITION_KEYWORDS: JSON list of exclusion keywords
- ACTIVITY_PROFILES: JSON object of named activity profiles, e.g.
  `{"cycling": {"max_wind_mph": 15}}`
- LOG_LEVEL: Logging level for the CLI (default: WARNING)

## Example .env file

```
WEATHERAPI_API_KEY=your-weatherapi-key
FRESHNESS_WINDOW_MINUTES=30
CONDITION_KEYWORDS=["rain", "storm", "snow", "thunder"]
```
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from outdoor_advisory.models.activity import (
    DEFAULT_CONDITION_KEYWORDS,
    DEFAULT_PROFILE,
    ActivityProfile,
)


class AdvisoryConfig(BaseModel):
    """Static configuration for the advisory engine."""

    model_config = ConfigDict(frozen=True)

    freshness_window: timedelta = timedelta(minutes=30)
    max_cache_age: timedelta = timedelta(hours=6)
    fetch_timeout_seconds: float = Field(default=5.0, gt=0)
    match_window: timedelta = timedelta(hours=8)
    coordinate_precision: int = Field(default=3, ge=0, le=6)

    default_profile: ActivityProfile = DEFAULT_PROFILE
    profiles: dict[str, ActivityProfile] = Field(
        default_factory=dict, description="Additional named activity profiles"
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    # Weather provider
    weatherapi_api_key: str | None = None
    weatherapi_base_url: str = "https://api.weatherapi.com/v1"
    weatherapi_forecast_days: int = Field(default=3, ge=1, le=14)
    user_agent: str = Field(
        default="outdoor-advisory/0.1.0",
        description="User-Agent sent to the weather provider",
    )
    provider_timeout_seconds: float = Field(default=5.0, gt=0, le=60)

    # Cache
    freshness_window_minutes: int = Field(default=30, ge=1)
    max_cache_age_hours: float = Field(default=6, gt=0)
    coordinate_precision: int = Field(default=3, ge=0, le=6)

    # Matching
    match_window_hours: float = Field(default=8, ge=0)

    # Default activity profile
    min_temperature_f: float = 40.0
    max_temperature_f: float = 90.0
    max_wind_mph: float = Field(default=25.0, ge=0)
    condition_keywords: list[str] = Field(
        default=list(DEFAULT_CONDITION_KEYWORDS),
        description="Condition text keywords that make conditions unsuitable",
    )

    # Named activity profiles, keyed by name; the key overrides any "name" field
    activity_profiles: dict[str, ActivityProfile] = Field(
        default_factory=dict,
        description="Activity profiles selectable per event",
    )

    @property
    def provider_configured(self) -> bool:
        """Check if the weather provider has credentials."""
        return bool(self.weatherapi_api_key)

    def advisory_config(self) -> AdvisoryConfig:
        """Build the static advisory configuration from these settings."""
        return AdvisoryConfig(
            freshness_window=timedelta(minutes=self.freshness_window_minutes),
            max_cache_age=timedelta(hours=self.max_cache_age_hours),
            fetch_timeout_seconds=self.provider_timeout_seconds,
            match_window=timedelta(hours=self.match_window_hours),
            coordinate_precision=self.coordinate_precision,
            default_profile=ActivityProfile(
                min_temperature_f=self.min_temperature_f,
                max_temperature_f=self.max_temperature_f,
                max_wind_mph=self.max_wind_mph,
                condition_keywords=tuple(self.condition_keywords),
            ),
            profiles={
                name: profile.model_copy(update={"name": name})
                for name, profile in self.activity_profiles.items()
            },
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached. To reload, clear the cache:
    ```python
    get_settings.cache_clear()
    ```
    """
    return Settings()
