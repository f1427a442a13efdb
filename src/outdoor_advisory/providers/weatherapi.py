"""WeatherAPI.com forecast client.

## API Documentation Summary
Source: https://www.weatherapi.com/docs/

## Endpoint
- Base URL: https://api.weatherapi.com/v1
- Forecast: /forecast.json?key={key}&q={lat},{lon}&days={n}&aqi=no&alerts=yes
- Full URL example: https://api.weatherapi.com/v1/forecast.json?key=KEY&q=29.6387,-82.4275&days=3&alerts=yes

## Authentication
- API key required, passed as the `key` query parameter
- Missing key: 401; disabled or over-quota key: 403

## Rate Limiting
- Monthly call quota per plan; exceeding it returns 403 (or 429)
- Free plan forecasts up to 3 days ahead

## Response Format
```json
{
  "location": {"name": "Gainesville", "lat": 29.64, "lon": -82.43, ...},
  "forecast": {
    "forecastday": [
      {
        "date": "2025-10-13",
        "hour": [
          {
            "time_epoch": 1760328000,
            "time": "2025-10-13 00:00",
            "temp_f": 67.1,
            "feelslike_f": 67.1,
            "wind_mph": 5.1,
            "chance_of_rain": 0,
            "chance_of_snow": 0,
            "precip_in": 0.0,
            "condition": {"text": "Clear", "icon": "...", "code": 1000}
          }
        ]
      }
    ]
  },
  "alerts": {
    "alert": [
      {
        "headline": "Coastal Flood Warning issued October 13 ...",
        "severity": "Moderate",
        "category": "Met",
        "event": "Coastal Flood Warning",
        "effective": "2025-10-13T01:44:00-04:00",
        "expires": "2025-10-14T05:00:00-04:00"
      }
    ]
  }
}
```

## Variable Translation (WeatherAPI -> Canonical)

### Hourly Variables (forecast.forecastday[].hour[])
| WeatherAPI Field | Canonical Field | Notes |
|------------------|-----------------|-------|
| time_epoch | sample_time | Unix seconds -> UTC datetime |
| temp_f | temperature_f | Direct mapping |
| feelslike_f | feels_like_f | Direct mapping |
| wind_mph | wind_speed_mph | Direct mapping |
| chance_of_rain, chance_of_snow | precipitation_probability_pct | Larger of the two |
| precip_in | precipitation_amount_in | Direct mapping |
| condition.text | condition_text | Direct mapping |

### Alert Variables (alerts.alert[])
| WeatherAPI Field | Canonical Field | Notes |
|------------------|-----------------|-------|
| severity | severity | Case-insensitive; "" / "Unknown" -> minor |
| category | category | Falls back to `event` when blank |
| effective | effective_from | ISO 8601 with offset |
| expires | effective_until | ISO 8601 with offset |
| headline | headline | Falls back to `event` when blank |
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import httpx
from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, ValidationError

from outdoor_advisory.models.location import Coordinate
from outdoor_advisory.models.weather import (
    Alert,
    AlertSeverity,
    ForecastBundle,
    ForecastSample,
)
from outdoor_advisory.providers.base import (
    ForecastClient,
    MalformedResponseError,
)

logger = logging.getLogger(__name__)


# Hourly endpoint; wider spacing means hours are missing from the payload
MAX_SAMPLE_SPACING = timedelta(hours=1)


# Severity strings that carry no information are reported as minor
SEVERITY_ALIASES: dict[str, AlertSeverity] = {
    "": AlertSeverity.MINOR,
    "unknown": AlertSeverity.MINOR,
    "minor": AlertSeverity.MINOR,
    "moderate": AlertSeverity.MODERATE,
    "severe": AlertSeverity.SEVERE,
    "extreme": AlertSeverity.EXTREME,
}


# Response schema. Strict so that e.g. a temperature sent as a string or null
# is rejected instead of coerced.


class _Condition(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    text: str


class _Hour(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore", allow_inf_nan=False)

    time_epoch: int
    temp_f: float
    feelslike_f: float
    wind_mph: float
    chance_of_rain: int
    chance_of_snow: int
    precip_in: float
    condition: _Condition


class _ForecastDay(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    hour: list[_Hour]


class _Forecast(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    forecastday: list[_ForecastDay]


class _Alert(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    headline: str = ""
    severity: str = ""
    category: str = ""
    event: str = ""
    effective: AwareDatetime
    expires: AwareDatetime


class _Alerts(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    alert: list[_Alert] = []


class _ForecastResponse(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    forecast: _Forecast
    alerts: _Alerts = Field(default_factory=_Alerts)


def _parse_severity(severity: str) -> AlertSeverity:
    """Parse a WeatherAPI severity string."""
    parsed = SEVERITY_ALIASES.get(severity.strip().lower())
    if parsed is None:
        raise ValueError(f"Unrecognized alert severity: {severity!r}")
    return parsed


def _unix_to_datetime(timestamp: int) -> datetime:
    """Convert Unix timestamp to datetime."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


class WeatherApiClient(ForecastClient):
    """WeatherAPI.com forecast client.

    Example:
        ```python
        async with WeatherApiClient(api_key="your-api-key") as client:
            bundle = await client.fetch(
                Coordinate(latitude=29.6387, longitude=-82.4275)
            )
        ```
    """

    name = "weatherapi"
    base_url = "https://api.weatherapi.com/v1"
    requires_api_key = True

    def __init__(
        self,
        api_key: str | None,
        user_agent: str | None = None,
        forecast_days: int = 3,
        timeout: float = 5.0,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize WeatherAPI client.

        Args:
            api_key: API key from weatherapi.com
            user_agent: Optional User-Agent string
            forecast_days: Days of forecast to request (3 covers the next 72h on the free plan)
            timeout: Request timeout in seconds
            base_url: Override the API base URL
            http_client: Pre-configured httpx.AsyncClient
        """
        super().__init__(
            api_key=api_key,
            user_agent=user_agent,
            timeout=timeout,
            http_client=http_client,
        )
        self.forecast_days = forecast_days
        if base_url:
            self.base_url = base_url.rstrip("/")

    async def fetch(self, coordinate: Coordinate) -> ForecastBundle:
        """Get the forecast bundle from WeatherAPI.com.

        Args:
            coordinate: Location (lat/lon)

        Returns:
            ForecastBundle in canonical units

        Raises:
            AuthenticationError: If no API key is configured or it is rejected
            MalformedResponseError: If the response fails schema validation
            ProviderError: If the request fails
        """
        self._require_api_key()

        url = f"{self.base_url}/forecast.json"
        params = {
            "key": self.api_key,
            "q": f"{coordinate.latitude},{coordinate.longitude}",
            "days": self.forecast_days,
            "aqi": "no",
            "alerts": "yes",
        }

        logger.info(f"Fetching {self.forecast_days}-day forecast for {coordinate}")
        response = await self._fetch(url, params=params)

        try:
            payload = _ForecastResponse.model_validate_json(response.content)
            bundle = self._translate_response(payload)
        except (ValidationError, ValueError) as e:
            raise MalformedResponseError(
                f"Invalid forecast payload: {e}",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            ) from e

        logger.debug(
            f"Received {len(bundle.samples)} samples and {len(bundle.alerts)} alerts "
            f"for {coordinate}"
        )
        return bundle

    def _translate_response(self, payload: _ForecastResponse) -> ForecastBundle:
        """Translate a validated WeatherAPI response to canonical format.

        See module docstring for detailed field mapping.
        """
        samples: list[ForecastSample] = []
        for day in payload.forecast.forecastday:
            for hour in day.hour:
                samples.append(
                    ForecastSample(
                        sample_time=_unix_to_datetime(hour.time_epoch),
                        temperature_f=hour.temp_f,
                        feels_like_f=hour.feelslike_f,
                        wind_speed_mph=hour.wind_mph,
                        precipitation_probability_pct=max(
                            hour.chance_of_rain, hour.chance_of_snow
                        ),
                        precipitation_amount_in=hour.precip_in,
                        condition_text=hour.condition.text,
                    )
                )

        if not samples:
            raise ValueError("Forecast contains no hourly samples")
        for previous, current in zip(samples, samples[1:]):
            if current.sample_time - previous.sample_time > MAX_SAMPLE_SPACING:
                raise ValueError(
                    f"Forecast gap from {previous.sample_time.isoformat()} "
                    f"to {current.sample_time.isoformat()}"
                )

        alerts: list[Alert] = []
        for alert in payload.alerts.alert:
            translated = Alert(
                severity=_parse_severity(alert.severity),
                category=alert.category or alert.event,
                effective_from=alert.effective,
                effective_until=alert.expires,
                headline=alert.headline or alert.event,
            )
            # Providers repeat alerts issued by several offices
            if translated not in alerts:
                alerts.append(translated)

        return ForecastBundle(
            samples=samples,
            alerts=alerts,
            fetched_at=datetime.now(timezone.utc),
            provider=self.name,
        )
