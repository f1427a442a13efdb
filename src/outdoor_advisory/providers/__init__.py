"""Weather forecast clients."""

from outdoor_advisory.providers.base import (
    AuthenticationError,
    ForecastClient,
    MalformedResponseError,
    ProviderError,
    ProviderUnreachableError,
    RateLimitError,
)
from outdoor_advisory.providers.weatherapi import WeatherApiClient

__all__ = [
    "ForecastClient",
    "ProviderError",
    "RateLimitError",
    "AuthenticationError",
    "ProviderUnreachableError",
    "MalformedResponseError",
    "WeatherApiClient",
]
