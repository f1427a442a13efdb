"""Forecast caching and time matching."""

from outdoor_advisory.forecasts.cache import ForecastCache
from outdoor_advisory.forecasts.matching import WindowMatcher

__all__ = [
    "ForecastCache",
    "WindowMatcher",
]
