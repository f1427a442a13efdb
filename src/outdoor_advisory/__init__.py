"""Weather-aware advisories for scheduled outdoor activities."""

from outdoor_advisory.advisory import AdvisoryOutcome, AdvisoryService
from outdoor_advisory.config import AdvisoryConfig, Settings, get_settings
from outdoor_advisory.exceptions import (
    AdvisoryError,
    NoForecastInWindowError,
    ProviderUnavailableError,
    UnknownActivityError,
)

__version__ = "0.1.0"

__all__ = [
    "AdvisoryService",
    "AdvisoryOutcome",
    "AdvisoryConfig",
    "Settings",
    "get_settings",
    "AdvisoryError",
    "NoForecastInWindowError",
    "ProviderUnavailableError",
    "UnknownActivityError",
]
