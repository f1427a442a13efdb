"""Location models for outdoor activity advisories."""

from __future__ import annotations

import re
from typing import Self

from pydantic import BaseModel, ConfigDict, Field


# Regex for parsing lat/long coordinates: "latitude,longitude"
# Supports optional +/- prefix for both values
COORDINATE_PATTERN = re.compile(
    r"^(?P<lat>[-+]?\d*\.?\d+)\s*,\s*(?P<lon>[-+]?\d*\.?\d+)$"
)

DEFAULT_BUCKET_PRECISION = 3  # ~110m at the equator


class CoordinateBucket(BaseModel):
    """A coordinate rounded to a fixed number of decimal places.

    Buckets are the cache key for forecasts: two venues a few metres apart
    land in the same bucket and share one provider call.
    """

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    precision: int = Field(..., ge=0, le=6)

    def __str__(self) -> str:
        return f"{self.latitude:.{self.precision}f},{self.longitude:.{self.precision}f}"


class Coordinate(BaseModel):
    """Geographic coordinate (latitude/longitude).

    Latitude:
        - Negative (-) = south of equator
        - Positive (+) = north of equator
        - Range: -90 to +90

    Longitude:
        - Negative (-) = west of prime meridian
        - Positive (+) = east of prime meridian
        - Range: -180 to +180
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Parse a coordinate from the string format 'latitude,longitude'.

        Examples:
            '29.6387,-82.4275' -> Gainesville, FL
            '-33.8688,151.2093' -> Sydney
            '+51.5074,-0.1278' -> London
        """
        match = COORDINATE_PATTERN.match(value.strip())
        if not match:
            raise ValueError(
                f"Invalid coordinate format: '{value}'. "
                "Expected format: 'latitude,longitude' (e.g., '29.6387,-82.4275')"
            )
        return cls(
            latitude=float(match.group("lat")),
            longitude=float(match.group("lon")),
        )

    def bucket(self, precision: int = DEFAULT_BUCKET_PRECISION) -> CoordinateBucket:
        """Round this coordinate into its cache bucket."""
        # + 0.0 folds -0.0 into 0.0 so both hemispheres print the same key
        return CoordinateBucket(
            latitude=round(self.latitude, precision) + 0.0,
            longitude=round(self.longitude, precision) + 0.0,
            precision=precision,
        )

    def __str__(self) -> str:
        return f"{self.latitude},{self.longitude}"
