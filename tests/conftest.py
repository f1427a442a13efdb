"""Pytest fixtures for outdoor advisory tests.

This module provides test fixtures that ensure:
1. No external API calls are made (the forecast client is an in-memory fake)
2. Time is controlled explicitly through a fake clock
3. Isolated test environment with controlled configuration
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from tenacity import wait_none

from outdoor_advisory.forecasts.cache import ForecastCache
from outdoor_advisory.models.location import Coordinate
from outdoor_advisory.models.weather import (
    Alert,
    AlertSeverity,
    ForecastBundle,
    ForecastSample,
)
from outdoor_advisory.providers.base import ForecastClient, ProviderUnreachableError

# Noon UTC on the day most tests are built around
BASE_TIME = datetime(2025, 10, 13, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Builders
# =============================================================================


def make_sample(
    sample_time: datetime,
    temperature_f: float = 68.0,
    wind_speed_mph: float = 5.0,
    condition_text: str = "Sunny",
    precipitation_probability_pct: int = 0,
    precipitation_amount_in: float = 0.0,
) -> ForecastSample:
    """Build a forecast sample with mild defaults."""
    return ForecastSample(
        sample_time=sample_time,
        temperature_f=temperature_f,
        feels_like_f=temperature_f,
        wind_speed_mph=wind_speed_mph,
        precipitation_probability_pct=precipitation_probability_pct,
        precipitation_amount_in=precipitation_amount_in,
        condition_text=condition_text,
    )


def make_bundle(
    samples: list[ForecastSample],
    alerts: list[Alert] | None = None,
    fetched_at: datetime = BASE_TIME,
) -> ForecastBundle:
    """Build a forecast bundle as a provider would return it."""
    return ForecastBundle(
        samples=samples,
        alerts=alerts or [],
        fetched_at=fetched_at,
        provider="fake",
    )


def make_alert(
    effective_from: datetime,
    effective_until: datetime,
    severity: AlertSeverity = AlertSeverity.SEVERE,
    headline: str = "Severe Thunderstorm Warning",
) -> Alert:
    return Alert(
        severity=severity,
        category="Met",
        effective_from=effective_from,
        effective_until=effective_until,
        headline=headline,
    )


# =============================================================================
# Fakes
# =============================================================================


class FakeClock:
    """Controllable replacement for the cache's wall clock."""

    def __init__(self, now: datetime = BASE_TIME):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FakeForecastClient(ForecastClient):
    """In-memory forecast client.

    Responses are bundles or exceptions, consumed in order; the last one is
    repeated once the queue runs down to it.
    """

    name = "fake"

    def __init__(self, *responses: ForecastBundle | Exception):
        super().__init__()
        self.responses: list[ForecastBundle | Exception] = list(responses)
        self.calls: list[Coordinate] = []
        self.closed = False
        self.delay = 0.0
        self.gate: asyncio.Event | None = None

    def queue(self, *responses: ForecastBundle | Exception) -> None:
        """Replace the pending responses."""
        self.responses = list(responses)

    async def fetch(self, coordinate: Coordinate) -> ForecastBundle:
        self.calls.append(coordinate)
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)

        if not self.responses:
            raise ProviderUnreachableError("No response queued", provider=self.name)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    async def aclose(self) -> None:
        self.closed = True
        await super().aclose()


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    from outdoor_advisory.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def no_retry_wait(monkeypatch):
    """Skip tenacity backoff sleeps between provider retries."""
    monkeypatch.setattr(ForecastClient._get.retry, "wait", wait_none())


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def coordinate() -> Coordinate:
    """Sample coordinate for Gainesville, FL."""
    return Coordinate(latitude=29.6387, longitude=-82.4275)


@pytest.fixture
def mild_samples() -> list[ForecastSample]:
    """Hourly mild, dry samples for 24 hours starting at BASE_TIME."""
    return [make_sample(BASE_TIME + timedelta(hours=i)) for i in range(24)]


@pytest.fixture
def mild_bundle(mild_samples: list[ForecastSample]) -> ForecastBundle:
    return make_bundle(mild_samples)


@pytest.fixture
def fake_client(mild_bundle: ForecastBundle) -> FakeForecastClient:
    """Fake client answering every fetch with the mild bundle."""
    return FakeForecastClient(mild_bundle)


@pytest.fixture
def cache(fake_client: FakeForecastClient, clock: FakeClock) -> ForecastCache:
    """Cache with default windows driven by the fake clock."""
    return ForecastCache(fake_client, clock=clock)
