"""Forecast cache keyed by coordinate bucket.

The cache bounds provider calls while keeping forecasts fresh enough for
same-day scheduling decisions.

## Lookup

1. Drop every entry older than `max_age` (default 6 hours).
2. A bundle younger than `freshness_window` (default 30 minutes) is returned
   directly, without suspending.
3. Otherwise the provider is called, bounded by `fetch_timeout`:
   - success: the bundle is stamped with the bucket and fetch time, replaces
     the previous one and is returned
   - failure or timeout with a previous bundle: the previous bundle is
     returned marked stale
   - failure without a previous bundle: `ProviderUnavailableError`

## Concurrency

Concurrent misses for the same bucket share one in-flight fetch. Refresh is
lazy; nothing runs in the background.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from outdoor_advisory.exceptions import ProviderUnavailableError
from outdoor_advisory.models.location import (
    DEFAULT_BUCKET_PRECISION,
    Coordinate,
    CoordinateBucket,
)
from outdoor_advisory.models.weather import ForecastBundle
from outdoor_advisory.providers.base import ForecastClient, ProviderError

logger = logging.getLogger(__name__)

DEFAULT_FRESHNESS_WINDOW = timedelta(minutes=30)
DEFAULT_MAX_AGE = timedelta(hours=6)
DEFAULT_FETCH_TIMEOUT_SECONDS = 5.0


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ForecastCache:
    """Memoizes forecast bundles per coordinate bucket.

    Construct one per process and close it on shutdown:

    ```python
    async with ForecastCache(WeatherApiClient(api_key=...)) as cache:
        bundle = await cache.get(Coordinate(latitude=29.64, longitude=-82.43))
    ```
    """

    def __init__(
        self,
        client: ForecastClient,
        freshness_window: timedelta = DEFAULT_FRESHNESS_WINDOW,
        max_age: timedelta = DEFAULT_MAX_AGE,
        fetch_timeout: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
        precision: int = DEFAULT_BUCKET_PRECISION,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the cache.

        Args:
            client: Forecast client called on miss or expiry
            freshness_window: Maximum age before a refresh is attempted
            max_age: Hard ceiling after which entries are dropped
            fetch_timeout: Seconds to wait for the client before giving up
            precision: Decimal places used to bucket coordinates
            clock: Returns the current timezone-aware time
        """
        if max_age < freshness_window:
            raise ValueError("max_age must be at least freshness_window")

        self.client = client
        self.freshness_window = freshness_window
        self.max_age = max_age
        self.fetch_timeout = fetch_timeout
        self.precision = precision
        self._clock = clock

        self._entries: dict[CoordinateBucket, ForecastBundle] = {}
        self._inflight: dict[CoordinateBucket, asyncio.Task[ForecastBundle]] = {}

    async def __aenter__(self) -> ForecastCache:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, coordinate: Coordinate) -> bool:
        return coordinate.bucket(self.precision) in self._entries

    async def aclose(self) -> None:
        """Cancel in-flight fetches, drop all entries and close the client."""
        for task in list(self._inflight.values()):
            task.cancel()
        self._inflight.clear()
        self.clear()
        await self.client.aclose()

    def clear(self) -> None:
        """Drop all cached bundles."""
        self._entries.clear()

    def evict_expired(self) -> int:
        """Drop entries older than max_age.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        expired = [
            bucket
            for bucket, bundle in self._entries.items()
            if bundle.age_at(now) >= self.max_age
        ]
        for bucket in expired:
            del self._entries[bucket]
        if expired:
            logger.info(f"Evicted {len(expired)} expired forecast bundle(s)")
        return len(expired)

    def _is_fresh(self, bundle: ForecastBundle, now: datetime) -> bool:
        return bundle.age_at(now) < self.freshness_window

    async def get(self, coordinate: Coordinate) -> ForecastBundle:
        """Get the forecast bundle for a coordinate.

        Args:
            coordinate: Location to look up

        Returns:
            A fresh bundle, or the previous bundle marked stale when the
            refresh failed

        Raises:
            ProviderUnavailableError: If the refresh failed and there is no
                usable previous bundle
        """
        bucket = coordinate.bucket(self.precision)
        self.evict_expired()

        cached = self._entries.get(bucket)
        if cached is not None and self._is_fresh(cached, self._clock()):
            logger.debug(f"Forecast cache hit for {bucket}")
            return cached

        task = self._inflight.get(bucket)
        if task is None:
            logger.debug(f"Forecast cache miss for {bucket}")
            task = asyncio.ensure_future(self._refresh(bucket, coordinate))
            self._inflight[bucket] = task
            task.add_done_callback(lambda t: self._finish_refresh(bucket, t))
        else:
            logger.debug(f"Joining in-flight forecast fetch for {bucket}")

        # Shielded so one caller giving up does not cancel the shared fetch
        return await asyncio.shield(task)

    def _finish_refresh(
        self, bucket: CoordinateBucket, task: asyncio.Task[ForecastBundle]
    ) -> None:
        if self._inflight.get(bucket) is task:
            del self._inflight[bucket]
        if not task.cancelled():
            # Retrieve so an unawaited failure is not reported as lost
            task.exception()

    async def _refresh(
        self, bucket: CoordinateBucket, coordinate: Coordinate
    ) -> ForecastBundle:
        try:
            bundle = await asyncio.wait_for(
                self.client.fetch(coordinate), timeout=self.fetch_timeout
            )
        except (ProviderError, asyncio.TimeoutError) as e:
            return self._fallback(bucket, e)

        return self._store(bucket, bundle)

    def _fallback(self, bucket: CoordinateBucket, error: Exception) -> ForecastBundle:
        """Serve the previous bundle as stale, or raise if there is none."""
        provider = getattr(error, "provider", None) or getattr(self.client, "name", None)
        if isinstance(error, asyncio.TimeoutError):
            reason = f"timed out after {self.fetch_timeout:g}s"
        else:
            reason = str(error)

        previous = self._entries.get(bucket)
        if previous is not None and previous.age_at(self._clock()) < self.max_age:
            logger.warning(
                f"Forecast refresh for {bucket} failed ({reason}); "
                f"serving bundle fetched at {previous.fetched_at.isoformat()}"
            )
            return previous.as_stale()

        logger.warning(f"Forecast refresh for {bucket} failed ({reason}); no cached bundle")
        raise ProviderUnavailableError(bucket, provider=provider) from error

    def _store(self, bucket: CoordinateBucket, bundle: ForecastBundle) -> ForecastBundle:
        stamped = bundle.model_copy(
            update={"bucket": bucket, "fetched_at": self._clock(), "is_stale": False}
        )

        current = self._entries.get(bucket)
        if current is not None and current.fetched_at > stamped.fetched_at:
            # Never replace a newer bundle with an older one
            return current

        self._entries[bucket] = stamped
        logger.info(
            f"Stored {len(stamped.samples)} samples and {len(stamped.alerts)} alerts "
            f"for {bucket} from {stamped.provider}"
        )
        return stamped
