"""Base forecast client abstraction.

This module defines the interface every weather data provider implements and
the errors a provider may raise.

## Contract

`ForecastClient.fetch(coordinate)` returns a `ForecastBundle` whose samples:
- are strictly ordered by `sample_time` with no duplicates
- span at least the next 72 hours
- are no coarser than hourly

plus zero or more alerts active for the coordinate's region.

### Canonical Units
- Temperature: Fahrenheit (°F)
- Wind speed: miles per hour (mph)
- Precipitation amount: inches (in)
- Precipitation probability: integer percentage (0-100)

### Translation Requirements
Each provider validates its payload against a strict schema before
translating it. A payload that fails validation raises
`MalformedResponseError`; missing values are never replaced with defaults,
since a defaulted temperature or wind speed could produce a false
"suitable" verdict.

## Errors
| Error | Raised when |
|-------|-------------|
| RateLimitError | HTTP 429 |
| AuthenticationError | HTTP 401 / 403, or missing API key |
| ProviderUnreachableError | Transport failure or timeout after retries, undecodable body |
| MalformedResponseError | Payload is not JSON or fails schema validation |
| ProviderError | Any other HTTP error |
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from outdoor_advisory.models.location import Coordinate
from outdoor_advisory.models.weather import ForecastBundle

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Base exception for weather provider errors."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.response_body = response_body


class RateLimitError(ProviderError):
    """Raised when provider rate limit is exceeded."""

    def __init__(
        self,
        provider: str,
        retry_after: int | None = None,
        status_code: int | None = None,
    ):
        super().__init__(
            f"Rate limit exceeded for {provider}",
            provider=provider,
            status_code=status_code,
        )
        self.retry_after = retry_after


class AuthenticationError(ProviderError):
    """Raised when authentication fails."""

    pass


class ProviderUnreachableError(ProviderError):
    """Raised when the provider cannot be reached (network error or timeout)."""

    pass


class MalformedResponseError(ProviderError):
    """Raised when the provider response fails schema validation."""

    pass


class ForecastClient(ABC):
    """Abstract base class for forecast clients.

    Subclasses implement `fetch()`; HTTP-backed clients can use `_fetch()` for
    retrying GET requests with consistent error mapping.

    Attributes:
        name: Human-readable provider name
        base_url: Base URL for the API
        requires_api_key: Whether this provider requires an API key

    Example:
        ```python
        class MyClient(ForecastClient):
            name = "my_provider"
            base_url = "https://api.example.com"

            async def fetch(self, coordinate):
                response = await self._fetch(...)
                return self._translate_response(response.json(), coordinate)
        ```
    """

    name: str
    base_url: str = ""
    requires_api_key: bool = False

    def __init__(
        self,
        api_key: str | None = None,
        user_agent: str | None = None,
        timeout: float = 5.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the client.

        Args:
            api_key: API key if required by the provider
            user_agent: User-Agent string for requests
            timeout: Per-request timeout in seconds
            http_client: Pre-configured HTTP client (owned by the caller)
        """
        self.api_key = api_key
        self.user_agent = user_agent or "outdoor-advisory/0.1.0"
        self.timeout = timeout
        self._client = http_client
        self._owns_client = http_client is None

    async def __aenter__(self) -> ForecastClient:
        """Enter async context manager."""
        self._get_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this client created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self._client

    def _require_api_key(self) -> None:
        """Raise AuthenticationError if this provider needs a key and has none."""
        if self.requires_api_key and not self.api_key:
            raise AuthenticationError(
                f"API key required for {self.name}",
                provider=self.name,
            )

    def _get_default_headers(self) -> dict[str, str]:
        """Get default headers for requests."""
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=2),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _get(
        self,
        url: str,
        params: dict[str, Any] | None,
        headers: dict[str, str],
    ) -> httpx.Response:
        return await self._get_client().get(url, params=params, headers=headers)

    async def _fetch(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Fetch data from the API with retry logic.

        Args:
            url: Full URL to fetch
            params: Query parameters
            headers: Additional headers

        Returns:
            HTTP response with a 2xx status

        Raises:
            ProviderUnreachableError: If the request fails after retries or the
                response cannot be read
            RateLimitError: If rate limit is exceeded
            AuthenticationError: If the provider rejects our credentials
            ProviderError: For any other HTTP error
        """
        request_headers = self._get_default_headers()
        if headers:
            request_headers.update(headers)

        try:
            response = await self._get(url, params, request_headers)
        except httpx.HTTPError as e:
            # Includes bodies that fail content decoding
            raise ProviderUnreachableError(
                f"Request to {self.name} failed: {e!r}",
                provider=self.name,
            ) from e

        # Handle rate limiting
        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                self.name,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                status_code=429,
            )

        if response.status_code in (401, 403):
            raise AuthenticationError(
                f"Authentication failed: {response.status_code}",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            )

        # Handle other errors
        if response.status_code >= 400:
            raise ProviderError(
                f"API request failed: {response.status_code}",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            )

        return response

    @abstractmethod
    async def fetch(self, coordinate: Coordinate) -> ForecastBundle:
        """Get the forecast bundle for a coordinate.

        Args:
            coordinate: Location to forecast

        Returns:
            ForecastBundle in canonical units

        Raises:
            ProviderError: If the forecast cannot be retrieved
        """
        pass
