"""Upstream source protocols and the shared HTTP base class."""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Protocol, runtime_checkable

import httpx

from oracle.core.errors import UpstreamDegradedError
from oracle.core.types import (
    DexMetrics,
    MarketSnapshot,
    PriceSeries,
    RankingMetrics,
    TokenIdentity,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class PriceSource(Protocol):
    """
    Spot snapshot and price history provider.

    Live implementations return ``None`` for tokens they do not cover and
    raise ``UpstreamDegradedError`` when a covered token cannot be served.
    """

    name: str

    async def fetch_market_snapshot(self, identity: TokenIdentity) -> MarketSnapshot | None:
        """Current price, market cap, 24h volume and change."""
        ...

    async def fetch_price_history(
        self,
        identity: TokenIdentity,
        days: int = 30,
    ) -> PriceSeries | None:
        """Chronological price series covering the last ``days`` days."""
        ...

    async def close(self) -> None:
        ...


@runtime_checkable
class DexSource(Protocol):
    """On-chain trading data provider."""

    name: str

    async def fetch_token_pairs(self, address: str) -> list[dict[str, Any]]:
        """All trading pairs whose base token is ``address``."""
        ...

    async def search_pairs(self, query: str) -> list[dict[str, Any]]:
        """Pairs matching free text (symbol or name)."""
        ...

    async def fetch_metrics(self, identity: TokenIdentity) -> DexMetrics | None:
        """Aggregated DEX metrics for a resolved token."""
        ...

    async def close(self) -> None:
        ...


@runtime_checkable
class RankingSource(Protocol):
    """Ranking and multi-timeframe performance provider."""

    name: str

    async def fetch_metrics(self, identity: TokenIdentity) -> RankingMetrics | None:
        """Rank, percent changes, supply figures and tags."""
        ...

    async def close(self) -> None:
        ...


class BaseHttpSource:
    """
    Common plumbing for live HTTP sources.

    Holds one lazily created ``httpx.AsyncClient`` per source. Non-2xx
    responses, transport errors, undecodable bodies and bodies of an
    unexpected shape are logged and re-raised as ``UpstreamDegradedError``.
    """

    name: str = "base"

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ):
        """
        Args:
            base_url: Provider root URL
            api_key: Credential, when the provider needs one
            timeout: Per-request timeout in seconds
            transport: Optional transport override (tests use MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._options = kwargs
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Accept": "application/json", **self._get_headers()},
                transport=self._transport,
            )
        return self._client

    def _get_headers(self) -> dict[str, str]:
        """Provider-specific headers (credentials)."""
        return {}

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Make an API request and decode the JSON body."""
        client = await self._get_client()

        try:
            response = await client.request(method, endpoint, params=params, json=json)
            response.raise_for_status()
            return response.json()

        except httpx.HTTPStatusError as e:
            logger.error(
                f"{self.name} API error {e.response.status_code}: {e.response.text[:200]}"
            )
            raise UpstreamDegradedError(
                self.name, f"HTTP {e.response.status_code} for {endpoint}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"{self.name} request failed: {e!r}")
            raise UpstreamDegradedError(self.name, f"request failed for {endpoint}") from e
        except ValueError as e:
            logger.error(f"{self.name} returned invalid JSON for {endpoint}")
            raise UpstreamDegradedError(self.name, "invalid JSON body") from e

    @contextmanager
    def _parsing(self, what: str) -> Iterator[None]:
        """Map a body that does not have the expected shape to ``UpstreamDegradedError``."""
        try:
            yield
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"{self.name} returned malformed {what}: {e!r}")
            raise UpstreamDegradedError(self.name, f"malformed {what}") from e

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None
