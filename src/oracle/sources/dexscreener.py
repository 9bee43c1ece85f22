"""DexScreener adapter: pair lookups by contract address and free-text search."""

import logging
from typing import Any

from oracle.analysis.dex import aggregate_pairs, exact_symbol_matches
from oracle.core.errors import UpstreamDegradedError
from oracle.core.types import DexMetrics, TokenIdentity
from oracle.sources.base import BaseHttpSource
from oracle.sources.registry import source_registry

logger = logging.getLogger(__name__)


@source_registry.register(
    "dexscreener",
    description="DexScreener on-chain pairs",
    role="dex",
    live=True,
)
class DexScreenerSource(BaseHttpSource):
    """
    Live DEX source.

    Endpoints:
        GET /latest/dex/tokens/{address}
        GET /latest/dex/search?q={query}
    """

    name = "dexscreener"

    def __init__(self, base_url: str = "https://api.dexscreener.com", **kwargs: Any):
        super().__init__(base_url, **kwargs)

    @staticmethod
    def _pairs(payload: Any) -> list[dict[str, Any]]:
        if not isinstance(payload, dict):
            return []
        return [
            p
            for p in payload.get("pairs") or []
            if isinstance(p, dict) and isinstance(p.get("baseToken") or {}, dict)
        ]

    async def fetch_token_pairs(self, address: str) -> list[dict[str, Any]]:
        payload = await self._request("GET", f"/latest/dex/tokens/{address}")
        pairs = self._pairs(payload)
        logger.debug(f"dexscreener: {len(pairs)} pairs for {address}")
        return pairs

    async def search_pairs(self, query: str) -> list[dict[str, Any]]:
        payload = await self._request("GET", "/latest/dex/search", params={"q": query})
        pairs = self._pairs(payload)
        logger.debug(f"dexscreener: {len(pairs)} search results for {query!r}")
        return pairs

    async def fetch_metrics(self, identity: TokenIdentity) -> DexMetrics:
        """
        Aggregate every pair of the token.

        Uses the resolved contract when there is one; otherwise searches by
        symbol and keeps exact symbol matches when any exist.
        """
        if identity.address:
            pairs = await self.fetch_token_pairs(identity.address)
            chain = identity.chain
        else:
            results = await self.search_pairs(identity.symbol)
            pairs = exact_symbol_matches(results, identity.symbol) or results
            chain = None

        if not pairs:
            raise UpstreamDegradedError(self.name, f"no pairs for {identity.symbol}")

        with self._parsing("pairs"):
            return aggregate_pairs(pairs, identity.symbol, chain=chain)
