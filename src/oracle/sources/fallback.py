"""
Offline sources backed by the bundled mock market tables.

These answer every request without network access. The orchestrator
uses them in place of a live source that is disabled, unconfigured or
failing.
"""

import logging
from typing import Any

from oracle.analysis.dex import buys_sells_ratio
from oracle.core.types import (
    DexMetrics,
    MarketSnapshot,
    PriceSeries,
    RankingMetrics,
    TokenIdentity,
)
from oracle.data import MockMarket, load_mock_market
from oracle.indicators.technical import synthesize_price_series
from oracle.sources.registry import source_registry

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "DEFAULT"


class _MockSource:
    name = "mock"

    def __init__(self, market: MockMarket | None = None, **kwargs: Any):
        self.market = market or load_mock_market()

    async def close(self) -> None:
        pass


@source_registry.register("mock_price", description="Bundled snapshots", role="price", live=False)
class FallbackPriceSource(_MockSource):
    """Bundled snapshots plus synthetic history."""

    name = "mock_price"

    def __init__(
        self,
        market: MockMarket | None = None,
        points: int = 30,
        jitter: float = 0.05,
        seed: int | None = None,
        **kwargs: Any,
    ):
        super().__init__(market)
        self.points = points
        self.jitter = jitter
        self.seed = seed

    async def fetch_market_snapshot(self, identity: TokenIdentity) -> MarketSnapshot | None:
        row = self.market.snapshots.get(identity.symbol.upper())
        if row is None:
            return None
        return MarketSnapshot(
            name=row.get("name") or identity.name,
            price=float(row["price"]),
            market_cap=float(row.get("market_cap", 0)),
            volume_24h=float(row.get("volume_24h", 0)),
            price_change_24h=float(row.get("price_change_24h", 0)),
            high_24h=float(row.get("high_24h", 0)),
            low_24h=float(row.get("low_24h", 0)),
        )

    async def fetch_price_history(
        self,
        identity: TokenIdentity,
        days: int = 30,
        anchor_price: float | None = None,
    ) -> PriceSeries:
        """
        Synthesize a flagged series around ``anchor_price``.

        Without an anchor the bundled snapshot price is used, then 1.0.
        """
        if anchor_price is None:
            snapshot = await self.fetch_market_snapshot(identity)
            anchor_price = snapshot.price if snapshot else 1.0
        logger.info(f"Using synthetic price history for {identity.symbol}")
        return synthesize_price_series(
            anchor_price,
            points=self.points,
            jitter=self.jitter,
            seed=self.seed,
        )


@source_registry.register("mock_dex", description="Bundled DEX profiles", role="dex", live=False)
class FallbackDexSource(_MockSource):
    """Bundled DEX profiles; pair lookups find nothing."""

    name = "mock_dex"

    async def fetch_token_pairs(self, address: str) -> list[dict[str, Any]]:
        return []

    async def search_pairs(self, query: str) -> list[dict[str, Any]]:
        return []

    async def fetch_metrics(self, identity: TokenIdentity) -> DexMetrics:
        symbol = identity.symbol.upper()
        row = self.market.dex.get(symbol) or self.market.dex[DEFAULT_PROFILE]

        volume_24h = float(row["volume_24h"])
        change_24h = float(row.get("price_change_24h", 0))
        buys = int(row["buys_24h"])
        sells = int(row["sells_24h"])

        return DexMetrics(
            ticker=symbol,
            token_name=identity.name or symbol,
            price_usd=float(row["price_usd"]),
            volume_24h=volume_24h,
            volume_6h=volume_24h * 0.25,
            volume_1h=volume_24h * 0.04,
            liquidity_usd=float(row["liquidity_usd"]),
            fdv=float(row.get("fdv", 0)),
            market_cap=float(row.get("market_cap", 0)),
            price_change_24h=change_24h,
            price_change_6h=change_24h * 0.4,
            price_change_1h=change_24h * 0.1,
            buys_24h=buys,
            sells_24h=sells,
            buys_sells_ratio=buys_sells_ratio(buys, sells),
            dex_id="uniswap",
            pair_address="0x...",
            chain=identity.chain or "ethereum",
            top_pairs_count=5,
            image_url=None,
        )


@source_registry.register(
    "mock_ranking",
    description="Bundled ranking profiles",
    role="ranking",
    live=False,
)
class FallbackRankingSource(_MockSource):
    """Bundled ranking profiles; unknown symbols get a neutral rank-100 profile."""

    name = "mock_ranking"

    async def fetch_metrics(self, identity: TokenIdentity) -> RankingMetrics:
        symbol = identity.symbol.upper()
        row = self.market.ranking.get(symbol) or self.market.ranking[DEFAULT_PROFILE]
        max_supply = row.get("max_supply")

        return RankingMetrics(
            ticker=symbol,
            name=row.get("name") or identity.name or symbol,
            rank=int(row["rank"]),
            price=float(row.get("price", 0)),
            volume_24h=float(row.get("volume_24h", 0)),
            volume_change_24h=float(row.get("volume_change_24h", 0)),
            percent_change_1h=float(row.get("percent_change_1h", 0)),
            percent_change_24h=float(row.get("percent_change_24h", 0)),
            percent_change_7d=float(row.get("percent_change_7d", 0)),
            percent_change_30d=float(row.get("percent_change_30d", 0)),
            market_cap=float(row.get("market_cap", 0)),
            market_cap_dominance=float(row.get("market_cap_dominance", 0)),
            fully_diluted_market_cap=float(row.get("fully_diluted_market_cap", 0)),
            circulating_supply=float(row.get("circulating_supply", 0)),
            total_supply=float(row.get("total_supply", 0)),
            max_supply=float(max_supply) if max_supply is not None else None,
            num_market_pairs=int(row.get("num_market_pairs", 0)),
            tags=tuple(row.get("tags") or ()),
        )
