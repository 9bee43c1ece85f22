"""Sector heatmap: volume, 24h change and RSI per sector basket."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from oracle.core.types import Category, IndicatorResult, TokenIdentity, utc_now
from oracle.data import TokenTables, load_token_tables
from oracle.indicators import analyze, sector_sentiment
from oracle.pipeline import OracleService

logger = logging.getLogger(__name__)

HEATMAP_HISTORY_DAYS = 14


@dataclass
class CoinHeat:
    symbol: str
    name: str
    price: float
    volume: float
    change_24h: float
    rsi: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "name": self.name,
            "price": self.price,
            "volume": self.volume,
            "change24h": self.change_24h,
            "rsi": self.rsi,
        }


@dataclass
class SectorHeat:
    sector: str
    total_volume: float
    avg_change: float
    avg_rsi: float
    sentiment: str
    coins: list[CoinHeat]
    relative_size: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "sector": self.sector,
            "totalVolume": self.total_volume,
            "avgChange": self.avg_change,
            "avgRSI": self.avg_rsi,
            "sentiment": self.sentiment,
            "relativeSize": self.relative_size,
            "coins": [c.to_dict() for c in self.coins],
        }


@dataclass
class SectorOverview:
    sectors: dict[str, SectorHeat]
    total_volume: float
    overall_sentiment: str
    timestamp: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sectors": {k.lower(): v.to_dict() for k, v in self.sectors.items()},
            "totalVolume": self.total_volume,
            "overallSentiment": self.overall_sentiment,
            "timestamp": self.timestamp.isoformat(),
        }


def overall_sentiment(sentiments: list[str]) -> str:
    """Two or more bullish sectors is BULLISH, none is BEARISH, otherwise MIXED."""
    bullish = sum(1 for s in sentiments if s == "BULLISH")
    if bullish >= 2:
        return "BULLISH"
    if bullish == 0:
        return "BEARISH"
    return "MIXED"


class SectorService:
    """Builds the heatmap from the oracle's price sources."""

    def __init__(self, service: OracleService, tables: TokenTables | None = None):
        self.service = service
        self.tables = tables or load_token_tables()

    async def _coin(self, sector: str, symbol: str) -> tuple[CoinHeat, IndicatorResult] | None:
        identity = TokenIdentity(
            symbol=symbol,
            name=symbol,
            category=Category(sector),
            image="",
            source="static_table",
        )
        snapshot, _ = await self.service.fetch_snapshot(identity)
        if snapshot is None:
            logger.debug(f"No snapshot for {symbol}, skipping")
            return None

        history, _ = await self.service.fetch_history(identity, days=HEATMAP_HISTORY_DAYS)
        if history is None:
            history = await self.service.sources.fallback_price.fetch_price_history(
                identity, days=HEATMAP_HISTORY_DAYS, anchor_price=snapshot.price
            )

        indicator = analyze(history)
        coin = CoinHeat(
            symbol=symbol,
            name=snapshot.name,
            price=snapshot.price,
            volume=snapshot.volume_24h,
            change_24h=snapshot.price_change_24h,
            rsi=indicator.rsi,
        )
        return coin, indicator

    async def _sector(self, sector: str, symbols: tuple[str, ...]) -> SectorHeat:
        rows = await asyncio.gather(*(self._coin(sector, s) for s in symbols))
        rows = [r for r in rows if r is not None]
        coins = [coin for coin, _ in rows]
        indicators = [indicator for _, indicator in rows]

        count = len(coins) or 1
        return SectorHeat(
            sector=sector,
            total_volume=sum(c.volume for c in coins),
            avg_change=sum(c.change_24h for c in coins) / count,
            avg_rsi=sum(i.rsi for i in indicators) / count if indicators else 50.0,
            sentiment=sector_sentiment(indicators),
            coins=coins,
        )

    async def overview(self) -> SectorOverview:
        names = list(self.tables.heatmap_sectors)
        heats = await asyncio.gather(
            *(self._sector(name, self.tables.heatmap_sectors[name]) for name in names)
        )

        total = sum(h.total_volume for h in heats)
        for heat in heats:
            heat.relative_size = heat.total_volume / total * 100 if total else 0.0

        return SectorOverview(
            sectors=dict(zip(names, heats)),
            total_volume=total,
            overall_sentiment=overall_sentiment([h.sentiment for h in heats]),
        )
