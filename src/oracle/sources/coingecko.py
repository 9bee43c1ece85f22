"""CoinGecko adapter: spot snapshots and market-chart price history."""

import logging
from typing import Any

from oracle.core.errors import UpstreamDegradedError
from oracle.core.types import MarketSnapshot, PriceSeries, TokenIdentity
from oracle.data import TokenTables, load_token_tables
from oracle.sources.base import BaseHttpSource
from oracle.sources.registry import source_registry

logger = logging.getLogger(__name__)


@source_registry.register(
    "coingecko",
    description="CoinGecko spot and history",
    role="price",
    live=True,
)
class CoinGeckoSource(BaseHttpSource):
    """
    Live price source for symbols listed in the CoinGecko id table.

    Endpoints:
        GET /coins/markets?vs_currency=usd&ids={id}
        GET /coins/{id}/market_chart?vs_currency=usd&days={days}
    """

    name = "coingecko"

    def __init__(
        self,
        base_url: str = "https://api.coingecko.com/api/v3",
        tables: TokenTables | None = None,
        **kwargs: Any,
    ):
        super().__init__(base_url, **kwargs)
        self.tables = tables or load_token_tables()

    def _get_headers(self) -> dict[str, str]:
        if self.api_key:
            return {"x-cg-demo-api-key": self.api_key}
        return {}

    def coin_id(self, symbol: str) -> str | None:
        return self.tables.coin_ids.get(symbol.upper())

    async def fetch_market_snapshot(self, identity: TokenIdentity) -> MarketSnapshot | None:
        coin_id = self.coin_id(identity.symbol)
        if coin_id is None:
            return None

        data = await self._request(
            "GET",
            "/coins/markets",
            params={
                "vs_currency": "usd",
                "ids": coin_id,
                "order": "market_cap_desc",
                "sparkline": "false",
                "price_change_percentage": "24h",
            },
        )
        if not isinstance(data, list) or not data:
            raise UpstreamDegradedError(self.name, f"no market data for {coin_id}")

        with self._parsing("market data"):
            coin = data[0]
            return MarketSnapshot(
                name=coin.get("name") or identity.name,
                price=float(coin.get("current_price") or 0),
                market_cap=float(coin.get("market_cap") or 0),
                volume_24h=float(coin.get("total_volume") or 0),
                price_change_24h=float(coin.get("price_change_percentage_24h") or 0),
                high_24h=float(coin.get("high_24h") or 0),
                low_24h=float(coin.get("low_24h") or 0),
            )

    async def fetch_price_history(
        self,
        identity: TokenIdentity,
        days: int = 30,
    ) -> PriceSeries | None:
        coin_id = self.coin_id(identity.symbol)
        if coin_id is None:
            return None

        data = await self._request(
            "GET",
            f"/coins/{coin_id}/market_chart",
            params={"vs_currency": "usd", "days": days},
        )
        prices = data.get("prices") if isinstance(data, dict) else None
        if not prices:
            raise UpstreamDegradedError(self.name, f"empty price history for {coin_id}")

        with self._parsing("price history"):
            return PriceSeries.from_pairs(prices)
