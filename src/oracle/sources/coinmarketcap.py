"""CoinMarketCap adapter: rank, multi-timeframe changes, supply and tags."""

import logging
from typing import Any

from oracle.core.errors import UpstreamDegradedError
from oracle.core.types import RankingMetrics, TokenIdentity
from oracle.data import TokenTables, load_token_tables
from oracle.sources.base import BaseHttpSource
from oracle.sources.registry import source_registry

logger = logging.getLogger(__name__)


def ranking_from_quote(data: dict[str, Any], ticker: str) -> RankingMetrics:
    """Build ``RankingMetrics`` from one ``quotes/latest`` entry."""
    quote = (data.get("quote") or {}).get("USD") or {}

    def q(key: str) -> float:
        return float(quote.get(key) or 0)

    max_supply = data.get("max_supply")
    return RankingMetrics(
        ticker=str(data.get("symbol") or ticker).upper(),
        name=data.get("name") or ticker,
        rank=int(data.get("cmc_rank") or 100),
        price=q("price"),
        volume_24h=q("volume_24h"),
        volume_change_24h=q("volume_change_24h"),
        percent_change_1h=q("percent_change_1h"),
        percent_change_24h=q("percent_change_24h"),
        percent_change_7d=q("percent_change_7d"),
        percent_change_30d=q("percent_change_30d"),
        market_cap=q("market_cap"),
        market_cap_dominance=q("market_cap_dominance"),
        fully_diluted_market_cap=q("fully_diluted_market_cap"),
        circulating_supply=float(data.get("circulating_supply") or 0),
        total_supply=float(data.get("total_supply") or 0),
        max_supply=float(max_supply) if max_supply is not None else None,
        num_market_pairs=int(data.get("num_market_pairs") or 0),
        tags=tuple(str(t) for t in data.get("tags") or ()),
    )


@source_registry.register(
    "coinmarketcap",
    description="CoinMarketCap quotes",
    role="ranking",
    live=True,
    requires_key=True,
)
class CoinMarketCapSource(BaseHttpSource):
    """
    Live ranking source for symbols listed in the CMC id table.

    Endpoint:
        GET /v1/cryptocurrency/quotes/latest?id={id}
    """

    name = "coinmarketcap"

    def __init__(
        self,
        base_url: str = "https://pro-api.coinmarketcap.com",
        tables: TokenTables | None = None,
        **kwargs: Any,
    ):
        super().__init__(base_url, **kwargs)
        self.tables = tables or load_token_tables()

    def _get_headers(self) -> dict[str, str]:
        return {"X-CMC_PRO_API_KEY": self.api_key}

    async def fetch_metrics(self, identity: TokenIdentity) -> RankingMetrics | None:
        cmc_id = self.tables.cmc_ids.get(identity.symbol.upper())
        if cmc_id is None:
            return None

        result = await self._request(
            "GET",
            "/v1/cryptocurrency/quotes/latest",
            params={"id": cmc_id},
        )
        with self._parsing("quote"):
            data = ((result or {}).get("data") or {}).get(str(cmc_id))
            if not data:
                raise UpstreamDegradedError(self.name, f"no quote for id {cmc_id}")
            return ranking_from_quote(data, identity.symbol)
