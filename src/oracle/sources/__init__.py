"""Upstream data sources (live HTTP adapters and offline fallbacks)."""

from oracle.sources.base import (
    BaseHttpSource,
    DexSource,
    PriceSource,
    RankingSource,
)
from oracle.sources.registry import (
    SourceBundle,
    build_sources,
    source_registry,
)

# Import adapters to trigger registration
from oracle.sources.coingecko import CoinGeckoSource
from oracle.sources.coinmarketcap import CoinMarketCapSource
from oracle.sources.dexscreener import DexScreenerSource
from oracle.sources.fallback import (
    FallbackDexSource,
    FallbackPriceSource,
    FallbackRankingSource,
)

__all__ = [
    "BaseHttpSource",
    "CoinGeckoSource",
    "CoinMarketCapSource",
    "DexScreenerSource",
    "DexSource",
    "FallbackDexSource",
    "FallbackPriceSource",
    "FallbackRankingSource",
    "PriceSource",
    "RankingSource",
    "SourceBundle",
    "build_sources",
    "source_registry",
]
