"""Core module - types, errors and the plugin registry."""

from oracle.core.errors import (
    InputError,
    InternalError,
    NotFoundError,
    OracleError,
    UpstreamDegradedError,
)
from oracle.core.registry import Registry
from oracle.core.types import (
    Category,
    CompositeResult,
    DexMetrics,
    DexSentiment,
    DexSignal,
    IndicatorResult,
    MarketSnapshot,
    Momentum,
    MomentumTrend,
    OracleReport,
    Outlook,
    PriceSeries,
    RankingMetrics,
    RankTier,
    TechnicalSignal,
    TokenIdentity,
)

__all__ = [
    "Category",
    "CompositeResult",
    "DexMetrics",
    "DexSentiment",
    "DexSignal",
    "IndicatorResult",
    "InputError",
    "InternalError",
    "MarketSnapshot",
    "Momentum",
    "MomentumTrend",
    "NotFoundError",
    "OracleError",
    "OracleReport",
    "Outlook",
    "PriceSeries",
    "RankingMetrics",
    "RankTier",
    "Registry",
    "TechnicalSignal",
    "TokenIdentity",
    "UpstreamDegradedError",
]
