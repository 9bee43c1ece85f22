"""Core data types shared by the resolver, sources, analyzers and pipeline."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Sequence


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class _StrEnum(str, Enum):
    """String-valued enum that prints as its value."""

    def __str__(self) -> str:
        return self.value


class Category(_StrEnum):
    """Coarse sector bucket used to theme output."""

    MAJORS = "MAJORS"
    AI = "AI"
    RWA = "RWA"
    MEME = "MEME"
    DEFI = "DEFI"
    L2 = "L2"
    GAMING = "GAMING"
    ALTCOIN = "ALTCOIN"


class TechnicalSignal(_StrEnum):
    """Categorical read of RSI and Bollinger position."""

    OVERBOUGHT = "OVERBOUGHT"
    OVERSOLD = "OVERSOLD"
    NEUTRAL = "NEUTRAL"


class DexSignal(_StrEnum):
    """On-chain buy/sell pressure classification."""

    ACCUMULATING = "ACCUMULATING"
    DISTRIBUTING = "DISTRIBUTING"
    NEUTRAL = "NEUTRAL"


class MomentumTrend(_StrEnum):
    """Multi-timeframe momentum bucket."""

    STRONG_UP = "STRONG_UP"
    UP = "UP"
    NEUTRAL = "NEUTRAL"
    DOWN = "DOWN"
    STRONG_DOWN = "STRONG_DOWN"

    @property
    def is_up(self) -> bool:
        return self in (MomentumTrend.STRONG_UP, MomentumTrend.UP)

    @property
    def is_down(self) -> bool:
        return self in (MomentumTrend.STRONG_DOWN, MomentumTrend.DOWN)


class RankTier(_StrEnum):
    """Market-cap tier derived from ranking position."""

    MEGA_CAP = "MEGA_CAP"
    LARGE_CAP = "LARGE_CAP"
    MID_CAP = "MID_CAP"
    SMALL_CAP = "SMALL_CAP"
    MICRO_CAP = "MICRO_CAP"


class Outlook(_StrEnum):
    """Binary composite outlook."""

    BULLISH = "Bullish"
    BEARISH = "Bearish"


# =============================================================================
# Identity
# =============================================================================


@dataclass(frozen=True)
class TokenIdentity:
    """Canonical identity of the queried token, resolved once per request."""

    symbol: str
    name: str
    category: Category
    image: str
    chain: str | None = None
    address: str | None = None
    source: str = "dex_search"


# =============================================================================
# Price data
# =============================================================================


@dataclass(frozen=True)
class PricePoint:
    """Single (timestamp, price) observation."""

    timestamp: datetime
    price: float


@dataclass
class PriceSeries:
    """
    Chronological price history.

    ``synthetic`` is set when the series was generated by the fallback
    policy instead of coming from a provider.
    """

    points: list[PricePoint]
    synthetic: bool = False

    def __post_init__(self) -> None:
        if not self.points:
            raise ValueError("PriceSeries requires at least one point")

    @property
    def prices(self) -> list[float]:
        return [p.price for p in self.points]

    @property
    def last_price(self) -> float:
        return self.points[-1].price

    def __len__(self) -> int:
        return len(self.points)

    @classmethod
    def from_pairs(
        cls,
        pairs: Sequence[Sequence[float]],
        synthetic: bool = False,
    ) -> "PriceSeries":
        """Build from ``[[timestamp_ms, price], ...]`` pairs."""
        points = [
            PricePoint(
                timestamp=datetime.fromtimestamp(float(ts) / 1000, tz=timezone.utc),
                price=float(price),
            )
            for ts, price in sorted(pairs, key=lambda pair: pair[0])
        ]
        return cls(points=points, synthetic=synthetic)


@dataclass(frozen=True)
class MarketSnapshot:
    """Current spot market figures for a token."""

    name: str
    price: float
    market_cap: float
    volume_24h: float
    price_change_24h: float
    high_24h: float = 0.0
    low_24h: float = 0.0


# =============================================================================
# Indicator / DEX / ranking results
# =============================================================================


@dataclass(frozen=True)
class BollingerBands:
    """Bollinger band levels and position of the last price within them."""

    upper: float
    middle: float
    lower: float
    percent_b: float


@dataclass(frozen=True)
class IndicatorResult:
    """RSI, Bollinger Bands and the derived technical signal."""

    rsi: float
    bollinger: BollingerBands
    signal: TechnicalSignal


@dataclass(frozen=True)
class DexMetrics:
    """Aggregated DEX trading metrics for a token."""

    ticker: str
    token_name: str
    price_usd: float
    volume_24h: float
    volume_6h: float
    volume_1h: float
    liquidity_usd: float
    fdv: float
    market_cap: float
    price_change_24h: float
    price_change_6h: float
    price_change_1h: float
    buys_24h: int
    sells_24h: int
    buys_sells_ratio: float
    dex_id: str
    pair_address: str
    chain: str
    top_pairs_count: int
    image_url: str | None = None


@dataclass(frozen=True)
class DexSentiment:
    """Buy/sell pressure classification and its strength (0-100)."""

    signal: DexSignal
    strength: float


@dataclass(frozen=True)
class RankingMetrics:
    """Ranking and multi-timeframe performance from the ranking provider."""

    ticker: str
    name: str
    rank: int
    price: float
    volume_24h: float
    volume_change_24h: float
    percent_change_1h: float
    percent_change_24h: float
    percent_change_7d: float
    percent_change_30d: float
    market_cap: float
    market_cap_dominance: float
    fully_diluted_market_cap: float
    circulating_supply: float
    total_supply: float
    max_supply: float | None
    num_market_pairs: int
    tags: tuple[str, ...] = ()

    @property
    def is_ai_token(self) -> bool:
        return any(
            "ai" in t.lower() or "artificial-intelligence" in t.lower()
            for t in self.tags
        )

    @property
    def is_rwa_token(self) -> bool:
        return any(
            "rwa" in t.lower() or "real-world-assets" in t.lower()
            for t in self.tags
        )

    @property
    def is_meme_token(self) -> bool:
        return any("meme" in t.lower() for t in self.tags)


@dataclass(frozen=True)
class Momentum:
    """Weighted multi-timeframe momentum."""

    trend: MomentumTrend
    score: float
    description: str


@dataclass(frozen=True)
class RankTierInfo:
    """Rank tier with its descriptive string."""

    tier: RankTier
    description: str


# =============================================================================
# Composite output
# =============================================================================


@dataclass(frozen=True)
class SixMonthPrediction:
    """Projected market-cap range six months out."""

    low_estimate: int
    mid_estimate: int
    high_estimate: int
    growth_percent: int
    confidence: int
    reasoning: str


@dataclass(frozen=True)
class CompositeResult:
    """Folded output of the scoring engine."""

    confidence: int
    outlook: Outlook
    bullish_signals: list[str]
    bearish_signals: list[str]
    six_month: SixMonthPrediction


@dataclass
class OracleReport:
    """Everything returned for a single oracle query."""

    identity: TokenIdentity
    price: float
    volume_24h: float
    price_change_24h: float
    market_cap: float
    indicator: IndicatorResult
    synthetic_history: bool
    dex: DexMetrics
    dex_sentiment: DexSentiment
    ranking: RankingMetrics
    rank_tier: RankTierInfo
    momentum: Momentum
    composite: CompositeResult
    prophecy: str
    target_cap: str
    data_sources: list[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON payload served by the API."""
        identity = self.identity
        bands = self.indicator.bollinger
        ranking = self.ranking
        six_month = self.composite.six_month

        return {
            "ticker": identity.symbol,
            "name": identity.name,
            "image": identity.image,
            "address": identity.address,
            "chain": identity.chain or self.dex.chain,
            "category": str(identity.category),
            "sector": str(identity.category),
            "price": self.price,
            "volume_24h": self.volume_24h,
            "price_change_24h": self.price_change_24h,
            "market_cap": self.market_cap,
            "prediction_6m": {
                "market_cap_low": six_month.low_estimate,
                "market_cap_mid": six_month.mid_estimate,
                "market_cap_high": six_month.high_estimate,
                "growth_percent": six_month.growth_percent,
                "confidence": six_month.confidence,
                "reasoning": six_month.reasoning,
            },
            "technical": {
                "rsi": self.indicator.rsi,
                "bollinger_position": bands.percent_b,
                "bollinger_upper": bands.upper,
                "bollinger_middle": bands.middle,
                "bollinger_lower": bands.lower,
                "signal": str(self.indicator.signal),
                "synthetic_history": self.synthetic_history,
            },
            "dex": {
                "liquidity_usd": self.dex.liquidity_usd,
                "volume_24h": self.dex.volume_24h,
                "volume_6h": self.dex.volume_6h,
                "volume_1h": self.dex.volume_1h,
                "buys_24h": self.dex.buys_24h,
                "sells_24h": self.dex.sells_24h,
                "buys_sells_ratio": self.dex.buys_sells_ratio,
                "sentiment": str(self.dex_sentiment.signal),
                "sentiment_strength": self.dex_sentiment.strength,
                "top_pairs_count": self.dex.top_pairs_count,
                "dex_id": self.dex.dex_id,
                "pair_address": self.dex.pair_address,
            },
            "cmc": {
                "rank": ranking.rank,
                "ranking_tier": str(self.rank_tier.tier),
                "ranking_description": self.rank_tier.description,
                "percent_change_1h": ranking.percent_change_1h,
                "percent_change_24h": ranking.percent_change_24h,
                "percent_change_7d": ranking.percent_change_7d,
                "percent_change_30d": ranking.percent_change_30d,
                "volume_change_24h": ranking.volume_change_24h,
                "market_cap_dominance": ranking.market_cap_dominance,
                "fdv": ranking.fully_diluted_market_cap,
                "circulating_supply": ranking.circulating_supply,
                "total_supply": ranking.total_supply,
                "max_supply": ranking.max_supply,
                "num_market_pairs": ranking.num_market_pairs,
                "momentum": {
                    "trend": str(self.momentum.trend),
                    "score": self.momentum.score,
                    "description": self.momentum.description,
                },
                "tags": list(ranking.tags),
                "is_ai_token": ranking.is_ai_token,
                "is_rwa_token": ranking.is_rwa_token,
                "is_meme_token": ranking.is_meme_token,
            },
            "prediction": {
                "outlook": str(self.composite.outlook),
                "prophecy": self.prophecy,
                "target_cap": self.target_cap,
                "confidence": self.composite.confidence,
                "signals_bullish": list(self.composite.bullish_signals),
                "signals_bearish": list(self.composite.bearish_signals),
            },
            "data_sources": list(self.data_sources),
            "timestamp": self.timestamp.isoformat(),
        }
