"""Multi-timeframe momentum and rank tiers."""

from oracle.core.numeric import round_half_up
from oracle.core.types import (
    Momentum,
    MomentumTrend,
    RankingMetrics,
    RankTier,
    RankTierInfo,
)

# Weights for the 1h / 24h / 7d / 30d percentage changes.
WEIGHTS = (0.10, 0.30, 0.35, 0.25)

TREND_DESCRIPTIONS = {
    MomentumTrend.STRONG_UP: "Explosive momentum across all timeframes. Caution advised at these levels.",
    MomentumTrend.UP: "Positive momentum building. Smart money accumulating.",
    MomentumTrend.STRONG_DOWN: "Heavy selling pressure. Potential capitulation zone.",
    MomentumTrend.DOWN: "Bearish pressure mounting. Watch for reversal signals.",
    MomentumTrend.NEUTRAL: "Consolidation phase. Awaiting breakout direction.",
}

# (max rank, tier, description), checked in order.
RANK_TIERS = (
    (10, RankTier.MEGA_CAP, "Top 10 - Elite institutional grade"),
    (50, RankTier.LARGE_CAP, "Top 50 - Proven market leaders"),
    (100, RankTier.MID_CAP, "Top 100 - Established projects"),
    (300, RankTier.SMALL_CAP, "Top 300 - Growth potential"),
)
MICRO_CAP_DESCRIPTION = "Micro-cap - High risk/reward"


def classify_trend(score: float, positive_count: int) -> MomentumTrend:
    """Map a weighted score and count of rising timeframes to a trend."""
    if score > 15 and positive_count >= 3:
        return MomentumTrend.STRONG_UP
    if score > 5 and positive_count >= 2:
        return MomentumTrend.UP
    if score < -15 and positive_count <= 1:
        return MomentumTrend.STRONG_DOWN
    if score < -5 and positive_count <= 2:
        return MomentumTrend.DOWN
    return MomentumTrend.NEUTRAL


def analyze_momentum(metrics: RankingMetrics) -> Momentum:
    """Weighted momentum over 1h/24h/7d/30d changes."""
    changes = (
        metrics.percent_change_1h,
        metrics.percent_change_24h,
        metrics.percent_change_7d,
        metrics.percent_change_30d,
    )
    score = sum(w * c for w, c in zip(WEIGHTS, changes))
    positive_count = sum(1 for c in changes if c > 0)

    trend = classify_trend(score, positive_count)
    return Momentum(
        trend=trend,
        score=round_half_up(score, 1),
        description=TREND_DESCRIPTIONS[trend],
    )


def rank_tier(rank: int) -> RankTierInfo:
    for max_rank, tier, description in RANK_TIERS:
        if rank <= max_rank:
            return RankTierInfo(tier=tier, description=description)
    return RankTierInfo(tier=RankTier.MICRO_CAP, description=MICRO_CAP_DESCRIPTION)
