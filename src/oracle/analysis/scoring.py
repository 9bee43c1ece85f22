"""
Composite scoring: confidence, outlook and the six-month projection.

Everything here is pure arithmetic over already-validated analyzer
outputs. Coefficients come from ``ScoringConfig`` / ``ProjectionConfig``
whose defaults give:

    confidence = round(min(99, 0.25*rsi_score + 0.20*bb_score
                               + 0.30*dex_score + 0.25*momentum_score
                               + rank_bonus))

where the RSI and Bollinger scores reward extremes (85/60 and 80/55),
the DEX score is ``clamp(40, 100, 50 + (ratio - 1) * 30)`` and the
momentum score is ``clamp(40, 100, 50 + momentum * 2)``.
"""

import logging

from oracle.config.schemas import ProjectionConfig, ScoringConfig
from oracle.core.numeric import clamp, round_half_up
from oracle.core.types import (
    Category,
    CompositeResult,
    DexSentiment,
    DexSignal,
    IndicatorResult,
    Momentum,
    Outlook,
    SixMonthPrediction,
    TechnicalSignal,
)

logger = logging.getLogger(__name__)

# Signal strings surfaced to clients.
SIGNAL_RSI_OVERSOLD = "RSI oversold - accumulation zone"
SIGNAL_RSI_OVERBOUGHT = "RSI overbought - distribution zone"
SIGNAL_DEX_ACCUMULATION = "DEX showing accumulation (high buy/sell ratio)"
SIGNAL_DEX_DISTRIBUTION = "DEX showing distribution (high sell pressure)"
SIGNAL_MOMENTUM = "Multi-timeframe momentum: {trend}"
SIGNAL_RSI_REVERSAL = "RSI indicates potential reversal zone"
SIGNAL_RSI_EXTENDED = "RSI indicates extended conditions"

REASONING = {
    "strong_bullish": (
        "Strong bullish indicators suggest significant upside potential. "
        "Multiple signals confirm accumulation phase."
    ),
    "moderate_bullish": (
        "Moderate bullish outlook with healthy momentum. "
        "Market conditions favor gradual appreciation."
    ),
    "cautious_bullish": (
        "Cautiously bullish. Some positive signals but limited near-term catalysts."
    ),
    "bearish": "Bearish pressure detected. Consider waiting for better entry points.",
    "neutral_bearish": (
        "Neutral to slightly bearish. "
        "Consolidation phase expected before next major move."
    ),
}

# (threshold, label) ladders for the target cap string, checked in order.
TARGET_CAP_LADDERS = {
    Category.MEME: ((50e9, "100B+"), (10e9, "50B+"), (0, "10B+")),
    Category.AI: ((10e9, "50B+"), (1e9, "25B+"), (0, "10B+")),
}
DEFAULT_TARGET_CAP_LADDER = ((5e9, "25B+"), (500e6, "10B+"), (0, "5B+"))


# =============================================================================
# Confidence
# =============================================================================


def composite_confidence(
    rsi: float,
    percent_b: float,
    ratio: float,
    momentum_score: float,
    rank: int,
    config: ScoringConfig | None = None,
) -> int:
    """Blend the sub-scores into an integer confidence in ``[0, max]``."""
    cfg = config or ScoringConfig()

    rsi_score = (
        cfg.rsi_extreme_score if rsi < 30 or rsi > 70 else cfg.rsi_normal_score
    )
    bb_extreme = (
        percent_b < cfg.bollinger_extreme_low or percent_b > cfg.bollinger_extreme_high
    )
    bb_score = cfg.bollinger_extreme_score if bb_extreme else cfg.bollinger_normal_score
    dex_score = clamp(
        50 + (ratio - 1) * cfg.dex_ratio_slope,
        cfg.component_floor,
        cfg.component_ceiling,
    )
    momentum_confidence = clamp(
        50 + momentum_score * cfg.momentum_slope,
        cfg.component_floor,
        cfg.component_ceiling,
    )

    if rank <= 50:
        rank_bonus = cfg.top50_bonus
    elif rank <= 100:
        rank_bonus = cfg.top100_bonus
    else:
        rank_bonus = 0.0

    weighted = (
        rsi_score * cfg.rsi_weight
        + bb_score * cfg.bollinger_weight
        + dex_score * cfg.dex_weight
        + momentum_confidence * cfg.momentum_weight
    )
    return max(0, int(round_half_up(min(cfg.max_confidence, weighted + rank_bonus))))


# =============================================================================
# Outlook
# =============================================================================


def determine_outlook(
    technical_signal: TechnicalSignal,
    dex_signal: DexSignal,
    momentum: Momentum,
    rsi: float,
) -> tuple[Outlook, list[str], list[str]]:
    """
    Run the four signal checks and pick an outlook.

    Returns ``(outlook, bullish, bearish)``. Ties, including no signals
    at all, resolve to Bullish.
    """
    bullish: list[str] = []
    bearish: list[str] = []

    if technical_signal == TechnicalSignal.OVERSOLD:
        bullish.append(SIGNAL_RSI_OVERSOLD)
    elif technical_signal == TechnicalSignal.OVERBOUGHT:
        bearish.append(SIGNAL_RSI_OVERBOUGHT)

    if dex_signal == DexSignal.ACCUMULATING:
        bullish.append(SIGNAL_DEX_ACCUMULATION)
    elif dex_signal == DexSignal.DISTRIBUTING:
        bearish.append(SIGNAL_DEX_DISTRIBUTION)

    if momentum.trend.is_up:
        bullish.append(SIGNAL_MOMENTUM.format(trend=momentum.trend))
    elif momentum.trend.is_down:
        bearish.append(SIGNAL_MOMENTUM.format(trend=momentum.trend))

    if rsi < 40:
        bullish.append(SIGNAL_RSI_REVERSAL)
    elif rsi > 60:
        bearish.append(SIGNAL_RSI_EXTENDED)

    outlook = Outlook.BULLISH if len(bullish) >= len(bearish) else Outlook.BEARISH
    return outlook, bullish, bearish


# =============================================================================
# Six-month projection
# =============================================================================


def _reasoning(is_bullish: bool, mid_growth: float) -> str:
    if is_bullish:
        if mid_growth > 0.5:
            return REASONING["strong_bullish"]
        if mid_growth > 0.2:
            return REASONING["moderate_bullish"]
        return REASONING["cautious_bullish"]
    if mid_growth < -0.1:
        return REASONING["bearish"]
    return REASONING["neutral_bearish"]


def project_six_months(
    current_market_cap: float,
    momentum_score: float,
    rsi: float,
    dex_strength: float,
    price_change_30d: float,
    is_bullish: bool,
    config: ProjectionConfig | None = None,
) -> SixMonthPrediction:
    """
    Project a low/mid/high market cap six months out.

    The growth multiplier is the product of momentum, RSI, DEX sentiment
    and 30-day performance factors applied to a fixed base rate. Bullish
    mid growth is floored at +10%, bearish at -20%.
    """
    cfg = config or ProjectionConfig()

    momentum_factor = 1 + momentum_score / cfg.momentum_divisor
    if rsi < 30:
        rsi_factor = cfg.rsi_oversold_factor
    elif rsi > 70:
        rsi_factor = cfg.rsi_overbought_factor
    else:
        rsi_factor = 1.0
    sentiment_factor = 1 + (dex_strength - 50) / cfg.sentiment_divisor
    performance_factor = 1 + price_change_30d / cfg.change_30d_divisor

    growth = (
        cfg.base_growth
        * momentum_factor
        * rsi_factor
        * sentiment_factor
        * performance_factor
    )

    if is_bullish:
        mid_growth = max(cfg.bullish_floor, growth * cfg.bullish_multiplier)
    else:
        mid_growth = max(cfg.bearish_floor, growth * cfg.bearish_multiplier)
    low_growth = mid_growth * cfg.low_multiplier
    high_growth = mid_growth * cfg.high_multiplier

    confidence = min(
        cfg.max_confidence,
        50 + abs(momentum_score) / 2 + dex_strength / 4,
    )

    return SixMonthPrediction(
        low_estimate=int(round_half_up(current_market_cap * (1 + low_growth))),
        mid_estimate=int(round_half_up(current_market_cap * (1 + mid_growth))),
        high_estimate=int(round_half_up(current_market_cap * (1 + high_growth))),
        growth_percent=int(round_half_up(mid_growth * 100)),
        confidence=int(round_half_up(confidence)),
        reasoning=_reasoning(is_bullish, mid_growth),
    )


def target_cap(market_cap: float, category: Category) -> str:
    """Sector-themed market-cap target label for the current market cap."""
    ladder = TARGET_CAP_LADDERS.get(category, DEFAULT_TARGET_CAP_LADDER)
    for threshold, label in ladder:
        if market_cap > threshold:
            return label
    return ladder[-1][1]


# =============================================================================
# Composite
# =============================================================================


def score(
    indicator: IndicatorResult,
    dex: DexSentiment,
    buys_sells_ratio: float,
    momentum: Momentum,
    rank: int,
    current_market_cap: float,
    price_change_30d: float = 0.0,
    config: ScoringConfig | None = None,
    projection: ProjectionConfig | None = None,
) -> CompositeResult:
    """Fold indicator, DEX and momentum reads into a ``CompositeResult``."""
    confidence = composite_confidence(
        rsi=indicator.rsi,
        percent_b=indicator.bollinger.percent_b,
        ratio=buys_sells_ratio,
        momentum_score=momentum.score,
        rank=rank,
        config=config,
    )
    outlook, bullish, bearish = determine_outlook(
        technical_signal=indicator.signal,
        dex_signal=dex.signal,
        momentum=momentum,
        rsi=indicator.rsi,
    )
    six_month = project_six_months(
        current_market_cap=current_market_cap,
        momentum_score=momentum.score,
        rsi=indicator.rsi,
        dex_strength=dex.strength,
        price_change_30d=price_change_30d,
        is_bullish=outlook == Outlook.BULLISH,
        config=projection,
    )
    logger.debug(
        f"Composite: confidence={confidence} outlook={outlook} "
        f"bullish={len(bullish)} bearish={len(bearish)}"
    )
    return CompositeResult(
        confidence=confidence,
        outlook=outlook,
        bullish_signals=bullish,
        bearish_signals=bearish,
        six_month=six_month,
    )
