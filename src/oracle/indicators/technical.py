"""Technical read of a price series: RSI, Bollinger position and a signal."""

import logging
from datetime import datetime, timedelta
from typing import Sequence

import numpy as np
import pandas as pd

from oracle.core.numeric import clamp
from oracle.core.types import (
    BollingerBands,
    IndicatorResult,
    PricePoint,
    PriceSeries,
    TechnicalSignal,
    utc_now,
)
from oracle.indicators.base import add_indicators

logger = logging.getLogger(__name__)

RSI_PERIOD = 14
BOLLINGER_PERIOD = 20
BOLLINGER_STD = 2.0

NEUTRAL_RSI = 50.0
DEFAULT_LAST_PRICE = 100.0

OVERBOUGHT_RSI = 70.0
OVERSOLD_RSI = 30.0
OVERBOUGHT_PERCENT_B = 0.95
OVERSOLD_PERCENT_B = 0.05


def to_frame(prices: PriceSeries | Sequence[float]) -> pd.DataFrame:
    """Build a ``close`` frame from a series or a plain list of prices."""
    if isinstance(prices, PriceSeries):
        return pd.DataFrame(
            {"close": prices.prices},
            index=pd.DatetimeIndex([p.timestamp for p in prices.points]),
        )
    return pd.DataFrame({"close": [float(p) for p in prices]})


def classify(rsi: float, percent_b: float) -> TechnicalSignal:
    """Overbought takes precedence over oversold."""
    if rsi > OVERBOUGHT_RSI or percent_b > OVERBOUGHT_PERCENT_B:
        return TechnicalSignal.OVERBOUGHT
    if rsi < OVERSOLD_RSI or percent_b < OVERSOLD_PERCENT_B:
        return TechnicalSignal.OVERSOLD
    return TechnicalSignal.NEUTRAL


def analyze(prices: PriceSeries | Sequence[float]) -> IndicatorResult:
    """
    Compute RSI(14), Bollinger Bands(20, 2) and the derived signal.

    Short series fall back to documented neutral values instead of failing:
    fewer than 15 prices read RSI 50, fewer than 20 prices get bands at
    ``last * {1.1, 1.0, 0.9}`` with percent_b 0.5.
    """
    df = to_frame(prices)

    if len(df) < RSI_PERIOD + 1:
        rsi = NEUTRAL_RSI
    else:
        df = add_indicators(df, [("rsi", {"period": RSI_PERIOD})])
        rsi = round(float(df[f"rsi_{RSI_PERIOD}"].iloc[-1]), 2)

    if len(df) < BOLLINGER_PERIOD:
        last = float(df["close"].iloc[-1]) if len(df) else DEFAULT_LAST_PRICE
        bands = BollingerBands(
            upper=last * 1.1,
            middle=last,
            lower=last * 0.9,
            percent_b=0.5,
        )
    else:
        df = add_indicators(
            df,
            [("bollinger", {"period": BOLLINGER_PERIOD, "std_dev": BOLLINGER_STD})],
        )
        last_row = df.iloc[-1]
        bands = BollingerBands(
            upper=float(last_row["bollinger_upper"]),
            middle=float(last_row["bollinger_middle"]),
            lower=float(last_row["bollinger_lower"]),
            percent_b=clamp(float(last_row["bollinger_percent_b"]), 0.0, 1.0),
        )

    return IndicatorResult(
        rsi=rsi,
        bollinger=bands,
        signal=classify(rsi, bands.percent_b),
    )


def synthesize_price_series(
    current_price: float,
    points: int = 30,
    jitter: float = 0.05,
    seed: int | None = None,
    end: datetime | None = None,
) -> PriceSeries:
    """
    Generate a stand-in history around ``current_price``.

    Each point is ``current_price * (1 + u)`` with ``u`` uniform in
    ``[-jitter, jitter]``, at hourly spacing ending at ``end`` (now by
    default). The result is flagged ``synthetic``.
    """
    if points < 1:
        raise ValueError("points must be >= 1")

    rng = np.random.default_rng(seed)
    offsets = rng.uniform(-jitter, jitter, size=points)
    end = end or utc_now()

    series = [
        PricePoint(
            timestamp=end - timedelta(hours=points - 1 - i),
            price=float(current_price * (1 + offset)),
        )
        for i, offset in enumerate(offsets)
    ]
    logger.debug(f"Synthesized {points} prices around {current_price}")
    return PriceSeries(points=series, synthetic=True)


def sector_sentiment(results: Sequence[IndicatorResult]) -> str:
    """
    Aggregate indicator reads across a sector.

    Oversold sectors read as accumulation (``BULLISH``), overbought ones
    as distribution (``BEARISH``).
    """
    if not results:
        return "NEUTRAL"

    avg_rsi = sum(r.rsi for r in results) / len(results)
    oversold = sum(1 for r in results if r.signal == TechnicalSignal.OVERSOLD)
    overbought = sum(1 for r in results if r.signal == TechnicalSignal.OVERBOUGHT)

    if avg_rsi < 40 or oversold > len(results) / 2:
        return "BULLISH"
    if avg_rsi > 60 or overbought > len(results) / 2:
        return "BEARISH"
    return "NEUTRAL"


def describe_rsi(rsi: float) -> str:
    """Human-readable RSI label used by the CLI."""
    if rsi >= OVERBOUGHT_RSI:
        return f"{rsi:.1f} (Overbought)"
    if rsi <= OVERSOLD_RSI:
        return f"{rsi:.1f} (Oversold)"
    return f"{rsi:.1f} (Neutral)"
