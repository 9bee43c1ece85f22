"""DEX pair aggregation and buy/sell pressure classification."""

from typing import Any, Sequence

from oracle.core.types import DexMetrics, DexSentiment, DexSignal

ACCUMULATION_RATIO = 1.5
ACCUMULATION_VOLUME_TREND = 0.8
DISTRIBUTION_RATIO = 0.7
STRENGTH_SCALE = 40.0
MAX_STRENGTH = 100.0
NEUTRAL_STRENGTH = 50.0


def buys_sells_ratio(buys: float, sells: float) -> float:
    """Buys per sell; 1.0 when there were no sells."""
    if sells <= 0:
        return 1.0
    return buys / sells


def volume_trend(metrics: DexMetrics) -> float:
    """Average hourly volume over 6h relative to the last hour."""
    if metrics.volume_1h > 0:
        return (metrics.volume_6h / 6) / metrics.volume_1h
    return 1.0


def dex_sentiment(metrics: DexMetrics) -> DexSentiment:
    """
    Classify on-chain pressure from the buy/sell ratio.

    ACCUMULATING needs both a high ratio and a non-collapsing volume
    trend; DISTRIBUTING only needs a low ratio. A non-positive ratio is
    maximal distribution.
    """
    ratio = metrics.buys_sells_ratio

    if ratio > ACCUMULATION_RATIO and volume_trend(metrics) > ACCUMULATION_VOLUME_TREND:
        return DexSentiment(
            signal=DexSignal.ACCUMULATING,
            strength=min(MAX_STRENGTH, ratio * STRENGTH_SCALE),
        )

    if ratio < DISTRIBUTION_RATIO:
        strength = MAX_STRENGTH if ratio <= 0 else min(MAX_STRENGTH, (1 / ratio) * STRENGTH_SCALE)
        return DexSentiment(signal=DexSignal.DISTRIBUTING, strength=strength)

    return DexSentiment(signal=DexSignal.NEUTRAL, strength=NEUTRAL_STRENGTH)


# =============================================================================
# Pair aggregation
# =============================================================================


def _num(value: Any) -> float:
    """Coerce an upstream numeric field, treating missing or junk as 0."""
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def _window(pair: dict[str, Any], key: str, window: str) -> float:
    return _num((pair.get(key) or {}).get(window))


def _txns(pair: dict[str, Any], side: str) -> int:
    h24 = (pair.get("txns") or {}).get("h24") or {}
    return int(_num(h24.get(side)))


def pair_liquidity(pair: dict[str, Any]) -> float:
    return _num((pair.get("liquidity") or {}).get("usd"))


def top_pair(pairs: Sequence[dict[str, Any]]) -> dict[str, Any]:
    """Pair with the greatest USD liquidity; the first one seen wins ties."""
    if not pairs:
        raise ValueError("top_pair requires at least one pair")
    best = pairs[0]
    for pair in pairs[1:]:
        if pair_liquidity(pair) > pair_liquidity(best):
            best = pair
    return best


def exact_symbol_matches(
    pairs: Sequence[dict[str, Any]],
    symbol: str,
) -> list[dict[str, Any]]:
    """Pairs whose base token symbol equals ``symbol`` (case-insensitive)."""
    wanted = symbol.upper()
    return [
        p for p in pairs
        if str((p.get("baseToken") or {}).get("symbol", "")).upper() == wanted
    ]


def aggregate_pairs(
    pairs: Sequence[dict[str, Any]],
    ticker: str,
    chain: str | None = None,
) -> DexMetrics:
    """
    Fold DexScreener pairs into one ``DexMetrics``.

    The most liquid pair supplies price, liquidity, valuation, price
    changes and identifiers; volumes and 24h transaction counts are summed
    over every pair.
    """
    best = top_pair(pairs)
    base = best.get("baseToken") or {}

    buys = sum(_txns(p, "buys") for p in pairs)
    sells = sum(_txns(p, "sells") for p in pairs)

    return DexMetrics(
        ticker=ticker.upper(),
        token_name=base.get("name") or ticker.upper(),
        price_usd=_num(best.get("priceUsd")),
        volume_24h=sum(_window(p, "volume", "h24") for p in pairs),
        volume_6h=sum(_window(p, "volume", "h6") for p in pairs),
        volume_1h=sum(_window(p, "volume", "h1") for p in pairs),
        liquidity_usd=pair_liquidity(best),
        fdv=_num(best.get("fdv")),
        market_cap=_num(best.get("marketCap")),
        price_change_24h=_window(best, "priceChange", "h24"),
        price_change_6h=_window(best, "priceChange", "h6"),
        price_change_1h=_window(best, "priceChange", "h1"),
        buys_24h=buys,
        sells_24h=sells,
        buys_sells_ratio=buys_sells_ratio(buys, sells),
        dex_id=best.get("dexId") or "",
        pair_address=best.get("pairAddress") or "",
        chain=chain or best.get("chainId") or "",
        top_pairs_count=len(pairs),
        image_url=(best.get("info") or {}).get("imageUrl"),
    )
