"""Analyzers: DEX sentiment, momentum and composite scoring."""

from oracle.analysis.dex import aggregate_pairs, buys_sells_ratio, dex_sentiment
from oracle.analysis.momentum import analyze_momentum, rank_tier
from oracle.analysis.scoring import score, target_cap

__all__ = [
    "aggregate_pairs",
    "analyze_momentum",
    "buys_sells_ratio",
    "dex_sentiment",
    "rank_tier",
    "score",
    "target_cap",
]
