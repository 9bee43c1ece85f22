"""Technical indicators module."""

from oracle.indicators.base import Indicator, indicator_registry
from oracle.indicators.technical import (
    analyze,
    sector_sentiment,
    synthesize_price_series,
)

__all__ = [
    "Indicator",
    "analyze",
    "indicator_registry",
    "sector_sentiment",
    "synthesize_price_series",
]
