"""Small numeric helpers shared by the analyzers."""

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from negative infinity, like ``Math.round``."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def clamp(value: float, low: float, high: float) -> float:
    """Clamp ``value`` to ``[low, high]``."""
    return max(low, min(high, value))


def format_usd(value: float, symbol: str = "$") -> str:
    """Compact dollar figure: ``$1.94T``, ``$2.10B``, ``$450.00M``, ``$12.50K``."""
    for threshold, suffix in ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K")):
        if abs(value) >= threshold:
            return f"{symbol}{value / threshold:.2f}{suffix}"
    return f"{symbol}{value:.2f}"
