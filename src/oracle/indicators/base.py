"""Technical indicator base classes and registry."""

from abc import ABC, abstractmethod
from typing import Any

import numpy as np
import pandas as pd

from oracle.core.registry import Registry


class Indicator(ABC):
    """
    Base class for technical indicators.

    Indicators take a price frame (a ``close`` column, chronological)
    and compute derived values aligned to the frame's index.
    """

    name: str = "base_indicator"

    @abstractmethod
    def compute(self, df: pd.DataFrame) -> pd.Series | pd.DataFrame:
        """
        Compute the indicator value(s).

        Args:
            df: DataFrame with at least a ``close`` column

        Returns:
            Series or DataFrame with indicator values
        """
        pass

    def __call__(self, df: pd.DataFrame) -> pd.Series | pd.DataFrame:
        return self.compute(df)


class IndicatorRegistry(Registry[Indicator]):
    """Registry for technical indicators."""

    def compute(
        self,
        name: str,
        df: pd.DataFrame,
        **params: Any,
    ) -> pd.Series | pd.DataFrame:
        """Compute an indicator by name."""
        indicator = self.create(name, **params)
        return indicator.compute(df)


indicator_registry = IndicatorRegistry("indicators")


# =============================================================================
# Indicator Implementations
# =============================================================================


@indicator_registry.register("sma", description="Simple Moving Average")
class SMA(Indicator):
    """Simple Moving Average indicator."""

    name = "sma"

    def __init__(self, period: int = 20, column: str = "close"):
        self.period = period
        self.column = column

    def compute(self, df: pd.DataFrame) -> pd.Series:
        return df[self.column].rolling(window=self.period).mean()


def _wilder_rsi(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 50.0 if avg_gain == 0 else 100.0
    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


@indicator_registry.register("rsi", description="Relative Strength Index (Wilder)")
class RSI(Indicator):
    """
    Relative Strength Index with Wilder smoothing.

    The first average is the simple mean of the first ``period`` gains and
    losses; later values use ``avg = (prev * (period - 1) + current) / period``.
    Values before the first full window are NaN. A window with no movement
    at all reads 50.
    """

    name = "rsi"

    def __init__(self, period: int = 14, column: str = "close"):
        self.period = period
        self.column = column

    def compute(self, df: pd.DataFrame) -> pd.Series:
        close = df[self.column].to_numpy(dtype=float)
        out = np.full(len(close), np.nan)
        if len(close) <= self.period:
            return pd.Series(out, index=df.index, name=self.name)

        deltas = np.diff(close)
        gains = np.clip(deltas, 0, None)
        losses = np.clip(-deltas, 0, None)

        avg_gain = gains[: self.period].mean()
        avg_loss = losses[: self.period].mean()
        out[self.period] = _wilder_rsi(avg_gain, avg_loss)

        for i in range(self.period + 1, len(close)):
            avg_gain = (avg_gain * (self.period - 1) + gains[i - 1]) / self.period
            avg_loss = (avg_loss * (self.period - 1) + losses[i - 1]) / self.period
            out[i] = _wilder_rsi(avg_gain, avg_loss)

        return pd.Series(out, index=df.index, name=self.name)


@indicator_registry.register("bollinger", description="Bollinger Bands")
class BollingerBands(Indicator):
    """
    Bollinger Bands with population standard deviation.

    Also reports ``percent_b``, the position of the close inside the bands
    clamped to [0, 1]; a zero-width band reads 0.5.
    """

    name = "bollinger"

    def __init__(self, period: int = 20, std_dev: float = 2.0):
        self.period = period
        self.std_dev = std_dev

    def compute(self, df: pd.DataFrame) -> pd.DataFrame:
        close = df["close"].astype(float)
        rolling = close.rolling(window=self.period)

        middle = SMA(self.period).compute(df)
        std = rolling.std(ddof=0)

        # Rolling sums drift on constant windows; pin those to exact values.
        flat = rolling.max() == rolling.min()
        middle = middle.mask(flat, close)
        std = std.mask(flat, 0.0)

        upper = middle + std * self.std_dev
        lower = middle - std * self.std_dev
        width = upper - lower
        percent_b = ((close - lower) / width).where(width > 0, 0.5).clip(0.0, 1.0)
        percent_b = percent_b.where(middle.notna())

        return pd.DataFrame({
            "upper": upper,
            "middle": middle,
            "lower": lower,
            "percent_b": percent_b,
        })


def add_indicators(
    df: pd.DataFrame,
    indicators: list[tuple[str, dict[str, Any]]],
) -> pd.DataFrame:
    """
    Add multiple indicators to a DataFrame.

    Args:
        df: Price DataFrame
        indicators: List of (name, params) tuples

    Returns:
        DataFrame with indicator columns added
    """
    result = df.copy()

    for name, params in indicators:
        values = indicator_registry.compute(name, result, **params)

        if isinstance(values, pd.Series):
            result[f"{name}_{params.get('period', '')}".rstrip("_")] = values
        else:
            for col in values.columns:
                result[f"{name}_{col}"] = values[col]

    return result
