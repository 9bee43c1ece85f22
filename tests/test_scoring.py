"""Tests for composite scoring."""

import pytest

from oracle.analysis.scoring import (
    REASONING,
    SIGNAL_DEX_ACCUMULATION,
    SIGNAL_DEX_DISTRIBUTION,
    SIGNAL_RSI_EXTENDED,
    SIGNAL_RSI_OVERBOUGHT,
    SIGNAL_RSI_OVERSOLD,
    SIGNAL_RSI_REVERSAL,
    composite_confidence,
    determine_outlook,
    project_six_months,
    score,
    target_cap,
)
from oracle.config.schemas import ProjectionConfig, ScoringConfig
from oracle.core.types import (
    BollingerBands,
    Category,
    DexSentiment,
    DexSignal,
    IndicatorResult,
    Momentum,
    MomentumTrend,
    Outlook,
    TechnicalSignal,
)

CAP = 1_000_000_000


def momentum(trend=MomentumTrend.NEUTRAL, value=0.0):
    return Momentum(trend=trend, score=value, description="")


class TestCompositeConfidence:
    """Tests for the weighted confidence."""

    def test_neutral_top_ranked(self):
        """Neutral reads on a rank-1 token."""
        assert composite_confidence(
            rsi=45, percent_b=0.5, ratio=1.0, momentum_score=0, rank=1
        ) == 64

    def test_extremes_score_higher(self):
        confidence = composite_confidence(
            rsi=25, percent_b=0.1, ratio=5.0, momentum_score=40, rank=200
        )
        # 85*.25 + 80*.20 + 100*.30 + 100*.25
        assert confidence == 92

    def test_capped_at_max(self):
        assert composite_confidence(
            rsi=80, percent_b=0.9, ratio=5.0, momentum_score=40, rank=1
        ) == 99

    def test_component_floor(self):
        confidence = composite_confidence(
            rsi=50, percent_b=0.5, ratio=0.0, momentum_score=-50, rank=500
        )
        # 60*.25 + 55*.20 + 40*.30 + 40*.25
        assert confidence == 48

    def test_rank_bonus(self):
        base = dict(rsi=50, percent_b=0.5, ratio=1.0, momentum_score=0)
        top50 = composite_confidence(rank=50, **base)
        top100 = composite_confidence(rank=75, **base)
        other = composite_confidence(rank=101, **base)

        assert top50 - other == 10
        assert top100 - other == 5

    def test_config_overrides(self):
        config = ScoringConfig(top50_bonus=0)
        assert composite_confidence(
            rsi=45, percent_b=0.5, ratio=1.0, momentum_score=0, rank=1, config=config
        ) == 54


class TestDetermineOutlook:
    """Tests for signal collection and outlook."""

    def test_no_signals_is_bullish(self):
        outlook, bullish, bearish = determine_outlook(
            TechnicalSignal.NEUTRAL, DexSignal.NEUTRAL, momentum(), 50
        )
        assert outlook == Outlook.BULLISH
        assert bullish == []
        assert bearish == []

    def test_all_bullish(self):
        outlook, bullish, bearish = determine_outlook(
            TechnicalSignal.OVERSOLD,
            DexSignal.ACCUMULATING,
            momentum(MomentumTrend.UP, 8),
            25,
        )
        assert outlook == Outlook.BULLISH
        assert bullish == [
            SIGNAL_RSI_OVERSOLD,
            SIGNAL_DEX_ACCUMULATION,
            "Multi-timeframe momentum: UP",
            SIGNAL_RSI_REVERSAL,
        ]
        assert bearish == []

    def test_all_bearish(self):
        outlook, bullish, bearish = determine_outlook(
            TechnicalSignal.OVERBOUGHT,
            DexSignal.DISTRIBUTING,
            momentum(MomentumTrend.STRONG_DOWN, -20),
            75,
        )
        assert outlook == Outlook.BEARISH
        assert bearish == [
            SIGNAL_RSI_OVERBOUGHT,
            SIGNAL_DEX_DISTRIBUTION,
            "Multi-timeframe momentum: STRONG_DOWN",
            SIGNAL_RSI_EXTENDED,
        ]

    def test_tie_is_bullish(self):
        outlook, bullish, bearish = determine_outlook(
            TechnicalSignal.OVERSOLD,
            DexSignal.DISTRIBUTING,
            momentum(MomentumTrend.DOWN, -8),
            35,
        )
        assert len(bullish) == len(bearish) == 2
        assert outlook == Outlook.BULLISH

    def test_more_bearish(self):
        outlook, _, _ = determine_outlook(
            TechnicalSignal.NEUTRAL,
            DexSignal.DISTRIBUTING,
            momentum(MomentumTrend.DOWN, -8),
            35,
        )
        assert outlook == Outlook.BEARISH


class TestSixMonthProjection:
    """Tests for the market-cap projection."""

    def test_neutral_bullish(self):
        prediction = project_six_months(
            current_market_cap=CAP,
            momentum_score=0,
            rsi=50,
            dex_strength=50,
            price_change_30d=0,
            is_bullish=True,
        )
        # base 15% * 1.5
        assert prediction.mid_estimate == pytest.approx(CAP * 1.225, rel=1e-9)
        assert prediction.low_estimate < prediction.mid_estimate < prediction.high_estimate
        assert prediction.confidence == 63
        assert prediction.reasoning == REASONING["moderate_bullish"]

    def test_bullish_floor(self):
        prediction = project_six_months(
            current_market_cap=CAP,
            momentum_score=-100,
            rsi=50,
            dex_strength=50,
            price_change_30d=0,
            is_bullish=True,
        )
        assert prediction.mid_estimate == pytest.approx(CAP * 1.1, rel=1e-9)
        assert prediction.low_estimate == pytest.approx(CAP * 1.05, rel=1e-9)
        assert prediction.high_estimate == pytest.approx(CAP * 1.25, rel=1e-9)
        assert prediction.growth_percent == 10
        assert prediction.reasoning == REASONING["cautious_bullish"]

    def test_bearish_floor(self):
        prediction = project_six_months(
            current_market_cap=CAP,
            momentum_score=-500,
            rsi=50,
            dex_strength=50,
            price_change_30d=0,
            is_bullish=False,
        )
        assert prediction.mid_estimate == pytest.approx(CAP * 0.8, rel=1e-9)
        assert prediction.growth_percent == -20
        assert prediction.reasoning == REASONING["bearish"]

    @pytest.mark.parametrize("momentum_score", [-500, -50, 0, 50, 200])
    @pytest.mark.parametrize("rsi", [20, 50, 80])
    def test_mid_never_below_floor(self, momentum_score, rsi):
        bullish = project_six_months(CAP, momentum_score, rsi, 50, 0, is_bullish=True)
        bearish = project_six_months(CAP, momentum_score, rsi, 50, 0, is_bullish=False)

        assert bullish.mid_estimate >= CAP * 1.1 - 1
        assert bearish.mid_estimate >= CAP * 0.8 - 1

    def test_rsi_factor(self):
        def mid(rsi):
            return project_six_months(CAP, 0, rsi, 50, 0, is_bullish=True).mid_estimate

        assert mid(25) > mid(50) > mid(75)

    def test_confidence_cap(self):
        prediction = project_six_months(CAP, 200, 50, 100, 0, is_bullish=True)
        assert prediction.confidence == 85

    def test_config_overrides(self):
        config = ProjectionConfig(bullish_floor=0.5)
        prediction = project_six_months(CAP, -100, 50, 50, 0, is_bullish=True, config=config)
        assert prediction.mid_estimate == pytest.approx(CAP * 1.5, rel=1e-9)


class TestTargetCap:
    """Tests for sector-themed target labels."""

    @pytest.mark.parametrize(
        "market_cap, category, label",
        [
            (60e9, Category.MEME, "100B+"),
            (20e9, Category.MEME, "50B+"),
            (1e6, Category.MEME, "10B+"),
            (20e9, Category.AI, "50B+"),
            (2e9, Category.AI, "25B+"),
            (5e8, Category.AI, "10B+"),
            (6e9, Category.MAJORS, "25B+"),
            (6e8, Category.RWA, "10B+"),
            (1e8, Category.ALTCOIN, "5B+"),
            (0, Category.ALTCOIN, "5B+"),
        ],
    )
    def test_ladders(self, market_cap, category, label):
        assert target_cap(market_cap, category) == label


class TestScore:
    """Tests for the composite fold."""

    def test_btc_like(self):
        indicator = IndicatorResult(
            rsi=45,
            bollinger=BollingerBands(upper=110, middle=100, lower=90, percent_b=0.5),
            signal=TechnicalSignal.NEUTRAL,
        )
        result = score(
            indicator=indicator,
            dex=DexSentiment(signal=DexSignal.NEUTRAL, strength=50),
            buys_sells_ratio=1.0,
            momentum=momentum(),
            rank=1,
            current_market_cap=1.94e12,
        )

        assert result.confidence == 64
        assert result.outlook == Outlook.BULLISH
        assert result.bullish_signals == []
        assert result.bearish_signals == []
        assert result.six_month.mid_estimate > 1.94e12
