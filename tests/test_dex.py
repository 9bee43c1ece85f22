"""Tests for DEX aggregation and sentiment."""

from dataclasses import replace

import pytest

from oracle.analysis.dex import (
    aggregate_pairs,
    buys_sells_ratio,
    dex_sentiment,
    exact_symbol_matches,
    top_pair,
    volume_trend,
)
from oracle.core.types import DexMetrics, DexSignal


@pytest.fixture
def metrics():
    """Balanced DEX metrics with a steady volume trend."""
    return DexMetrics(
        ticker="PEPE",
        token_name="Pepe",
        price_usd=0.00002,
        volume_24h=2400.0,
        volume_6h=600.0,
        volume_1h=100.0,
        liquidity_usd=1_000_000,
        fdv=1e9,
        market_cap=1e9,
        price_change_24h=1.0,
        price_change_6h=0.5,
        price_change_1h=0.1,
        buys_24h=100,
        sells_24h=100,
        buys_sells_ratio=1.0,
        dex_id="uniswap",
        pair_address="0xpair",
        chain="ethereum",
        top_pairs_count=1,
    )


class TestBuysSellsRatio:
    """Tests for buys_sells_ratio."""

    def test_ratio(self):
        assert buys_sells_ratio(300, 200) == 1.5

    def test_no_sells_is_neutral(self):
        assert buys_sells_ratio(10, 0) == 1.0
        assert buys_sells_ratio(0, 0) == 1.0


class TestDexSentiment:
    """Tests for buy/sell pressure classification."""

    def test_volume_trend(self, metrics):
        assert volume_trend(metrics) == pytest.approx(1.0)
        assert volume_trend(replace(metrics, volume_1h=0)) == 1.0

    def test_accumulating(self, metrics):
        sentiment = dex_sentiment(replace(metrics, buys_sells_ratio=2.0))
        assert sentiment.signal == DexSignal.ACCUMULATING
        assert sentiment.strength == pytest.approx(80.0)

    def test_accumulating_strength_capped(self, metrics):
        sentiment = dex_sentiment(replace(metrics, buys_sells_ratio=3.0))
        assert sentiment.strength == 100.0

    def test_accumulation_needs_volume(self, metrics):
        """A high ratio on collapsing volume stays neutral."""
        sentiment = dex_sentiment(
            replace(metrics, buys_sells_ratio=2.0, volume_6h=60.0, volume_1h=100.0)
        )
        assert sentiment.signal == DexSignal.NEUTRAL
        assert sentiment.strength == 50.0

    def test_no_hourly_volume_counts_as_steady(self, metrics):
        sentiment = dex_sentiment(replace(metrics, buys_sells_ratio=2.0, volume_1h=0))
        assert sentiment.signal == DexSignal.ACCUMULATING

    def test_distributing(self, metrics):
        sentiment = dex_sentiment(replace(metrics, buys_sells_ratio=0.5))
        assert sentiment.signal == DexSignal.DISTRIBUTING
        assert sentiment.strength == pytest.approx(80.0)

    def test_distributing_strength_capped(self, metrics):
        sentiment = dex_sentiment(replace(metrics, buys_sells_ratio=0.25))
        assert sentiment.strength == 100.0

    def test_zero_ratio_is_max_distribution(self, metrics):
        sentiment = dex_sentiment(replace(metrics, buys_sells_ratio=0.0))
        assert sentiment.signal == DexSignal.DISTRIBUTING
        assert sentiment.strength == 100.0

    @pytest.mark.parametrize("ratio", [0.7, 1.0, 1.5])
    def test_neutral_band(self, metrics, ratio):
        sentiment = dex_sentiment(replace(metrics, buys_sells_ratio=ratio))
        assert sentiment.signal == DexSignal.NEUTRAL
        assert sentiment.strength == 50.0


class TestPairSelection:
    """Tests for top pair and symbol matching."""

    def test_top_pair_by_liquidity(self, make_pair):
        small = make_pair(liquidity=1_000, pair_address="0xsmall")
        big = make_pair(liquidity=9_000, pair_address="0xbig")
        assert top_pair([small, big])["pairAddress"] == "0xbig"

    def test_top_pair_tie_keeps_first(self, make_pair):
        first = make_pair(liquidity=5_000, pair_address="0xfirst")
        second = make_pair(liquidity=5_000, pair_address="0xsecond")
        assert top_pair([first, second])["pairAddress"] == "0xfirst"

    def test_top_pair_empty(self):
        with pytest.raises(ValueError):
            top_pair([])

    def test_exact_symbol_matches(self, make_pair):
        pairs = [make_pair(symbol="pepe"), make_pair(symbol="PEPE2"), make_pair(symbol="PEPE")]
        matches = exact_symbol_matches(pairs, "Pepe")
        assert len(matches) == 2


class TestAggregatePairs:
    """Tests for folding pairs into DexMetrics."""

    def test_sums_and_top_pair(self, make_pair):
        pairs = [
            make_pair(
                liquidity=1_000_000,
                price="0.00001",
                volume=(100, 20, 5),
                buys=10,
                sells=5,
                pair_address="0xa",
            ),
            make_pair(
                liquidity=3_000_000,
                price="0.00002",
                volume=(300, 60, 15),
                buys=30,
                sells=20,
                pair_address="0xb",
                dex_id="raydium",
                image="https://img/pepe.png",
            ),
        ]
        metrics = aggregate_pairs(pairs, "pepe")

        assert metrics.ticker == "PEPE"
        assert metrics.token_name == "Pepe"
        assert metrics.price_usd == 0.00002
        assert metrics.liquidity_usd == 3_000_000
        assert metrics.volume_24h == 400
        assert metrics.volume_6h == 80
        assert metrics.volume_1h == 20
        assert metrics.buys_24h == 40
        assert metrics.sells_24h == 25
        assert metrics.buys_sells_ratio == pytest.approx(1.6)
        assert metrics.pair_address == "0xb"
        assert metrics.dex_id == "raydium"
        assert metrics.top_pairs_count == 2
        assert metrics.image_url == "https://img/pepe.png"

    def test_chain_override(self, make_pair):
        metrics = aggregate_pairs([make_pair(chain="base")], "PEPE", chain="ethereum")
        assert metrics.chain == "ethereum"

    def test_chain_from_pair(self, make_pair):
        metrics = aggregate_pairs([make_pair(chain="base")], "PEPE")
        assert metrics.chain == "base"

    def test_missing_fields_are_zero(self):
        pair = {"baseToken": {"symbol": "NEW"}, "priceUsd": "not-a-number"}
        metrics = aggregate_pairs([pair], "new")

        assert metrics.token_name == "NEW"
        assert metrics.price_usd == 0.0
        assert metrics.volume_24h == 0.0
        assert metrics.buys_24h == 0
        assert metrics.buys_sells_ratio == 1.0
        assert metrics.image_url is None
