"""
Aggregation orchestrator.

One ``predict`` call resolves the token, fans out the four upstream
fetches concurrently, substitutes fallbacks call by call, runs the
analyzers and folds everything into an ``OracleReport``.
"""

import asyncio
import dataclasses
import logging
from typing import Any, Awaitable, Callable

import httpx

from oracle.analysis import (
    analyze_momentum,
    dex_sentiment,
    rank_tier,
    score,
    target_cap,
)
from oracle.config import Settings, get_settings
from oracle.core.errors import (
    InputError,
    InternalError,
    OracleError,
    UpstreamDegradedError,
)
from oracle.core.types import (
    DexMetrics,
    MarketSnapshot,
    OracleReport,
    PriceSeries,
    RankingMetrics,
    TokenIdentity,
)
from oracle.indicators import analyze
from oracle.narrative import NarrativeGenerator, NarrativeInput, build_narrative
from oracle.resolver import TokenResolver
from oracle.sources import SourceBundle, build_sources

logger = logging.getLogger(__name__)

MISSING_TICKER = (
    "Missing ticker parameter. Usage: /api/oracle?ticker=FET or /api/oracle?ticker=0x..."
)
MISSING_TICKER_HINT = "Pass a ticker symbol such as FET or a contract address."
INTERNAL_FAILURE = "Failed to generate prophecy. The quantum timeline is unstable."

# Failures that degrade a single call to its fallback.
DEGRADED = (UpstreamDegradedError, httpx.HTTPError, asyncio.TimeoutError)


class OracleService:
    """
    Owns the sources, resolver and narrative generator for a process.

    Example:
        service = OracleService()
        try:
            report = await service.predict("FET")
        finally:
            await service.close()
    """

    def __init__(
        self,
        settings: Settings | None = None,
        sources: SourceBundle | None = None,
        resolver: TokenResolver | None = None,
        narrative: NarrativeGenerator | None = None,
    ):
        self.settings = settings or get_settings()
        self.sources = sources or build_sources(self.settings)
        self.resolver = resolver or TokenResolver(self.sources.dex)
        self.narrative = narrative or build_narrative(self.settings)

    @property
    def timeout(self) -> float:
        return self.settings.pipeline.upstream_timeout

    async def close(self) -> None:
        await self.sources.close()
        await self.narrative.close()

    # =========================================================================
    # Entry point
    # =========================================================================

    async def predict(self, raw: str | None) -> OracleReport:
        """
        Build the report for a ticker or contract address.

        Raises:
            InputError: Empty input
            NotFoundError: Identity resolution failed
            InternalError: Anything unexpected
        """
        text = (raw or "").strip()
        if not text:
            raise InputError(MISSING_TICKER, hint=MISSING_TICKER_HINT)

        try:
            return await self._predict(text)
        except OracleError:
            raise
        except Exception as e:
            logger.exception(f"Oracle pipeline failed for {text!r}")
            raise InternalError(INTERNAL_FAILURE) from e

    async def _predict(self, text: str) -> OracleReport:
        identity = await self.resolver.resolve(text)
        logger.info(f"Predicting {identity.symbol} ({identity.source})")

        fetched = await asyncio.gather(
            self.fetch_snapshot(identity),
            self.fetch_history(identity),
            self._dex(identity),
            self._ranking(identity),
        )
        snapshot, snapshot_src = fetched[0]
        history, history_src = fetched[1]
        dex, dex_src = fetched[2]
        ranking, ranking_src = fetched[3]

        if snapshot is not None:
            price = snapshot.price
            volume_24h = snapshot.volume_24h
            change_24h = snapshot.price_change_24h
            market_cap = snapshot.market_cap or dex.market_cap
        else:
            price = dex.price_usd
            volume_24h = dex.volume_24h
            change_24h = dex.price_change_24h
            market_cap = dex.market_cap or dex.fdv

        if history is None:
            history = await self.sources.fallback_price.fetch_price_history(
                identity,
                days=self.settings.pipeline.history_days,
                anchor_price=price,
            )
            history_src = self.sources.fallback_price.name

        if identity.source == "static_table":
            better_name = snapshot.name if snapshot else dex.token_name
            identity = dataclasses.replace(identity, name=better_name or identity.name)

        indicator = analyze(history)
        sentiment = dex_sentiment(dex)
        momentum = analyze_momentum(ranking)
        tier = rank_tier(ranking.rank)
        composite = score(
            indicator=indicator,
            dex=sentiment,
            buys_sells_ratio=dex.buys_sells_ratio,
            momentum=momentum,
            rank=ranking.rank,
            current_market_cap=market_cap,
            price_change_30d=ranking.percent_change_30d,
            config=self.settings.scoring,
            projection=self.settings.projection,
        )

        prophecy = await self.narrative.generate(
            NarrativeInput(
                ticker=identity.symbol,
                name=identity.name,
                price=price,
                volume_24h=volume_24h,
                price_change_24h=change_24h,
                rsi=indicator.rsi,
                percent_b=indicator.bollinger.percent_b,
                category=identity.category,
                outlook=composite.outlook,
                confidence=composite.confidence,
            )
        )

        used = [snapshot_src, history_src, dex_src, ranking_src]
        return OracleReport(
            identity=identity,
            price=price,
            volume_24h=volume_24h,
            price_change_24h=change_24h,
            market_cap=market_cap,
            indicator=indicator,
            synthetic_history=history.synthetic,
            dex=dex,
            dex_sentiment=sentiment,
            ranking=ranking,
            rank_tier=tier,
            momentum=momentum,
            composite=composite,
            prophecy=prophecy,
            target_cap=target_cap(market_cap, identity.category),
            data_sources=list(dict.fromkeys(s for s in used if s)),
        )

    # =========================================================================
    # Guarded fetches
    # =========================================================================

    async def _guarded(
        self,
        label: str,
        primary: Any,
        fallback: Any,
        call: Callable[[Any], Awaitable[Any]],
    ) -> tuple[Any, str | None]:
        """
        Run ``call`` on the primary source under the per-call timeout.

        A degraded call, or a primary that does not cover the token,
        is answered by the fallback source instead.
        """
        try:
            result = await asyncio.wait_for(call(primary), timeout=self.timeout)
        except DEGRADED as e:
            logger.warning(f"{label}: {primary.name} degraded ({e!r}), using fallback")
            result = None
        if result is not None:
            return result, primary.name

        if fallback is primary:
            return None, None
        result = await call(fallback)
        return result, (fallback.name if result is not None else None)

    async def fetch_snapshot(
        self,
        identity: TokenIdentity,
    ) -> tuple[MarketSnapshot | None, str | None]:
        return await self._guarded(
            "snapshot",
            self.sources.price,
            self.sources.fallback_price,
            lambda source: source.fetch_market_snapshot(identity),
        )

    async def fetch_history(
        self,
        identity: TokenIdentity,
        days: int | None = None,
    ) -> tuple[PriceSeries | None, str | None]:
        """
        Live price history, or ``(None, None)`` when it is unavailable.

        Synthetic history is anchored on the final price, so callers
        build it themselves once that price is known.
        """
        source = self.sources.price
        if source is self.sources.fallback_price:
            return None, None
        days = days or self.settings.pipeline.history_days
        try:
            history = await asyncio.wait_for(
                source.fetch_price_history(identity, days=days),
                timeout=self.timeout,
            )
        except DEGRADED as e:
            logger.warning(f"history: {source.name} degraded ({e!r}), synthesizing")
            return None, None
        return history, (source.name if history is not None else None)

    async def _dex(self, identity: TokenIdentity) -> tuple[DexMetrics, str]:
        return await self._guarded(
            "dex",
            self.sources.dex,
            self.sources.fallback_dex,
            lambda source: source.fetch_metrics(identity),
        )

    async def _ranking(self, identity: TokenIdentity) -> tuple[RankingMetrics, str]:
        return await self._guarded(
            "ranking",
            self.sources.ranking,
            self.sources.fallback_ranking,
            lambda source: source.fetch_metrics(identity),
        )
