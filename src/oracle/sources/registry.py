"""Source registry and live/fallback selection."""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from oracle.config.schemas import ProviderConfig
from oracle.core.registry import Registry
from oracle.sources.base import DexSource, PriceSource, RankingSource

logger = logging.getLogger(__name__)


class SourceRegistry(Registry[Any]):
    """Registry of upstream sources, tagged with ``role`` and ``live`` metadata."""

    def by_role(self, role: str) -> list[str]:
        """Names of sources serving ``role`` (price, dex or ranking)."""
        return self.find(role=role)


source_registry = SourceRegistry("sources")

# role -> (live source, fallback source)
ROLE_SOURCES = {
    "price": ("coingecko", "mock_price"),
    "dex": ("dexscreener", "mock_dex"),
    "ranking": ("coinmarketcap", "mock_ranking"),
}


@dataclass
class SourceBundle:
    """Primary and fallback collaborator for each upstream role."""

    price: PriceSource
    dex: DexSource
    ranking: RankingSource
    fallback_price: PriceSource
    fallback_dex: DexSource
    fallback_ranking: RankingSource

    def all(self) -> list[Any]:
        """Distinct source instances."""
        seen: dict[int, Any] = {}
        for source in (
            self.price,
            self.dex,
            self.ranking,
            self.fallback_price,
            self.fallback_dex,
            self.fallback_ranking,
        ):
            seen.setdefault(id(source), source)
        return list(seen.values())

    async def close(self) -> None:
        for source in self.all():
            await source.close()


def _usable(name: str, provider: ProviderConfig) -> bool:
    if not provider.enabled:
        logger.info(f"Provider {name} disabled, using fallback")
        return False
    if source_registry.metadata(name).get("requires_key") and not provider.has_api_key:
        logger.info(f"Provider {name} has no API key, using fallback")
        return False
    return True


def build_sources(
    settings: Any,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SourceBundle:
    """
    Instantiate the sources for every role.

    A provider that is disabled, or that needs a key and has none, is
    replaced by its fallback as primary.

    Args:
        settings: ``Settings`` instance
        transport: Optional httpx transport shared by the live sources
    """
    pipeline = settings.pipeline
    instances: dict[str, Any] = {}

    for role, (live_name, fallback_name) in ROLE_SOURCES.items():
        fallback_params: dict[str, Any] = {}
        if role == "price":
            fallback_params = {
                "points": pipeline.synthetic_points,
                "jitter": pipeline.synthetic_jitter,
            }
        fallback = source_registry.create(fallback_name, **fallback_params)

        provider: ProviderConfig = getattr(settings.providers, live_name)
        if _usable(live_name, provider):
            primary = source_registry.create(
                live_name,
                base_url=provider.base_url,
                api_key=provider.api_key,
                timeout=provider.timeout,
                transport=transport,
            )
        else:
            primary = fallback

        instances[role] = primary
        instances[f"fallback_{role}"] = fallback
        logger.debug(f"{role}: primary={primary.name} fallback={fallback.name}")

    return SourceBundle(**instances)
