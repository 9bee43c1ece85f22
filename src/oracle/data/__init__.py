"""
Static reference datasets.

Symbol tables (provider ids, canonical contracts, categories, logos) and
the offline market tables used by the fallback sources. Both files ship
with the package and are parsed once per process.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from oracle.config.loader import load_yaml_config

DATA_DIR = Path(__file__).parent


@dataclass(frozen=True)
class ContractRef:
    chain: str
    address: str


@dataclass(frozen=True)
class TokenTables:
    """Read-only symbol lookups."""

    coin_ids: Mapping[str, str]
    cmc_ids: Mapping[str, int]
    token_addresses: Mapping[str, ContractRef]
    categories: Mapping[str, tuple[str, ...]]
    heatmap_sectors: Mapping[str, tuple[str, ...]]
    meme_keywords: tuple[str, ...]
    category_keywords: Mapping[str, tuple[str, ...]]
    placeholder_palette: tuple[str, ...]
    logos: Mapping[str, str]

    def category_of(self, symbol: str) -> str | None:
        """Category name whose member list contains ``symbol`` exactly."""
        upper = symbol.upper()
        for category, members in self.categories.items():
            if upper in members:
                return category
        return None

    def is_known(self, symbol: str) -> bool:
        """Whether any static table mentions ``symbol``."""
        upper = symbol.upper()
        return (
            upper in self.coin_ids
            or upper in self.cmc_ids
            or upper in self.token_addresses
            or upper in self.logos
            or self.category_of(upper) is not None
        )


@dataclass(frozen=True)
class MockMarket:
    """Offline snapshot, DEX and ranking profiles keyed by symbol."""

    snapshots: Mapping[str, Mapping[str, Any]]
    dex: Mapping[str, Mapping[str, Any]]
    ranking: Mapping[str, Mapping[str, Any]]


def _upper_keys(table: dict[Any, Any] | None) -> dict[str, Any]:
    return {str(k).upper(): v for k, v in (table or {}).items()}


def _frozen_lists(table: dict[Any, Any] | None) -> Mapping[str, tuple[str, ...]]:
    return MappingProxyType({
        str(k).upper(): tuple(str(s).upper() for s in v)
        for k, v in (table or {}).items()
    })


@lru_cache(maxsize=None)
def load_token_tables(path: Path | str | None = None) -> TokenTables:
    """Parse ``tokens.yaml`` (cached per path)."""
    raw = load_yaml_config(path or DATA_DIR / "tokens.yaml", substitute=False)

    addresses = {
        symbol: ContractRef(chain=str(ref["chain"]), address=str(ref["address"]))
        for symbol, ref in _upper_keys(raw.get("token_addresses")).items()
    }
    keywords = {
        str(k).upper(): tuple(str(w).lower() for w in v)
        for k, v in (raw.get("category_keywords") or {}).items()
    }

    return TokenTables(
        coin_ids=MappingProxyType({k: str(v) for k, v in _upper_keys(raw.get("coin_ids")).items()}),
        cmc_ids=MappingProxyType({k: int(v) for k, v in _upper_keys(raw.get("cmc_ids")).items()}),
        token_addresses=MappingProxyType(addresses),
        categories=_frozen_lists(raw.get("categories")),
        heatmap_sectors=_frozen_lists(raw.get("heatmap_sectors")),
        meme_keywords=tuple(str(w).lower() for w in raw.get("meme_keywords") or ()),
        category_keywords=MappingProxyType(keywords),
        placeholder_palette=tuple(str(c) for c in raw.get("placeholder_palette") or ()),
        logos=MappingProxyType(_upper_keys(raw.get("logos"))),
    )


@lru_cache(maxsize=None)
def load_mock_market(path: Path | str | None = None) -> MockMarket:
    """Parse ``mock_market.yaml`` (cached per path)."""
    raw = load_yaml_config(path or DATA_DIR / "mock_market.yaml", substitute=False)
    return MockMarket(
        snapshots=MappingProxyType(_upper_keys(raw.get("snapshots"))),
        dex=MappingProxyType(_upper_keys(raw.get("dex"))),
        ranking=MappingProxyType(_upper_keys(raw.get("ranking"))),
    )


__all__ = [
    "ContractRef",
    "MockMarket",
    "TokenTables",
    "load_mock_market",
    "load_token_tables",
]
