"""
Token identity resolution.

Turns raw user input (a ticker or a contract address) into one canonical
``TokenIdentity`` before any market data is fetched. Addresses are looked
up on the DEX source; symbols are searched there first and fall back to
the bundled static tables.
"""

import logging
import re
from typing import Any

import httpx

from oracle.analysis.dex import exact_symbol_matches, top_pair
from oracle.core.errors import NotFoundError, UpstreamDegradedError
from oracle.core.types import Category, TokenIdentity
from oracle.data import TokenTables, load_token_tables
from oracle.sources.base import DexSource

logger = logging.getLogger(__name__)

EVM_ADDRESS = re.compile(r"^0x[a-fA-F0-9]{40}$")
BASE58_ADDRESS = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")

ADDRESS_NOT_FOUND = "Could not find token for this address."
ADDRESS_HINT = "Make sure the address is correct and has trading activity on DEX."
SYMBOL_HINT = (
    "Supported tickers include BTC, ETH, SOL, PEPE, FET, DOGE, SHIB, ARB, "
    "and 60+ more. You can also paste a contract address."
)

PLACEHOLDER_URL = (
    "https://ui-avatars.com/api/?name={letter}&background={color}"
    "&color=fff&size=128&bold=true"
)


def is_contract_address(text: str) -> bool:
    """True for an EVM hex address or a base58 (Solana-style) address."""
    cleaned = text.strip()
    if EVM_ADDRESS.match(cleaned):
        return True
    return bool(BASE58_ADDRESS.match(cleaned)) and not cleaned.lower().startswith("0x")


class TokenResolver:
    """
    Resolve raw input to a ``TokenIdentity``.

    Example:
        resolver = TokenResolver(DexScreenerSource())
        identity = await resolver.resolve("pepe")
    """

    def __init__(self, dex: DexSource, tables: TokenTables | None = None):
        self.dex = dex
        self.tables = tables or load_token_tables()

    async def resolve(self, raw: str) -> TokenIdentity:
        """
        Resolve ``raw`` to an identity.

        Raises:
            NotFoundError: No tradable token could be identified
        """
        text = raw.strip()
        if is_contract_address(text):
            return await self.resolve_address(text)
        return await self.resolve_symbol(text)

    # =========================================================================
    # Lookup paths
    # =========================================================================

    async def resolve_address(self, address: str) -> TokenIdentity:
        try:
            pairs = await self.dex.fetch_token_pairs(address)
        except (UpstreamDegradedError, httpx.HTTPError) as e:
            logger.warning(f"Address lookup failed for {address}: {e}")
            pairs = []

        if not pairs:
            raise NotFoundError(ADDRESS_NOT_FOUND, hint=ADDRESS_HINT)

        pair = top_pair(pairs)
        base = pair.get("baseToken") or {}
        symbol = str(base.get("symbol") or "").upper()
        if not symbol:
            raise NotFoundError(ADDRESS_NOT_FOUND, hint=ADDRESS_HINT)

        name = base.get("name") or symbol
        logger.info(f"Resolved address {address} -> {symbol}")
        return TokenIdentity(
            symbol=symbol,
            name=name,
            category=self.categorize(symbol, name),
            image=self.image_for(symbol, (pair.get("info") or {}).get("imageUrl")),
            chain=pair.get("chainId"),
            address=base.get("address") or address,
            source="address_lookup",
        )

    async def resolve_symbol(self, text: str) -> TokenIdentity:
        query = text.upper()
        try:
            results = await self.dex.search_pairs(text)
        except (UpstreamDegradedError, httpx.HTTPError) as e:
            logger.warning(f"Symbol search failed for {query}: {e}")
            results = []

        if results:
            return self._from_search(results, query)

        if self.tables.is_known(query):
            logger.info(f"Resolved {query} from static tables")
            return self._from_tables(query)

        raise NotFoundError(
            f"Could not find data for {query}. Try a different ticker.",
            hint=SYMBOL_HINT,
        )

    def _from_search(self, results: list[dict[str, Any]], query: str) -> TokenIdentity:
        pair = top_pair(exact_symbol_matches(results, query) or results)
        base = pair.get("baseToken") or {}
        symbol = str(base.get("symbol") or query).upper()
        name = base.get("name") or symbol

        chain = pair.get("chainId")
        address = base.get("address")
        curated = self.tables.token_addresses.get(symbol)
        if curated is not None:
            chain, address = curated.chain, curated.address

        logger.info(f"Resolved {query} -> {symbol} on {chain}")
        return TokenIdentity(
            symbol=symbol,
            name=name,
            category=self.categorize(symbol, name),
            image=self.image_for(symbol, (pair.get("info") or {}).get("imageUrl")),
            chain=chain,
            address=address,
            source="dex_search",
        )

    def _from_tables(self, symbol: str) -> TokenIdentity:
        curated = self.tables.token_addresses.get(symbol)
        return TokenIdentity(
            symbol=symbol,
            name=symbol,
            category=self.categorize(symbol, symbol),
            image=self.image_for(symbol),
            chain=curated.chain if curated else None,
            address=curated.address if curated else None,
            source="static_table",
        )

    # =========================================================================
    # Classification
    # =========================================================================

    def categorize(self, symbol: str, name: str) -> Category:
        """Static tables, then meme keywords, then name keywords, else ALTCOIN."""
        listed = self.tables.category_of(symbol)
        if listed is not None:
            return Category(listed)

        haystack = f"{name} {symbol}".lower()
        if any(word in haystack for word in self.tables.meme_keywords):
            return Category.MEME

        name_lower = name.lower()
        for category, keywords in self.tables.category_keywords.items():
            if any(k in name_lower for k in keywords):
                return Category(category)

        return Category.ALTCOIN

    def image_for(self, symbol: str, upstream: str | None = None) -> str:
        """Upstream image, else bundled logo, else a lettered placeholder tile."""
        if upstream:
            return upstream
        logo = self.tables.logos.get(symbol.upper())
        if logo:
            return logo
        return self.placeholder_image(symbol)

    def placeholder_image(self, symbol: str) -> str:
        letter = (symbol[:1] or "?").upper()
        palette = self.tables.placeholder_palette
        color = palette[ord(symbol[0]) % len(palette)] if symbol else palette[0]
        return PLACEHOLDER_URL.format(letter=letter, color=color)
