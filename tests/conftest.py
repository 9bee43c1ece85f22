"""Pytest configuration and fixtures."""

from typing import Any, Callable

import httpx
import pytest


@pytest.fixture(autouse=True)
def reset_settings():
    """Reset settings singleton between tests."""
    from oracle.config.settings import reset_settings
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings(tmp_path):
    """Settings backed by an empty config dir (schema defaults)."""
    from oracle.config.settings import Settings
    return Settings(tmp_path)


OFFLINE_SETTINGS = """
providers:
  dexscreener:
    base_url: https://api.dexscreener.com
    enabled: false
  coingecko:
    base_url: https://api.coingecko.com/api/v3
    enabled: false
pipeline:
  upstream_timeout: {timeout}
"""


@pytest.fixture
def offline_settings(tmp_path):
    """Settings with every live provider disabled (bundled tables only)."""
    from oracle.config.settings import Settings
    (tmp_path / "settings.yaml").write_text(OFFLINE_SETTINGS.format(timeout=5))
    return Settings(tmp_path)


@pytest.fixture
def fast_timeout_settings(tmp_path):
    """Offline settings with a very short per-call timeout."""
    from oracle.config.settings import Settings
    (tmp_path / "settings.yaml").write_text(OFFLINE_SETTINGS.format(timeout=0.05))
    return Settings(tmp_path)


@pytest.fixture
def offline_service(offline_settings):
    from oracle.pipeline import OracleService
    return OracleService(settings=offline_settings)


def build_pair(
    symbol: str = "PEPE",
    name: str = "Pepe",
    address: str = "0x6982508145454ce325ddbe47a25d4ec3d2311933",
    chain: str = "ethereum",
    liquidity: float = 1_000_000,
    price: str = "0.00002",
    volume: tuple[float, float, float] = (600_000, 150_000, 20_000),
    buys: int = 300,
    sells: int = 200,
    dex_id: str = "uniswap",
    pair_address: str = "0xpair",
    image: str | None = None,
    market_cap: float = 8_000_000_000,
) -> dict[str, Any]:
    """DexScreener-shaped pair payload."""
    pair = {
        "chainId": chain,
        "dexId": dex_id,
        "pairAddress": pair_address,
        "baseToken": {"address": address, "name": name, "symbol": symbol},
        "priceUsd": price,
        "txns": {"h24": {"buys": buys, "sells": sells}},
        "volume": {"h24": volume[0], "h6": volume[1], "h1": volume[2]},
        "priceChange": {"h24": 4.0, "h6": 1.5, "h1": 0.2},
        "liquidity": {"usd": liquidity},
        "fdv": market_cap,
        "marketCap": market_cap,
    }
    if image:
        pair["info"] = {"imageUrl": image}
    return pair


@pytest.fixture
def make_pair() -> Callable[..., dict[str, Any]]:
    return build_pair


def route_transport(routes: dict[str, Any]) -> httpx.MockTransport:
    """
    MockTransport answering by URL path suffix.

    Values may be a JSON body (200), an int status code, or a callable
    taking the request and returning an ``httpx.Response``.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        for suffix, answer in routes.items():
            if request.url.path.endswith(suffix):
                if callable(answer):
                    return answer(request)
                if isinstance(answer, int):
                    return httpx.Response(answer, json={"error": "upstream"})
                return httpx.Response(200, json=answer)
        return httpx.Response(404, json={"error": "not found"})

    return httpx.MockTransport(handler)


@pytest.fixture
def transport() -> Callable[[dict[str, Any]], httpx.MockTransport]:
    return route_transport
