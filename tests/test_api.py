"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from oracle.api import SECTORS_FAILURE, create_app
from oracle.pipeline import INTERNAL_FAILURE, MISSING_TICKER, MISSING_TICKER_HINT, OracleService
from oracle.resolver import SYMBOL_HINT


class BrokenNarrative:
    name = "broken"

    async def generate(self, data):
        raise ValueError("bad template")

    async def close(self):
        pass


class BrokenSectors:
    async def overview(self):
        raise RuntimeError("heatmap down")


@pytest.fixture
def client(offline_service):
    with TestClient(create_app(offline_service)) as test_client:
        yield test_client


class TestOracleEndpoint:
    """Tests for GET /api/oracle."""

    def test_missing_ticker(self, client):
        response = client.get("/api/oracle")

        assert response.status_code == 400
        assert response.json() == {"error": MISSING_TICKER, "hint": MISSING_TICKER_HINT}

    def test_blank_ticker(self, client):
        assert client.get("/api/oracle", params={"ticker": "  "}).status_code == 400

    def test_unknown_ticker(self, client):
        response = client.get("/api/oracle", params={"ticker": "zzznotreal"})

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "Could not find data for ZZZNOTREAL. Try a different ticker."
        assert body["hint"] == SYMBOL_HINT

    def test_prediction(self, client):
        response = client.get("/api/oracle", params={"ticker": "FET"})

        assert response.status_code == 200
        body = response.json()
        assert body["ticker"] == "FET"
        assert body["name"] == "Fetch.ai"
        assert body["category"] == "AI"
        assert body["cmc"]["rank"] == 45
        assert body["cmc"]["is_ai_token"] is True
        assert body["prediction"]["prophecy"]
        assert body["data_sources"] == ["mock_price", "mock_dex", "mock_ranking"]

    def test_internal_error(self, offline_settings):
        service = OracleService(settings=offline_settings, narrative=BrokenNarrative())
        with TestClient(create_app(service)) as client:
            response = client.get("/api/oracle", params={"ticker": "BTC"})

        assert response.status_code == 500
        assert response.json() == {"error": INTERNAL_FAILURE}


class TestSectorsEndpoint:
    """Tests for GET /api/sectors."""

    def test_overview(self, client):
        response = client.get("/api/sectors")

        assert response.status_code == 200
        body = response.json()
        assert set(body["sectors"]) == {"ai", "rwa", "meme"}
        assert body["overallSentiment"] in ("BULLISH", "BEARISH", "MIXED")
        assert body["totalVolume"] > 0

    def test_failure(self, client):
        client.app.state.sectors = BrokenSectors()
        response = client.get("/api/sectors")

        assert response.status_code == 500
        assert response.json() == {"error": SECTORS_FAILURE}


class TestHealth:
    def test_health(self, client):
        body = client.get("/api/health").json()
        assert body["status"] == "ok"
        assert "timestamp" in body
