"""Tests for prophecy generators."""

import asyncio
import json

import httpx
import pytest

from oracle.config.settings import Settings
from oracle.core.types import Category, Outlook
from oracle.narrative import (
    GeminiNarrativeGenerator,
    NarrativeGenerator,
    NarrativeInput,
    TemplateNarrativeGenerator,
    build_narrative,
    extract_prophecy,
)
from oracle.narrative.templates import BEARISH, BULLISH, DEFAULT_BULLISH, pick


def facts(ticker="FET", category=Category.AI, outlook=Outlook.BULLISH, confidence=72):
    return NarrativeInput(
        ticker=ticker,
        name="Fetch.ai",
        price=2.45,
        volume_24h=450_000_000,
        price_change_24h=8.5,
        rsi=61.2,
        percent_b=0.74,
        category=category,
        outlook=outlook,
        confidence=confidence,
    )


def gemini_reply(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def generate(generator, data):
    async def _run():
        try:
            return await generator.generate(data)
        finally:
            await generator.close()

    return asyncio.run(_run())


class TestTemplates:
    """Tests for deterministic templates."""

    def test_pick_is_stable(self):
        options = ("a", "b", "c")
        # ord sum of "BTC" is 217
        assert pick("BTC", options) == "b"
        assert pick("BTC", options) == pick("BTC", options)

    def test_sector_and_outlook(self):
        generator = TemplateNarrativeGenerator()

        bullish = generator.render(facts())
        bearish = generator.render(facts(ticker="PEPE", category=Category.MEME, outlook=Outlook.BEARISH))

        assert bullish == pick("FET", BULLISH[Category.AI]).format(ticker="FET")
        assert bearish == pick("PEPE", BEARISH[Category.MEME]).format(ticker="PEPE")

    def test_other_categories_use_defaults(self):
        text = TemplateNarrativeGenerator().render(facts(ticker="UNI", category=Category.DEFI))
        assert text == pick("UNI", DEFAULT_BULLISH).format(ticker="UNI")
        assert "UNI" in text

    def test_generate(self):
        generator = TemplateNarrativeGenerator()
        assert generate(generator, facts()) == generator.render(facts())

    def test_protocol(self):
        assert isinstance(TemplateNarrativeGenerator(), NarrativeGenerator)


class TestExtractProphecy:
    """Tests for model reply parsing."""

    def test_json(self):
        assert extract_prophecy('{"prophecy": "To the moon."}') == "To the moon."

    def test_json_in_markdown(self):
        text = '```json\n{"prophecy": "FET rules 2026"}\n```'
        assert extract_prophecy(text) == "FET rules 2026"

    def test_plain_text(self):
        assert extract_prophecy("  Just vibes.  ") == "Just vibes."

    def test_empty(self):
        assert extract_prophecy("   ") is None

    def test_json_without_field(self):
        assert extract_prophecy('{"other": 1}') is None

    def test_broken_json_falls_back_to_text(self):
        assert extract_prophecy("{not json}") == "{not json}"


class TestGemini:
    """Tests for the Gemini generator."""

    def test_no_key_uses_template(self):
        def handler(request):
            raise AssertionError("no request expected")

        generator = GeminiNarrativeGenerator(transport=httpx.MockTransport(handler))
        assert generate(generator, facts()) == TemplateNarrativeGenerator().render(facts())

    def test_success(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=gemini_reply('{"prophecy": "FET runs the agents."}'))

        generator = GeminiNarrativeGenerator(
            api_key="g-key",
            model="gemini-test",
            transport=httpx.MockTransport(handler),
        )
        assert generate(generator, facts()) == "FET runs the agents."

        request = seen[0]
        assert request.method == "POST"
        assert request.url.path.endswith("/models/gemini-test:generateContent")
        assert request.url.params["key"] == "g-key"
        prompt = json.loads(request.content)["contents"][0]["parts"][0]["text"]
        assert "Bullish with 72% confidence" in prompt
        assert "$450.00M" in prompt

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(500, json={"error": "overloaded"}),
            httpx.Response(200, json={"candidates": []}),
            httpx.Response(200, json=gemini_reply("   ")),
            httpx.Response(200, text="not json"),
        ],
    )
    def test_failures_use_template(self, response):
        generator = GeminiNarrativeGenerator(
            api_key="g-key",
            transport=httpx.MockTransport(lambda request: response),
        )
        assert generate(generator, facts()) == TemplateNarrativeGenerator().render(facts())

    def test_transport_error_uses_template(self):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        generator = GeminiNarrativeGenerator(api_key="g-key", transport=httpx.MockTransport(handler))
        assert generate(generator, facts()) == TemplateNarrativeGenerator().render(facts())


class TestBuildNarrative:
    """Tests for generator selection."""

    def test_default_is_template(self, settings):
        assert isinstance(build_narrative(settings), TemplateNarrativeGenerator)

    def test_gemini(self, tmp_path):
        (tmp_path / "settings.yaml").write_text(
            "providers:\n"
            "  gemini:\n"
            "    base_url: https://generativelanguage.googleapis.com/v1beta\n"
            "    api_key: g-key\n"
            "    model: gemini-test\n"
            "pipeline:\n"
            "  narrative: gemini\n"
        )
        generator = build_narrative(Settings(tmp_path))

        assert isinstance(generator, GeminiNarrativeGenerator)
        assert generator.model == "gemini-test"
        assert generator.api_key == "g-key"

    def test_key_alone_enables_gemini(self, tmp_path):
        (tmp_path / "settings.yaml").write_text(
            "providers:\n"
            "  gemini:\n"
            "    base_url: https://generativelanguage.googleapis.com/v1beta\n"
            "    api_key: g-key\n"
        )
        generator = build_narrative(Settings(tmp_path))

        assert isinstance(generator, GeminiNarrativeGenerator)
        assert generator.model == "gemini-2.0-flash"

    def test_gemini_without_key_is_template(self, tmp_path):
        (tmp_path / "settings.yaml").write_text("pipeline:\n  narrative: gemini\n")
        assert isinstance(build_narrative(Settings(tmp_path)), TemplateNarrativeGenerator)

    def test_template_by_name(self, tmp_path):
        (tmp_path / "settings.yaml").write_text(
            "providers:\n"
            "  gemini:\n"
            "    base_url: https://generativelanguage.googleapis.com/v1beta\n"
            "    api_key: g-key\n"
            "pipeline:\n"
            "  narrative: template\n"
        )
        assert isinstance(build_narrative(Settings(tmp_path)), TemplateNarrativeGenerator)

    def test_gemini_disabled(self, tmp_path):
        (tmp_path / "settings.yaml").write_text(
            "providers:\n"
            "  gemini:\n"
            "    base_url: https://generativelanguage.googleapis.com/v1beta\n"
            "    enabled: false\n"
            "pipeline:\n"
            "  narrative: gemini\n"
        )
        assert isinstance(build_narrative(Settings(tmp_path)), TemplateNarrativeGenerator)

    def test_unknown_name(self, tmp_path):
        (tmp_path / "settings.yaml").write_text("pipeline:\n  narrative: shakespeare\n")
        with pytest.raises(KeyError):
            build_narrative(Settings(tmp_path))
