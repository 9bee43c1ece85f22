"""Gemini-backed prophecy prose with template fallback."""

import json
import logging
import re
from typing import Any

import httpx

from oracle.core.numeric import format_usd
from oracle.narrative.base import NarrativeInput, narrative_registry
from oracle.narrative.templates import TemplateNarrativeGenerator
from oracle.sources.base import BaseHttpSource

logger = logging.getLogger(__name__)

JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

PROMPT = """You are the $ORACLE 2026 - a sarcastic, all-knowing crypto oracle from the future.

The market verdict for this token is already decided: {outlook} with {confidence}% confidence.
Write the prophecy to match it.

- Ticker: {ticker}
- Name: {name}
- Current Price: ${price}
- 24h Volume: {volume}
- 24h Change: {change:.2f}%
- RSI (14): {rsi:.1f}
- Bollinger Position: {percent_b:.0f}%
- Sector: {category}

Respond with ONLY a JSON object (no markdown, no code blocks):
{{"prophecy": "A short, sarcastic 1-2 sentence 2026 prediction (be witty and reference future events)"}}"""


def extract_prophecy(text: str) -> str | None:
    """
    Pull the prophecy out of a model reply.

    Accepts a JSON object with a ``prophecy`` field anywhere in the text,
    otherwise the stripped plain text. Empty replies give ``None``.
    """
    match = JSON_OBJECT.search(text)
    if match:
        try:
            parsed = json.loads(match.group(0))
        except ValueError:
            parsed = None
        if isinstance(parsed, dict):
            prophecy = parsed.get("prophecy")
            return prophecy.strip() if isinstance(prophecy, str) and prophecy.strip() else None

    cleaned = text.strip()
    return cleaned or None


@narrative_registry.register("gemini", description="Gemini generateContent prose")
class GeminiNarrativeGenerator(BaseHttpSource):
    """
    Calls ``POST /models/{model}:generateContent`` and keeps only the prose.

    Any failure, or a reply without usable text, returns the templated
    prophecy instead.
    """

    name = "gemini"

    def __init__(
        self,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        model: str = "gemini-2.0-flash",
        fallback: TemplateNarrativeGenerator | None = None,
        **kwargs: Any,
    ):
        super().__init__(base_url, **kwargs)
        self.model = model
        self.fallback = fallback or TemplateNarrativeGenerator()

    def build_prompt(self, data: NarrativeInput) -> str:
        return PROMPT.format(
            outlook=data.outlook,
            confidence=data.confidence,
            ticker=data.ticker,
            name=data.name,
            price=data.price,
            volume=format_usd(data.volume_24h),
            change=data.price_change_24h,
            rsi=data.rsi,
            percent_b=data.percent_b * 100,
            category=data.category,
        )

    async def generate(self, data: NarrativeInput) -> str:
        if not self.api_key:
            return self.fallback.render(data)

        body = {"contents": [{"parts": [{"text": self.build_prompt(data)}]}]}
        try:
            client = await self._get_client()
            response = await client.post(
                f"/models/{self.model}:generateContent",
                params={"key": self.api_key},
                json=body,
            )
            response.raise_for_status()
            reply = response.json()
            text = reply["candidates"][0]["content"]["parts"][0]["text"]
        except httpx.HTTPError as e:
            logger.warning(f"Gemini request failed: {e!r}")
            return self.fallback.render(data)
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.warning(f"Gemini reply unusable: {e!r}")
            return self.fallback.render(data)

        prophecy = extract_prophecy(str(text))
        if prophecy is None:
            logger.warning("Gemini reply had no prophecy text")
            return self.fallback.render(data)
        return prophecy
