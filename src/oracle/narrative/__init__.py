"""Prophecy prose generators."""

from typing import Any

import httpx

from oracle.narrative.base import NarrativeGenerator, NarrativeInput, narrative_registry
from oracle.narrative.gemini import GeminiNarrativeGenerator, extract_prophecy
from oracle.narrative.templates import TemplateNarrativeGenerator


def build_narrative(
    settings: Any,
    transport: httpx.AsyncBaseTransport | None = None,
) -> NarrativeGenerator:
    """
    Instantiate the generator named by ``pipeline.narrative``.

    Gemini is only used when its provider is enabled and has a key;
    otherwise the templates are.
    """
    name = settings.pipeline.narrative
    if name != "gemini":
        return narrative_registry.create(name)

    provider = settings.providers.gemini
    if not provider.enabled or not provider.has_api_key:
        return TemplateNarrativeGenerator()
    return narrative_registry.create(
        "gemini",
        base_url=provider.base_url,
        api_key=provider.api_key,
        timeout=provider.timeout,
        model=provider.model or "gemini-2.0-flash",
        transport=transport,
    )


__all__ = [
    "GeminiNarrativeGenerator",
    "NarrativeGenerator",
    "NarrativeInput",
    "TemplateNarrativeGenerator",
    "build_narrative",
    "extract_prophecy",
    "narrative_registry",
]
