"""Narrative generator protocol, its input and the generator registry."""

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from oracle.core.registry import Registry
from oracle.core.types import Category, Outlook


@dataclass(frozen=True)
class NarrativeInput:
    """Facts a generator may mention. Outlook and confidence are already decided."""

    ticker: str
    name: str
    price: float
    volume_24h: float
    price_change_24h: float
    rsi: float
    percent_b: float
    category: Category
    outlook: Outlook
    confidence: int


@runtime_checkable
class NarrativeGenerator(Protocol):
    """Produces the prophecy prose for a report."""

    name: str

    async def generate(self, data: NarrativeInput) -> str:
        ...

    async def close(self) -> None:
        ...


narrative_registry: Registry[Any] = Registry("narrative")
