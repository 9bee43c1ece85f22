"""Deterministic sector x outlook prophecy templates."""

from oracle.core.types import Category, Outlook
from oracle.narrative.base import NarrativeInput, narrative_registry

BULLISH = {
    Category.AI: (
        "{ticker} will be running half the world's autonomous agents by Q3 2026. You're early, anon.",
        "In 2026, {ticker} becomes the backbone of AI-to-AI transactions. Your grandkids will study this chart.",
        "The AI revolution chose {ticker}. Resistance is futile, accumulation is wise.",
    ),
    Category.RWA: (
        "{ticker} tokenizes BlackRock's entire portfolio by 2026. TradFi never saw it coming.",
        "When boomers finally understand {ticker}, you'll need a boat for your bags.",
        "Real world assets meet blockchain. {ticker} is where Wall Street meets the future.",
    ),
    Category.MEME: (
        "{ticker} transcends meme status in 2026. The prophecy was always true.",
        "Elon tweets about {ticker} exactly 47 times in 2026. Each one adds a zero.",
        "{ticker} becomes legal tender in three countries. You can't make this up.",
    ),
}

BEARISH = {
    Category.AI: (
        "{ticker} needs to cool off. Even AI agents know when to take profits.",
        "The oracle sees paper hands in 2026. {ticker} will shake out the weak.",
        "Overheated silicon needs cooling. Patience, young padawan.",
    ),
    Category.RWA: (
        "{ticker} is running hot. The institutions are taking profits while you FOMO.",
        "When everyone's bullish on RWA, smart money takes a breather. The oracle waits.",
        "{ticker} will revisit lower levels. Dry powder ready.",
    ),
    Category.MEME: (
        "{ticker} is peak euphoria. The oracle has seen this movie before.",
        "When your Uber driver talks about {ticker}, it's time to touch grass.",
        "{ticker} needs a cooldown arc. Every meme lord knows the pattern.",
    ),
}

DEFAULT_BULLISH = (
    "The charts whisper {ticker}. By 2026 the doubters will be asking for your entry.",
    "{ticker} is quietly loading. The oracle has seen the next chapter and it trends up.",
    "Accumulation is a lonely art. {ticker} rewards the patient in 2026.",
)

DEFAULT_BEARISH = (
    "{ticker} has run ahead of itself. The oracle prefers a better entry.",
    "The 2026 timeline shows {ticker} consolidating. Keep some powder dry.",
    "Gravity still applies to {ticker}. Expect a cooldown before the next leg.",
)


def pick(ticker: str, options: tuple[str, ...]) -> str:
    """Stable choice: the same ticker always gets the same template."""
    return options[sum(ord(c) for c in ticker) % len(options)]


@narrative_registry.register("template", description="Deterministic sector templates")
class TemplateNarrativeGenerator:
    """Picks one canned prophecy by sector and outlook."""

    name = "template"

    def __init__(self, **kwargs):
        pass

    def render(self, data: NarrativeInput) -> str:
        if data.outlook == Outlook.BULLISH:
            options = BULLISH.get(data.category, DEFAULT_BULLISH)
        else:
            options = BEARISH.get(data.category, DEFAULT_BEARISH)
        return pick(data.ticker, options).format(ticker=data.ticker)

    async def generate(self, data: NarrativeInput) -> str:
        return self.render(data)

    async def close(self) -> None:
        pass
