"""Command-line interface for the token oracle."""

import asyncio
import json

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="oracle",
    help="Token Oracle - Signal aggregation and composite scoring for crypto tokens",
    add_completion=False,
)

console = Console()

# Sub-commands
sources_app = typer.Typer(help="Upstream source commands")
config_app = typer.Typer(help="Configuration commands")

app.add_typer(sources_app, name="sources")
app.add_typer(config_app, name="config")

OUTLOOK_STYLE = {"Bullish": "bold green", "Bearish": "bold red"}


def run_async(coro):
    """Run an async function."""
    return asyncio.run(coro)


# =============================================================================
# Prediction Commands
# =============================================================================


@app.command()
def predict(
    ticker: str = typer.Argument(..., help="Ticker symbol or contract address"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON payload"),
):
    """Run the oracle for one ticker or contract address."""
    from oracle.core.errors import OracleError
    from oracle.core.numeric import format_usd
    from oracle.indicators.technical import describe_rsi
    from oracle.pipeline import OracleService

    async def _predict():
        service = OracleService()
        try:
            return await service.predict(ticker)
        finally:
            await service.close()

    try:
        report = run_async(_predict())
    except OracleError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        if e.hint:
            console.print(f"[dim]{e.hint}[/dim]")
        raise typer.Exit(code=1)

    payload = report.to_dict()
    if as_json:
        console.print_json(json.dumps(payload))
        return

    prediction = payload["prediction"]
    six_month = payload["prediction_6m"]
    outlook = prediction["outlook"]

    console.print(
        f"[bold]{payload['ticker']}[/bold] {payload['name']} "
        f"[dim]({payload['category']})[/dim]"
    )
    console.print(
        f"  Price:      ${payload['price']:,.8g}  ({payload['price_change_24h']:+.2f}% 24h)"
    )
    console.print(f"  Market cap: {format_usd(payload['market_cap'])}")
    console.print(f"  Volume 24h: {format_usd(payload['volume_24h'])}")
    console.print("")

    table = Table(title="Signals")
    table.add_column("Source", style="cyan")
    table.add_column("Reading")
    table.add_row("RSI (14)", describe_rsi(payload["technical"]["rsi"]))
    table.add_row("Bollinger %B", f"{payload['technical']['bollinger_position']:.2f}")
    table.add_row("Technical", payload["technical"]["signal"])
    table.add_row(
        "DEX",
        f"{payload['dex']['sentiment']} ({payload['dex']['sentiment_strength']:.0f}), "
        f"liquidity {format_usd(payload['dex']['liquidity_usd'])}",
    )
    table.add_row(
        "Momentum",
        f"{payload['cmc']['momentum']['trend']} ({payload['cmc']['momentum']['score']})",
    )
    table.add_row("Rank", f"#{payload['cmc']['rank']} {payload['cmc']['ranking_tier']}")
    console.print(table)

    console.print(
        f"\n[{OUTLOOK_STYLE.get(outlook, 'bold')}]{outlook}[/] "
        f"confidence {prediction['confidence']}%  target {prediction['target_cap']}"
    )
    for signal in prediction["signals_bullish"]:
        console.print(f"  [green]+[/green] {signal}")
    for signal in prediction["signals_bearish"]:
        console.print(f"  [red]-[/red] {signal}")
    console.print(f"\n[italic]{prediction['prophecy']}[/italic]")
    console.print(
        f"\n[bold]6 months:[/bold] {format_usd(six_month['market_cap_low'])} - "
        f"{format_usd(six_month['market_cap_high'])} "
        f"(mid {format_usd(six_month['market_cap_mid'])}, {six_month['growth_percent']:+d}%)"
    )
    console.print(f"  {six_month['reasoning']}")
    if payload["technical"]["synthetic_history"]:
        console.print("[yellow]Price history unavailable; indicators use a synthetic series.[/yellow]")
    console.print(f"[dim]Sources: {', '.join(payload['data_sources'])}[/dim]")


@app.command()
def sectors():
    """Show the AI / RWA / MEME sector heatmap."""
    from oracle.core.numeric import format_usd
    from oracle.pipeline import OracleService
    from oracle.sectors import SectorService

    async def _overview():
        service = OracleService()
        try:
            return await SectorService(service).overview()
        finally:
            await service.close()

    overview = run_async(_overview())

    table = Table(title=f"Sectors - overall {overview.overall_sentiment}")
    table.add_column("Sector", style="cyan")
    table.add_column("Volume", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("Avg 24h", justify="right")
    table.add_column("Avg RSI", justify="right")
    table.add_column("Sentiment")

    for name, heat in overview.sectors.items():
        table.add_row(
            name,
            format_usd(heat.total_volume),
            f"{heat.relative_size:.1f}%",
            f"{heat.avg_change:+.2f}%",
            f"{heat.avg_rsi:.1f}",
            heat.sentiment,
        )

    console.print(table)


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int = typer.Option(None, "--port", "-p", help="Port (default from config)"),
):
    """Serve the HTTP API with uvicorn."""
    import uvicorn

    from oracle.config.settings import get_settings

    api = get_settings().api
    host = host or api.host
    port = port or api.port
    console.print(f"[bold]Serving oracle API on http://{host}:{port}[/bold]")
    uvicorn.run("oracle.api:create_app", factory=True, host=host, port=port)


# =============================================================================
# Source Commands
# =============================================================================


@sources_app.command("list")
def sources_list():
    """List registered upstream sources."""
    from oracle.sources import source_registry

    table = Table(title="Available Sources")
    table.add_column("Name", style="cyan")
    table.add_column("Role", style="green")
    table.add_column("Live")
    table.add_column("Description")

    for name, meta in source_registry.list_with_metadata().items():
        table.add_row(
            name,
            meta.get("role", ""),
            "yes" if meta.get("live") else "no",
            meta.get("description", ""),
        )

    console.print(table)


# =============================================================================
# Config Commands
# =============================================================================


@config_app.command("validate")
def config_validate():
    """Validate the configuration file."""
    from pydantic import ValidationError

    from oracle.config.settings import get_settings

    try:
        settings = get_settings()
        _ = settings.settings
        console.print("[green]✓ settings.yaml valid[/green]")
    except (ValidationError, ValueError) as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(code=1)


@config_app.command("show")
def config_show(section: str = typer.Argument("all", help="Config section to show")):
    """Show configuration values."""
    from oracle.config.settings import get_settings

    settings = get_settings()

    if section in ("all", "providers"):
        console.print("[bold]Providers:[/bold]")
        for name, provider in settings.providers:
            key = "set" if provider.has_api_key else "none"
            state = "enabled" if provider.enabled else "disabled"
            console.print(f"  {name}: {provider.base_url} (key: {key}, {state})")

    if section in ("all", "scoring"):
        scoring = settings.scoring
        console.print("[bold]Scoring:[/bold]")
        console.print(
            f"  Weights: rsi={scoring.rsi_weight} bb={scoring.bollinger_weight} "
            f"dex={scoring.dex_weight} momentum={scoring.momentum_weight}"
        )
        console.print(f"  Rank bonus: top50={scoring.top50_bonus} top100={scoring.top100_bonus}")

    if section in ("all", "pipeline"):
        pipeline = settings.pipeline
        console.print("[bold]Pipeline:[/bold]")
        console.print(f"  History days:     {pipeline.history_days}")
        console.print(f"  Upstream timeout: {pipeline.upstream_timeout}s")
        console.print(f"  Narrative:        {pipeline.narrative}")

    if section in ("all", "api"):
        console.print("[bold]API:[/bold]")
        console.print(f"  Host: {settings.api.host}")
        console.print(f"  Port: {settings.api.port}")


# =============================================================================
# Main Entry Point
# =============================================================================


@app.command()
def version():
    """Show version information."""
    from oracle import __version__
    console.print(f"Token Oracle v{__version__}")


@app.callback()
def main():
    """
    Token Oracle

    Aggregates price, DEX and ranking data into one heuristic prediction.
    """
    load_dotenv()
    from oracle.config.settings import get_settings
    get_settings().setup_logging()


def cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    cli()
