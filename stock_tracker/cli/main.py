"""Main CLI entry point using Typer."""

import asyncio
import logging
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from stock_tracker.cli.display import describe_status, render
from stock_tracker.config import PRODUCT_NAME, PRODUCT_TAGLINE, PRODUCT_VERSION, get_settings
from stock_tracker.core import Failed, LocalStore, StockTracker
from stock_tracker.data.sources import DATA_SOURCES, get_data_source

settings = get_settings()

console = Console()
app = typer.Typer(
    name="stocks",
    help=f"{PRODUCT_NAME}: {PRODUCT_TAGLINE}",
    add_completion=False,
)


@app.callback()
def main_callback():
    """Configure logging."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def _build_tracker(source: Optional[str] = None) -> StockTracker:
    """Create a tracker seeded from the local cache."""
    effective = settings if source is None else settings.model_copy(update={"data_source": source})
    try:
        data_source = get_data_source(effective)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(2)
    return StockTracker(data_source, LocalStore(effective.storage_path), settings=effective)


@app.command("show")
def show():
    """Show cached stocks without fetching."""
    render(console, _build_tracker())


@app.command("refresh")
def refresh(
    source: Optional[str] = typer.Option(
        None,
        "--source",
        "-s",
        help=f"Data source ({', '.join(DATA_SOURCES)}; default: {settings.data_source})",
    ),
):
    """Fetch fresh stocks and update the local cache."""
    tracker = _build_tracker(source)

    def print_status(t: StockTracker) -> None:
        text, style = describe_status(t.status, t)
        console.print(f"[{style}]{escape(text)}[/{style}]")

    async def run_refresh() -> None:
        unsubscribe = tracker.subscribe(print_status)
        try:
            await tracker.refresh()
        finally:
            unsubscribe()

    with console.status(f"Refreshing from {tracker.data_source.display_name}..."):
        asyncio.run(run_refresh())

    console.print()
    render(console, tracker)

    if isinstance(tracker.status, Failed):
        raise typer.Exit(1)


@app.command("clear")
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete the local stock cache."""
    store = LocalStore(settings.storage_path)
    if not yes and not typer.confirm(f"Delete cached stocks at {store.path}?"):
        console.print("[dim]Cancelled.[/dim]")
        return

    if store.clear():
        console.print(f"[green]Cleared:[/green] {store.path}")
    else:
        console.print("[yellow]Nothing to clear.[/yellow]")


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold]{PRODUCT_NAME}[/bold]")
    console.print(f"[bold]Version:[/] {PRODUCT_VERSION}")
    console.print(f"[bold]Tagline:[/] {PRODUCT_TAGLINE}")


if __name__ == "__main__":
    app()
