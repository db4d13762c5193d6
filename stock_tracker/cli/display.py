"""Rich rendering of the tracker state."""

from __future__ import annotations

from typing import List, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from stock_tracker.config import PRODUCT_NAME
from stock_tracker.core.status import Failed, FetchStatus, Idle, Succeeded, Waiting
from stock_tracker.core.tracker import StockTracker
from stock_tracker.data.models import TrackedStock


def describe_status(status: FetchStatus, tracker: StockTracker) -> Tuple[str, str]:
    """Return (text, rich style) for a fetch status."""
    if isinstance(status, Idle):
        return "Pull to refresh (run 'stocks refresh')", "dim"
    if isinstance(status, Waiting):
        return f"Waiting since {tracker.format_timestamp(status.since)}", "yellow"
    if isinstance(status, Succeeded):
        seconds = status.elapsed.total_seconds()
        return f"Refreshed stocks after {seconds:.1f} seconds", "green"
    if isinstance(status, Failed):
        return f"Error: {status.message}", "bold red"
    raise TypeError(f"Unknown fetch status: {status!r}")


def stocks_table(stocks: List[TrackedStock]) -> Table:
    """Build a table of symbols and their latest price."""
    table = Table(title="Tracked Stocks")
    table.add_column("Symbol", style="cyan")
    table.add_column("Price", justify="right", style="green")

    for stock in stocks:
        price = stock.current_price or 0.0
        table.add_row(stock.symbol, f"${price:,.2f}")

    return table


def render(console: Console, tracker: StockTracker) -> None:
    """Print header, status and the stock list."""
    console.print(f"[bold]{PRODUCT_NAME}[/bold]")
    console.print(f"[dim]Last Updated: {tracker.last_update_display}[/dim]\n")

    text, style = describe_status(tracker.status, tracker)
    console.print(f"[{style}]{escape(text)}[/{style}]\n")

    if not tracker.stocks:
        console.print("[yellow]No stocks cached.[/yellow] Run 'refresh' to fetch some.")
        return

    console.print(stocks_table(tracker.stocks))
    console.print(f"\n[dim]Total stocks: {len(tracker.stocks)}[/dim]")
