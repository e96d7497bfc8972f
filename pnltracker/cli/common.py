"""Helpers shared by the CLI command modules."""

from typing import NoReturn

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pnltracker.models import Confidence, ExtractedFieldSet, Trade

console = Console()

CONFIDENCE_STYLES = {
    Confidence.HIGH: "green",
    Confidence.MEDIUM: "yellow",
    Confidence.LOW: "red",
}


def get_config() -> dict:
    """Lazily load configuration."""
    from pnltracker.config import load_config

    return load_config()


def get_data_store(config: dict):
    """Get the trade store instance."""
    from pnltracker.config import get_db_path
    from pnltracker.db.store import TradeStore

    return TradeStore(get_db_path(config))


def currency_of(config: dict) -> str:
    return config.get("display", {}).get("currency", "USDT")


def fail(message: str, title: str = "Error") -> NoReturn:
    """Print an error panel and exit with status 1."""
    console.print(Panel(
        message,
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


def warn(message: str, title: str = "Warning") -> None:
    console.print(Panel(
        message,
        title=f"[bold yellow]{title}[/bold yellow]",
        border_style="yellow",
    ))


def pnl_markup(value: float, currency: str = "USDT") -> str:
    color = "green" if value >= 0 else "red"
    sign = "+" if value >= 0 else ""
    return f"[{color}]{sign}{value:,.2f} {currency}[/{color}]"


def confidence_markup(level: Confidence) -> str:
    style = CONFIDENCE_STYLES[level]
    return f"[{style}]{level.value}[/{style}]"


def fields_table(fields: ExtractedFieldSet) -> Table:
    """Render an extraction result, one row per field."""
    table = Table(title="Extracted Fields", show_header=True, header_style="bold cyan")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_column("Confidence", justify="center")
    table.add_column("Matched Text", style="dim", max_width=40)

    rows = [
        ("Timestamp", fields.timestamp),
        ("Symbol", fields.symbol),
        ("Side", fields.side),
        ("Realized PnL", fields.realized_pnl),
        ("Fees", fields.fees),
        ("ROI", fields.roi),
    ]
    for label, field in rows:
        if field.value is None:
            table.add_row(label, "[dim]-[/dim]", "[dim]-[/dim]", "")
        else:
            table.add_row(label, str(field.value), confidence_markup(field.confidence), field.raw_text or "")
    return table


def trades_table(trades: list[Trade], currency: str = "USDT", title: str = "Trade Journal") -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim", max_width=8)
    table.add_column("Date/Time", style="dim")
    table.add_column("Symbol", style="bold")
    table.add_column("Side", justify="center")
    table.add_column("P&L", justify="right")
    table.add_column("ROI", justify="right")
    table.add_column("Result", justify="center")
    table.add_column("Review", justify="center")

    for trade in trades:
        side_color = {"long": "green", "short": "red"}.get(trade.side, "dim")
        table.add_row(
            trade.id[:8],
            trade.timestamp.strftime("%Y-%m-%d %H:%M"),
            trade.symbol,
            f"[{side_color}]{trade.side}[/{side_color}]",
            pnl_markup(trade.realized_pnl, currency),
            f"{trade.roi:+.2f}%" if trade.roi is not None else "-",
            trade.result,
            "[yellow]yes[/yellow]" if trade.needs_review else "-",
        )
    return table


def trade_summary(trade: Trade, currency: str) -> str:
    return (
        f"[bold]{trade.symbol}[/bold] ({trade.side}) "
        f"{trade.timestamp.strftime('%Y-%m-%d %H:%M:%S')}\n"
        f"Realized P&L: {pnl_markup(trade.realized_pnl, currency)}  "
        f"Result: {trade.result}\n"
        f"[dim]id {trade.id}[/dim]"
    )
