"""Journal maintenance commands for PnL Tracker CLI.

Lists, edits and deletes recorded trades. Edits are full replacements:
the edited trade keeps its id and creation time and counts as reviewed.
"""

import sqlite3
from typing import Optional

import click
from rich.panel import Panel

from pnltracker.cli.common import (
    console,
    currency_of,
    fail,
    get_config,
    get_data_store,
    pnl_markup,
    trades_table,
)
from pnltracker.models import Trade


def _resolve_trade(store, trade_id: str) -> Trade:
    """Find a trade by full id or unique id prefix."""
    trade = store.get_trade(trade_id)
    if trade is not None:
        return trade

    matches = [t for t in store.get_trades() if t.id.startswith(trade_id)]
    if not matches:
        fail(f"No trade with id '{trade_id}'.")
    if len(matches) > 1:
        fail(f"Id prefix '{trade_id}' matches {len(matches)} trades; use more characters.")
    return matches[0]


@click.command()
@click.option("--week", "week_key", type=str, default=None, help="Only trades of this ISO week (YYYY-Www).")
@click.option("--review", "review_only", is_flag=True, default=False, help="Only trades flagged for review.")
def trades(week_key: Optional[str], review_only: bool) -> None:
    """List recorded trades, newest first.

    \b
    Examples:
      pnltracker trades
      pnltracker trades --week 2024-W02
      pnltracker trades --review
    """
    from pnltracker.parsing.dates import InvalidWeekKeyError

    config = get_config()
    try:
        found = get_data_store(config).get_trades(week_key=week_key)
    except InvalidWeekKeyError as e:
        fail(str(e))
    except (sqlite3.Error, OSError) as e:
        fail(f"Could not read the trade journal: {e}")

    if review_only:
        found = [t for t in found if t.needs_review]

    if not found:
        console.print(Panel(
            "[dim]No trades found[/dim]",
            title="[bold]Trade Journal[/bold]",
            border_style="dim",
        ))
        return

    currency = currency_of(config)
    console.print(trades_table(found, currency))

    total_pnl = sum(t.realized_pnl for t in found)
    flagged = sum(1 for t in found if t.needs_review)
    console.print(f"\n[bold]Total Trades:[/bold] {len(found)}")
    console.print(f"[bold]Total P&L:[/bold] {pnl_markup(total_pnl, currency)}")
    if flagged:
        console.print(f"[yellow]{flagged} trade(s) need review[/yellow]")


@click.command()
@click.argument("trade_id")
@click.option("--timestamp", "timestamp_text", type=str, default=None, help="New close time.")
@click.option("--symbol", type=str, default=None, help="New ticker.")
@click.option("--pnl", type=float, default=None, help="New realized P&L.")
@click.option("--side", type=click.Choice(["long", "short", "unknown"]), default=None)
@click.option("--fees", type=float, default=None, help="New trading fees.")
@click.option("--roi", type=float, default=None, help="New return on margin in percent.")
@click.option("--remarks", type=str, default=None, help="New notes.")
def edit(
    trade_id: str,
    timestamp_text: Optional[str],
    symbol: Optional[str],
    pnl: Optional[float],
    side: Optional[str],
    fees: Optional[float],
    roi: Optional[float],
    remarks: Optional[str],
) -> None:
    """Correct a recorded trade and mark it reviewed.

    TRADE_ID may be the full id or a unique prefix of it. Options that are
    not given keep their current value.

    \b
    Examples:
      pnltracker edit 3f2a9c1e --pnl -42.10
      pnltracker edit 3f2a9c1e --symbol ETHUSDT --side short
    """
    from pnltracker.parsing import parse_flexible_date, replace_trade

    config = get_config()
    try:
        store = get_data_store(config)
        existing = _resolve_trade(store, trade_id)
    except (sqlite3.Error, OSError) as e:
        fail(f"Could not read the trade journal: {e}")

    changes = {
        "symbol": symbol,
        "realized_pnl": pnl,
        "side": side,
        "fees": fees,
        "roi": roi,
        "remarks": remarks,
    }
    if timestamp_text is not None:
        timestamp = parse_flexible_date(timestamp_text)
        if timestamp is None:
            fail(f"Could not understand the timestamp '{timestamp_text}'.")
        changes["timestamp"] = timestamp

    updated = replace_trade(existing, **{k: v for k, v in changes.items() if v is not None})
    try:
        store.save_trade(updated)
    except (sqlite3.Error, OSError) as e:
        fail(f"Could not save the trade: {e}\n\nThe journal still holds the previous version.")

    console.print(Panel(
        f"[bold]{updated.symbol}[/bold] {updated.timestamp.strftime('%Y-%m-%d %H:%M:%S')}\n"
        f"Realized P&L: {pnl_markup(updated.realized_pnl, currency_of(config))}  "
        f"Result: {updated.result}",
        title="[bold]Trade Updated[/bold]",
        border_style="green",
    ))


@click.command()
@click.argument("trade_id")
@click.option("--yes", is_flag=True, default=False, help="Do not ask for confirmation.")
def delete(trade_id: str, yes: bool) -> None:
    """Delete a recorded trade.

    \b
    Examples:
      pnltracker delete 3f2a9c1e
    """
    from pnltracker.journal import TradeNotFoundError

    config = get_config()
    try:
        store = get_data_store(config)
        trade = _resolve_trade(store, trade_id)
    except (sqlite3.Error, OSError) as e:
        fail(f"Could not read the trade journal: {e}")

    if not yes:
        click.confirm(
            f"Delete {trade.symbol} {trade.timestamp:%Y-%m-%d %H:%M} ({trade.realized_pnl:+.2f})?",
            abort=True,
        )

    try:
        store.delete_trade(trade.id)
    except TradeNotFoundError:
        fail(f"Trade {trade.id} was already deleted.")
    except (sqlite3.Error, OSError) as e:
        fail(f"Could not delete the trade: {e}")
    console.print(f"[green]Deleted trade {trade.id}[/green]")
