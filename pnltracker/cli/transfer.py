"""Data management commands for PnL Tracker CLI.

Exports the journal to JSON, imports JSON exports back, loads the demo
journal and clears everything.
"""

import sqlite3
from pathlib import Path
from typing import Optional

import click
from rich.panel import Panel

from pnltracker.cli.common import console, fail, get_config, get_data_store


@click.command()
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file. Defaults to pnl-export-<date>.json.",
)
def export(output: Optional[Path]) -> None:
    """Export all trades to a JSON file.

    \b
    Examples:
      pnltracker export
      pnltracker export -o backup.json
    """
    from pnltracker.exchange import default_export_filename, export_trades

    config = get_config()
    try:
        all_trades = get_data_store(config).get_trades()
    except (sqlite3.Error, OSError) as e:
        fail(f"Could not read the trade journal: {e}")

    output = output or Path(default_export_filename())
    output.write_text(export_trades(all_trades), encoding="utf-8")

    console.print(f"[green]Exported {len(all_trades)} trade(s) to[/green] {output}")


@click.command("import")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def import_(source: Path) -> None:
    """Import trades from a JSON export.

    Trades matching one already recorded (same symbol, within a minute,
    same P&L) are skipped. An invalid file is rejected as a whole.

    \b
    Examples:
      pnltracker import backup.json
    """
    from pnltracker.exchange import TradeImportError, import_trades
    from pnltracker.journal import JournalState

    config = get_config()
    try:
        incoming = import_trades(source.read_text(encoding="utf-8"))
    except TradeImportError as e:
        fail(str(e), title="Import Failed")

    try:
        store = get_data_store(config)
        state = JournalState(trades=tuple(store.get_trades()))
        merged = state.import_trades(incoming)
        # Imported trades are prepended to the snapshot
        fresh = list(merged.trades[: len(merged.trades) - len(state.trades)])
        store.save_trades(fresh)
    except (sqlite3.Error, OSError) as e:
        fail(f"Could not write the trade journal: {e}", title="Import Failed")

    console.print(Panel(
        f"Read:     {len(incoming)} trade(s)\n"
        f"Imported: {len(fresh)}\n"
        f"Skipped:  {len(incoming) - len(fresh)} (already recorded)",
        title="[bold cyan]Import Complete[/bold cyan]",
        border_style="cyan",
    ))


@click.command()
def sample() -> None:
    """Load a demo journal of 50 trades over the last nine weeks.

    The trades are dated relative to now, so 'week' and 'trend' have
    something to show right away. Remove them with 'pnltracker clear'.

    \b
    Examples:
      pnltracker sample
    """
    from pnltracker.sample import generate_sample_trades

    config = get_config()
    trades = generate_sample_trades()
    try:
        get_data_store(config).save_trades(trades)
    except (sqlite3.Error, OSError) as e:
        fail(f"Could not write the trade journal: {e}")

    console.print(f"[green]Loaded {len(trades)} sample trade(s).[/green]")


@click.command()
@click.option("--yes", is_flag=True, default=False, help="Do not ask for confirmation.")
def clear(yes: bool) -> None:
    """Delete every recorded trade.

    Export first if you may want the trades back.

    \b
    Examples:
      pnltracker export -o backup.json && pnltracker clear
    """
    config = get_config()
    try:
        store = get_data_store(config)
        stats = store.get_stats()
    except (sqlite3.Error, OSError) as e:
        fail(f"Could not read the trade journal: {e}")

    if stats["trades"] == 0:
        console.print("[dim]The journal is already empty.[/dim]")
        return

    if not yes:
        flagged = f", {stats['needs_review']} flagged for review" if stats["needs_review"] else ""
        click.confirm(f"Delete all {stats['trades']} trade(s){flagged}? This cannot be undone.", abort=True)

    try:
        removed = store.delete_all()
    except (sqlite3.Error, OSError) as e:
        fail(f"Could not clear the trade journal: {e}")

    console.print(f"[green]Deleted {removed} trade(s).[/green]")
