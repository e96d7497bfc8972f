"""Reporting commands for PnL Tracker CLI.

Weekly performance, a shareable plain-text summary, the list of recent
weeks and the trailing trend views.
"""

import sqlite3
from pathlib import Path
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from pnltracker.cli.common import (
    console,
    currency_of,
    fail,
    get_config,
    get_data_store,
    pnl_markup,
)


def _load_trades(config: dict) -> list:
    try:
        return get_data_store(config).get_trades()
    except (sqlite3.Error, OSError) as e:
        fail(f"Could not read the trade journal: {e}")


def _load_state(config: dict, week_key: Optional[str] = None):
    """Snapshot of the journal with the requested week selected."""
    from pnltracker.journal import JournalState
    from pnltracker.parsing.dates import InvalidWeekKeyError

    state = JournalState(trades=tuple(_load_trades(config)))
    if week_key is None:
        return state
    try:
        return state.set_current_week(week_key)
    except InvalidWeekKeyError as e:
        fail(str(e))


@click.command()
@click.argument("week_key", required=False, default=None)
def week(week_key: Optional[str]) -> None:
    """Show performance metrics for an ISO week.

    WEEK_KEY looks like 2024-W02 and defaults to the current week.

    \b
    Examples:
      pnltracker week
      pnltracker week 2024-W02
    """
    from pnltracker.analytics import compute_daily_pnl, compute_weekly_metrics, filter_trades_by_week
    from pnltracker.analytics.metrics import format_percentage, format_profit_factor
    from pnltracker.parsing.dates import days_in_week, format_week_range

    config = get_config()
    currency = currency_of(config)
    state = _load_state(config, week_key)
    week_key = state.current_week
    metrics = compute_weekly_metrics(state.trades, week_key)

    lines = [
        f"[bold]{week_key}[/bold] ({format_week_range(week_key)})\n",
        f"Net P&L:        {pnl_markup(metrics.net_pnl, currency)}",
        f"Trades:         {metrics.total_trades} "
        f"([green]{metrics.win_count}W[/green] / [red]{metrics.loss_count}L[/red])",
        f"Win Rate:       {format_percentage(metrics.win_rate)}",
        f"Avg Win:        {pnl_markup(metrics.avg_win, currency)}",
        f"Avg Loss:       [red]{metrics.avg_loss:,.2f} {currency}[/red]",
        f"Profit Factor:  {format_profit_factor(metrics)}",
        f"Max Drawdown:   [red]{metrics.max_drawdown:,.2f} {currency}[/red]",
    ]
    if metrics.best_day is not None:
        lines.append(
            f"Best Day:       {metrics.best_day.date.isoformat()} "
            f"{pnl_markup(metrics.best_day.pnl, currency)}"
        )
    if metrics.worst_day is not None:
        lines.append(
            f"Worst Day:      {metrics.worst_day.date.isoformat()} "
            f"{pnl_markup(metrics.worst_day.pnl, currency)}"
        )

    console.print(Panel(
        "\n".join(lines),
        title="[bold cyan]Weekly Performance[/bold cyan]",
        border_style="cyan",
    ))

    daily = {day.date: day for day in compute_daily_pnl(filter_trades_by_week(state.trades, week_key))}
    if daily:
        table = Table(title="Daily Breakdown", show_header=True, header_style="bold cyan")
        table.add_column("Date", style="bold")
        table.add_column("Trades", justify="right")
        table.add_column("P&L", justify="right")
        for day in days_in_week(week_key):
            bucket = daily.get(day)
            if bucket is None:
                table.add_row(f"{day:%a %Y-%m-%d}", "[dim]0[/dim]", "[dim]-[/dim]")
            else:
                table.add_row(f"{day:%a %Y-%m-%d}", str(bucket.trades), pnl_markup(bucket.pnl, currency))
        console.print(table)


@click.command()
@click.option(
    "--points",
    type=int,
    default=14,
    help="Number of most recent equity curve points to show (default: 14).",
)
def trend(points: int) -> None:
    """Show the 12-week P&L trend and the equity curve.

    \b
    Examples:
      pnltracker trend
      pnltracker trend --points 30
    """
    from pnltracker.analytics import (
        compute_equity_curve,
        compute_weekly_pnl_series,
        compute_weekly_win_loss_series,
    )

    config = get_config()
    currency = currency_of(config)
    all_trades = _load_trades(config)

    pnl_series = compute_weekly_pnl_series(all_trades)
    win_loss = {p.week: p for p in compute_weekly_win_loss_series(all_trades)}

    table = Table(title="Last 12 Weeks", show_header=True, header_style="bold cyan")
    table.add_column("Week", style="bold")
    table.add_column("Starting", style="dim")
    table.add_column("Net P&L", justify="right")
    table.add_column("Wins", justify="right", style="green")
    table.add_column("Losses", justify="right", style="red")
    for point in pnl_series:
        counts = win_loss[point.week]
        table.add_row(
            point.week,
            point.label,
            pnl_markup(point.pnl, currency),
            str(counts.wins),
            str(counts.losses),
        )
    console.print(table)

    curve = compute_equity_curve(all_trades)
    if not curve:
        console.print("[dim]No trades recorded yet.[/dim]")
        return

    equity_table = Table(title="Equity Curve", show_header=True, header_style="bold cyan")
    equity_table.add_column("Date", style="bold")
    equity_table.add_column("Equity", justify="right")
    for point in curve[-points:]:
        equity_table.add_row(point.date.isoformat(), pnl_markup(point.equity, currency))
    console.print(equity_table)


@click.command()
@click.argument("week_key", required=False, default=None)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the summary to a file instead of printing it.",
)
def summary(week_key: Optional[str], output: Optional[Path]) -> None:
    """Print a plain-text weekly summary to share.

    WEEK_KEY looks like 2024-W02 and defaults to the current week.

    \b
    Examples:
      pnltracker summary
      pnltracker summary 2024-W02 -o week.txt
    """
    from pnltracker.analytics import compute_weekly_metrics
    from pnltracker.analytics.metrics import format_weekly_summary

    config = get_config()
    state = _load_state(config, week_key)
    text = format_weekly_summary(
        compute_weekly_metrics(state.trades, state.current_week),
        currency_of(config),
    )

    if output is None:
        # Plain echo so the text can be piped or copied without markup
        click.echo(text)
        return

    output.write_text(text + "\n", encoding="utf-8")
    console.print(f"[green]Wrote summary for {state.current_week} to[/green] {output}")


@click.command()
@click.option("--count", type=click.IntRange(1, 104), default=12, help="Number of weeks (default: 12).")
def weeks(count: int) -> None:
    """List recent ISO weeks with their trade counts, newest first.

    Use a key from the first column with 'week', 'summary' or 'trades --week'.

    \b
    Examples:
      pnltracker weeks
      pnltracker weeks --count 26
    """
    from pnltracker.analytics import filter_trades_by_week
    from pnltracker.parsing.dates import week_options

    config = get_config()
    currency = currency_of(config)
    state = _load_state(config)

    table = Table(title=f"Last {count} Weeks", show_header=True, header_style="bold cyan")
    table.add_column("Week", style="bold")
    table.add_column("Dates", style="dim")
    table.add_column("Trades", justify="right")
    table.add_column("Net P&L", justify="right")
    for key, label in week_options(count):
        week_trades = filter_trades_by_week(state.trades, key)
        marker = " [cyan]*[/cyan]" if key == state.current_week else ""
        table.add_row(
            f"{key}{marker}",
            label,
            str(len(week_trades)),
            pnl_markup(sum(t.realized_pnl for t in week_trades), currency) if week_trades else "[dim]-[/dim]",
        )
    console.print(table)
