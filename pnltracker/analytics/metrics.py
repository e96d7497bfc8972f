"""Weekly performance metrics and P&L time series.

Every function here is pure: it reads the trades it is given and returns
new model objects, never modifying the input collection.
"""

import math
from collections import defaultdict
from datetime import datetime
from typing import Iterable, Optional

from pnltracker.models import (
    DailyPnl,
    EquityPoint,
    Trade,
    WeeklyMetrics,
    WeeklyPnlPoint,
    WeeklyWinLossPoint,
)
from pnltracker.parsing.dates import (
    date_key,
    format_week_range,
    format_week_short,
    is_in_week,
    last_week_keys,
    week_range,
)

TREND_WEEKS = 12


def filter_trades_by_week(trades: Iterable[Trade], week_key: str) -> list[Trade]:
    """Trades whose timestamp falls inside the ISO week (bounds inclusive)."""
    return [t for t in trades if is_in_week(t.timestamp, week_key)]


def compute_profit_factor(trades: Iterable[Trade]) -> float:
    """Gross profit over gross absolute loss.

    Returns:
        math.inf when there are wins but no losses, 0.0 when there is
        neither.
    """
    total_wins = 0.0
    total_losses = 0.0
    for trade in trades:
        if trade.is_win:
            total_wins += trade.realized_pnl
        elif trade.is_loss:
            total_losses += trade.realized_pnl
    total_losses = abs(total_losses)

    if total_losses > 0:
        return total_wins / total_losses
    return math.inf if total_wins > 0 else 0.0


def compute_daily_pnl(trades: Iterable[Trade]) -> list[DailyPnl]:
    """Bucket trades by calendar date, oldest first."""
    buckets = defaultdict(lambda: {"pnl": 0.0, "trades": 0})
    for trade in trades:
        day = date_key(trade.timestamp)
        buckets[day]["pnl"] += trade.realized_pnl
        buckets[day]["trades"] += 1

    return [
        DailyPnl(date=day, pnl=data["pnl"], trades=data["trades"])
        for day, data in sorted(buckets.items())
    ]


def compute_drawdown_and_extremes(
    daily: list[DailyPnl],
) -> tuple[float, Optional[DailyPnl], Optional[DailyPnl]]:
    """Walk daily buckets in order tracking the running peak.

    Args:
        daily: Daily buckets sorted by date.

    Returns:
        (max drawdown, best day, worst day). Days are None when `daily` is empty.
    """
    if not daily:
        return 0.0, None, None

    peak = 0.0
    cumulative = 0.0
    max_drawdown = 0.0
    best_day = daily[0]
    worst_day = daily[0]

    for day in daily:
        cumulative += day.pnl
        if cumulative > peak:
            peak = cumulative

        drawdown = peak - cumulative
        if drawdown > max_drawdown:
            max_drawdown = drawdown

        if day.pnl > best_day.pnl:
            best_day = day
        if day.pnl < worst_day.pnl:
            worst_day = day

    return max_drawdown, best_day, worst_day


def compute_weekly_metrics(trades: Iterable[Trade], week_key: str) -> WeeklyMetrics:
    """Compute the performance summary of one ISO week.

    Args:
        trades: Full trade collection; only trades inside the week count.
        week_key: ISO week key such as '2024-W02'.

    Returns:
        WeeklyMetrics. With wins but no losses the profit factor is
        reported as 0 and `profit_factor_unbounded` is set.
    """
    start, end = week_range(week_key)
    week_trades = filter_trades_by_week(trades, week_key)

    wins = [t for t in week_trades if t.is_win]
    losses = [t for t in week_trades if t.is_loss]

    total_wins = sum(t.realized_pnl for t in wins)
    total_losses = abs(sum(t.realized_pnl for t in losses))

    profit_factor = compute_profit_factor(week_trades)
    unbounded = math.isinf(profit_factor)

    max_drawdown, best_day, worst_day = compute_drawdown_and_extremes(
        compute_daily_pnl(week_trades)
    )

    return WeeklyMetrics(
        week_key=week_key,
        week_start=start.date(),
        week_end=end.date(),
        net_pnl=sum(t.realized_pnl for t in week_trades),
        total_trades=len(week_trades),
        win_count=len(wins),
        loss_count=len(losses),
        win_rate=(len(wins) / len(week_trades) * 100) if week_trades else 0.0,
        avg_win=(total_wins / len(wins)) if wins else 0.0,
        avg_loss=(total_losses / len(losses)) if losses else 0.0,
        profit_factor=0.0 if unbounded else profit_factor,
        profit_factor_unbounded=unbounded,
        max_drawdown=max_drawdown,
        best_day=best_day,
        worst_day=worst_day,
    )


def compute_equity_curve(trades: Iterable[Trade]) -> list[EquityPoint]:
    """Cumulative realized P&L, one point per calendar day.

    Trades are replayed in time order; a day's point is the running total
    after that day's last trade.
    """
    ordered = sorted(trades, key=lambda t: t.timestamp)

    cumulative = 0.0
    by_day = {}
    for trade in ordered:
        cumulative += trade.realized_pnl
        by_day[date_key(trade.timestamp)] = cumulative

    return [EquityPoint(date=day, equity=equity) for day, equity in sorted(by_day.items())]


def compute_weekly_pnl_series(
    trades: Iterable[Trade], *, now: Optional[datetime] = None
) -> list[WeeklyPnlPoint]:
    """Net P&L for each of the trailing 12 weeks, oldest first, ending this week."""
    trades = list(trades)
    points = []
    for week in last_week_keys(TREND_WEEKS, now):
        week_trades = filter_trades_by_week(trades, week)
        points.append(
            WeeklyPnlPoint(
                week=week,
                pnl=sum(t.realized_pnl for t in week_trades),
                label=format_week_short(week),
            )
        )
    return points


def compute_weekly_win_loss_series(
    trades: Iterable[Trade], *, now: Optional[datetime] = None
) -> list[WeeklyWinLossPoint]:
    """Win and loss counts for each of the trailing 12 weeks, oldest first."""
    trades = list(trades)
    points = []
    for week in last_week_keys(TREND_WEEKS, now):
        week_trades = filter_trades_by_week(trades, week)
        points.append(
            WeeklyWinLossPoint(
                week=week,
                wins=sum(1 for t in week_trades if t.is_win),
                losses=sum(1 for t in week_trades if t.is_loss),
                label=format_week_short(week),
            )
        )
    return points


def format_pnl(value: float, currency: str = "USDT") -> str:
    prefix = "+" if value >= 0 else ""
    return f"{prefix}{value:.2f} {currency}"


def format_percentage(value: float) -> str:
    return f"{value:.1f}%"


def format_profit_factor(metrics: WeeklyMetrics) -> str:
    if metrics.profit_factor_unbounded:
        return "∞"
    return f"{metrics.profit_factor:.2f}"


def format_weekly_summary(metrics: WeeklyMetrics, currency: str = "USDT") -> str:
    """Plain-text weekly report suitable for pasting into a chat or note."""
    lines = [
        "PnL Tracker Weekly Report",
        f"Week: {metrics.week_key} ({format_week_range(metrics.week_key)})",
        "",
        f"Net PnL: {format_pnl(metrics.net_pnl, currency)}",
        f"Win Rate: {format_percentage(metrics.win_rate)}",
        f"Total Trades: {metrics.total_trades}",
        f"Profit Factor: {format_profit_factor(metrics)}",
    ]
    return "\n".join(lines)
