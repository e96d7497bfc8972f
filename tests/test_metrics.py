"""Tests for weekly metrics and trend series.

**Feature: pnl-tracker**
"""

import math
from datetime import date, datetime, timedelta

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from pnltracker.analytics import (
    compute_daily_pnl,
    compute_equity_curve,
    compute_weekly_metrics,
    compute_weekly_pnl_series,
    compute_weekly_win_loss_series,
    filter_trades_by_week,
)
from pnltracker.analytics.metrics import (
    compute_drawdown_and_extremes,
    compute_profit_factor,
    format_percentage,
    format_pnl,
    format_profit_factor,
    format_weekly_summary,
)
from pnltracker.parsing import manual_trade
from pnltracker.parsing.dates import InvalidWeekKeyError

WEEK = "2024-W02"
MONDAY = datetime(2024, 1, 8)


def make_trade(timestamp: datetime, pnl: float, symbol: str = "BTCUSDT"):
    return manual_trade(timestamp, symbol, pnl, now=timestamp)


class TestEmptyWeek:
    """A week without trades reports zeros."""

    def test_zeros(self):
        metrics = compute_weekly_metrics([], WEEK)

        assert metrics.week_key == WEEK
        assert metrics.week_start == date(2024, 1, 8)
        assert metrics.week_end == date(2024, 1, 14)
        assert metrics.net_pnl == 0
        assert metrics.total_trades == 0
        assert metrics.win_rate == 0
        assert metrics.avg_win == 0
        assert metrics.avg_loss == 0
        assert metrics.profit_factor == 0
        assert metrics.profit_factor_unbounded is False
        assert metrics.max_drawdown == 0
        assert metrics.best_day is None
        assert metrics.worst_day is None

    def test_trades_outside_week_ignored(self):
        trades = [make_trade(MONDAY - timedelta(days=1), 50.0)]
        assert compute_weekly_metrics(trades, WEEK).total_trades == 0

    def test_invalid_week_key(self):
        with pytest.raises(InvalidWeekKeyError):
            compute_weekly_metrics([], "2024-13")


class TestWeeklyMetrics:
    """Counts, averages, profit factor and drawdown over one week."""

    def test_drawdown_example(self):
        trades = [
            make_trade(MONDAY + timedelta(hours=10), 100.0),
            make_trade(MONDAY + timedelta(days=1, hours=10), -40.0),
            make_trade(MONDAY + timedelta(days=2, hours=10), 20.0),
        ]
        metrics = compute_weekly_metrics(trades, WEEK)

        assert metrics.max_drawdown == pytest.approx(40.0)
        assert metrics.net_pnl == pytest.approx(80.0)
        assert metrics.total_trades == 3
        assert metrics.win_count == 2
        assert metrics.loss_count == 1
        assert metrics.win_rate == pytest.approx(200 / 3)
        assert metrics.avg_win == pytest.approx(60.0)
        assert metrics.avg_loss == pytest.approx(40.0)
        assert metrics.profit_factor == pytest.approx(3.0)
        assert metrics.best_day.date == date(2024, 1, 8)
        assert metrics.best_day.pnl == pytest.approx(100.0)
        assert metrics.worst_day.date == date(2024, 1, 9)
        assert metrics.worst_day.pnl == pytest.approx(-40.0)

    def test_profit_factor(self):
        trades = [
            make_trade(MONDAY + timedelta(hours=1), 100.0),
            make_trade(MONDAY + timedelta(hours=2), 200.0),
            make_trade(MONDAY + timedelta(hours=3), -150.0),
        ]
        assert compute_weekly_metrics(trades, WEEK).profit_factor == pytest.approx(2.0)

    def test_wins_without_losses(self):
        trades = [make_trade(MONDAY + timedelta(hours=1), 25.0)]
        metrics = compute_weekly_metrics(trades, WEEK)

        assert metrics.profit_factor == 0
        assert metrics.profit_factor_unbounded is True
        assert format_profit_factor(metrics) == "∞"
        assert math.isinf(compute_profit_factor(trades))

    def test_losses_only(self):
        trades = [make_trade(MONDAY + timedelta(hours=1), -25.0)]
        metrics = compute_weekly_metrics(trades, WEEK)
        assert metrics.profit_factor == 0
        assert metrics.profit_factor_unbounded is False
        assert metrics.max_drawdown == pytest.approx(25.0)

    def test_breakeven_counts_toward_total_only(self):
        trades = [
            make_trade(MONDAY + timedelta(hours=1), 10.0),
            make_trade(MONDAY + timedelta(hours=2), 0.0),
        ]
        metrics = compute_weekly_metrics(trades, WEEK)
        assert metrics.total_trades == 2
        assert metrics.win_count == 1
        assert metrics.loss_count == 0
        assert metrics.win_rate == pytest.approx(50.0)

    def test_week_bounds_inclusive(self):
        trades = [
            make_trade(datetime(2024, 1, 8, 0, 0, 0), 1.0),
            make_trade(datetime(2024, 1, 14, 23, 59, 59), 2.0),
            make_trade(datetime(2024, 1, 15, 0, 0, 0), 4.0),
            make_trade(datetime(2024, 1, 7, 23, 59, 59), 8.0),
        ]
        assert compute_weekly_metrics(trades, WEEK).net_pnl == pytest.approx(3.0)
        assert len(filter_trades_by_week(trades, WEEK)) == 2

    @given(
        entries=st.lists(
            st.tuples(
                st.integers(min_value=0, max_value=7 * 24 * 60 - 1),
                st.floats(min_value=-10_000, max_value=10_000, allow_nan=False),
            ),
            max_size=30,
        )
    )
    @settings(max_examples=100)
    def test_metric_invariants(self, entries):
        """
        *For any* set of trades inside a week, net P&L is their sum, win and
        loss counts never exceed the total, the win rate stays within
        0-100 and the drawdown is never negative.
        """
        trades = [make_trade(MONDAY + timedelta(minutes=m), pnl) for m, pnl in entries]
        metrics = compute_weekly_metrics(trades, WEEK)

        assert metrics.net_pnl == pytest.approx(sum(p for _, p in entries), abs=1e-6)
        assert metrics.total_trades == len(entries)
        assert metrics.win_count + metrics.loss_count <= metrics.total_trades
        assert 0 <= metrics.win_rate <= 100
        assert metrics.max_drawdown >= 0
        assert metrics.profit_factor >= 0


class TestDailyBuckets:
    """Daily buckets, drawdown and extremes."""

    def test_same_day_trades_summed(self):
        trades = [
            make_trade(MONDAY + timedelta(hours=9), 10.0),
            make_trade(MONDAY + timedelta(hours=18), -3.0),
            make_trade(MONDAY + timedelta(days=1), 5.0),
        ]
        daily = compute_daily_pnl(trades)
        assert [d.date for d in daily] == [date(2024, 1, 8), date(2024, 1, 9)]
        assert daily[0].pnl == pytest.approx(7.0)
        assert daily[0].trades == 2

    def test_drawdown_starts_from_zero_peak(self):
        trades = [make_trade(MONDAY, -30.0), make_trade(MONDAY + timedelta(days=1), 10.0)]
        max_dd, best, worst = compute_drawdown_and_extremes(compute_daily_pnl(trades))
        assert max_dd == pytest.approx(30.0)
        assert best.pnl == pytest.approx(10.0)
        assert worst.pnl == pytest.approx(-30.0)

    def test_empty(self):
        assert compute_drawdown_and_extremes([]) == (0.0, None, None)


class TestSeries:
    """Equity curve and trailing weekly series."""

    def test_equity_curve(self):
        trades = [
            make_trade(datetime(2024, 1, 9, 10, 0), 5.0),
            make_trade(datetime(2024, 1, 8, 9, 0), 10.0),
            make_trade(datetime(2024, 1, 8, 18, 0), -3.0),
        ]
        curve = compute_equity_curve(trades)
        assert [(p.date, p.equity) for p in curve] == [
            (date(2024, 1, 8), pytest.approx(7.0)),
            (date(2024, 1, 9), pytest.approx(12.0)),
        ]

    def test_equity_curve_empty(self):
        assert compute_equity_curve([]) == []

    def test_weekly_pnl_series(self):
        now = datetime(2024, 3, 20, 12, 0)
        trades = [
            make_trade(datetime(2024, 3, 19, 10, 0), 15.0),
            make_trade(datetime(2024, 3, 18, 10, 0), -5.0),
            make_trade(datetime(2024, 1, 2, 10, 0), 7.0),
            make_trade(datetime(2023, 12, 20, 10, 0), 100.0),
        ]
        series = compute_weekly_pnl_series(trades, now=now)

        assert len(series) == 12
        assert series[-1].week == "2024-W12"
        assert series[-1].pnl == pytest.approx(10.0)
        assert series[-1].label == "Mar 18"
        assert series[0].week == "2024-W01"
        assert series[0].pnl == pytest.approx(7.0)
        assert sum(p.pnl for p in series) == pytest.approx(17.0)

    def test_weekly_win_loss_series(self):
        now = datetime(2024, 3, 20, 12, 0)
        trades = [
            make_trade(datetime(2024, 3, 19, 10, 0), 15.0),
            make_trade(datetime(2024, 3, 18, 10, 0), -5.0),
            make_trade(datetime(2024, 3, 18, 11, 0), 0.0),
        ]
        series = compute_weekly_win_loss_series(trades, now=now)
        assert len(series) == 12
        assert (series[-1].wins, series[-1].losses) == (1, 1)
        assert all(p.wins == 0 and p.losses == 0 for p in series[:-1])


class TestFormatting:
    def test_format_pnl(self):
        assert format_pnl(12.5) == "+12.50 USDT"
        assert format_pnl(-3) == "-3.00 USDT"
        assert format_pnl(0, "USD") == "+0.00 USD"

    def test_format_percentage(self):
        assert format_percentage(66.666) == "66.7%"

    def test_weekly_summary(self):
        trades = [
            make_trade(MONDAY + timedelta(hours=9), 100.0),
            make_trade(MONDAY + timedelta(days=1, hours=9), -40.0),
            make_trade(MONDAY + timedelta(days=2, hours=9), 20.0),
        ]
        summary = format_weekly_summary(compute_weekly_metrics(trades, WEEK))

        assert summary.splitlines() == [
            "PnL Tracker Weekly Report",
            "Week: 2024-W02 (Jan 8 - Jan 14, 2024)",
            "",
            "Net PnL: +80.00 USDT",
            "Win Rate: 66.7%",
            "Total Trades: 3",
            "Profit Factor: 3.00",
        ]

    def test_weekly_summary_without_losses(self):
        metrics = compute_weekly_metrics([make_trade(MONDAY, 5.0)], WEEK)
        summary = format_weekly_summary(metrics, "USD")
        assert "Net PnL: +5.00 USD" in summary
        assert summary.endswith("Profit Factor: ∞")
