"""Trade analytics: weekly metrics, time series and duplicate detection."""

from pnltracker.analytics.duplicates import DuplicateAction, filter_new_trades, find_duplicate
from pnltracker.analytics.metrics import (
    compute_daily_pnl,
    compute_equity_curve,
    compute_weekly_metrics,
    compute_weekly_pnl_series,
    compute_weekly_win_loss_series,
    filter_trades_by_week,
)

__all__ = [
    "compute_weekly_metrics",
    "compute_daily_pnl",
    "compute_equity_curve",
    "compute_weekly_pnl_series",
    "compute_weekly_win_loss_series",
    "filter_trades_by_week",
    "find_duplicate",
    "filter_new_trades",
    "DuplicateAction",
]
