"""Aggregate metric models for weekly reporting."""

from datetime import date as date_type
from typing import Optional

from pydantic import BaseModel, Field


class DailyPnl(BaseModel):
    """P&L bucket for one calendar day."""

    date: date_type = Field(..., description="Calendar date")
    pnl: float = Field(..., description="Summed realized P&L")
    trades: int = Field(default=0, ge=0, description="Number of trades")

    model_config = {"frozen": True}


class WeeklyMetrics(BaseModel):
    """Performance summary for one ISO week. Recomputed on every query."""

    week_key: str = Field(..., description="ISO week key (YYYY-Www)")
    week_start: date_type = Field(..., description="Monday of the week")
    week_end: date_type = Field(..., description="Sunday of the week")
    net_pnl: float = Field(default=0.0, description="Sum of realized P&L")
    total_trades: int = Field(default=0, ge=0, description="Trades in the week")
    win_count: int = Field(default=0, ge=0, description="Winning trades")
    loss_count: int = Field(default=0, ge=0, description="Losing trades")
    win_rate: float = Field(default=0.0, ge=0, le=100, description="Win rate percentage")
    avg_win: float = Field(default=0.0, ge=0, description="Mean winning P&L")
    avg_loss: float = Field(default=0.0, ge=0, description="Mean absolute losing P&L")
    profit_factor: float = Field(
        default=0.0, ge=0, description="Gross profit / gross loss (0 when undefined)"
    )
    profit_factor_unbounded: bool = Field(
        default=False, description="Wins with no losses; profit_factor is reported as 0"
    )
    max_drawdown: float = Field(default=0.0, ge=0, description="Peak-to-trough over daily buckets")
    best_day: Optional[DailyPnl] = Field(default=None, description="Highest P&L day")
    worst_day: Optional[DailyPnl] = Field(default=None, description="Lowest P&L day")

    model_config = {"frozen": True}


class EquityPoint(BaseModel):
    """Cumulative equity at the end of a trading day."""

    date: date_type = Field(..., description="Calendar date")
    equity: float = Field(..., description="Running total of realized P&L")

    model_config = {"frozen": True}


class WeeklyPnlPoint(BaseModel):
    """Net P&L of one week in a trailing series."""

    week: str = Field(..., description="ISO week key")
    pnl: float = Field(..., description="Net realized P&L")
    label: str = Field(..., description="Short label, e.g. 'Jan 8'")

    model_config = {"frozen": True}


class WeeklyWinLossPoint(BaseModel):
    """Win/loss counts of one week in a trailing series."""

    week: str = Field(..., description="ISO week key")
    wins: int = Field(..., ge=0, description="Winning trades")
    losses: int = Field(..., ge=0, description="Losing trades")
    label: str = Field(..., description="Short label, e.g. 'Jan 8'")

    model_config = {"frozen": True}
