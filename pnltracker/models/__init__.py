"""Data models for PnL Tracker."""

from pnltracker.models.confidence import Confidence
from pnltracker.models.extraction import (
    ExtractedFieldSet,
    FieldExtraction,
    RecognizedDocument,
)
from pnltracker.models.metrics import (
    DailyPnl,
    EquityPoint,
    WeeklyMetrics,
    WeeklyPnlPoint,
    WeeklyWinLossPoint,
)
from pnltracker.models.trade import Trade, TradeConfidence, result_for_pnl

__all__ = [
    "Confidence",
    "RecognizedDocument",
    "FieldExtraction",
    "ExtractedFieldSet",
    "Trade",
    "TradeConfidence",
    "result_for_pnl",
    "DailyPnl",
    "WeeklyMetrics",
    "EquityPoint",
    "WeeklyPnlPoint",
    "WeeklyWinLossPoint",
]
