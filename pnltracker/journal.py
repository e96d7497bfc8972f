"""Immutable journal state with pure transitions.

A `JournalState` is a snapshot of the trade collection plus the week being
viewed. Every operation returns a new snapshot; callers swap their
reference, and anything still holding the old snapshot keeps reading a
consistent collection.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from pnltracker.analytics.duplicates import DuplicateAction, filter_new_trades, find_duplicate
from pnltracker.models import Trade
from pnltracker.parsing.dates import current_week_key, week_range

logger = logging.getLogger(__name__)


class TradeNotFoundError(KeyError):
    """Raised when a trade id is not present in the journal or store."""


class JournalState(BaseModel):
    """Trades (newest additions first) and the currently selected week."""

    trades: tuple[Trade, ...] = Field(default=(), description="Recorded trades")
    current_week: str = Field(default_factory=current_week_key, description="Selected ISO week")

    model_config = {"frozen": True}

    def _with_trades(self, trades: Iterable[Trade]) -> "JournalState":
        return self.model_copy(update={"trades": tuple(trades)})

    def get(self, trade_id: str) -> Optional[Trade]:
        for trade in self.trades:
            if trade.id == trade_id:
                return trade
        return None

    def find_duplicate(self, candidate: Trade) -> Optional[Trade]:
        return find_duplicate(candidate, self.trades)

    def add_trade(self, trade: Trade) -> "JournalState":
        return self._with_trades((trade, *self.trades))

    def add_trades(self, trades: Iterable[Trade]) -> "JournalState":
        return self._with_trades((*trades, *self.trades))

    def import_trades(self, trades: Iterable[Trade]) -> "JournalState":
        """Add imported trades, silently dropping those already recorded."""
        trades = list(trades)
        fresh = filter_new_trades(trades, self.trades)
        if len(fresh) < len(trades):
            logger.info("Skipped %d duplicate trade(s) on import", len(trades) - len(fresh))
        return self.add_trades(fresh)

    def replace_trade(self, trade: Trade) -> "JournalState":
        """Swap in the full replacement of the trade with the same id."""
        if self.get(trade.id) is None:
            raise TradeNotFoundError(trade.id)
        return self._with_trades(trade if t.id == trade.id else t for t in self.trades)

    def delete_trade(self, trade_id: str) -> "JournalState":
        if self.get(trade_id) is None:
            raise TradeNotFoundError(trade_id)
        return self._with_trades(t for t in self.trades if t.id != trade_id)

    def insert_with_policy(
        self,
        trade: Trade,
        action: DuplicateAction = DuplicateAction.SKIP,
        *,
        now: Optional[datetime] = None,
    ) -> tuple["JournalState", Optional[Trade]]:
        """Insert a single trade, resolving a detected duplicate.

        Args:
            trade: Candidate trade.
            action: What to do if it duplicates an existing trade: SKIP keeps
                the journal unchanged, REPLACE overwrites the existing trade
                (keeping its id and creation time), ADD records it anyway.

        Returns:
            (new state, the existing trade that was matched or None)
        """
        existing = self.find_duplicate(trade)
        if existing is None:
            return self.add_trade(trade), None

        if action is DuplicateAction.SKIP:
            return self, existing
        if action is DuplicateAction.REPLACE:
            replacement = trade.model_copy(
                update={
                    "id": existing.id,
                    "created_at": existing.created_at,
                    "updated_at": now or datetime.now(),
                }
            )
            return self.replace_trade(replacement), existing
        return self.add_trade(trade), existing

    def set_current_week(self, week_key: str) -> "JournalState":
        week_range(week_key)  # raises InvalidWeekKeyError
        return self.model_copy(update={"current_week": week_key})
