"""Near-duplicate detection for trades recorded more than once.

The same close can be captured from two screenshots a few seconds apart;
such trades match on symbol, time and amount without being identical.
"""

from datetime import timedelta
from enum import Enum
from typing import Iterable, Optional

from pnltracker.models import Trade

DUPLICATE_TIME_WINDOW = timedelta(milliseconds=60000)
DUPLICATE_PNL_TOLERANCE = 0.01


class DuplicateAction(Enum):
    """How to resolve a single insertion that matches an existing trade."""

    SKIP = "skip"
    REPLACE = "replace"
    ADD = "add"


def is_duplicate(candidate: Trade, existing: Trade) -> bool:
    """Check whether two trades describe the same close.

    All must hold: timestamps less than 60 s apart, identical symbol, and
    realized P&L differing by less than 0.01.
    """
    return (
        abs(candidate.timestamp - existing.timestamp) < DUPLICATE_TIME_WINDOW
        and candidate.symbol == existing.symbol
        and abs(candidate.realized_pnl - existing.realized_pnl) < DUPLICATE_PNL_TOLERANCE
    )


def find_duplicate(candidate: Trade, existing: Iterable[Trade]) -> Optional[Trade]:
    """Return the first existing trade that `candidate` duplicates, if any."""
    for trade in existing:
        if is_duplicate(candidate, trade):
            return trade
    return None


def filter_new_trades(candidates: Iterable[Trade], existing: Iterable[Trade]) -> list[Trade]:
    """Drop candidates that duplicate an existing trade (bulk import).

    Candidates are compared only against `existing`, not against each other.
    """
    existing = list(existing)
    return [t for t in candidates if find_duplicate(t, existing) is None]
