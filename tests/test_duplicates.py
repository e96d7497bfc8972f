"""Tests for near-duplicate detection.

**Feature: pnl-tracker**
"""

from datetime import datetime, timedelta

from hypothesis import given, settings
from hypothesis import strategies as st

from pnltracker.analytics import filter_new_trades, find_duplicate
from pnltracker.analytics.duplicates import is_duplicate
from pnltracker.parsing import manual_trade

BASE = datetime(2024, 1, 8, 14, 32, 15)


def make_trade(offset_seconds: float = 0, pnl: float = 100.0, symbol: str = "BTCUSDT"):
    timestamp = BASE + timedelta(seconds=offset_seconds)
    return manual_trade(timestamp, symbol, pnl, now=timestamp)


class TestIsDuplicate:
    """Same symbol, under a minute apart and under 0.01 apart in P&L."""

    def test_close_in_time_and_amount(self):
        assert is_duplicate(make_trade(30, 100.009), make_trade(0, 100.0))

    def test_too_far_apart(self):
        assert not is_duplicate(make_trade(61, 100.0), make_trade(0, 100.0))

    def test_exactly_one_minute_is_not_duplicate(self):
        assert not is_duplicate(make_trade(60, 100.0), make_trade(0, 100.0))

    def test_direction_of_time_irrelevant(self):
        assert is_duplicate(make_trade(-59, 100.0), make_trade(0, 100.0))

    def test_different_symbol(self):
        assert not is_duplicate(make_trade(0, 100.0, "ETHUSDT"), make_trade(0, 100.0))

    def test_amount_difference(self):
        assert not is_duplicate(make_trade(0, 100.02), make_trade(0, 100.0))

    def test_distinct_ids_still_match(self):
        a, b = make_trade(), make_trade()
        assert a.id != b.id
        assert is_duplicate(a, b)

    @given(
        offset=st.floats(min_value=-120, max_value=120, allow_nan=False),
        delta=st.floats(min_value=-0.05, max_value=0.05, allow_nan=False),
    )
    @settings(max_examples=100)
    def test_symmetric(self, offset: float, delta: float):
        """
        *For any* two trades on the same symbol, duplicate detection gives
        the same answer in both directions.
        """
        a = make_trade(0, 100.0)
        b = make_trade(offset, 100.0 + delta)
        assert is_duplicate(a, b) == is_duplicate(b, a)


class TestFindDuplicate:
    def test_first_match_returned(self):
        first = make_trade(10, 100.0)
        second = make_trade(20, 100.0)
        assert find_duplicate(make_trade(0, 100.0), [make_trade(500), first, second]) is first

    def test_none_when_clean(self):
        assert find_duplicate(make_trade(0, 1.0), [make_trade(0, 100.0)]) is None
        assert find_duplicate(make_trade(), []) is None


class TestFilterNewTrades:
    """Bulk filtering compares candidates against existing trades only."""

    def test_drops_known_trades(self):
        existing = [make_trade(0, 100.0)]
        fresh = make_trade(3600, 50.0)
        candidates = [make_trade(5, 100.0), fresh]
        assert filter_new_trades(candidates, existing) == [fresh]

    def test_batch_not_compared_with_itself(self):
        candidates = [make_trade(0, 100.0), make_trade(1, 100.0)]
        assert filter_new_trades(candidates, []) == candidates

    def test_accepts_generators(self):
        existing = (t for t in [make_trade(0, 100.0)])
        assert filter_new_trades([make_trade(0, 100.0), make_trade(0, 5.0)], existing)[0].realized_pnl == 5.0
