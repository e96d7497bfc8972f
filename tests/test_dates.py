"""Tests for date parsing and ISO week helpers.

**Feature: pnl-tracker**
"""

from datetime import date, datetime, timedelta

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from pnltracker.parsing.dates import (
    InvalidWeekKeyError,
    current_week_key,
    date_key,
    days_in_week,
    format_week_range,
    format_week_short,
    is_in_week,
    iso_week_key,
    last_week_keys,
    parse_flexible_date,
    to_iso,
    week_options,
    week_range,
)


class TestParseFlexibleDate:
    """Each supported layout converts to the wall-clock datetime shown."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2024-01-08 14:32:15", datetime(2024, 1, 8, 14, 32, 15)),
            ("2024-01-08T14:32", datetime(2024, 1, 8, 14, 32)),
            ("01/08/2024 14:32", datetime(2024, 1, 8, 14, 32)),
            ("08-01-2024 14:32", datetime(2024, 1, 8, 14, 32)),
            ("08-01-2024", datetime(2024, 1, 8)),
            ("Jan 8, 2024 14:32", datetime(2024, 1, 8, 14, 32)),
            ("January 8 2024 09:05", datetime(2024, 1, 8, 9, 5)),
            ("Sept 30, 2023 23:59", datetime(2023, 9, 30, 23, 59)),
            ("2024/01/08 14:32", datetime(2024, 1, 8, 14, 32)),
        ],
    )
    def test_supported_layouts(self, text: str, expected: datetime):
        assert parse_flexible_date(text) == expected

    def test_date_embedded_in_line(self):
        assert parse_flexible_date("Close Time 2024-03-01 08:00:00 UTC") == datetime(2024, 3, 1, 8, 0)

    def test_fallback_to_iso_date(self):
        assert parse_flexible_date("2024-01-08") == datetime(2024, 1, 8)

    def test_fallback_drops_zone(self):
        parsed = parse_flexible_date("2024-01-08T14:32:15+02:00")
        assert parsed == datetime(2024, 1, 8, 14, 32, 15)
        assert parsed.tzinfo is None

    def test_impossible_date_is_rejected(self):
        assert parse_flexible_date("13/45/2024 10:00") is None

    def test_unknown_month_name_is_rejected(self):
        assert parse_flexible_date("Foo 8, 2024 14:32") is None

    def test_garbage_returns_none(self):
        assert parse_flexible_date("no date here") is None
        assert parse_flexible_date("") is None

    @given(
        value=st.datetimes(
            min_value=datetime(2000, 1, 1),
            max_value=datetime(2099, 12, 31),
        ).map(lambda d: d.replace(microsecond=0))
    )
    @settings(max_examples=100)
    def test_iso_layout_roundtrip(self, value: datetime):
        """
        *For any* datetime printed as 'YYYY-MM-DD HH:MM:SS', parsing
        returns the same datetime.
        """
        assert parse_flexible_date(value.strftime("%Y-%m-%d %H:%M:%S")) == value

    def test_to_iso_has_no_zone(self):
        assert to_iso(datetime(2024, 1, 8, 14, 32, 15)) == "2024-01-08T14:32:15"


class TestWeekKeys:
    """ISO week keys use the ISO week-numbering year and Monday starts."""

    def test_week_key(self):
        assert iso_week_key(datetime(2024, 1, 8, 12, 0)) == "2024-W02"
        assert iso_week_key(date(2024, 1, 1)) == "2024-W01"

    def test_week_key_year_boundary(self):
        assert iso_week_key(date(2024, 12, 30)) == "2025-W01"
        assert iso_week_key(date(2021, 1, 3)) == "2020-W53"

    def test_week_key_from_string(self):
        assert iso_week_key("2024-01-14T23:59:59") == "2024-W02"

    def test_current_week_key(self):
        assert current_week_key(datetime(2024, 1, 10)) == "2024-W02"

    def test_week_range(self):
        start, end = week_range("2024-W02")
        assert start == datetime(2024, 1, 8, 0, 0, 0)
        assert end == datetime(2024, 1, 14, 23, 59, 59, 999999)

    def test_week_53_exists_only_in_long_years(self):
        start, _ = week_range("2020-W53")
        assert start == datetime(2020, 12, 28)
        with pytest.raises(InvalidWeekKeyError):
            week_range("2024-W53")

    @pytest.mark.parametrize("key", ["2024-02", "W02-2024", "2024W02", "", "2024-W"])
    def test_malformed_week_key(self, key: str):
        with pytest.raises(InvalidWeekKeyError):
            week_range(key)

    def test_invalid_week_key_is_value_error(self):
        with pytest.raises(ValueError):
            week_range("2024-W00")

    def test_week_bounds_inclusive(self):
        assert is_in_week(datetime(2024, 1, 8, 0, 0, 0), "2024-W02")
        assert is_in_week(datetime(2024, 1, 14, 23, 59, 59), "2024-W02")
        assert not is_in_week(datetime(2024, 1, 15, 0, 0, 0), "2024-W02")
        assert not is_in_week(datetime(2024, 1, 7, 23, 59, 59), "2024-W02")

    @given(
        value=st.datetimes(
            min_value=datetime(2000, 1, 1),
            max_value=datetime(2099, 12, 31),
        )
    )
    @settings(max_examples=100)
    def test_datetime_is_in_its_own_week(self, value: datetime):
        """
        *For any* datetime, it falls inside the week named by its own key
        and that week starts on a Monday.
        """
        key = iso_week_key(value)
        start, end = week_range(key)
        assert is_in_week(value, key)
        assert start.weekday() == 0
        assert end - start < timedelta(days=7)

    def test_days_in_week(self):
        days = days_in_week("2024-W02")
        assert len(days) == 7
        assert days[0] == date(2024, 1, 8)
        assert days[-1] == date(2024, 1, 14)

    def test_date_key(self):
        assert date_key(datetime(2024, 1, 8, 23, 59)) == date(2024, 1, 8)


class TestTrailingWeeks:
    """Trailing week lists end at the current week."""

    def test_last_week_keys(self):
        keys = last_week_keys(12, now=datetime(2024, 3, 20))
        assert len(keys) == 12
        assert keys[-1] == "2024-W12"
        assert keys[0] == "2024-W01"

    def test_last_week_keys_cross_year(self):
        keys = last_week_keys(3, now=datetime(2024, 1, 10))
        assert keys == ["2023-W52", "2024-W01", "2024-W02"]

    def test_week_options_newest_first(self):
        options = week_options(2, now=datetime(2024, 1, 10))
        assert options[0] == ("2024-W02", "Jan 8 - Jan 14, 2024")
        assert options[1][0] == "2024-W01"

    def test_format_week_labels(self):
        assert format_week_range("2024-W02") == "Jan 8 - Jan 14, 2024"
        assert format_week_range("2025-W01") == "Dec 30 - Jan 5, 2025"
        assert format_week_short("2024-W02") == "Jan 8"
