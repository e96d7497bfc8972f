"""Date parsing and ISO week helpers.

Recognized screenshots print close times in several layouts. This module
normalizes them to naive datetimes (the wall clock shown on screen; no
zone conversion is applied) and provides the Monday-start ISO week
arithmetic used by the weekly metrics.
"""

import re
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

DateLike = Union[datetime, date, str]

WEEK_KEY_PATTERN = re.compile(r"^(\d{4})-W(\d{1,2})$")

_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}


class InvalidWeekKeyError(ValueError):
    """Raised for week keys that are not 'YYYY-Www' or name no real week."""


def _iso_layout(m: re.Match) -> datetime:
    return datetime(
        int(m.group(1)), int(m.group(2)), int(m.group(3)),
        int(m.group(4)), int(m.group(5)), int(m.group(6) or 0),
    )


def _month_first_layout(m: re.Match) -> datetime:
    return datetime(
        int(m.group(3)), int(m.group(1)), int(m.group(2)),
        int(m.group(4)), int(m.group(5)),
    )


def _day_first_layout(m: re.Match) -> datetime:
    return datetime(
        int(m.group(3)), int(m.group(2)), int(m.group(1)),
        int(m.group(4) or 0), int(m.group(5) or 0),
    )


def _month_name_layout(m: re.Match) -> datetime:
    month = _MONTHS.get(m.group(1)[:3].lower())
    if month is None:
        raise ValueError(f"unknown month name: {m.group(1)}")
    return datetime(
        int(m.group(3)), month, int(m.group(2)),
        int(m.group(4)), int(m.group(5)),
    )


def _year_first_slash_layout(m: re.Match) -> datetime:
    return datetime(
        int(m.group(1)), int(m.group(2)), int(m.group(3)),
        int(m.group(4)), int(m.group(5)),
    )


# Priority order matters: the first layout that yields a real date wins.
DATE_LAYOUTS = [
    ("iso", re.compile(r"(\d{4})-(\d{2})-(\d{2})[\sT](\d{2}):(\d{2})(?::(\d{2}))?"), _iso_layout),
    ("month_day_year", re.compile(r"(\d{2})/(\d{2})/(\d{4})\s+(\d{2}):(\d{2})"), _month_first_layout),
    ("day_month_year", re.compile(r"(\d{2})-(\d{2})-(\d{4})(?:\s+(\d{2}):(\d{2}))?"), _day_first_layout),
    (
        "month_name",
        re.compile(r"([A-Za-z]{3,9})\.?\s+(\d{1,2}),?\s+(\d{4})\s+(\d{2}):(\d{2})"),
        _month_name_layout,
    ),
    ("year_month_day", re.compile(r"(\d{4})/(\d{2})/(\d{2})\s+(\d{2}):(\d{2})"), _year_first_slash_layout),
]


def parse_flexible_date(text: str) -> Optional[datetime]:
    """Parse a date/time substring in any supported layout.

    Args:
        text: Text containing a date, e.g. '2024-01-08 14:32:15'.

    Returns:
        Naive datetime, or None if nothing could be parsed.
    """
    for _name, pattern, build in DATE_LAYOUTS:
        match = pattern.search(text)
        if not match:
            continue
        try:
            return build(match)
        except ValueError:
            # Matched the shape but not a real calendar date.
            continue

    try:
        return datetime.fromisoformat(text.strip()).replace(tzinfo=None)
    except ValueError:
        return None


def to_iso(value: datetime) -> str:
    """Render a datetime as ISO-8601 without zone information."""
    return value.replace(tzinfo=None).isoformat()


def _coerce(value: DateLike) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    return datetime.combine(value, time.min)


def iso_week_key(value: DateLike) -> str:
    """Get the ISO week key ('2024-W02') for a date or datetime."""
    year, week, _ = _coerce(value).isocalendar()
    return f"{year}-W{week:02d}"


def current_week_key(now: Optional[datetime] = None) -> str:
    return iso_week_key(now or datetime.now())


def week_range(week_key: str) -> tuple[datetime, datetime]:
    """Get the inclusive bounds of an ISO week.

    Args:
        week_key: Key such as '2024-W02'.

    Returns:
        (Monday 00:00:00, Sunday 23:59:59.999999)

    Raises:
        InvalidWeekKeyError: If the key is malformed or the week does not exist.
    """
    match = WEEK_KEY_PATTERN.match(week_key.strip())
    if not match:
        raise InvalidWeekKeyError(f"Invalid week key '{week_key}', expected YYYY-Www")

    try:
        monday = date.fromisocalendar(int(match.group(1)), int(match.group(2)), 1)
    except ValueError as e:
        raise InvalidWeekKeyError(f"Week {week_key} does not exist: {e}") from e

    return (
        datetime.combine(monday, time.min),
        datetime.combine(monday + timedelta(days=6), time.max),
    )


def is_in_week(value: DateLike, week_key: str) -> bool:
    start, end = week_range(week_key)
    return start <= _coerce(value) <= end


def days_in_week(week_key: str) -> list[date]:
    start, _ = week_range(week_key)
    return [start.date() + timedelta(days=i) for i in range(7)]


def date_key(value: DateLike) -> date:
    """Calendar date a trade is booked on."""
    return _coerce(value).date()


def last_week_keys(count: int = 12, now: Optional[datetime] = None) -> list[str]:
    """Week keys of the trailing `count` weeks, oldest first, ending this week."""
    now = now or datetime.now()
    return [iso_week_key(now - timedelta(weeks=i)) for i in range(count - 1, -1, -1)]


def format_week_range(week_key: str) -> str:
    """Human label such as 'Jan 8 - Jan 14, 2024'."""
    start, end = week_range(week_key)
    return f"{start:%b} {start.day} - {end:%b} {end.day}, {end.year}"


def format_week_short(week_key: str) -> str:
    start, _ = week_range(week_key)
    return f"{start:%b} {start.day}"


def week_options(count: int = 12, now: Optional[datetime] = None) -> list[tuple[str, str]]:
    """(key, label) pairs for the last `count` weeks, newest first."""
    return [(key, format_week_range(key)) for key in reversed(last_week_keys(count, now))]
