"""Date parsing utilities."""

import re
from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

# "in 3 days", "in 2 weeks", "in 1 month"
RELATIVE_OFFSET = re.compile(r"^in (\d+) (day|week|month|year)s?$")

PERIODS = ("this-week", "this-month", "this-year", "last-week", "last-month", "last-year")


def _offset(today: date, count: int, unit: str) -> date:
    if unit == "day":
        return today + timedelta(days=count)
    if unit == "week":
        return today + timedelta(weeks=count)
    if unit == "month":
        return today + relativedelta(months=count)
    return today + relativedelta(years=count)


def _period_start(today: date, period: str, shift: int) -> Optional[date]:
    """First day of the week/month/year ``shift`` periods from today's."""
    if period == "week":
        return today - timedelta(days=today.weekday()) + timedelta(weeks=shift)
    if period == "month":
        return today.replace(day=1) + relativedelta(months=shift)
    if period == "year":
        return today.replace(month=1, day=1) + relativedelta(years=shift)
    return None


def _weekday(today: date, name: str, direction: int) -> date:
    """Nearest given weekday strictly before (-1) or after (+1) today."""
    target = WEEKDAYS.index(name)
    if direction < 0:
        days = (today.weekday() - target) % 7 or 7
        return today - timedelta(days=days)
    days = (target - today.weekday()) % 7 or 7
    return today + timedelta(days=days)


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - "today", "yesterday", "tomorrow"
    - "last/this/next week|month|year" (first day of that period)
    - "last/next friday" and other weekday names
    - "in 3 days", "in 2 weeks", "in 1 month", "in 1 year"

    Args:
        date_str: Date string in various formats
        today: Reference date for relative forms (defaults to today)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = today or date.today()

    simple = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in simple:
        return simple[text]

    match = RELATIVE_OFFSET.match(text)
    if match:
        return _offset(today, int(match.group(1)), match.group(2))

    shifts = {"last": -1, "this": 0, "next": 1}
    word, _, period = text.partition(" ")
    if word in shifts and period:
        start = _period_start(today, period, shifts[word])
        if start is not None:
            return start
        if period in WEEKDAYS and word != "this":
            return _weekday(today, period, shifts[word])

    try:
        return date_parser.parse(text).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_datetime(datetime_str: str, now: Optional[datetime] = None) -> datetime:
    """Parse a point in time such as "2024-01-05 09:30" or "now".

    A date without a time means midnight of that day. Times with an offset
    are converted to naive local time.

    Raises:
        ValueError: If the string cannot be parsed
    """
    text = datetime_str.strip().lower()
    if text == "now":
        return (now or datetime.now()).replace(second=0, microsecond=0)
    try:
        parsed = date_parser.parse(text)
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse time '{datetime_str}': {e}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Current periods end today; previous periods end on their last day.

    Args:
        period: One of this-week, this-month, this-year, last-week,
            last-month, last-year

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    name = period.strip().lower()
    today = today or date.today()
    if name not in PERIODS:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")

    which, unit = name.split("-")
    if which == "this":
        return _period_start(today, unit, 0), today
    start = _period_start(today, unit, -1)
    end = _period_start(today, unit, 0) - timedelta(days=1)
    return start, end
