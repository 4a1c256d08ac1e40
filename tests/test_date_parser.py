"""Tests for date parser with relative dates."""

import pytest
from datetime import date, datetime, timedelta, timezone
from freelancedesk.utils.date_parser import parse_date, parse_datetime, get_date_range

# A Wednesday
TODAY = date(2024, 5, 15)


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("January 15, 2024") == date(2024, 1, 15)


def test_parse_today_defaults_to_current_date():
    assert parse_date("today") == date.today()


@pytest.mark.parametrize(
    "text, expected",
    [
        ("yesterday", date(2024, 5, 14)),
        ("tomorrow", date(2024, 5, 16)),
        ("  Tomorrow ", date(2024, 5, 16)),
        ("last month", date(2024, 4, 1)),
        ("this month", date(2024, 5, 1)),
        ("next month", date(2024, 6, 1)),
        ("last year", date(2023, 1, 1)),
        ("next year", date(2025, 1, 1)),
        ("this week", date(2024, 5, 13)),
        ("last week", date(2024, 5, 6)),
        ("next week", date(2024, 5, 20)),
        ("next friday", date(2024, 5, 17)),
        ("next wednesday", date(2024, 5, 22)),
        ("last wednesday", date(2024, 5, 8)),
        ("last monday", date(2024, 5, 13)),
        ("in 3 days", date(2024, 5, 18)),
        ("in 1 week", date(2024, 5, 22)),
        ("in 2 months", date(2024, 7, 15)),
        ("in 1 year", date(2025, 5, 15)),
    ],
)
def test_parse_relative(text, expected):
    assert parse_date(text, today=TODAY) == expected


def test_in_one_month_clamps_month_end():
    assert parse_date("in 1 month", today=date(2024, 1, 31)) == date(2024, 2, 29)


def test_parse_invalid_date():
    """Test parsing invalid date raises ValueError."""
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")


def test_parse_datetime():
    assert parse_datetime("2024-01-05 09:30") == datetime(2024, 1, 5, 9, 30)
    assert parse_datetime("2024-01-05") == datetime(2024, 1, 5)


def test_parse_datetime_now_drops_seconds():
    now = datetime(2024, 5, 15, 14, 7, 42, 123)
    assert parse_datetime("Now", now=now) == datetime(2024, 5, 15, 14, 7)


def test_parse_datetime_with_offset_is_naive():
    parsed = parse_datetime("2024-01-05 09:30:00+00:00")
    expected = datetime(2024, 1, 5, 9, 30, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert parsed == expected
    assert parsed.tzinfo is None


def test_parse_datetime_invalid():
    with pytest.raises(ValueError, match="Could not parse time"):
        parse_datetime("whenever")


@pytest.mark.parametrize(
    "period, expected",
    [
        ("this-week", (date(2024, 5, 13), TODAY)),
        ("this-month", (date(2024, 5, 1), TODAY)),
        ("this-year", (date(2024, 1, 1), TODAY)),
        ("last-week", (date(2024, 5, 6), date(2024, 5, 12))),
        ("last-month", (date(2024, 4, 1), date(2024, 4, 30))),
        ("last-year", (date(2023, 1, 1), date(2023, 12, 31))),
    ],
)
def test_get_date_range(period, expected):
    assert get_date_range(period, today=TODAY) == expected


def test_get_date_range_last_month_in_january():
    assert get_date_range("last-month", today=date(2024, 1, 10)) == (
        date(2023, 12, 1),
        date(2023, 12, 31),
    )


def test_get_date_range_unknown():
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-decade")


def test_this_week_starts_on_monday():
    start, _ = get_date_range("this-week")
    assert start.weekday() == 0
    assert date.today() - start < timedelta(days=7)
