"""Date Helpers — calendar arithmetic and chart labels, no IO."""

from datetime import date, datetime

import pytest

from ntrl_stats.core.date_helpers import (
    add_days, date_range, format_day_of_month, format_hour, format_month,
    format_weekday, is_within_range, local_date_string, parse_local_date,
    start_of_day, start_of_month, start_of_week,
)


def test_local_date_string_zero_pads():
    """Month and day are zero-padded."""
    assert local_date_string(date(2024, 1, 5)) == "2024-01-05"


def test_parse_local_date_roundtrips_string():
    """YYYY-MM-DD parses back to the same calendar day."""
    assert parse_local_date("2024-02-29") == date(2024, 2, 29)


def test_parse_local_date_rejects_garbage():
    """Non-ISO text raises ValueError."""
    with pytest.raises(ValueError):
        parse_local_date("yesterday")


def test_start_of_day_strips_time():
    """Datetimes and dates both reduce to the calendar day."""
    assert start_of_day(datetime(2024, 3, 10, 17, 45)) == date(2024, 3, 10)
    assert start_of_day(date(2024, 3, 10)) == date(2024, 3, 10)


def test_start_of_week_is_sunday():
    """Weeks begin on Sunday, even across a year boundary."""
    # 2024-01-02 is a Tuesday; the week began on Sunday 2023-12-31
    assert start_of_week(date(2024, 1, 2)) == date(2023, 12, 31)


def test_start_of_week_on_sunday_is_same_day():
    """A Sunday is its own week start."""
    assert start_of_week(date(2023, 12, 31)) == date(2023, 12, 31)


def test_start_of_week_on_saturday_goes_back_six_days():
    """Saturday is the last day of its week."""
    assert start_of_week(date(2024, 1, 6)) == date(2023, 12, 31)


def test_start_of_month():
    """First day of the same month."""
    assert start_of_month(date(2024, 2, 17)) == date(2024, 2, 1)


def test_add_days_crosses_month_boundary():
    """Adding and subtracting days rolls months, including leap February."""
    assert add_days(date(2024, 1, 31), 1) == date(2024, 2, 1)
    assert add_days(date(2024, 3, 1), -1) == date(2024, 2, 29)


def test_date_range_is_inclusive():
    """Both ends are part of the range."""
    days = date_range(date(2024, 1, 30), date(2024, 2, 2))
    assert days == [
        date(2024, 1, 30), date(2024, 1, 31), date(2024, 2, 1), date(2024, 2, 2),
    ]


def test_date_range_empty_when_end_before_start():
    """Reversed bounds give no days."""
    assert date_range(date(2024, 1, 5), date(2024, 1, 4)) == []


def test_is_within_range_inclusive_on_both_ends():
    """Start and end days match; neighbours do not."""
    start, end = date(2024, 1, 1), date(2024, 1, 7)
    assert is_within_range(date(2024, 1, 1), start, end)
    assert is_within_range(date(2024, 1, 7), start, end)
    assert not is_within_range(date(2023, 12, 31), start, end)
    assert not is_within_range(date(2024, 1, 8), start, end)


def test_format_hour_twelve_hour_clock():
    """Hour labels use the compact 12-hour form."""
    assert [format_hour(h) for h in (0, 1, 9, 11, 12, 13, 23)] == [
        "12a", "1a", "9a", "11a", "12p", "1p", "11p",
    ]


def test_format_weekday_starts_on_sunday():
    """Weekday labels in Sunday-first order."""
    labels = [format_weekday(d) for d in date_range(date(2023, 12, 31), date(2024, 1, 6))]
    assert labels == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def test_format_day_of_month_and_month():
    """Day-of-month is unpadded; months are three-letter names."""
    assert format_day_of_month(date(2024, 1, 15)) == "15"
    assert format_month(date(2024, 1, 15)) == "Jan"
    assert format_month(date(2024, 12, 1)) == "Dec"
