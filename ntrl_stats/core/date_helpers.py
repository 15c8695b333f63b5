"""Date Helpers — locale-naive calendar arithmetic for stats aggregation and labels.

Invariants:
    - Everything operates on naive local dates (no tz, no DST adjustment)
    - Weeks start on Sunday
    - Range enumeration is inclusive on both ends
    - Labels are fixed English abbreviations ("9a", "Mon", "15", "Jan")
"""

from datetime import date, datetime, timedelta

_WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
_MONTHS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


def local_date_string(value: date) -> str:
    """Format as YYYY-MM-DD."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_local_date(value: str) -> date:
    """Parse YYYY-MM-DD. Raises ValueError on anything else."""
    year, month, day = (int(part) for part in value.split("-"))
    return date(year, month, day)


def start_of_day(value: date | datetime) -> date:
    """Calendar day of a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def start_of_week(value: date | datetime) -> date:
    """Sunday on or before the given day."""
    day = start_of_day(value)
    days_since_sunday = (day.weekday() + 1) % 7  # weekday(): Monday == 0
    return day - timedelta(days=days_since_sunday)


def start_of_month(value: date | datetime) -> date:
    return start_of_day(value).replace(day=1)


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)


def date_range(start: date, end: date) -> list[date]:
    """Every calendar day from start to end, inclusive. Empty if end < start."""
    days = []
    current = start_of_day(start)
    last = start_of_day(end)
    while current <= last:
        days.append(current)
        current = add_days(current, 1)
    return days


def is_within_range(value: date, start: date, end: date) -> bool:
    """Inclusive date-only comparison."""
    return start_of_day(start) <= start_of_day(value) <= start_of_day(end)


# ─── Labels ──────────────────────────────────────────────────────

def format_hour(hour: int) -> str:
    """12-hour label: 0 -> "12a", 9 -> "9a", 12 -> "12p", 17 -> "5p"."""
    if hour == 0:
        return "12a"
    if hour == 12:
        return "12p"
    if hour < 12:
        return f"{hour}a"
    return f"{hour - 12}p"


def format_weekday(value: date) -> str:
    return _WEEKDAYS[(value.weekday() + 1) % 7]


def format_day_of_month(value: date) -> str:
    return str(value.day)


def format_month(value: date) -> str:
    return _MONTHS[value.month - 1]
