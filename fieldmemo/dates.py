"""
Date and wall-clock helpers.

All dates are local calendar dates; weeks start on Sunday and weekday
indices follow 0=Sunday .. 6=Saturday.
"""
import calendar
import re
from datetime import date, timedelta
from typing import List, Optional

MINUTES_PER_DAY = 24 * 60
WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_date_string(value: str) -> date:
    """Parse YYYY-MM-DD. Raises ValueError (or TypeError for non-strings)."""
    return date.fromisoformat(value)


def format_date_string(value: date) -> str:
    """date -> "YYYY-MM-DD", the form used for startDate and endDate."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_time(value: str) -> int:
    """
    Parse "HH:MM" into minutes since midnight.

    Raises:
        ValueError: malformed or out of range (hours > 23, minutes > 59).
    """
    match = _TIME_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Invalid time: {value!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Time out of range: {value!r}")
    return hours * 60 + minutes


def format_minutes(total: int) -> str:
    total %= MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def add_minutes_to_time(value: str, minutes: int) -> str:
    """Shift "HH:MM" by minutes, wrapping past midnight."""
    return format_minutes(parse_time(value) + minutes)


def format_time(value: str) -> str:
    """ "09:00" -> "9am", "13:30" -> "1:30pm" """
    total = parse_time(value)
    hours, minutes = divmod(total, 60)
    suffix = "pm" if hours >= 12 else "am"
    h = hours % 12 or 12
    if minutes == 0:
        return f"{h}{suffix}"
    return f"{h}:{minutes:02d}{suffix}"


def format_time_range(start: str, end: str) -> str:
    return f"{format_time(start)}-{format_time(end)}"


def format_hours(minutes: int) -> str:
    """90 -> "1h 30m", 45 -> "45m" """
    if minutes < 60:
        return f"{minutes}m"
    h, m = divmod(minutes, 60)
    return f"{h}h {m}m" if m else f"{h}h"


def weekday_index(value: date) -> int:
    """Sunday-based weekday (0=Sunday)."""
    return (value.weekday() + 1) % 7


def week_start(value: date) -> date:
    return value - timedelta(days=weekday_index(value))


def week_dates(value: date) -> List[date]:
    start = week_start(value)
    return [start + timedelta(days=i) for i in range(7)]


def days_in_month(year: int, month0: int) -> int:
    """Days in a month given a zero-based month index."""
    return calendar.monthrange(year, month0 + 1)[1]


def first_day_of_month(year: int, month0: int) -> int:
    """Sunday-based weekday of the 1st of a zero-based month."""
    return weekday_index(date(year, month0 + 1, 1))


def months_between(start: date, end: date) -> int:
    return (end.year - start.year) * 12 + (end.month - start.month)


def parse_day_reference(text: str, today: Optional[date] = None) -> date:
    """
    Resolve a loose day reference.

    Accepts today / tomorrow / yesterday / next week / last week and ISO dates.

    Raises:
        ValueError: when the text is not understood.
    """
    today = today or date.today()
    key = text.strip().lower()
    relative = {
        "today": 0,
        "tomorrow": 1,
        "yesterday": -1,
        "next week": 7,
        "last week": -7,
    }
    if key in relative:
        return today + timedelta(days=relative[key])
    return parse_date_string(key)
