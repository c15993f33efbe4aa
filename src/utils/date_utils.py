"""Calendar helpers shared by aggregation and scheduling."""

import calendar
from datetime import date, datetime, timezone


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in the given month."""
    return calendar.monthrange(year, month)[1]


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, clamping the day to the month's last valid day.

    Args:
        year: Calendar year.
        month: Calendar month (1-12).
        day: Requested day of month; values past the month end are clamped.

    Returns:
        date: The clamped calendar date.
    """
    return date(year, month, min(max(day, 1), days_in_month(year, month)))


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Return the (year, month) pair delta months away."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def add_months(value, months: int):
    """Shift a date or datetime by whole months, clamping the day."""
    year, month = shift_month(value.year, value.month, months)
    day = min(value.day, days_in_month(year, month))
    return value.replace(year=year, month=month, day=day)


def month_range(end: date, months: int) -> list[tuple[int, int]]:
    """Return the chronological (year, month) pairs ending at end's month."""
    return [
        shift_month(end.year, end.month, offset)
        for offset in range(-(months - 1), 1)
    ]


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    """Return the current UTC time."""
    return datetime.now(timezone.utc)


__all__ = [
    "days_in_month",
    "clamp_day",
    "shift_month",
    "add_months",
    "month_range",
    "ensure_utc",
    "utc_now",
]
