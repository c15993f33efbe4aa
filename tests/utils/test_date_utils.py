"""Tests for calendar helpers."""

from datetime import date, datetime, timedelta, timezone

from src.utils.date_utils import (
    add_months,
    clamp_day,
    ensure_utc,
    month_range,
    shift_month,
)


def test_clamp_day_limits_to_month_end():
    """Days past the month end should clamp to the last day."""
    assert clamp_day(2023, 2, 31) == date(2023, 2, 28)
    assert clamp_day(2024, 2, 31) == date(2024, 2, 29)
    assert clamp_day(2024, 4, 15) == date(2024, 4, 15)


def test_shift_month_crosses_years():
    """Month shifts should wrap around year boundaries."""
    assert shift_month(2024, 1, -1) == (2023, 12)
    assert shift_month(2023, 12, 1) == (2024, 1)
    assert shift_month(2024, 6, -18) == (2022, 12)


def test_add_months_clamps_day():
    """Adding months should keep the day when valid, else clamp it."""
    assert add_months(date(2024, 8, 31), -6) == date(2024, 2, 29)
    assert add_months(date(2024, 1, 15), 1) == date(2024, 2, 15)


def test_month_range_is_chronological():
    """month_range should end at the reference month."""
    assert month_range(date(2024, 2, 10), 3) == [
        (2023, 12),
        (2024, 1),
        (2024, 2),
    ]


def test_ensure_utc_handles_naive_and_aware():
    """Naive datetimes are treated as UTC, aware ones converted."""
    naive = datetime(2024, 1, 1, 12)
    aware = datetime(2024, 1, 1, 15, tzinfo=timezone(timedelta(hours=3)))

    assert ensure_utc(naive).tzinfo == timezone.utc
    assert ensure_utc(aware) == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)
