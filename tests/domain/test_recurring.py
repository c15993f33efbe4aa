"""Tests for recurring rule scheduling and materialization."""

from datetime import date, datetime, timezone
from decimal import Decimal

from src.domain.models import FlowDirection, Frequency, RecurringRule
from src.domain.services.recurring import (
    is_due,
    materialize_due,
    next_due_date,
    upcoming_obligations,
)


def _rule(
    anchor_day: int,
    frequency: Frequency = Frequency.MONTHLY,
    rule_id: int = 1,
    **overrides,
) -> RecurringRule:
    values = {
        "rule_id": rule_id,
        "account_id": 7,
        "title": "Rent",
        "amount": Decimal("1500"),
        "category_id": 3,
        "source_id": 4,
        "instrument_code": "TRY",
        "direction": FlowDirection.EXPENSE,
        "frequency": frequency,
        "anchor_day": anchor_day,
    }
    values.update(overrides)
    return RecurringRule(**values)


def test_anchor_31_fires_on_last_day_of_short_month():
    """Anchor 31 should be due on the 30th of a 30-day month."""
    rule = _rule(31)

    assert is_due(rule, date(2024, 4, 30)) is True
    assert is_due(rule, date(2024, 4, 29)) is False
    assert is_due(rule, date(2024, 2, 29)) is True
    assert is_due(rule, date(2024, 5, 31)) is True
    assert is_due(rule, date(2024, 5, 30)) is False


def test_weekly_rule_due_on_its_weekday():
    """A Monday rule is not due on Wednesday but due the next Monday."""
    rule = _rule(1, Frequency.WEEKLY)
    wednesday = datetime(2024, 6, 5, 8, tzinfo=timezone.utc)
    monday = datetime(2024, 6, 10, 8, tzinfo=timezone.utc)

    assert is_due(rule, wednesday.date()) is False
    assert materialize_due([rule], wednesday) == []

    created = materialize_due([rule], monday)

    assert len(created) == 1
    assert created[0].entry.timestamp == monday
    assert created[0].rule.last_materialized == date(2024, 6, 10)


def test_inactive_and_invalid_rules_are_never_due():
    """Inactive rules and out-of-range anchors should never fire."""
    assert is_due(_rule(5, is_active=False), date(2024, 6, 5)) is False
    assert is_due(_rule(0), date(2024, 6, 1)) is False
    assert is_due(_rule(8, Frequency.WEEKLY), date(2024, 6, 9)) is False
    assert next_due_date(_rule(32), date(2024, 6, 1)) is None


def test_materialize_due_is_idempotent_within_a_day():
    """A second pass with stamped rules should create nothing."""
    now = datetime(2024, 6, 15, 9, tzinfo=timezone.utc)
    rules = [_rule(15, rule_id=1), _rule(15, rule_id=2), _rule(16, rule_id=3)]

    first = materialize_due(rules, now)
    second = materialize_due([item.rule for item in first], now)

    assert [item.rule.rule_id for item in first] == [1, 2]
    assert second == []


def test_materialized_entry_copies_rule_fields():
    """The new entry should carry the rule's amount and references."""
    now = datetime(2024, 6, 15, 9, tzinfo=timezone.utc)
    rule = _rule(15)

    entry = materialize_due([rule], now)[0].entry

    assert entry.account_id == 7
    assert entry.amount == Decimal("1500")
    assert entry.category_id == 3
    assert entry.source_id == 4
    assert entry.instrument_code == "TRY"
    assert entry.direction == FlowDirection.EXPENSE
    assert entry.title == "Rent (Auto)"
    assert rule.last_materialized is None


def test_next_due_date_projects_forward():
    """The next occurrence should roll into the following month."""
    rule = _rule(31)

    assert next_due_date(rule, date(2024, 4, 30)) == date(2024, 4, 30)
    assert next_due_date(rule, date(2024, 5, 1)) == date(2024, 5, 31)
    stamped = _rule(31, last_materialized=date(2024, 4, 30))
    assert next_due_date(stamped, date(2024, 4, 30)) == date(2024, 5, 31)


def test_next_due_date_weekly():
    """Weekly rules should project to the next matching weekday."""
    friday_rule = _rule(5, Frequency.WEEKLY)

    assert next_due_date(friday_rule, date(2024, 6, 5)) == date(2024, 6, 7)
    assert next_due_date(friday_rule, date(2024, 6, 7)) == date(2024, 6, 7)
    stamped = _rule(5, Frequency.WEEKLY, last_materialized=date(2024, 6, 7))
    assert next_due_date(stamped, date(2024, 6, 7)) == date(2024, 6, 14)


def test_upcoming_obligations_window_and_order():
    """Upcoming obligations should be within the window, soonest first."""
    today = date(2024, 6, 5)
    rules = [
        _rule(20, rule_id=1, title="Rent"),
        _rule(6, rule_id=2, title="Phone"),
        _rule(4, rule_id=3, title="Insurance"),
        _rule(1, Frequency.WEEKLY, rule_id=4, title="Gym", is_active=False),
    ]

    upcoming = upcoming_obligations(
        rules,
        today,
        {1: Decimal("1500"), 2: Decimal("20")},
        window_days=28,
    )

    assert [item.title for item in upcoming] == ["Phone", "Rent"]
    assert upcoming[0].days_left == 1
    assert upcoming[1].due_date == date(2024, 6, 20)
    assert upcoming[0].direction == "expense"
