"""Scheduling rules for recurring obligations.

Monthly rules are due on their anchor day, clamped to the last day of short
months. Weekly rules are due on their ISO weekday. Materialization is guarded
by the rule's ``last_materialized`` date so a rule yields at most one ledger
entry per calendar day.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from decimal import Decimal

from src.domain.constants import AUTO_ENTRY_SUFFIX, DEFAULT_UPCOMING_WINDOW_DAYS
from src.domain.models import (
    Frequency,
    LedgerEntry,
    RecurringRule,
    UpcomingObligation,
)
from src.domain.services.validation import is_valid_anchor
from src.utils.date_utils import clamp_day, ensure_utc, shift_month


@dataclass(frozen=True)
class Materialization:
    """New ledger entry for a due rule and the rule stamped for today."""

    rule: RecurringRule
    entry: LedgerEntry


def _anchor_is_valid(rule: RecurringRule) -> bool:
    return is_valid_anchor(rule.frequency.value, rule.anchor_day)


def occurrence_in_month(rule: RecurringRule, year: int, month: int) -> date:
    """Return the monthly rule's occurrence date within a given month."""
    return clamp_day(year, month, rule.anchor_day)


def is_due(rule: RecurringRule, today: date) -> bool:
    """Return True when an active rule has an occurrence on ``today``."""
    if not rule.is_active or not _anchor_is_valid(rule):
        return False
    if rule.frequency == Frequency.WEEKLY:
        return today.isoweekday() == rule.anchor_day
    return occurrence_in_month(rule, today.year, today.month) == today


def already_materialized(rule: RecurringRule, today: date) -> bool:
    return rule.last_materialized == today


def next_due_date(rule: RecurringRule, today: date) -> date | None:
    """Return the next occurrence on or after today.

    Today counts unless the rule was already materialized today. Returns None
    for inactive rules or invalid anchors.
    """
    if not rule.is_active or not _anchor_is_valid(rule):
        return None
    start = today
    if already_materialized(rule, today):
        start = today + timedelta(days=1)

    if rule.frequency == Frequency.WEEKLY:
        offset = (rule.anchor_day - start.isoweekday()) % 7
        return start + timedelta(days=offset)

    candidate = occurrence_in_month(rule, start.year, start.month)
    if candidate < start:
        year, month = shift_month(start.year, start.month, 1)
        candidate = occurrence_in_month(rule, year, month)
    return candidate


def build_entry(rule: RecurringRule, now: datetime) -> LedgerEntry:
    """Return the ledger entry a rule materializes into."""
    return LedgerEntry(
        account_id=rule.account_id,
        instrument_code=rule.instrument_code,
        category_id=rule.category_id,
        source_id=rule.source_id,
        direction=rule.direction,
        amount=rule.amount,
        title=f"{rule.title}{AUTO_ENTRY_SUFFIX}",
        timestamp=ensure_utc(now),
    )


def materialize_due(
    rules: Iterable[RecurringRule],
    now: datetime,
) -> list[Materialization]:
    """Return one materialization per rule due today and not yet stamped.

    Running it again with the returned (stamped) rules yields nothing for
    the same day.

    Args:
        rules: Rules to evaluate.
        now: Current instant; its UTC date is the evaluated day.

    Returns:
        list[Materialization]: New entries paired with stamped rules.
    """
    today = ensure_utc(now).date()
    materializations = []
    for rule in rules:
        if not is_due(rule, today) or already_materialized(rule, today):
            continue
        materializations.append(
            Materialization(
                rule=replace(rule, last_materialized=today),
                entry=build_entry(rule, now),
            )
        )
    return materializations


def upcoming_obligations(
    rules: Iterable[RecurringRule],
    today: date,
    normalized_amounts: Mapping[int, Decimal] | None = None,
    window_days: int = DEFAULT_UPCOMING_WINDOW_DAYS,
) -> list[UpcomingObligation]:
    """Return next occurrences within the window, soonest first.

    Args:
        rules: Active recurring rules.
        today: Reference date.
        normalized_amounts: Base-currency amount per rule id; raw amounts
            are used for rules missing from the mapping.
        window_days: Maximum days ahead to include.

    Returns:
        list[UpcomingObligation]: Obligations sorted by days left.
    """
    amounts = normalized_amounts or {}
    upcoming = []
    for rule in rules:
        due = next_due_date(rule, today)
        if due is None:
            continue
        days_left = (due - today).days
        if days_left > window_days:
            continue
        upcoming.append(
            UpcomingObligation(
                rule_id=rule.rule_id,
                title=rule.title,
                amount=amounts.get(rule.rule_id, rule.amount),
                due_date=due,
                days_left=days_left,
                direction=rule.direction.value,
            )
        )
    return sorted(upcoming, key=lambda item: (item.days_left, item.title))


__all__ = [
    "Materialization",
    "occurrence_in_month",
    "is_due",
    "already_materialized",
    "next_due_date",
    "build_entry",
    "materialize_due",
    "upcoming_obligations",
]
