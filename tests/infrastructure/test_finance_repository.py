"""Tests for the SQLAlchemy ledger store against SQLite."""

from datetime import date, datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine, insert, select
from sqlalchemy.exc import OperationalError

from src.domain.errors import StoreError
from src.domain.models import FlowDirection, Frequency, LedgerEntry
from src.infrastructure.finance_repository import (
    SqlAlchemyFinanceRepository,
    asset_holdings_table,
    categories_table,
    debt_obligations_table,
    ledger_entries_table,
    recurring_rules_table,
    sources_table,
)


@pytest.fixture
def engine(tmp_path):
    return create_engine(f"sqlite:///{tmp_path / 'ledger.db'}", future=True)


@pytest.fixture
def repository(engine):
    repo = SqlAlchemyFinanceRepository(
        SimpleNamespace(get_finance_engine=lambda: engine),
        logger=MagicMock(),
    )
    repo.ensure_schema()
    return repo


def _seed(engine) -> None:
    with engine.begin() as conn:
        conn.execute(insert(categories_table), [{"id": 1, "account_id": 1, "name": "Food"}])
        conn.execute(insert(sources_table), [{"id": 1, "account_id": 1, "name": "Bank"}])
        conn.execute(
            insert(ledger_entries_table),
            [
                {
                    "account_id": 1,
                    "instrument_code": "TRY",
                    "category_id": 1,
                    "source_id": 1,
                    "direction": "expense",
                    "amount": Decimal("12.50"),
                    "title": "Lunch",
                    "occurred_at": datetime(2024, 6, 5, 12, tzinfo=timezone.utc),
                },
                {
                    "account_id": 1,
                    "instrument_code": "USD",
                    "category_id": None,
                    "source_id": None,
                    "direction": "income",
                    "amount": Decimal("100"),
                    "title": "Salary",
                    "occurred_at": datetime(2024, 1, 5, 12, tzinfo=timezone.utc),
                },
                {
                    "account_id": 2,
                    "instrument_code": "TRY",
                    "category_id": None,
                    "source_id": None,
                    "direction": "income",
                    "amount": Decimal("1"),
                    "title": "Other account",
                    "occurred_at": datetime(2024, 6, 5, tzinfo=timezone.utc),
                },
            ],
        )
        conn.execute(
            insert(asset_holdings_table),
            [
                {
                    "account_id": 1,
                    "name": "Apple",
                    "instrument_code": "USD",
                    "market_symbol": "AAPL",
                    "quantity": Decimal("3"),
                    "average_cost": Decimal("150"),
                    "category_label": "Stock",
                }
            ],
        )
        conn.execute(
            insert(debt_obligations_table),
            [
                {
                    "account_id": 1,
                    "title": "Card",
                    "amount_outstanding": Decimal("250"),
                    "currency_code": "TRY",
                    "original_amount": None,
                    "interest_rate": Decimal("3.5"),
                    "total_installments": 6,
                    "remaining_installments": 4,
                }
            ],
        )
        conn.execute(
            insert(recurring_rules_table),
            [
                {
                    "id": 10,
                    "account_id": 1,
                    "title": "Rent",
                    "amount": Decimal("900"),
                    "category_id": 1,
                    "source_id": 1,
                    "instrument_code": "TRY",
                    "direction": "expense",
                    "frequency": "monthly",
                    "anchor_day": 1,
                    "is_active": True,
                    "last_materialized": None,
                },
                {
                    "id": 11,
                    "account_id": 2,
                    "title": "Paused",
                    "amount": Decimal("5"),
                    "category_id": None,
                    "source_id": None,
                    "instrument_code": "TRY",
                    "direction": "expense",
                    "frequency": "weekly",
                    "anchor_day": 3,
                    "is_active": False,
                    "last_materialized": None,
                },
            ],
        )


def _entry(title: str = "Rent (Auto)") -> LedgerEntry:
    return LedgerEntry(
        account_id=1,
        instrument_code="TRY",
        category_id=1,
        source_id=1,
        direction=FlowDirection.EXPENSE,
        amount=Decimal("900"),
        title=title,
        timestamp=datetime(2024, 7, 1, 6, tzinfo=timezone.utc),
    )


def test_list_ledger_entries_joins_names_and_filters(engine, repository):
    """Entries should be scoped by account, ordered and carry names."""
    _seed(engine)

    entries = repository.list_ledger_entries(1)

    assert [entry.title for entry in entries] == ["Salary", "Lunch"]
    lunch = entries[1]
    assert lunch.direction == FlowDirection.EXPENSE
    assert lunch.amount == Decimal("12.50")
    assert lunch.category_name == "Food"
    assert lunch.source_name == "Bank"
    assert lunch.timestamp.tzinfo == timezone.utc
    assert entries[0].category_name is None


def test_list_ledger_entries_since(engine, repository):
    """The since bound should exclude older entries."""
    _seed(engine)

    entries = repository.list_ledger_entries(
        1, since=datetime(2024, 3, 1, tzinfo=timezone.utc)
    )

    assert [entry.title for entry in entries] == ["Lunch"]


def test_list_holdings_and_debts(engine, repository):
    """Holdings and debts should map to domain records."""
    _seed(engine)

    holdings = repository.list_holdings(1)
    debts = repository.list_debts(1)

    assert holdings[0].market_symbol == "AAPL"
    assert holdings[0].quantity == Decimal("3")
    assert debts[0].amount_outstanding == Decimal("250")
    assert debts[0].original_amount is None
    assert debts[0].remaining_installments == 4


def test_list_active_recurring_rules(engine, repository):
    """Only active rules should be listed, optionally per account."""
    _seed(engine)

    rules = repository.list_active_recurring_rules()

    assert [rule.rule_id for rule in rules] == [10]
    assert rules[0].frequency == Frequency.MONTHLY
    assert repository.list_active_recurring_rules(2) == []


def test_create_ledger_entry_returns_identifier(engine, repository):
    """Created entries should come back with their identifier."""
    created = repository.create_ledger_entry(_entry("Manual"))

    assert created.entry_id is not None
    assert repository.list_ledger_entries(1)[0].title == "Manual"


def test_record_materialization_is_compare_and_set(engine, repository):
    """A second stamp for the same day should insert nothing."""
    _seed(engine)
    rule = repository.list_active_recurring_rules()[0]
    day = date(2024, 7, 1)

    first = repository.record_materialization(rule, _entry(), day)
    second = repository.record_materialization(rule, _entry(), day)

    assert first is True
    assert second is False
    titles = [entry.title for entry in repository.list_ledger_entries(1)]
    assert titles.count("Rent (Auto)") == 1
    assert repository.list_active_recurring_rules()[0].last_materialized == day


def test_record_materialization_rolls_back_on_failure(engine, repository):
    """A failed insert should leave the rule unstamped."""
    _seed(engine)
    rule = repository.list_active_recurring_rules()[0]
    broken = LedgerEntry(
        account_id=1,
        instrument_code="TRY",
        category_id=None,
        source_id=None,
        direction=FlowDirection.EXPENSE,
        amount=None,
        title="Broken",
        timestamp=datetime(2024, 7, 1, tzinfo=timezone.utc),
    )

    with pytest.raises(StoreError):
        repository.record_materialization(rule, broken, date(2024, 7, 1))

    with engine.connect() as conn:
        stamp = conn.execute(
            select(recurring_rules_table.c.last_materialized).where(
                recurring_rules_table.c.id == 10
            )
        ).scalar_one()
    assert stamp is None


def test_update_rule_last_materialized(engine, repository):
    """The plain stamp update should persist the date."""
    _seed(engine)

    repository.update_rule_last_materialized(10, date(2024, 7, 2))

    assert repository.list_active_recurring_rules()[0].last_materialized == date(2024, 7, 2)


def test_read_failures_become_store_errors():
    """SQLAlchemy errors should be wrapped into StoreError."""
    engine = MagicMock()
    engine.connect.side_effect = OperationalError("SELECT", {}, Exception("down"))
    repository = SqlAlchemyFinanceRepository(
        SimpleNamespace(get_finance_engine=lambda: engine),
        logger=MagicMock(),
    )

    with pytest.raises(StoreError):
        repository.list_holdings(1)
