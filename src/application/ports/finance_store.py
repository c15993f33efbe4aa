"""Port for the ledger, holdings, debts and recurring rules store."""

from datetime import date, datetime
from typing import Protocol

from src.domain.models import (
    AssetHolding,
    DebtObligation,
    LedgerEntry,
    RecurringRule,
)


class FinanceStorePort(Protocol):
    """Port exposing the records the finance engine reads and writes.

    Implementations raise ``StoreError`` when the backend is unavailable.
    """

    def list_ledger_entries(
        self,
        account_id: int,
        since: datetime | None = None,
    ) -> list[LedgerEntry]:
        """Return ledger entries of an account, optionally from a UTC instant."""

    def list_holdings(self, account_id: int) -> list[AssetHolding]:
        """Return the asset holdings of an account."""

    def list_debts(self, account_id: int) -> list[DebtObligation]:
        """Return the debt obligations of an account."""

    def list_active_recurring_rules(
        self,
        account_id: int | None = None,
    ) -> list[RecurringRule]:
        """Return active recurring rules, for one account or all accounts."""

    def create_ledger_entry(self, entry: LedgerEntry) -> LedgerEntry:
        """Persist a new ledger entry and return it with its identifier."""

    def update_rule_last_materialized(self, rule_id: int, day: date) -> None:
        """Stamp the last materialization date of a rule."""

    def record_materialization(
        self,
        rule: RecurringRule,
        entry: LedgerEntry,
        day: date,
    ) -> bool:
        """Atomically stamp the rule for ``day`` and insert its entry.

        Returns:
            bool: False when the rule was already stamped for ``day`` by a
            concurrent writer, in which case no entry is inserted.
        """


__all__ = ["FinanceStorePort"]
