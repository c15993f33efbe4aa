"""SQLAlchemy adapter for the ledger store."""

from dataclasses import replace
from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    insert,
    or_,
    select,
    update,
)
from sqlalchemy.exc import SQLAlchemyError

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.finance_store import FinanceStorePort
from src.domain.errors import StoreError
from src.domain.models import (
    AssetHolding,
    DebtObligation,
    FlowDirection,
    Frequency,
    LedgerEntry,
    RecurringRule,
)
from src.infrastructure.logging.logger import get_app_logger
from src.utils.date_utils import ensure_utc
from src.utils.decimal_utils import coerce_decimal

metadata = MetaData()

AMOUNT = Numeric(24, 8)

categories_table = Table(
    "categories",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("account_id", Integer, nullable=False, index=True),
    Column("name", String(120), nullable=False),
)

sources_table = Table(
    "sources",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("account_id", Integer, nullable=False, index=True),
    Column("name", String(120), nullable=False),
)

ledger_entries_table = Table(
    "ledger_entries",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("account_id", Integer, nullable=False, index=True),
    Column("instrument_code", String(32)),
    Column("category_id", Integer, ForeignKey("categories.id")),
    Column("source_id", Integer, ForeignKey("sources.id")),
    Column("direction", String(16), nullable=False),
    Column("amount", AMOUNT, nullable=False),
    Column("title", String(255), nullable=False, default=""),
    Column("occurred_at", DateTime(timezone=True), nullable=False),
)

asset_holdings_table = Table(
    "asset_holdings",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("account_id", Integer, nullable=False, index=True),
    Column("name", String(120)),
    Column("instrument_code", String(32)),
    Column("market_symbol", String(32)),
    Column("quantity", AMOUNT, nullable=False),
    Column("average_cost", AMOUNT, nullable=False),
    Column("category_label", String(64)),
)

debt_obligations_table = Table(
    "debt_obligations",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("account_id", Integer, nullable=False, index=True),
    Column("title", String(255), nullable=False, default=""),
    Column("amount_outstanding", AMOUNT, nullable=False),
    Column("currency_code", String(32)),
    Column("original_amount", AMOUNT),
    Column("interest_rate", AMOUNT, nullable=False, default=0),
    Column("total_installments", Integer, nullable=False, default=1),
    Column("remaining_installments", Integer, nullable=False, default=1),
)

recurring_rules_table = Table(
    "recurring_rules",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("account_id", Integer, nullable=False, index=True),
    Column("title", String(255), nullable=False),
    Column("amount", AMOUNT, nullable=False),
    Column("category_id", Integer, ForeignKey("categories.id")),
    Column("source_id", Integer, ForeignKey("sources.id")),
    Column("instrument_code", String(32)),
    Column("direction", String(16), nullable=False),
    Column("frequency", String(16), nullable=False),
    Column("anchor_day", Integer, nullable=False),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("last_materialized", Date),
)


class SqlAlchemyFinanceRepository(FinanceStorePort):
    """Ledger store backed by SQLAlchemy Core tables."""

    def __init__(self, db_port: DatabaseEnginePort, logger=None) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the ledger engine.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()

    def ensure_schema(self) -> None:
        """Create the ledger tables when they do not exist."""
        engine = self._db_port.get_finance_engine()
        try:
            metadata.create_all(engine)
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not create ledger schema: {exc}") from exc
        self._logger.info("Ledger schema is ready")

    def list_ledger_entries(
        self,
        account_id: int,
        since: datetime | None = None,
    ) -> list[LedgerEntry]:
        """Return ledger entries of an account, oldest first.

        Args:
            account_id: Owning account.
            since: Optional inclusive lower bound (UTC).

        Returns:
            list[LedgerEntry]: Entries with category and source names.
        """
        entries = ledger_entries_table
        query = (
            select(
                entries,
                categories_table.c.name.label("category_name"),
                sources_table.c.name.label("source_name"),
            )
            .select_from(
                entries.outerjoin(
                    categories_table,
                    entries.c.category_id == categories_table.c.id,
                ).outerjoin(
                    sources_table,
                    entries.c.source_id == sources_table.c.id,
                )
            )
            .where(entries.c.account_id == account_id)
            .order_by(entries.c.occurred_at, entries.c.id)
        )
        if since is not None:
            query = query.where(entries.c.occurred_at >= ensure_utc(since))
        rows = self._fetch(query, "ledger entries")
        return [_entry_from_row(row) for row in rows]

    def list_holdings(self, account_id: int) -> list[AssetHolding]:
        """Return the asset holdings of an account."""
        query = (
            select(asset_holdings_table)
            .where(asset_holdings_table.c.account_id == account_id)
            .order_by(asset_holdings_table.c.id)
        )
        return [
            AssetHolding(
                account_id=row.account_id,
                instrument_code=row.instrument_code,
                quantity=coerce_decimal(row.quantity),
                average_cost=coerce_decimal(row.average_cost),
                category_label=row.category_label,
                market_symbol=row.market_symbol,
                holding_id=row.id,
                name=row.name,
            )
            for row in self._fetch(query, "holdings")
        ]

    def list_debts(self, account_id: int) -> list[DebtObligation]:
        """Return the debt obligations of an account."""
        query = (
            select(debt_obligations_table)
            .where(debt_obligations_table.c.account_id == account_id)
            .order_by(debt_obligations_table.c.id)
        )
        return [
            DebtObligation(
                account_id=row.account_id,
                amount_outstanding=coerce_decimal(row.amount_outstanding),
                currency_code=row.currency_code,
                original_amount=(
                    coerce_decimal(row.original_amount)
                    if row.original_amount is not None
                    else None
                ),
                interest_rate=coerce_decimal(row.interest_rate),
                total_installments=row.total_installments,
                remaining_installments=row.remaining_installments,
                debt_id=row.id,
                title=row.title or "",
            )
            for row in self._fetch(query, "debts")
        ]

    def list_active_recurring_rules(
        self,
        account_id: int | None = None,
    ) -> list[RecurringRule]:
        """Return active recurring rules, for one account or for all."""
        rules = recurring_rules_table
        query = select(rules).where(rules.c.is_active.is_(True))
        if account_id is not None:
            query = query.where(rules.c.account_id == account_id)
        query = query.order_by(rules.c.id)
        return [_rule_from_row(row) for row in self._fetch(query, "rules")]

    def create_ledger_entry(self, entry: LedgerEntry) -> LedgerEntry:
        """Insert a ledger entry and return it with its identifier."""
        engine = self._db_port.get_finance_engine()
        try:
            with engine.begin() as conn:
                result = conn.execute(
                    insert(ledger_entries_table).values(**_entry_values(entry))
                )
                entry_id = result.inserted_primary_key[0]
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not insert ledger entry: {exc}") from exc
        return replace(entry, entry_id=entry_id)

    def update_rule_last_materialized(self, rule_id: int, day: date) -> None:
        """Stamp the last materialization date of a rule."""
        engine = self._db_port.get_finance_engine()
        try:
            with engine.begin() as conn:
                conn.execute(
                    update(recurring_rules_table)
                    .where(recurring_rules_table.c.id == rule_id)
                    .values(last_materialized=day)
                )
        except SQLAlchemyError as exc:
            raise StoreError(
                f"Could not stamp recurring rule {rule_id}: {exc}"
            ) from exc

    def record_materialization(
        self,
        rule: RecurringRule,
        entry: LedgerEntry,
        day: date,
    ) -> bool:
        """Stamp the rule and insert its entry in one transaction.

        The stamp is a compare-and-set: it only succeeds when the rule has
        not been stamped for ``day`` yet, so concurrent writers cannot both
        insert an entry.

        Args:
            rule: Rule being materialized.
            entry: Ledger entry to insert.
            day: Calendar day of the occurrence.

        Returns:
            bool: True when the entry was inserted, False when another
            writer already stamped the rule for ``day``.

        Raises:
            StoreError: If the transaction fails; nothing is committed.
        """
        rules = recurring_rules_table
        engine = self._db_port.get_finance_engine()
        try:
            with engine.begin() as conn:
                stamped = conn.execute(
                    update(rules)
                    .where(rules.c.id == rule.rule_id)
                    .where(
                        or_(
                            rules.c.last_materialized.is_(None),
                            rules.c.last_materialized != day,
                        )
                    )
                    .values(last_materialized=day)
                )
                if stamped.rowcount == 0:
                    return False
                conn.execute(
                    insert(ledger_entries_table).values(**_entry_values(entry))
                )
        except SQLAlchemyError as exc:
            raise StoreError(
                f"Could not materialize recurring rule {rule.rule_id}: {exc}"
            ) from exc
        return True

    def _fetch(self, query, label: str):
        engine = self._db_port.get_finance_engine()
        try:
            with engine.connect() as conn:
                return conn.execute(query).all()
        except SQLAlchemyError as exc:
            self._logger.error(f"Failed to read {label}: {exc}")
            raise StoreError(f"Could not read {label}: {exc}") from exc


def _entry_values(entry: LedgerEntry) -> dict:
    return {
        "account_id": entry.account_id,
        "instrument_code": entry.instrument_code,
        "category_id": entry.category_id,
        "source_id": entry.source_id,
        "direction": entry.direction.value,
        "amount": entry.amount,
        "title": entry.title,
        "occurred_at": ensure_utc(entry.timestamp),
    }


def _entry_from_row(row) -> LedgerEntry:
    return LedgerEntry(
        account_id=row.account_id,
        instrument_code=row.instrument_code,
        category_id=row.category_id,
        source_id=row.source_id,
        direction=FlowDirection(row.direction.lower()),
        amount=coerce_decimal(row.amount),
        title=row.title or "",
        timestamp=ensure_utc(row.occurred_at),
        entry_id=row.id,
        category_name=row.category_name,
        source_name=row.source_name,
    )


def _rule_from_row(row) -> RecurringRule:
    return RecurringRule(
        rule_id=row.id,
        account_id=row.account_id,
        title=row.title,
        amount=coerce_decimal(row.amount),
        category_id=row.category_id,
        source_id=row.source_id,
        instrument_code=row.instrument_code,
        direction=FlowDirection(row.direction.lower()),
        frequency=Frequency(row.frequency.lower()),
        anchor_day=row.anchor_day,
        is_active=bool(row.is_active),
        last_materialized=row.last_materialized,
    )


__all__ = [
    "metadata",
    "categories_table",
    "sources_table",
    "ledger_entries_table",
    "asset_holdings_table",
    "debt_obligations_table",
    "recurring_rules_table",
    "SqlAlchemyFinanceRepository",
]
