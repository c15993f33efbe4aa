"""Domain records supplied by the ledger store and the quote provider."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum


class FlowDirection(str, Enum):
    """Direction of a ledger movement."""

    INCOME = "income"
    EXPENSE = "expense"


class Frequency(str, Enum):
    """Recurrence frequency of a recurring rule."""

    MONTHLY = "monthly"
    WEEKLY = "weekly"


@dataclass(frozen=True)
class LedgerEntry:
    """Single income or expense movement.

    Attributes:
        account_id: Owning account.
        instrument_code: Currency or instrument the amount is expressed in.
        category_id: Category reference, None when missing.
        source_id: Source reference (bank, cash, card), None when missing.
        direction: Income or expense.
        amount: Non-negative amount in the instrument's unit.
        title: Free-form description.
        timestamp: UTC timestamp of the movement.
        entry_id: Store identifier, None for entries not yet persisted.
        category_name: Resolved category display name.
        source_name: Resolved source display name.
    """

    account_id: int
    instrument_code: str | None
    category_id: int | None
    source_id: int | None
    direction: FlowDirection
    amount: Decimal
    title: str
    timestamp: datetime
    entry_id: int | None = None
    category_name: str | None = None
    source_name: str | None = None


@dataclass(frozen=True)
class AssetHolding:
    """Position held by an account."""

    account_id: int
    instrument_code: str | None
    quantity: Decimal
    average_cost: Decimal
    category_label: str | None
    market_symbol: str | None = None
    holding_id: int | None = None
    name: str | None = None


@dataclass(frozen=True)
class DebtObligation:
    """Outstanding liability."""

    account_id: int
    amount_outstanding: Decimal
    currency_code: str | None
    original_amount: Decimal | None = None
    interest_rate: Decimal = Decimal("0")
    total_installments: int = 1
    remaining_installments: int = 1
    debt_id: int | None = None
    title: str = ""


@dataclass(frozen=True)
class RecurringRule:
    """Rule that materializes a ledger entry on a schedule.

    ``anchor_day`` is the day of month (1-31) for monthly rules and the ISO
    weekday (1=Monday .. 7=Sunday) for weekly rules. ``last_materialized``
    guards against creating more than one entry per calendar day.
    """

    rule_id: int
    account_id: int
    title: str
    amount: Decimal
    category_id: int | None
    source_id: int | None
    instrument_code: str | None
    direction: FlowDirection
    frequency: Frequency
    anchor_day: int
    is_active: bool = True
    last_materialized: date | None = None


@dataclass(frozen=True)
class MarketQuote:
    """Quote returned by the market data provider."""

    symbol: str
    price: Decimal
    currency: str | None
    change_percent: Decimal
    fetched_at: datetime


__all__ = [
    "FlowDirection",
    "Frequency",
    "LedgerEntry",
    "AssetHolding",
    "DebtObligation",
    "RecurringRule",
    "MarketQuote",
]
