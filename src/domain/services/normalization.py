"""Normalization of ledger records into base-currency values."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from logging import Logger

from src.domain.models import (
    AssetHolding,
    DebtObligation,
    FlowDirection,
    LedgerEntry,
    RecurringRule,
)
from src.domain.services.validation import validate_non_negative
from src.utils.decimal_utils import coerce_decimal


def normalize_code(code: str | None) -> str:
    """Return a trimmed, upper-cased instrument code ('' when missing)."""
    return (code or "").strip().upper()


@dataclass(frozen=True)
class NormalizedEntry:
    """Ledger entry paired with its base-currency amount."""

    entry: LedgerEntry
    value: Decimal
    rate: Decimal

    @property
    def is_income(self) -> bool:
        return self.entry.direction == FlowDirection.INCOME

    @property
    def is_expense(self) -> bool:
        return self.entry.direction == FlowDirection.EXPENSE


@dataclass(frozen=True)
class NormalizedHolding:
    """Holding paired with its unit price and value in the base currency."""

    holding: AssetHolding
    unit_price: Decimal
    value: Decimal
    cost_basis: Decimal
    resolved: bool


@dataclass(frozen=True)
class NormalizedDebt:
    """Debt paired with its outstanding amount in the base currency."""

    debt: DebtObligation
    value: Decimal
    rate: Decimal


@dataclass(frozen=True)
class NormalizedRule:
    """Recurring rule paired with its amount in the base currency."""

    rule: RecurringRule
    value: Decimal
    rate: Decimal


@dataclass(frozen=True)
class NormalizedSet:
    """Base-currency view of an account's records."""

    currency_code: str
    entries: tuple[NormalizedEntry, ...] = ()
    holdings: tuple[NormalizedHolding, ...] = ()
    debts: tuple[NormalizedDebt, ...] = ()
    rules: tuple[NormalizedRule, ...] = ()
    unresolved_codes: tuple[str, ...] = field(default_factory=tuple)


def native_holding_codes(holding: AssetHolding) -> list[str]:
    """Return the codes to try for a holding, most specific first."""
    codes = [
        normalize_code(holding.market_symbol),
        normalize_code(holding.instrument_code),
    ]
    return [code for code in dict.fromkeys(codes) if code]


def normalize(
    entries: Iterable[LedgerEntry],
    holdings: Iterable[AssetHolding],
    debts: Iterable[DebtObligation],
    resolver,
    rules: Iterable[RecurringRule] = (),
    logger: Logger | None = None,
) -> NormalizedSet:
    """Convert records into base-currency values without mutating them.

    Args:
        entries: Ledger entries to convert.
        holdings: Asset holdings to value.
        debts: Debt obligations to convert.
        resolver: Object exposing ``resolve(code)`` and ``base_currency``.
        rules: Recurring rules to convert.
        logger: Optional logger for invariant warnings.

    Returns:
        NormalizedSet: Records paired with their base-currency values.
    """
    unresolved: dict[str, None] = {}

    def _rate(code: str | None) -> Decimal:
        resolution = resolver.resolve(code)
        if not resolution.resolved:
            unresolved[resolution.code] = None
        return resolution.rate

    normalized_entries = []
    for entry in entries:
        amount = coerce_decimal(entry.amount)
        validate_non_negative("ledger amount", amount, logger)
        rate = _rate(entry.instrument_code)
        normalized_entries.append(
            NormalizedEntry(entry=entry, value=amount * rate, rate=rate)
        )

    normalized_holdings = [
        _normalize_holding(holding, resolver, unresolved, logger)
        for holding in holdings
    ]

    normalized_debts = []
    for debt in debts:
        amount = coerce_decimal(debt.amount_outstanding)
        validate_non_negative("debt amount", amount, logger)
        rate = _rate(debt.currency_code)
        normalized_debts.append(
            NormalizedDebt(debt=debt, value=amount * rate, rate=rate)
        )

    normalized_rules = []
    for rule in rules:
        amount = coerce_decimal(rule.amount)
        rate = _rate(rule.instrument_code)
        normalized_rules.append(
            NormalizedRule(rule=rule, value=amount * rate, rate=rate)
        )

    return NormalizedSet(
        currency_code=resolver.base_currency,
        entries=tuple(normalized_entries),
        holdings=tuple(normalized_holdings),
        debts=tuple(normalized_debts),
        rules=tuple(normalized_rules),
        unresolved_codes=tuple(unresolved),
    )


def _normalize_holding(
    holding: AssetHolding,
    resolver,
    unresolved: dict[str, None],
    logger: Logger | None,
) -> NormalizedHolding:
    quantity = coerce_decimal(holding.quantity)
    average_cost = coerce_decimal(holding.average_cost)
    validate_non_negative("holding quantity", quantity, logger)

    resolution = None
    for code in native_holding_codes(holding):
        resolution = resolver.resolve(code)
        if resolution.resolved:
            break
    if resolution is None:
        resolution = resolver.resolve(None)
    if not resolution.resolved:
        unresolved[resolution.code] = None

    return NormalizedHolding(
        holding=holding,
        unit_price=resolution.rate,
        value=quantity * resolution.rate,
        cost_basis=quantity * average_cost,
        resolved=resolution.resolved,
    )


__all__ = [
    "normalize_code",
    "NormalizedEntry",
    "NormalizedHolding",
    "NormalizedDebt",
    "NormalizedRule",
    "NormalizedSet",
    "native_holding_codes",
    "normalize",
]
