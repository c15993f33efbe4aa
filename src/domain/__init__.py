"""Domain package for business rules and core models."""

from .constants import DEFAULT_BASE_CURRENCY, LOOKUP_TABLES_VERSION
from .errors import (
    FinanceError,
    QuoteProviderError,
    ReportErrorKind,
    ReportWarning,
    StoreError,
)
from .models import (
    AssetHolding,
    DebtObligation,
    FlowDirection,
    Frequency,
    LedgerEntry,
    MarketQuote,
    RecurringRule,
    Report,
    ReportResult,
)
from .policies import classify_holding

__all__ = [
    "DEFAULT_BASE_CURRENCY",
    "LOOKUP_TABLES_VERSION",
    "FinanceError",
    "QuoteProviderError",
    "ReportErrorKind",
    "ReportWarning",
    "StoreError",
    "AssetHolding",
    "DebtObligation",
    "FlowDirection",
    "Frequency",
    "LedgerEntry",
    "MarketQuote",
    "RecurringRule",
    "Report",
    "ReportResult",
    "classify_holding",
]
