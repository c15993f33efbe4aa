"""Domain error types and error kinds returned by entry points."""

from enum import Enum


class FinanceError(Exception):
    """Base class for finance engine failures."""


class StoreError(FinanceError):
    """Raised when the ledger store cannot be read or written."""


class QuoteProviderError(FinanceError):
    """Raised when a quote batch lookup fails as a whole."""


class ReportErrorKind(str, Enum):
    """Reasons a report could not be produced."""

    NO_ACCOUNT_CONTEXT = "no_account_context"
    STORE_UNAVAILABLE = "store_unavailable"


class ReportWarning(str, Enum):
    """Non-fatal conditions attached to a produced report."""

    QUOTE_BATCH_FAILED = "quote_batch_failed"
    UNRESOLVED_CODES = "unresolved_codes"


__all__ = [
    "FinanceError",
    "StoreError",
    "QuoteProviderError",
    "ReportErrorKind",
    "ReportWarning",
]
