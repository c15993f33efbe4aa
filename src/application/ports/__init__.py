"""Application ports package."""

from .database import DatabaseEnginePort
from .finance_store import FinanceStorePort
from .quote_provider import QuoteProviderPort

__all__ = [
    "DatabaseEnginePort",
    "FinanceStorePort",
    "QuoteProviderPort",
]
