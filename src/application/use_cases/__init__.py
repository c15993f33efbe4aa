"""Application use cases package."""

from .get_financial_report import GetFinancialReportUseCase
from .materialize_recurring import (
    MaterializationResult,
    MaterializeRecurringUseCase,
)

__all__ = [
    "GetFinancialReportUseCase",
    "MaterializationResult",
    "MaterializeRecurringUseCase",
]
