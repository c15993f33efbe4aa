"""Domain models package."""

from .finance import Aggregates, FlowMetrics, Totals
from .ledger import (
    AssetHolding,
    DebtObligation,
    FlowDirection,
    Frequency,
    LedgerEntry,
    MarketQuote,
    RecurringRule,
)
from .report import (
    AllocationSlice,
    CategorySpending,
    CategoryTrend,
    ExpenseStructure,
    HealthScores,
    HoldingValuation,
    IncomeSourceShare,
    MonthlyTrendPoint,
    MonthSummary,
    PortfolioPerformance,
    ProjectionPoint,
    Report,
    ReportResult,
    SourceFlow,
    UpcomingObligation,
    WeeklyRhythmPoint,
)

__all__ = [
    "Aggregates",
    "FlowMetrics",
    "Totals",
    "AssetHolding",
    "DebtObligation",
    "FlowDirection",
    "Frequency",
    "LedgerEntry",
    "MarketQuote",
    "RecurringRule",
    "AllocationSlice",
    "CategorySpending",
    "CategoryTrend",
    "ExpenseStructure",
    "HealthScores",
    "HoldingValuation",
    "IncomeSourceShare",
    "MonthlyTrendPoint",
    "MonthSummary",
    "PortfolioPerformance",
    "ProjectionPoint",
    "Report",
    "ReportResult",
    "SourceFlow",
    "UpcomingObligation",
    "WeeklyRhythmPoint",
]
