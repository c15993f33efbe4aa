"""Domain models for financial aggregates."""

from dataclasses import dataclass
from decimal import Decimal

from .report import (
    AllocationSlice,
    CategorySpending,
    CategoryTrend,
    ExpenseStructure,
    HoldingValuation,
    IncomeSourceShare,
    MonthlyTrendPoint,
    MonthSummary,
    PortfolioPerformance,
    WeeklyRhythmPoint,
)


@dataclass(frozen=True)
class Totals:
    """Balance sheet totals in the base currency.

    Attributes:
        total_assets: Sum of holding values.
        total_debts: Sum of outstanding debts.
        cash_balance: All-time income minus all-time expense.
    """

    total_assets: Decimal
    total_debts: Decimal
    cash_balance: Decimal

    @property
    def net_worth(self) -> Decimal:
        """Return assets minus debts plus cash balance."""
        return self.total_assets - self.total_debts + self.cash_balance


@dataclass(frozen=True)
class FlowMetrics:
    """Income and spending metrics over the trailing flow window.

    Attributes:
        income: Income over the window.
        expense: Expense over the window.
        monthly_burn_rate: Average monthly expense, floored at the minimum.
        savings_rate: Percentage of income kept over the window.
        survival_months: Unrounded months of runway, or the infinite
            sentinel.
        average_monthly_income: Average monthly income, floored at 1.
        runway_is_infinite: True when the window holds no expenses.
    """

    income: Decimal
    expense: Decimal
    monthly_burn_rate: Decimal
    savings_rate: Decimal
    survival_months: Decimal
    average_monthly_income: Decimal
    runway_is_infinite: bool


@dataclass(frozen=True)
class Aggregates:
    """Everything the aggregator derives from a normalized set."""

    currency_code: str
    totals: Totals
    flows: FlowMetrics
    performance: PortfolioPerformance
    holdings: list[HoldingValuation]
    allocation: list[AllocationSlice]
    allocation_with_liabilities: list[AllocationSlice]
    top_expense_categories: list[CategorySpending]
    monthly_trend: list[MonthlyTrendPoint]
    category_trends: list[CategoryTrend]
    weekly_rhythm: list[WeeklyRhythmPoint]
    income_sources: list[IncomeSourceShare]
    expense_structure: ExpenseStructure
    month_summary: MonthSummary

    @property
    def net_worth(self) -> Decimal:
        return self.totals.net_worth


__all__ = ["Totals", "FlowMetrics", "Aggregates"]
