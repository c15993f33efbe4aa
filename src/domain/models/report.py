"""Value objects composing the financial report."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from src.domain.errors import ReportErrorKind, ReportWarning


@dataclass(frozen=True)
class AllocationSlice:
    """Share of holdings (or a synthetic bucket) in one allocation class."""

    category: str
    value: Decimal
    percentage: Decimal
    color: str
    synthetic: bool = False


@dataclass(frozen=True)
class CategorySpending:
    """Expense total for one category."""

    category: str
    amount: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class MonthlyTrendPoint:
    """Income and expense totals for a calendar month."""

    year: int
    month: int
    income: Decimal
    expense: Decimal

    @property
    def net_change(self) -> Decimal:
        """Return income minus expense."""
        return self.income - self.expense

    @property
    def label(self) -> str:
        """Return a display label such as ``Jan 2024``."""
        return date(self.year, self.month, 1).strftime("%b %Y")


@dataclass(frozen=True)
class CategoryTrend:
    """Expense amounts per category for a calendar month."""

    year: int
    month: int
    amounts: dict[str, Decimal]


@dataclass(frozen=True)
class WeeklyRhythmPoint:
    """Expense total for one weekday (1=Monday .. 7=Sunday)."""

    day_index: int
    day_name: str
    amount: Decimal


@dataclass(frozen=True)
class IncomeSourceShare:
    """Income total for one source."""

    source: str
    amount: Decimal
    percentage: Decimal
    color: str


@dataclass(frozen=True)
class SourceFlow:
    """Net flow (income minus expense) through a source."""

    source: str
    net_flow: Decimal


@dataclass(frozen=True)
class ExpenseStructure:
    """Split of monthly spending into fixed and variable parts."""

    fixed_costs: Decimal
    variable_costs: Decimal
    savings: Decimal
    flexibility_score: int


@dataclass(frozen=True)
class HoldingValuation:
    """Valuation of a single holding in the base currency."""

    instrument_code: str | None
    market_symbol: str | None
    category: str
    quantity: Decimal
    unit_price: Decimal
    value: Decimal
    cost_basis: Decimal
    resolved: bool

    @property
    def profit_loss(self) -> Decimal:
        return self.value - self.cost_basis

    @property
    def profit_loss_percent(self) -> Decimal:
        if not self.cost_basis:
            return Decimal("0")
        return self.profit_loss / self.cost_basis * Decimal("100")


@dataclass(frozen=True)
class PortfolioPerformance:
    """Unrealized performance across all holdings."""

    cost_basis: Decimal
    profit_loss: Decimal
    profit_loss_percent: Decimal


@dataclass(frozen=True)
class HealthScores:
    """Five 0-100 sub-scores of financial health."""

    liquidity: int
    solvency: int
    growth: int
    diversification: int
    stability: int


@dataclass(frozen=True)
class ProjectionPoint:
    """Point of the wealth projection series."""

    label: str
    period: date
    amount: Decimal
    is_projected: bool


@dataclass(frozen=True)
class UpcomingObligation:
    """Next occurrence of an active recurring rule."""

    rule_id: int
    title: str
    amount: Decimal
    due_date: date
    days_left: int
    direction: str


@dataclass(frozen=True)
class MonthSummary:
    """Month-to-date flows of the current calendar month."""

    income: Decimal
    expense: Decimal
    source_flows: list[SourceFlow]


@dataclass(frozen=True)
class Report:
    """Financial report computed fresh for one account."""

    account_id: int
    currency_code: str
    generated_on: date
    total_assets: Decimal
    total_debts: Decimal
    cash_balance: Decimal
    net_worth: Decimal
    monthly_burn_rate: Decimal
    savings_rate: Decimal
    survival_months: Decimal
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
    health: HealthScores
    identity: str
    projection: list[ProjectionPoint]
    upcoming: list[UpcomingObligation]
    month_summary: MonthSummary
    warnings: list[ReportWarning] = field(default_factory=list)
    unresolved_codes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ReportResult:
    """Outcome of a report request: a report or an error kind."""

    report: Report | None = None
    error: ReportErrorKind | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.report is not None


__all__ = [
    "AllocationSlice",
    "CategorySpending",
    "MonthlyTrendPoint",
    "CategoryTrend",
    "WeeklyRhythmPoint",
    "IncomeSourceShare",
    "SourceFlow",
    "ExpenseStructure",
    "HoldingValuation",
    "PortfolioPerformance",
    "HealthScores",
    "ProjectionPoint",
    "UpcomingObligation",
    "MonthSummary",
    "Report",
    "ReportResult",
]
