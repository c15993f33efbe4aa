"""Domain services for finance aggregates."""

from collections.abc import Iterable, Sequence
from datetime import datetime
from decimal import Decimal

from src.domain.constants import (
    CASH_CLASS,
    DEBT_CLASS,
    DEFAULT_FLOW_MONTHS,
    DEFAULT_HISTORY_MONTHS,
    INCOME_SOURCE_PALETTE,
    INFINITE_RUNWAY_MONTHS,
    LIQUID_ASSET_SHARE,
    MIN_BURN_RATE,
    OTHER_LABEL,
    TOP_EXPENSE_CATEGORIES,
    UNCATEGORIZED_LABEL,
    WEEKDAY_NAMES,
)
from src.domain.models import (
    Aggregates,
    AllocationSlice,
    CategorySpending,
    CategoryTrend,
    ExpenseStructure,
    FlowMetrics,
    HoldingValuation,
    IncomeSourceShare,
    MonthlyTrendPoint,
    MonthSummary,
    PortfolioPerformance,
    SourceFlow,
    Totals,
    WeeklyRhythmPoint,
)
from src.domain.policies.allocation import classify_holding, color_for_category
from src.domain.services.normalization import (
    NormalizedEntry,
    NormalizedHolding,
    NormalizedRule,
    NormalizedSet,
)
from src.utils.date_utils import add_months, ensure_utc, month_range
from src.utils.decimal_utils import ZERO, percentage, quantize, safe_ratio

def _sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def _month_key(entry: NormalizedEntry) -> tuple[int, int]:
    stamp = ensure_utc(entry.entry.timestamp)
    return stamp.year, stamp.month


def _entries_between(
    entries: Iterable[NormalizedEntry],
    start: datetime,
    end: datetime,
) -> list[NormalizedEntry]:
    """Return entries stamped within [start, end]."""
    return [
        item
        for item in entries
        if start <= ensure_utc(item.entry.timestamp) <= end
    ]


def history_window_start(as_of: datetime, history_months: int) -> datetime:
    """Return the first instant of the month-aligned history window."""
    start = add_months(as_of, -(history_months - 1))
    return start.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def compute_totals(normalized: NormalizedSet) -> Totals:
    """Return total assets, total debts and the all-time cash balance."""
    income = _sum(item.value for item in normalized.entries if item.is_income)
    expense = _sum(item.value for item in normalized.entries if item.is_expense)
    return Totals(
        total_assets=_sum(item.value for item in normalized.holdings),
        total_debts=_sum(item.value for item in normalized.debts),
        cash_balance=income - expense,
    )


def compute_flow_metrics(
    entries: Sequence[NormalizedEntry],
    total_assets: Decimal,
    as_of: datetime,
    flow_months: int = DEFAULT_FLOW_MONTHS,
) -> FlowMetrics:
    """Compute burn rate, savings rate and runway over the trailing window.

    Args:
        entries: Normalized ledger entries.
        total_assets: Total holding value in the base currency.
        as_of: Reference instant (UTC).
        flow_months: Length of the trailing window in months.

    Returns:
        FlowMetrics: Flow figures for the window.
    """
    months = Decimal(flow_months)
    end = ensure_utc(as_of)
    recent = _entries_between(entries, add_months(end, -flow_months), end)
    income = _sum(item.value for item in recent if item.is_income)
    expense = _sum(item.value for item in recent if item.is_expense)

    burn_rate = max(expense / months, MIN_BURN_RATE)
    runway_is_infinite = expense == 0
    if runway_is_infinite:
        survival = INFINITE_RUNWAY_MONTHS
    else:
        survival = total_assets * LIQUID_ASSET_SHARE / burn_rate

    savings_rate = (
        quantize(percentage(income - expense, income), 2) if income > 0 else ZERO
    )
    return FlowMetrics(
        income=income,
        expense=expense,
        monthly_burn_rate=burn_rate,
        savings_rate=savings_rate,
        survival_months=survival,
        average_monthly_income=max(income / months, Decimal("1")),
        runway_is_infinite=runway_is_infinite,
    )


def compute_holding_valuations(
    holdings: Iterable[NormalizedHolding],
) -> list[HoldingValuation]:
    """Return per-holding valuations sorted by value, largest first."""
    valuations = [
        HoldingValuation(
            instrument_code=item.holding.instrument_code,
            market_symbol=item.holding.market_symbol,
            category=classify_holding(item.holding),
            quantity=item.holding.quantity,
            unit_price=item.unit_price,
            value=item.value,
            cost_basis=item.cost_basis,
            resolved=item.resolved,
        )
        for item in holdings
    ]
    return sorted(valuations, key=lambda item: item.value, reverse=True)


def compute_performance(
    holdings: Iterable[NormalizedHolding],
) -> PortfolioPerformance:
    """Return cost basis and unrealized profit/loss across holdings."""
    items = list(holdings)
    value = _sum(item.value for item in items)
    cost_basis = _sum(item.cost_basis for item in items)
    profit_loss = value - cost_basis
    return PortfolioPerformance(
        cost_basis=cost_basis,
        profit_loss=profit_loss,
        profit_loss_percent=percentage(profit_loss, cost_basis),
    )


def compute_allocation(
    holdings: Iterable[NormalizedHolding],
) -> list[AllocationSlice]:
    """Group holding values by allocation class with percentages.

    Percentages are relative to the total holding value and sum to 100
    whenever that total is positive.
    """
    totals: dict[str, Decimal] = {}
    for item in holdings:
        category = classify_holding(item.holding)
        totals[category] = totals.get(category, ZERO) + item.value
    grand_total = _sum(totals.values())
    slices = [
        AllocationSlice(
            category=category,
            value=value,
            percentage=percentage(value, grand_total),
            color=color_for_category(category),
        )
        for category, value in totals.items()
    ]
    return sorted(slices, key=lambda item: (-item.value, item.category))


def inject_synthetic_buckets(
    allocation: Sequence[AllocationSlice],
    cash_balance: Decimal,
    total_debts: Decimal,
) -> list[AllocationSlice]:
    """Add cash balance and debts as extra buckets for visualization.

    Percentages are recomputed over holdings plus the injected buckets. A
    positive cash balance is added to the cash bucket as a synthetic slice.
    """
    values: list[tuple[str, Decimal, bool]] = [
        (item.category, item.value, item.synthetic) for item in allocation
    ]
    if cash_balance > 0:
        values.append((CASH_CLASS, cash_balance, True))
    if total_debts > 0:
        values.append((DEBT_CLASS, total_debts, True))
    grand_total = _sum(value for _, value, _ in values)
    return [
        AllocationSlice(
            category=category,
            value=value,
            percentage=percentage(value, grand_total),
            color=color_for_category(category),
            synthetic=synthetic,
        )
        for category, value, synthetic in values
    ]


def compute_top_expense_categories(
    entries: Iterable[NormalizedEntry],
    limit: int = TOP_EXPENSE_CATEGORIES,
) -> list[CategorySpending]:
    """Return the largest expense categories plus an Other bucket."""
    totals: dict[str, Decimal] = {}
    for item in entries:
        if not item.is_expense:
            continue
        name = item.entry.category_name or UNCATEGORIZED_LABEL
        totals[name] = totals.get(name, ZERO) + item.value
    grand_total = _sum(totals.values())
    ranked = sorted(totals.items(), key=lambda kv: (-kv[1], kv[0]))
    result = [
        CategorySpending(
            category=name,
            amount=amount,
            percentage=percentage(amount, grand_total),
        )
        for name, amount in ranked[:limit]
    ]
    other_amount = _sum(amount for _, amount in ranked[limit:])
    if other_amount > 0:
        result.append(
            CategorySpending(
                category=OTHER_LABEL,
                amount=other_amount,
                percentage=percentage(other_amount, grand_total),
            )
        )
    return result


def compute_monthly_trend(
    entries: Iterable[NormalizedEntry],
    as_of: datetime,
    history_months: int = DEFAULT_HISTORY_MONTHS,
) -> list[MonthlyTrendPoint]:
    """Sum income and expense per calendar month across the window.

    Every month of the window is present, ordered by (year, month).
    """
    months = month_range(ensure_utc(as_of).date(), history_months)
    income: dict[tuple[int, int], Decimal] = {key: ZERO for key in months}
    expense: dict[tuple[int, int], Decimal] = {key: ZERO for key in months}
    for item in entries:
        key = _month_key(item)
        if key not in income:
            continue
        if item.is_income:
            income[key] += item.value
        else:
            expense[key] += item.value
    return [
        MonthlyTrendPoint(
            year=year,
            month=month,
            income=income[(year, month)],
            expense=expense[(year, month)],
        )
        for year, month in months
    ]


def compute_category_trends(
    entries: Iterable[NormalizedEntry],
) -> list[CategoryTrend]:
    """Return expense amounts per category for each month with expenses."""
    by_month: dict[tuple[int, int], dict[str, Decimal]] = {}
    for item in entries:
        if not item.is_expense:
            continue
        amounts = by_month.setdefault(_month_key(item), {})
        name = item.entry.category_name or UNCATEGORIZED_LABEL
        amounts[name] = amounts.get(name, ZERO) + item.value
    return [
        CategoryTrend(year=year, month=month, amounts=amounts)
        for (year, month), amounts in sorted(by_month.items())
    ]


def compute_weekly_rhythm(
    entries: Iterable[NormalizedEntry],
) -> list[WeeklyRhythmPoint]:
    """Sum expenses per weekday, index 1 (Monday) to 7 (Sunday)."""
    totals = {index: ZERO for index in range(1, 8)}
    for item in entries:
        if item.is_expense:
            day = ensure_utc(item.entry.timestamp).isoweekday()
            totals[day] += item.value
    return [
        WeeklyRhythmPoint(
            day_index=index,
            day_name=WEEKDAY_NAMES[index - 1],
            amount=totals[index],
        )
        for index in range(1, 8)
    ]


def compute_income_sources(
    entries: Iterable[NormalizedEntry],
    palette: Sequence[str] = INCOME_SOURCE_PALETTE,
) -> list[IncomeSourceShare]:
    """Group income by source with percentages and rank-cycled colors."""
    totals: dict[str, Decimal] = {}
    for item in entries:
        if not item.is_income:
            continue
        name = item.entry.source_name or OTHER_LABEL
        totals[name] = totals.get(name, ZERO) + item.value
    grand_total = _sum(totals.values())
    ranked = sorted(totals.items(), key=lambda kv: (-kv[1], kv[0]))
    return [
        IncomeSourceShare(
            source=name,
            amount=amount,
            percentage=percentage(amount, grand_total),
            color=palette[rank % len(palette)],
        )
        for rank, (name, amount) in enumerate(ranked)
    ]


def compute_expense_structure(
    rules: Iterable[NormalizedRule],
    flows: FlowMetrics,
) -> ExpenseStructure:
    """Split monthly spending into fixed, variable and savings parts.

    Fixed costs are the normalized amounts of every active recurring rule,
    taken as they are stored.
    """
    fixed = _sum(item.value for item in rules if item.rule.is_active)
    income = flows.average_monthly_income
    variable = max(flows.monthly_burn_rate - fixed, ZERO)
    savings = max(income - flows.monthly_burn_rate, ZERO)
    locked_ratio = min(max(safe_ratio(fixed, income), ZERO), Decimal("1"))
    return ExpenseStructure(
        fixed_costs=fixed,
        variable_costs=variable,
        savings=savings,
        flexibility_score=int((Decimal("1") - locked_ratio) * 100),
    )


def compute_month_summary(
    entries: Iterable[NormalizedEntry],
    as_of: datetime,
) -> MonthSummary:
    """Return month-to-date income, expense and net flow per source."""
    current = (ensure_utc(as_of).year, ensure_utc(as_of).month)
    income = ZERO
    expense = ZERO
    flows: dict[str, Decimal] = {}
    for item in entries:
        if _month_key(item) != current:
            continue
        name = item.entry.source_name or OTHER_LABEL
        signed = item.value if item.is_income else -item.value
        flows[name] = flows.get(name, ZERO) + signed
        if item.is_income:
            income += item.value
        else:
            expense += item.value
    return MonthSummary(
        income=income,
        expense=expense,
        source_flows=[
            SourceFlow(source=name, net_flow=amount)
            for name, amount in sorted(flows.items())
        ],
    )


def aggregate(
    normalized: NormalizedSet,
    as_of: datetime,
    *,
    flow_months: int = DEFAULT_FLOW_MONTHS,
    history_months: int = DEFAULT_HISTORY_MONTHS,
) -> Aggregates:
    """Compute every aggregate of a normalized set.

    Args:
        normalized: Base-currency records for one account.
        as_of: Reference instant (UTC) for trailing windows.
        flow_months: Window for burn rate and savings rate.
        history_months: Month-aligned window for trends and groupings.

    Returns:
        Aggregates: Totals, flow metrics, breakdowns and series.
    """
    totals = compute_totals(normalized)
    flows = compute_flow_metrics(
        normalized.entries,
        totals.total_assets,
        as_of,
        flow_months,
    )
    history = _entries_between(
        normalized.entries,
        history_window_start(ensure_utc(as_of), history_months),
        ensure_utc(as_of),
    )
    allocation = compute_allocation(normalized.holdings)
    return Aggregates(
        currency_code=normalized.currency_code,
        totals=totals,
        flows=flows,
        performance=compute_performance(normalized.holdings),
        holdings=compute_holding_valuations(normalized.holdings),
        allocation=allocation,
        allocation_with_liabilities=inject_synthetic_buckets(
            allocation,
            totals.cash_balance,
            totals.total_debts,
        ),
        top_expense_categories=compute_top_expense_categories(history),
        monthly_trend=compute_monthly_trend(history, as_of, history_months),
        category_trends=compute_category_trends(history),
        weekly_rhythm=compute_weekly_rhythm(history),
        income_sources=compute_income_sources(history),
        expense_structure=compute_expense_structure(normalized.rules, flows),
        month_summary=compute_month_summary(normalized.entries, as_of),
    )


__all__ = [
    "history_window_start",
    "compute_totals",
    "compute_flow_metrics",
    "compute_holding_valuations",
    "compute_performance",
    "compute_allocation",
    "inject_synthetic_buckets",
    "compute_top_expense_categories",
    "compute_monthly_trend",
    "compute_category_trends",
    "compute_weekly_rhythm",
    "compute_income_sources",
    "compute_expense_structure",
    "compute_month_summary",
    "aggregate",
]
