"""Streamlit dashboard entry point."""

from collections.abc import Sequence
from datetime import date
from decimal import Decimal

import streamlit as st
import altair as alt

from src.domain.constants import DEFAULT_ALLOCATION_COLOR, OTHER_LABEL
from src.domain.models import (
    AllocationSlice,
    MonthlyTrendPoint,
    ProjectionPoint,
    Report,
    ReportResult,
    UpcomingObligation,
)
from src.infrastructure.container import build_report_use_case
from src.infrastructure.settings import FinanceSettings

DEFAULT_ACCOUNT_ID = 1


def _check_altair_dependencies() -> tuple[bool, str | None]:
    """Check that the numpy/pandas stack Altair relies on imports cleanly.

    Returns:
        Tuple with an ok flag and an error message when not ok.
    """
    try:
        import numpy
        import pandas
    except ImportError as exc:
        return False, f"Altair dependencies are missing: {exc}"
    if not hasattr(numpy, "ndarray"):
        return False, "numpy import is incomplete (ndarray missing)."
    if not hasattr(pandas, "Timestamp"):
        return False, "pandas import is incomplete (Timestamp missing)."
    return True, None


def _fetch_report(account_id: int, as_of: date) -> ReportResult:
    """Build the report for an account with the configured adapters."""
    use_case = build_report_use_case()
    return use_case.execute(account_id)


@st.cache_data(show_spinner=False, ttl=300)
def _load_report(
    account_id: int,
    as_of: date,
    schema_version: int = 1,
) -> ReportResult:
    """Cached wrapper around _fetch_report for Streamlit sessions."""
    _ = schema_version
    return _fetch_report(account_id, as_of)


def _format_currency(value: Decimal, currency_code: str) -> str:
    """Format currency values for display."""
    return f"{value:,.2f} {currency_code}"


def _format_percent(value: Decimal) -> str:
    """Format percentages for display."""
    sign = "+" if value > 0 else ""
    return f"{sign}{value:,.2f}%"


def _prepare_donut_chart_data(
    slices: Sequence[AllocationSlice],
    currency_code: str,
    max_categories: int = 6,
) -> tuple[list[dict[str, str | float]], Decimal]:
    """Prepare donut chart data with a Top-N + Other grouping.

    Args:
        slices: Allocation slices sorted or unsorted.
        currency_code: Currency used in labels.
        max_categories: Maximum categories to keep before grouping into Other.

    Returns:
        Tuple with Altair-ready chart data and the total amount.
    """
    sorted_items = sorted(slices, key=lambda item: item.value, reverse=True)
    top_items = sorted_items[:max_categories]
    other_items = sorted_items[max_categories:]
    other_amount = sum(
        (item.value for item in other_items),
        start=Decimal("0"),
    )
    if other_items and other_amount != 0:
        top_items = [
            *top_items,
            AllocationSlice(
                category=OTHER_LABEL,
                value=other_amount,
                percentage=Decimal("0"),
                color=DEFAULT_ALLOCATION_COLOR,
            ),
        ]
    total_amount = sum(
        (item.value for item in sorted_items),
        start=Decimal("0"),
    )
    data: list[dict[str, str | float]] = []
    for item in top_items:
        share = (
            (item.value / total_amount) * Decimal("100")
            if total_amount
            else Decimal("0")
        )
        data.append(
            {
                "category": item.category,
                "amount": float(item.value),
                "color": item.color,
                "amount_label": _format_currency(item.value, currency_code),
                "share_label": f"{share:.1f}%",
            }
        )
    return data, total_amount


def _prepare_trend_data(
    points: Sequence[MonthlyTrendPoint],
) -> list[dict[str, str | float]]:
    """Flatten the monthly trend into one row per month and direction."""
    data: list[dict[str, str | float]] = []
    for order, point in enumerate(points):
        for kind, amount in (("Income", point.income), ("Expense", point.expense)):
            data.append(
                {
                    "month": point.label,
                    "order": order,
                    "kind": kind,
                    "amount": float(amount),
                }
            )
    return data


def _prepare_projection_data(
    points: Sequence[ProjectionPoint],
) -> list[dict[str, str | float | bool]]:
    return [
        {
            "label": point.label,
            "order": index,
            "amount": float(point.amount),
            "projected": point.is_projected,
        }
        for index, point in enumerate(points)
    ]


def _prepare_upcoming_rows(
    upcoming: Sequence[UpcomingObligation],
    currency_code: str,
) -> list[dict[str, str | int]]:
    return [
        {
            "Title": item.title,
            "Due": item.due_date.isoformat(),
            "Days left": item.days_left,
            "Direction": item.direction.capitalize(),
            "Amount": _format_currency(item.amount, currency_code),
        }
        for item in upcoming
    ]


def _render_allocation_chart(
    slices: Sequence[AllocationSlice],
    currency_code: str,
    title: str,
    max_categories: int = 6,
    chart_size: int = 300,
) -> None:
    """Render a donut chart of holding values by allocation class.

    Args:
        slices: Allocation slices to chart.
        currency_code: Currency used in labels.
        title: Chart title to display above the donut.
        max_categories: Maximum categories before grouping into Other.
        chart_size: Width/height for the chart canvas.
    """
    if not slices:
        st.info("No holdings available for the chart.")
        return
    data, _ = _prepare_donut_chart_data(
        slices,
        currency_code,
        max_categories=max_categories,
    )
    hover = alt.selection_point(
        name="hover",
        fields=["category"],
        on="view:mouseover",
        clear="view:mouseout",
        empty=False,
    )
    base = alt.Chart(alt.Data(values=data)).mark_arc(
        innerRadius=chart_size * 0.4,
        cornerRadius=8,
        padAngle=0.02,
        stroke="#0f1115",
        strokeWidth=2,
    ).encode(
        theta=alt.Theta("amount:Q"),
        color=alt.Color(
            "category:N",
            scale=alt.Scale(
                domain=[row["category"] for row in data],
                range=[row["color"] for row in data],
            ),
            legend=alt.Legend(orient="bottom", title=None, columns=3),
        ),
        opacity=alt.condition(hover, alt.value(1.0), alt.value(0.25)),
        order=alt.Order("amount:Q", sort="descending"),
        tooltip=[
            alt.Tooltip("category:N"),
            alt.Tooltip("amount_label:N"),
            alt.Tooltip("share_label:N"),
        ],
    )
    hover_text = alt.Chart(alt.Data(values=data)).transform_filter(
        hover
    ).mark_text(
        align="center",
        baseline="middle",
        fontSize=16,
        fontWeight="bold",
        color="#f5f7ff",
    ).encode(text="amount_label:N")

    chart = alt.layer(base, hover_text).add_params(hover).properties(
        width=chart_size,
        height=chart_size,
    ).configure_view(stroke=None)
    st.subheader(title)
    st.altair_chart(chart, width="stretch")


def _render_trend_chart(points: Sequence[MonthlyTrendPoint]) -> None:
    st.subheader("Monthly Trend")
    data = _prepare_trend_data(points)
    chart = alt.Chart(alt.Data(values=data)).mark_bar().encode(
        x=alt.X("month:N", sort=alt.SortField("order"), title=None),
        xOffset="kind:N",
        y=alt.Y("amount:Q", title=None),
        color=alt.Color(
            "kind:N",
            scale=alt.Scale(
                domain=["Income", "Expense"],
                range=["#10b981", "#ef4444"],
            ),
            legend=alt.Legend(orient="bottom", title=None),
        ),
        tooltip=["month:N", "kind:N", "amount:Q"],
    )
    st.altair_chart(chart, width="stretch")


def _render_projection_chart(points: Sequence[ProjectionPoint]) -> None:
    st.subheader("Wealth Projection")
    data = _prepare_projection_data(points)
    chart = alt.Chart(alt.Data(values=data)).mark_line(point=True).encode(
        x=alt.X("label:N", sort=alt.SortField("order"), title=None),
        y=alt.Y("amount:Q", title=None),
        strokeDash=alt.StrokeDash("projected:N", legend=None),
        tooltip=["label:N", "amount:Q"],
    )
    st.altair_chart(chart, width="stretch")


def _render_health(report: Report) -> None:
    st.subheader(f"Financial Health: {report.identity}")
    scores = report.health
    columns = st.columns(5)
    for column, (label, value) in zip(
        columns,
        (
            ("Liquidity", scores.liquidity),
            ("Solvency", scores.solvency),
            ("Growth", scores.growth),
            ("Diversification", scores.diversification),
            ("Stability", scores.stability),
        ),
    ):
        column.metric(label, f"{value}/100")


def _render_headline(report: Report) -> None:
    currency = report.currency_code
    net_col, assets_col, debts_col, cash_col = st.columns(4)
    net_col.metric("Net Worth", _format_currency(report.net_worth, currency))
    assets_col.metric(
        "Assets",
        _format_currency(report.total_assets, currency),
        _format_percent(report.performance.profit_loss_percent),
    )
    debts_col.metric(
        "Debts",
        _format_currency(report.total_debts, currency),
        delta_color="inverse",
    )
    cash_col.metric("Cash", _format_currency(report.cash_balance, currency))

    burn_col, savings_col, runway_col = st.columns(3)
    burn_col.metric(
        "Monthly Burn",
        _format_currency(report.monthly_burn_rate, currency),
    )
    savings_col.metric("Savings Rate", f"{report.savings_rate:.2f}%")
    runway_col.metric("Runway", f"{report.survival_months} months")


def _render_report(report: Report) -> None:
    """Render every section of a report."""
    if report.warnings:
        codes = ", ".join(report.unresolved_codes) or "none"
        st.warning(
            "Some prices could not be resolved; values use fallback rates "
            f"(unresolved: {codes})."
        )
    _render_headline(report)
    chart_left, chart_right = st.columns(2)
    with chart_left:
        _render_allocation_chart(
            report.allocation,
            report.currency_code,
            "Allocation",
            chart_size=360,
        )
    with chart_right:
        _render_allocation_chart(
            report.allocation_with_liabilities,
            report.currency_code,
            "Allocation incl. Cash and Debt",
            chart_size=360,
        )
    _render_trend_chart(report.monthly_trend)
    _render_projection_chart(report.projection)
    _render_health(report)

    st.subheader("Upcoming Obligations")
    rows = _prepare_upcoming_rows(report.upcoming, report.currency_code)
    if rows:
        st.dataframe(rows, width="stretch", hide_index=True)
    else:
        st.caption("Nothing due in the next 30 days.")


def main() -> None:
    """Render the Streamlit app."""
    st.set_page_config(page_title="Finance Dashboard", layout="wide")
    st.title("Finance Dashboard")

    ok, message = _check_altair_dependencies()
    if not ok:
        st.error(message)
        return

    settings = FinanceSettings.from_env()
    account_id = int(
        st.sidebar.number_input(
            "Account",
            min_value=1,
            value=settings.default_account_id or DEFAULT_ACCOUNT_ID,
            step=1,
        )
    )
    result = _load_report(account_id, date.today(), schema_version=1)
    if not result.ok:
        st.error(f"Report unavailable: {result.error.value}")
        return
    _render_report(result.report)


if __name__ == "__main__":  # pragma: no cover
    main()
