"""CLI adapter printing a financial report for one account."""

import argparse
from datetime import datetime, time, timezone

from src.domain.models import Report
from src.infrastructure.container import build_report_use_case
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.settings import FinanceSettings


def _parse_as_of(value: str | None, logger) -> datetime | None:
    """Parse an ISO date string into an end-of-day UTC instant.

    Args:
        value: Date string in YYYY-MM-DD format.
        logger: Logger used for warnings.

    Returns:
        datetime | None: Parsed instant or None when missing or invalid.
    """
    if not value:
        return None
    try:
        day = datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        logger.warning(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        )
        return None
    return datetime.combine(day, time.max, tzinfo=timezone.utc)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Print the financial report of an account."
    )
    parser.add_argument("--account", type=int, default=None)
    parser.add_argument("--as-of", dest="as_of", default=None)
    return parser


def format_report(report: Report) -> list[str]:
    """Render the headline figures of a report as printable lines."""
    currency = report.currency_code
    lines = [
        f"Report for account {report.account_id} on {report.generated_on} "
        f"({currency})",
        f"Net worth: {report.net_worth:,.2f}",
        f"Assets: {report.total_assets:,.2f}, debts: "
        f"{report.total_debts:,.2f}, cash: {report.cash_balance:,.2f}",
        f"Unrealized P/L: {report.performance.profit_loss:,.2f} "
        f"({report.performance.profit_loss_percent:.2f}%)",
        f"Monthly burn: {report.monthly_burn_rate:,.2f}, savings rate: "
        f"{report.savings_rate:.2f}%, runway: {report.survival_months} months",
        f"Identity: {report.identity} (liquidity={report.health.liquidity}, "
        f"solvency={report.health.solvency}, growth={report.health.growth}, "
        f"diversification={report.health.diversification}, "
        f"stability={report.health.stability})",
    ]
    for item in report.allocation:
        lines.append(
            f"  {item.category}: {item.value:,.2f} ({item.percentage:.1f}%)"
        )
    for item in report.upcoming:
        lines.append(
            f"  due {item.due_date} ({item.days_left}d): {item.title} "
            f"{item.amount:,.2f}"
        )
    if report.warnings:
        warnings = ", ".join(warning.value for warning in report.warnings)
        lines.append(f"Warnings: {warnings}")
    return lines


def main(argv: list[str] | None = None) -> None:
    """Compute and print the report for the requested account."""
    args = _build_parser().parse_args(argv)
    logger = get_app_logger()
    settings = FinanceSettings.from_env()
    account_id = (
        args.account
        if args.account is not None
        else settings.default_account_id
    )

    use_case = build_report_use_case(settings=settings)
    result = use_case.execute(account_id, _parse_as_of(args.as_of, logger))
    if not result.ok:
        detail = f": {result.detail}" if result.detail else ""
        print(f"Report unavailable ({result.error.value}){detail}")
        return
    for line in format_report(result.report):
        print(line)


if __name__ == "__main__":  # pragma: no cover
    main()
