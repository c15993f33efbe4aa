"""Use case to build a financial report for one account."""

from collections.abc import Callable
from datetime import datetime

from src.application.ports.finance_store import FinanceStorePort
from src.application.ports.quote_provider import QuoteProviderPort
from src.domain.constants import (
    DEFAULT_BASE_CURRENCY,
    DEFAULT_FLOW_MONTHS,
    DEFAULT_HISTORY_MONTHS,
    DEFAULT_PROJECTION_MONTHS,
    DEFAULT_UPCOMING_WINDOW_DAYS,
)
from src.domain.errors import (
    QuoteProviderError,
    ReportErrorKind,
    ReportWarning,
    StoreError,
)
from src.domain.models import (
    Aggregates,
    AssetHolding,
    DebtObligation,
    LedgerEntry,
    MarketQuote,
    RecurringRule,
    Report,
    ReportResult,
)
from src.domain.services.finance import aggregate
from src.domain.services.fx import RateResolver, collect_quote_symbols
from src.domain.services.health import financial_identity, score_health
from src.domain.services.normalization import NormalizedSet, normalize
from src.domain.services.projection import project_wealth
from src.domain.services.recurring import upcoming_obligations
from src.infrastructure.logging.logger import get_app_logger
from src.utils.date_utils import ensure_utc, utc_now
from src.utils.decimal_utils import quantize


class GetFinancialReportUseCase:
    """Compute a fresh, unpersisted report for one account.

    The use case reads the account's records, issues a single batch quote
    lookup, then runs normalization, aggregation, scoring, projection and
    upcoming-obligation scheduling. Store failures are returned as error
    kinds; quote failures only add warnings.
    """

    def __init__(
        self,
        store: FinanceStorePort,
        quote_provider: QuoteProviderPort,
        logger=None,
        base_currency: str = DEFAULT_BASE_CURRENCY,
        flow_months: int = DEFAULT_FLOW_MONTHS,
        history_months: int = DEFAULT_HISTORY_MONTHS,
        projection_months: int = DEFAULT_PROJECTION_MONTHS,
        upcoming_window_days: int = DEFAULT_UPCOMING_WINDOW_DAYS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the use case.

        Args:
            store: Port providing ledger records for an account.
            quote_provider: Port returning market quotes in one batch.
            logger: Optional logger compatible with logging.Logger-like API.
            base_currency: Currency every figure is expressed in.
            flow_months: Trailing window for burn and savings rates.
            history_months: Window for trends and groupings.
            projection_months: Number of projected months.
            upcoming_window_days: Horizon of the upcoming obligations list.
            clock: Callable returning the current UTC time.
        """
        self._store = store
        self._quote_provider = quote_provider
        self._logger = logger or get_app_logger()
        self._base_currency = base_currency.strip().upper()
        self._flow_months = flow_months
        self._history_months = history_months
        self._projection_months = projection_months
        self._upcoming_window_days = upcoming_window_days
        self._clock = clock

    def execute(
        self,
        account_id: int | None,
        as_of: datetime | None = None,
    ) -> ReportResult:
        """Return the report for an account, or the reason it failed.

        Args:
            account_id: Account whose records are reported.
            as_of: Optional reference instant; defaults to now (UTC).

        Returns:
            ReportResult: Report on success, error kind otherwise.
        """
        if account_id is None:
            self._logger.warning("Report requested without an account id")
            return ReportResult(error=ReportErrorKind.NO_ACCOUNT_CONTEXT)

        reference = ensure_utc(as_of or self._clock())
        try:
            entries = self._store.list_ledger_entries(account_id, None)
            holdings = self._store.list_holdings(account_id)
            debts = self._store.list_debts(account_id)
            rules = self._store.list_active_recurring_rules(account_id)
        except StoreError as exc:
            self._logger.error(
                f"Ledger store unavailable for account {account_id}: {exc}"
            )
            return ReportResult(
                error=ReportErrorKind.STORE_UNAVAILABLE,
                detail=str(exc),
            )

        warnings: list[ReportWarning] = []
        quotes = self._fetch_quotes(
            entries, holdings, debts, rules, warnings
        )
        resolver = RateResolver(quotes, self._base_currency, self._logger)
        normalized = normalize(
            entries,
            holdings,
            debts,
            resolver,
            rules=rules,
            logger=self._logger,
        )
        if normalized.unresolved_codes:
            warnings.append(ReportWarning.UNRESOLVED_CODES)

        aggregates = aggregate(
            normalized,
            reference,
            flow_months=self._flow_months,
            history_months=self._history_months,
        )
        report = self._build_report(
            account_id, reference, normalized, aggregates, warnings
        )
        self._logger.info(
            f"Report built for account {account_id}: "
            f"net_worth={report.net_worth} {report.currency_code}, "
            f"identity={report.identity}, warnings={len(warnings)}"
        )
        return ReportResult(report=report)

    def _fetch_quotes(
        self,
        entries: list[LedgerEntry],
        holdings: list[AssetHolding],
        debts: list[DebtObligation],
        rules: list[RecurringRule],
        warnings: list[ReportWarning],
    ) -> dict[str, MarketQuote]:
        codes = [entry.instrument_code for entry in entries]
        for holding in holdings:
            codes.extend([holding.market_symbol, holding.instrument_code])
        codes.extend(debt.currency_code for debt in debts)
        codes.extend(rule.instrument_code for rule in rules)

        symbols = collect_quote_symbols(codes, self._base_currency)
        if not symbols:
            return {}
        try:
            quotes = self._quote_provider.get_quotes(symbols)
        except QuoteProviderError as exc:
            self._logger.warning(
                f"Quote batch of {len(symbols)} symbols failed: {exc}; "
                "falling back to static rates"
            )
            warnings.append(ReportWarning.QUOTE_BATCH_FAILED)
            return {}
        missing = [symbol for symbol in symbols if symbol not in quotes]
        if missing:
            self._logger.warning(
                f"Quotes unavailable for {', '.join(missing)}"
            )
        return quotes

    def _build_report(
        self,
        account_id: int,
        reference: datetime,
        normalized: NormalizedSet,
        aggregates: Aggregates,
        warnings: list[ReportWarning],
    ) -> Report:
        totals = aggregates.totals
        flows = aggregates.flows
        health = score_health(aggregates)
        today = reference.date()
        return Report(
            account_id=account_id,
            currency_code=aggregates.currency_code,
            generated_on=today,
            total_assets=totals.total_assets,
            total_debts=totals.total_debts,
            cash_balance=totals.cash_balance,
            net_worth=totals.net_worth,
            monthly_burn_rate=flows.monthly_burn_rate,
            savings_rate=flows.savings_rate,
            survival_months=quantize(flows.survival_months, 1),
            performance=aggregates.performance,
            holdings=aggregates.holdings,
            allocation=aggregates.allocation,
            allocation_with_liabilities=aggregates.allocation_with_liabilities,
            top_expense_categories=aggregates.top_expense_categories,
            monthly_trend=aggregates.monthly_trend,
            category_trends=aggregates.category_trends,
            weekly_rhythm=aggregates.weekly_rhythm,
            income_sources=aggregates.income_sources,
            expense_structure=aggregates.expense_structure,
            health=health,
            identity=financial_identity(health),
            projection=project_wealth(
                totals.net_worth,
                aggregates.expense_structure.savings,
                today,
                self._projection_months,
            ),
            upcoming=upcoming_obligations(
                (item.rule for item in normalized.rules),
                today,
                {item.rule.rule_id: item.value for item in normalized.rules},
                self._upcoming_window_days,
            ),
            month_summary=aggregates.month_summary,
            warnings=warnings,
            unresolved_codes=list(normalized.unresolved_codes),
        )


__all__ = ["GetFinancialReportUseCase"]
