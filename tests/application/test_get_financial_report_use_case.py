"""Tests for the financial report use case."""

from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

from src.application.use_cases.get_financial_report import (
    GetFinancialReportUseCase,
)
from src.domain.errors import (
    QuoteProviderError,
    ReportErrorKind,
    ReportWarning,
    StoreError,
)
from src.domain.models import (
    AssetHolding,
    FlowDirection,
    Frequency,
    LedgerEntry,
    MarketQuote,
    RecurringRule,
)

AS_OF = datetime(2024, 6, 15, 12, tzinfo=timezone.utc)


def _entry(direction: FlowDirection, amount: str, day: int) -> LedgerEntry:
    return LedgerEntry(
        account_id=1,
        instrument_code="TRY",
        category_id=None,
        source_id=None,
        direction=direction,
        amount=Decimal(amount),
        title="",
        timestamp=datetime(2024, 6, day, tzinfo=timezone.utc),
        category_name="Groceries",
        source_name="Bank",
    )


def _store(entries=None, holdings=None, rules=None) -> MagicMock:
    store = MagicMock()
    store.list_ledger_entries.return_value = entries or []
    store.list_holdings.return_value = holdings or []
    store.list_debts.return_value = []
    store.list_active_recurring_rules.return_value = rules or []
    return store


def _scenario_store() -> MagicMock:
    return _store(
        entries=[
            _entry(FlowDirection.INCOME, "1000", 3),
            _entry(FlowDirection.EXPENSE, "600", 5),
        ],
        holdings=[
            AssetHolding(
                account_id=1,
                instrument_code="USD",
                quantity=Decimal("10"),
                average_cost=Decimal("40"),
                category_label="Cash",
            )
        ],
        rules=[
            RecurringRule(
                rule_id=9,
                account_id=1,
                title="Rent",
                amount=Decimal("10"),
                category_id=None,
                source_id=None,
                instrument_code="USD",
                direction=FlowDirection.EXPENSE,
                frequency=Frequency.MONTHLY,
                anchor_day=20,
            )
        ],
    )


def test_execute_builds_report_with_single_quote_batch():
    """The use case should fetch quotes once and assemble the report."""
    store = _scenario_store()
    provider = MagicMock()
    provider.get_quotes.return_value = {
        "USDTRY=X": MarketQuote(
            "USDTRY=X", Decimal("50"), "TRY", Decimal("0.5"), AS_OF
        ),
    }
    logger = MagicMock()
    use_case = GetFinancialReportUseCase(store, provider, logger=logger)

    result = use_case.execute(1, AS_OF)

    assert result.ok
    report = result.report
    provider.get_quotes.assert_called_once()
    requested = provider.get_quotes.call_args.args[0]
    assert requested == ["USDTRY=X", "EURTRY=X", "XAUTRY=X"]
    store.list_ledger_entries.assert_called_once_with(1, None)
    assert report.total_assets == Decimal("500")
    assert report.performance.profit_loss == Decimal("100")
    assert report.monthly_burn_rate == Decimal("100")
    assert report.savings_rate == Decimal("40.00")
    assert report.survival_months == Decimal("4.0")
    assert report.health.growth == 100
    assert report.net_worth == Decimal("900")
    assert report.generated_on == date(2024, 6, 15)
    assert report.warnings == []
    assert report.upcoming[0].amount == Decimal("500")
    assert report.upcoming[0].days_left == 5
    assert len(report.projection) == 13
    savings = report.expense_structure.savings
    assert savings == Decimal("1000") / 6 - Decimal("100")
    assert report.projection[1].amount == Decimal("900") + savings


def test_projection_stays_flat_when_spending_exceeds_income():
    """Overspending should not project a declining net worth."""
    store = _store(entries=[_entry(FlowDirection.EXPENSE, "600", 5)])
    provider = MagicMock()
    provider.get_quotes.return_value = {}
    use_case = GetFinancialReportUseCase(store, provider, logger=MagicMock())

    report = use_case.execute(1, AS_OF).report

    assert report.expense_structure.savings == Decimal("0")
    amounts = {point.amount for point in report.projection}
    assert amounts == {report.net_worth}


def test_quote_failure_degrades_to_fallback_rates():
    """A failed quote batch should add a warning, not fail the report."""
    store = _scenario_store()
    provider = MagicMock()
    provider.get_quotes.side_effect = QuoteProviderError("timeout")
    logger = MagicMock()
    use_case = GetFinancialReportUseCase(store, provider, logger=logger)

    result = use_case.execute(1, AS_OF)

    assert result.ok
    assert result.report.warnings == [ReportWarning.QUOTE_BATCH_FAILED]
    assert result.report.total_assets == Decimal("340")
    logger.warning.assert_called()


def test_unresolved_codes_are_reported():
    """Codes without any rate should be listed on the report."""
    store = _store(
        holdings=[
            AssetHolding(
                account_id=1,
                instrument_code="ZZZ",
                quantity=Decimal("2"),
                average_cost=Decimal("1"),
                category_label="",
            )
        ]
    )
    provider = MagicMock()
    provider.get_quotes.return_value = {}
    use_case = GetFinancialReportUseCase(store, provider, logger=MagicMock())

    result = use_case.execute(1, AS_OF)

    assert result.report.unresolved_codes == ["ZZZ"]
    assert result.report.warnings == [ReportWarning.UNRESOLVED_CODES]
    assert result.report.total_assets == Decimal("2")


def test_store_failure_returns_error_kind():
    """Store failures should be returned, not raised."""
    store = _store()
    store.list_holdings.side_effect = StoreError("db down")
    provider = MagicMock()
    logger = MagicMock()
    use_case = GetFinancialReportUseCase(store, provider, logger=logger)

    result = use_case.execute(1, AS_OF)

    assert result.ok is False
    assert result.error == ReportErrorKind.STORE_UNAVAILABLE
    assert result.detail == "db down"
    provider.get_quotes.assert_not_called()
    logger.error.assert_called_once()


def test_missing_account_returns_error_kind():
    """A request without an account should not touch the store."""
    store = _store()
    use_case = GetFinancialReportUseCase(store, MagicMock(), logger=MagicMock())

    result = use_case.execute(None)

    assert result.error == ReportErrorKind.NO_ACCOUNT_CONTEXT
    store.list_ledger_entries.assert_not_called()


def test_default_reference_time_comes_from_clock():
    """Without as_of the injected clock should set the report date."""
    use_case = GetFinancialReportUseCase(
        _store(),
        MagicMock(get_quotes=MagicMock(return_value={})),
        logger=MagicMock(),
        clock=lambda: AS_OF,
    )

    result = use_case.execute(1)

    assert result.report.generated_on == date(2024, 6, 15)
    assert result.report.survival_months == Decimal("999")
    assert result.report.health.liquidity == 100
