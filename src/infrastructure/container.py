"""Composition root for wiring infrastructure adapters."""

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.finance_store import FinanceStorePort
from src.application.ports.quote_provider import QuoteProviderPort
from src.application.use_cases.get_financial_report import (
    GetFinancialReportUseCase,
)
from src.application.use_cases.materialize_recurring import (
    MaterializeRecurringUseCase,
)
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.finance_repository import SqlAlchemyFinanceRepository
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.quote_cache import CachingQuoteProvider, TTLQuoteCache
from src.infrastructure.scheduler import PeriodicTask
from src.infrastructure.settings import FinanceSettings
from src.infrastructure.yahoo_quote_provider import YahooQuoteProvider

_quote_cache: TTLQuoteCache | None = None


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_finance_repository(
    db_port: DatabaseEnginePort | None = None,
) -> SqlAlchemyFinanceRepository:
    """Return the ledger store repository."""
    resolved_db = db_port or build_database_adapter()
    return SqlAlchemyFinanceRepository(resolved_db, logger=get_app_logger())


def build_quote_cache(settings: FinanceSettings | None = None) -> TTLQuoteCache:
    """Return the process-wide quote cache."""
    global _quote_cache
    if _quote_cache is None:
        resolved = settings or FinanceSettings.from_env()
        _quote_cache = TTLQuoteCache(resolved.quote_cache_ttl_seconds)
    return _quote_cache


def build_quote_provider(
    settings: FinanceSettings | None = None,
) -> QuoteProviderPort:
    """Return the cached HTTP quote provider."""
    resolved = settings or FinanceSettings.from_env()
    upstream = YahooQuoteProvider(
        resolved.quote_provider_url,
        timeout=resolved.quote_timeout_seconds,
        logger=get_app_logger(),
    )
    return CachingQuoteProvider(
        upstream,
        cache=build_quote_cache(resolved),
        logger=get_app_logger(),
        wait_timeout=resolved.quote_timeout_seconds,
    )


def build_report_use_case(
    store: FinanceStorePort | None = None,
    quote_provider: QuoteProviderPort | None = None,
    settings: FinanceSettings | None = None,
) -> GetFinancialReportUseCase:
    """Return the report use case wired with configured adapters."""
    resolved = settings or FinanceSettings.from_env()
    return GetFinancialReportUseCase(
        store or build_finance_repository(),
        quote_provider or build_quote_provider(resolved),
        logger=get_app_logger(),
        base_currency=resolved.base_currency,
        flow_months=resolved.flow_months,
        history_months=resolved.history_months,
        projection_months=resolved.projection_months,
        upcoming_window_days=resolved.upcoming_window_days,
    )


def build_materialize_use_case(
    store: FinanceStorePort | None = None,
) -> MaterializeRecurringUseCase:
    """Return the recurring materialization use case."""
    return MaterializeRecurringUseCase(
        store or build_finance_repository(),
        logger=get_app_logger(),
    )


def build_recurring_task(
    use_case: MaterializeRecurringUseCase | None = None,
    settings: FinanceSettings | None = None,
) -> PeriodicTask:
    """Return the periodic task running recurring materialization."""
    resolved = settings or FinanceSettings.from_env()
    materializer = use_case or build_materialize_use_case()
    return PeriodicTask(
        materializer.run,
        interval_seconds=resolved.recurring_interval_hours * 3600,
        name="recurring-worker",
        logger=get_app_logger(),
    )


__all__ = [
    "build_database_adapter",
    "build_finance_repository",
    "build_quote_cache",
    "build_quote_provider",
    "build_report_use_case",
    "build_materialize_use_case",
    "build_recurring_task",
]
