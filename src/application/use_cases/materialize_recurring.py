"""Use case to materialize due recurring rules into ledger entries."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from src.application.ports.finance_store import FinanceStorePort
from src.domain.errors import StoreError
from src.domain.services.recurring import materialize_due
from src.infrastructure.logging.logger import get_app_logger
from src.utils.date_utils import ensure_utc, utc_now


@dataclass(frozen=True)
class MaterializationResult:
    """Result of one materialization pass.

    Attributes:
        created: Rule ids that produced a ledger entry.
        skipped: Rule ids already stamped for the day by another writer.
        failed: Rule ids whose write failed; they stay eligible for retry.
    """

    created: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)


class MaterializeRecurringUseCase:
    """Turn rules due today into ledger entries, at most once per day."""

    def __init__(
        self,
        store: FinanceStorePort,
        logger=None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the use case.

        Args:
            store: Port providing rules and accepting new entries.
            logger: Optional logger compatible with logging.Logger-like API.
            clock: Callable returning the current UTC time.
        """
        self._store = store
        self._logger = logger or get_app_logger()
        self._clock = clock

    def run(self, now: datetime | None = None) -> MaterializationResult:
        """Execute one pass over all active rules.

        Args:
            now: Optional reference instant; defaults to the clock.

        Returns:
            MaterializationResult: Created, skipped and failed rule ids.
        """
        reference = ensure_utc(now or self._clock())
        today = reference.date()
        result = MaterializationResult()
        try:
            rules = self._store.list_active_recurring_rules()
        except StoreError as exc:
            self._logger.error(f"Could not load recurring rules: {exc}")
            return result

        for item in materialize_due(rules, reference):
            rule_id = item.rule.rule_id
            try:
                recorded = self._store.record_materialization(
                    item.rule, item.entry, today
                )
            except StoreError as exc:
                self._logger.error(
                    f"Materialization failed for rule {rule_id}: {exc}"
                )
                result.failed.append(rule_id)
                continue
            if recorded:
                result.created.append(rule_id)
            else:
                self._logger.warning(
                    f"Rule {rule_id} already materialized on {today}; skipped"
                )
                result.skipped.append(rule_id)

        self._logger.info(
            f"Recurring pass for {today}: created={len(result.created)}, "
            f"skipped={len(result.skipped)}, failed={len(result.failed)}"
        )
        return result


__all__ = ["MaterializeRecurringUseCase", "MaterializationResult"]
