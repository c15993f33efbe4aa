"""Validation helpers for records read from the ledger store."""

from decimal import Decimal
from logging import Logger


def validate_non_negative(
    record_kind: str,
    value: Decimal,
    logger: Logger | None,
) -> None:
    """Log a warning when a stored amount breaks the non-negative invariant.

    Args:
        record_kind: Human readable kind of record (e.g. "holding quantity").
        value: Amount read from the store.
        logger: Logger used for warnings.
    """
    if value < 0 and logger is not None:
        logger.warning(f"Negative {record_kind} found in store: {value}")


def is_valid_anchor(frequency: str, anchor_day: int) -> bool:
    """Return True when the anchor fits the frequency's range.

    Monthly anchors are days of month (1-31); weekly anchors are ISO
    weekdays (1-7).
    """
    if frequency == "weekly":
        return 1 <= anchor_day <= 7
    return 1 <= anchor_day <= 31


__all__ = ["validate_non_negative", "is_valid_anchor"]
