"""Classification of holdings into allocation classes."""

from src.domain.constants import (
    ALLOCATION_COLORS,
    CANONICAL_CATEGORY_LABELS,
    DEFAULT_ALLOCATION_COLOR,
    INSTRUMENT_CLASS_BY_CODE,
    LEGACY_CATEGORY_LABELS,
    OTHER_CLASS,
)
from src.domain.models import AssetHolding


def _normalize(value: str | None) -> str:
    return (value or "").strip()


def classify_holding(holding: AssetHolding) -> str:
    """Return the allocation class for a holding.

    Known labels map to their canonical class. Unclassified or legacy labels
    are re-derived from the instrument code, then from the market symbol.
    Unknown labels that are not legacy are kept as given.

    Args:
        holding: Holding to classify.

    Returns:
        str: Allocation class name.
    """
    label = _normalize(holding.category_label)
    canonical = CANONICAL_CATEGORY_LABELS.get(label.lower())
    if canonical:
        return canonical
    if label.lower() not in LEGACY_CATEGORY_LABELS:
        return label
    for code in (holding.instrument_code, holding.market_symbol):
        klass = INSTRUMENT_CLASS_BY_CODE.get(_normalize(code).upper())
        if klass:
            return klass
    return OTHER_CLASS


def color_for_category(category: str) -> str:
    """Return the display color for an allocation class."""
    return ALLOCATION_COLORS.get(category, DEFAULT_ALLOCATION_COLOR)


__all__ = ["classify_holding", "color_for_category"]
