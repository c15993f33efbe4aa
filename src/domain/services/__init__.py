"""Domain services package."""

from .finance import aggregate, compute_flow_metrics, compute_totals
from .fx import RateResolution, RateResolver, RateSource, collect_quote_symbols
from .health import financial_identity, score_health
from .normalization import NormalizedSet, normalize, normalize_code
from .projection import project_wealth
from .recurring import (
    Materialization,
    is_due,
    materialize_due,
    next_due_date,
    upcoming_obligations,
)
from .validation import is_valid_anchor, validate_non_negative

__all__ = [
    "aggregate",
    "compute_flow_metrics",
    "compute_totals",
    "RateResolution",
    "RateResolver",
    "RateSource",
    "collect_quote_symbols",
    "financial_identity",
    "score_health",
    "NormalizedSet",
    "normalize",
    "normalize_code",
    "project_wealth",
    "Materialization",
    "is_due",
    "materialize_due",
    "next_due_date",
    "upcoming_obligations",
    "is_valid_anchor",
    "validate_non_negative",
]
