"""Financial health scoring."""

from collections.abc import Sequence
from decimal import Decimal

from src.domain.constants import (
    CONCENTRATION_PENALTY,
    CONCENTRATION_THRESHOLD,
    DIVERSIFICATION_POINTS_PER_CLASS,
    GROWTH_TARGET_SAVINGS_RATE,
    IDENTITY_TIERS,
    LIQUIDITY_TARGET_MONTHS,
    STABILITY_BASELINE,
)
from src.domain.models import Aggregates, AllocationSlice, HealthScores
from src.utils.decimal_utils import safe_ratio


def _clamp(value: int, low: int = 0, high: int = 100) -> int:
    return max(low, min(high, value))


def liquidity_score(survival_months: Decimal, runway_is_infinite: bool) -> int:
    if runway_is_infinite:
        return 100
    ratio = min(survival_months / LIQUIDITY_TARGET_MONTHS, Decimal("1"))
    return _clamp(int(ratio * 100))


def solvency_score(total_debts: Decimal, total_assets: Decimal) -> int:
    if total_debts <= 0:
        return 100
    if total_assets <= 0:
        return 0
    ratio = total_debts / total_assets
    if ratio >= 1:
        return 0
    return _clamp(int((1 - ratio) * 100))


def growth_score(savings_rate: Decimal) -> int:
    if savings_rate <= 0:
        return 0
    if savings_rate >= GROWTH_TARGET_SAVINGS_RATE:
        return 100
    return _clamp(int(savings_rate / GROWTH_TARGET_SAVINGS_RATE * 100))


def diversification_score(allocation: Sequence[AllocationSlice]) -> int:
    """Score 20 points per class, minus a penalty for a dominant class."""
    holdings = [item for item in allocation if not item.synthetic]
    total = sum((item.value for item in holdings), Decimal("0"))
    score = DIVERSIFICATION_POINTS_PER_CLASS * len(
        {item.category for item in holdings}
    )
    if total > 0 and any(
        safe_ratio(item.value, total) > CONCENTRATION_THRESHOLD
        for item in holdings
    ):
        score -= CONCENTRATION_PENALTY
    return _clamp(score)


def score_health(aggregates: Aggregates) -> HealthScores:
    """Derive the five 0-100 health sub-scores from aggregates.

    Stability is a fixed baseline until income/expense variance is modelled.
    """
    return HealthScores(
        liquidity=liquidity_score(
            aggregates.flows.survival_months,
            aggregates.flows.runway_is_infinite,
        ),
        solvency=solvency_score(
            aggregates.totals.total_debts,
            aggregates.totals.total_assets,
        ),
        growth=growth_score(aggregates.flows.savings_rate),
        diversification=diversification_score(aggregates.allocation),
        stability=STABILITY_BASELINE,
    )


def financial_identity(scores: HealthScores) -> str:
    """Map the average of the four computed scores to an identity tier."""
    average = (
        scores.liquidity
        + scores.solvency
        + scores.growth
        + scores.diversification
    ) / 4.0
    for threshold, label in IDENTITY_TIERS:
        if threshold is None or average > threshold:
            return label
    return IDENTITY_TIERS[-1][1]


__all__ = [
    "liquidity_score",
    "solvency_score",
    "growth_score",
    "diversification_score",
    "score_health",
    "financial_identity",
]
