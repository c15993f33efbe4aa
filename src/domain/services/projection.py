"""Linear wealth projection.

The projection adds a constant monthly savings amount to the current net
worth. It does not compound returns or model variance.
"""

from datetime import date
from decimal import Decimal

from src.domain.constants import DEFAULT_PROJECTION_MONTHS, PROJECTION_NOW_LABEL
from src.domain.models import ProjectionPoint
from src.utils.date_utils import shift_month


def project_wealth(
    current_net_worth: Decimal,
    monthly_savings: Decimal,
    as_of: date,
    horizon_months: int = DEFAULT_PROJECTION_MONTHS,
) -> list[ProjectionPoint]:
    """Return the current net worth followed by one point per future month.

    Args:
        current_net_worth: Net worth today in the base currency.
        monthly_savings: Amount added each projected month.
        as_of: Date of the actual (non-projected) point.
        horizon_months: Number of projected months.

    Returns:
        list[ProjectionPoint]: ``horizon_months + 1`` points.
    """
    points = [
        ProjectionPoint(
            label=PROJECTION_NOW_LABEL,
            period=as_of,
            amount=current_net_worth,
            is_projected=False,
        )
    ]
    running = current_net_worth
    for offset in range(1, horizon_months + 1):
        running += monthly_savings
        year, month = shift_month(as_of.year, as_of.month, offset)
        period = date(year, month, 1)
        points.append(
            ProjectionPoint(
                label=period.strftime("%b %y"),
                period=period,
                amount=running,
                is_projected=True,
            )
        )
    return points


__all__ = ["project_wealth"]
