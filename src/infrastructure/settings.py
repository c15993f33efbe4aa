"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os

import dotenv

from src.domain.constants import (
    DEFAULT_BASE_CURRENCY,
    DEFAULT_FLOW_MONTHS,
    DEFAULT_HISTORY_MONTHS,
    DEFAULT_PROJECTION_MONTHS,
    DEFAULT_UPCOMING_WINDOW_DAYS,
    RECURRING_INTERVAL_HOURS,
)

DEFAULT_QUOTE_PROVIDER_URL = "https://query1.finance.yahoo.com/v7/finance/quote"
DEFAULT_QUOTE_TIMEOUT_SECONDS = 5.0
DEFAULT_QUOTE_CACHE_TTL_SECONDS = 300.0


@dataclass(frozen=True)
class FinanceSettings:
    """Settings for the report engine and its adapters.

    Attributes:
        base_currency: Currency every report figure is expressed in.
        quote_provider_url: Endpoint of the batch quote lookup.
        quote_timeout_seconds: Timeout of one quote request.
        quote_cache_ttl_seconds: Freshness of cached quotes.
        recurring_interval_hours: Interval between recurring passes.
        flow_months: Trailing window for burn and savings rates.
        history_months: Window for trends and groupings.
        projection_months: Horizon of the wealth projection.
        upcoming_window_days: Horizon of the upcoming obligations list.
        default_account_id: Account used when none is given.
    """

    base_currency: str = DEFAULT_BASE_CURRENCY
    quote_provider_url: str = DEFAULT_QUOTE_PROVIDER_URL
    quote_timeout_seconds: float = DEFAULT_QUOTE_TIMEOUT_SECONDS
    quote_cache_ttl_seconds: float = DEFAULT_QUOTE_CACHE_TTL_SECONDS
    recurring_interval_hours: float = float(RECURRING_INTERVAL_HOURS)
    flow_months: int = DEFAULT_FLOW_MONTHS
    history_months: int = DEFAULT_HISTORY_MONTHS
    projection_months: int = DEFAULT_PROJECTION_MONTHS
    upcoming_window_days: int = DEFAULT_UPCOMING_WINDOW_DAYS
    default_account_id: int | None = None

    @classmethod
    def from_env(cls) -> "FinanceSettings":
        """Build settings from environment variables.

        Returns:
            FinanceSettings: Settings sourced from environment variables.

        Raises:
            ValueError: If a numeric variable cannot be parsed or is not
                positive.
        """
        dotenv.load_dotenv()
        base_currency = (
            os.getenv("BASE_CURRENCY", DEFAULT_BASE_CURRENCY).strip().upper()
            or DEFAULT_BASE_CURRENCY
        )
        raw_account = os.getenv("DEFAULT_ACCOUNT_ID", "").strip()
        return cls(
            base_currency=base_currency,
            quote_provider_url=os.getenv(
                "QUOTE_PROVIDER_URL", DEFAULT_QUOTE_PROVIDER_URL
            ).strip(),
            quote_timeout_seconds=cls._positive(
                "QUOTE_TIMEOUT_SECONDS", DEFAULT_QUOTE_TIMEOUT_SECONDS, float
            ),
            quote_cache_ttl_seconds=cls._positive(
                "QUOTE_CACHE_TTL_SECONDS",
                DEFAULT_QUOTE_CACHE_TTL_SECONDS,
                float,
            ),
            recurring_interval_hours=cls._positive(
                "RECURRING_INTERVAL_HOURS",
                float(RECURRING_INTERVAL_HOURS),
                float,
            ),
            flow_months=cls._positive(
                "REPORT_FLOW_MONTHS", DEFAULT_FLOW_MONTHS, int
            ),
            history_months=cls._positive(
                "REPORT_HISTORY_MONTHS", DEFAULT_HISTORY_MONTHS, int
            ),
            projection_months=cls._positive(
                "PROJECTION_HORIZON_MONTHS", DEFAULT_PROJECTION_MONTHS, int
            ),
            upcoming_window_days=cls._positive(
                "UPCOMING_WINDOW_DAYS", DEFAULT_UPCOMING_WINDOW_DAYS, int
            ),
            default_account_id=int(raw_account) if raw_account else None,
        )

    @staticmethod
    def _positive(name: str, default, cast):
        """Read a positive number from the environment.

        Args:
            name: Environment variable name.
            default: Value used when the variable is unset or empty.
            cast: Numeric type to convert to.

        Returns:
            The parsed value, or the default.
        """
        raw = os.getenv(name, "").strip()
        if not raw:
            return default
        try:
            value = cast(raw)
        except ValueError as exc:
            raise ValueError(f"Invalid value for {name}: {raw!r}") from exc
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {raw!r}")
        return value


__all__ = ["FinanceSettings"]
