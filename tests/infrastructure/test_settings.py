"""Tests for infrastructure settings."""

import pytest

from src.infrastructure import settings as settings_module
from src.infrastructure.settings import FinanceSettings

_VARS = (
    "BASE_CURRENCY",
    "QUOTE_PROVIDER_URL",
    "QUOTE_TIMEOUT_SECONDS",
    "QUOTE_CACHE_TTL_SECONDS",
    "RECURRING_INTERVAL_HOURS",
    "REPORT_FLOW_MONTHS",
    "REPORT_HISTORY_MONTHS",
    "PROJECTION_HORIZON_MONTHS",
    "UPCOMING_WINDOW_DAYS",
    "DEFAULT_ACCOUNT_ID",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.setattr(settings_module.dotenv, "load_dotenv", lambda: None)
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_from_env_defaults() -> None:
    """Unset variables should fall back to documented defaults."""
    settings = FinanceSettings.from_env()

    assert settings.base_currency == "TRY"
    assert settings.quote_timeout_seconds == 5.0
    assert settings.quote_cache_ttl_seconds == 300.0
    assert settings.recurring_interval_hours == 12.0
    assert settings.flow_months == 6
    assert settings.history_months == 12
    assert settings.projection_months == 12
    assert settings.upcoming_window_days == 30
    assert settings.default_account_id is None


def test_from_env_reads_overrides(monkeypatch) -> None:
    """Environment values should override defaults."""
    monkeypatch.setenv("BASE_CURRENCY", " usd ")
    monkeypatch.setenv("QUOTE_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("REPORT_HISTORY_MONTHS", "24")
    monkeypatch.setenv("DEFAULT_ACCOUNT_ID", "42")

    settings = FinanceSettings.from_env()

    assert settings.base_currency == "USD"
    assert settings.quote_timeout_seconds == 2.5
    assert settings.history_months == 24
    assert settings.default_account_id == 42


@pytest.mark.parametrize("raw", ["abc", "0", "-3"])
def test_from_env_rejects_invalid_numbers(monkeypatch, raw) -> None:
    """Non-numeric or non-positive values should raise ValueError."""
    monkeypatch.setenv("REPORT_FLOW_MONTHS", raw)

    with pytest.raises(ValueError):
        FinanceSettings.from_env()
