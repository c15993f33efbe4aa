"""Versioned lookup tables and thresholds for finance analytics.

The tables are plain data so they can be tested and extended without touching
the aggregation code. Bump ``LOOKUP_TABLES_VERSION`` when changing them.
"""

from decimal import Decimal

LOOKUP_TABLES_VERSION = 3

DEFAULT_BASE_CURRENCY = "TRY"

# Bare currency/commodity code -> quoted market symbol, per base currency.
MARKET_SYMBOLS_BY_BASE: dict[str, dict[str, str]] = {
    "TRY": {
        "USD": "USDTRY=X",
        "EUR": "EURTRY=X",
        "GBP": "GBPTRY=X",
        "GA": "XAUTRY=X",
        "XAU": "XAUTRY=X",
        "XAUTRY": "XAUTRY=X",
        "XAG": "XAGTRY=X",
    },
    "USD": {
        "EUR": "EURUSD=X",
        "GBP": "GBPUSD=X",
        "TRY": "TRYUSD=X",
        "XAU": "GC=F",
    },
    "EUR": {
        "USD": "USDEUR=X",
        "GBP": "GBPEUR=X",
        "TRY": "TRYEUR=X",
    },
}

# Mappings that do not depend on the base currency.
GLOBAL_MARKET_SYMBOLS: dict[str, str] = {
    "BTC": "BTC-USD",
    "ETH": "ETH-USD",
}

# Approximate multipliers used when no live quote is available.
FALLBACK_RATES_BY_BASE: dict[str, dict[str, Decimal]] = {
    "TRY": {
        "USD": Decimal("34"),
        "EUR": Decimal("36"),
        "GA": Decimal("2800"),
        "BTC": Decimal("3000000"),
    },
}

# Symbols always requested so cross rates are available.
BASE_PAIR_CODES = ("USD", "EUR", "GA")

# Allocation classes.
CASH_CLASS = "Cash"
COMMODITIES_CLASS = "Commodities"
CRYPTO_CLASS = "Crypto"
STOCK_CLASS = "Stock"
FUNDS_CLASS = "Funds"
BONDS_CLASS = "Bonds"
DEBT_CLASS = "Debt"
OTHER_CLASS = "Other"

# Free-form labels recognised as an allocation class (lower-cased keys).
CANONICAL_CATEGORY_LABELS: dict[str, str] = {
    "cash": CASH_CLASS,
    "forex": CASH_CLASS,
    "currency": CASH_CLASS,
    "gold": COMMODITIES_CLASS,
    "silver": COMMODITIES_CLASS,
    "commodity": COMMODITIES_CLASS,
    "commodities": COMMODITIES_CLASS,
    "crypto": CRYPTO_CLASS,
    "stock": STOCK_CLASS,
    "stocks": STOCK_CLASS,
    "equity": STOCK_CLASS,
    "fund": FUNDS_CLASS,
    "funds": FUNDS_CLASS,
    "bond": BONDS_CLASS,
    "bonds": BONDS_CLASS,
}

# Labels treated as unclassified and re-derived from the instrument code.
LEGACY_CATEGORY_LABELS = frozenset({"", "other", "legacy", "unknown", "diğer"})

# Instrument code -> allocation class.
INSTRUMENT_CLASS_BY_CODE: dict[str, str] = {
    "TRY": CASH_CLASS,
    "USD": CASH_CLASS,
    "EUR": CASH_CLASS,
    "GBP": CASH_CLASS,
    "GA": COMMODITIES_CLASS,
    "XAU": COMMODITIES_CLASS,
    "XAUTRY": COMMODITIES_CLASS,
    "XAG": COMMODITIES_CLASS,
    "EMT": COMMODITIES_CLASS,
    "BTC": CRYPTO_CLASS,
    "ETH": CRYPTO_CLASS,
    "STK": STOCK_CLASS,
    "FON": FUNDS_CLASS,
    "BOND": BONDS_CLASS,
}

ALLOCATION_COLORS: dict[str, str] = {
    STOCK_CLASS: "#3b82f6",
    CRYPTO_CLASS: "#f59e0b",
    COMMODITIES_CLASS: "#eab308",
    CASH_CLASS: "#22c55e",
    FUNDS_CLASS: "#10b981",
    BONDS_CLASS: "#8b5cf6",
    DEBT_CLASS: "#ef4444",
}
DEFAULT_ALLOCATION_COLOR = "#6b7280"

INCOME_SOURCE_PALETTE = (
    "#10b981",
    "#3b82f6",
    "#f59e0b",
    "#8b5cf6",
    "#ec4899",
)

UNCATEGORIZED_LABEL = "Uncategorized"
OTHER_LABEL = "Other"

WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

# Flow metrics.
DEFAULT_FLOW_MONTHS = 6
DEFAULT_HISTORY_MONTHS = 12
MIN_BURN_RATE = Decimal("1")
LIQUID_ASSET_SHARE = Decimal("0.8")
INFINITE_RUNWAY_MONTHS = Decimal("999")
TOP_EXPENSE_CATEGORIES = 5

# Health scoring.
LIQUIDITY_TARGET_MONTHS = Decimal("6")
GROWTH_TARGET_SAVINGS_RATE = Decimal("20")
DIVERSIFICATION_POINTS_PER_CLASS = 20
CONCENTRATION_THRESHOLD = Decimal("0.7")
CONCENTRATION_PENALTY = 20
STABILITY_BASELINE = 75

# (exclusive lower bound, label), checked in order; last entry is the floor.
IDENTITY_TIERS: tuple[tuple[float | None, str], ...] = (
    (85.0, "Financial Emperor"),
    (70.0, "Strategist"),
    (50.0, "Builder"),
    (30.0, "Rebuilder"),
    (None, "Apprentice"),
)

# Projection and scheduling.
DEFAULT_PROJECTION_MONTHS = 12
PROJECTION_NOW_LABEL = "Now"
DEFAULT_UPCOMING_WINDOW_DAYS = 30
RECURRING_INTERVAL_HOURS = 12
AUTO_ENTRY_SUFFIX = " (Auto)"


__all__ = [name for name in dir() if name.isupper()]
