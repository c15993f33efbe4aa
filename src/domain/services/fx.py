"""Rate resolution from a quote snapshot into the base currency."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from logging import Logger

from src.domain.constants import (
    BASE_PAIR_CODES,
    FALLBACK_RATES_BY_BASE,
    GLOBAL_MARKET_SYMBOLS,
    MARKET_SYMBOLS_BY_BASE,
)
from src.domain.models import MarketQuote
from src.domain.services.normalization import normalize_code

NEUTRAL_RATE = Decimal("1")


class RateSource(str, Enum):
    """Step of the resolution chain that produced a rate."""

    BASE = "base"
    QUOTE = "quote"
    CROSS = "cross"
    FALLBACK = "fallback"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class RateResolution:
    """Rate converting one unit of a code into the base currency."""

    code: str
    rate: Decimal
    resolved: bool
    source: RateSource


def market_symbol_for(
    code: str,
    base_currency: str,
    symbol_map: Mapping[str, Mapping[str, str]] | None = None,
) -> str | None:
    """Return the quoted market symbol for a bare code, if one is known."""
    table = symbol_map if symbol_map is not None else MARKET_SYMBOLS_BY_BASE
    mapped = table.get(base_currency, {}).get(code)
    if mapped:
        return mapped
    return GLOBAL_MARKET_SYMBOLS.get(code)


def collect_quote_symbols(
    codes: Iterable[str | None],
    base_currency: str,
    symbol_map: Mapping[str, Mapping[str, str]] | None = None,
) -> list[str]:
    """Build the single batch of symbols needed to value a report.

    Args:
        codes: Instrument codes and market symbols found in the records.
        base_currency: Currency all figures are expressed in.
        symbol_map: Optional override of the code to symbol table.

    Returns:
        list[str]: Unique symbols in first-seen order, base excluded.
    """
    symbols: list[str] = []
    seen: set[str] = set()

    def _add(symbol: str | None) -> None:
        if symbol and symbol != base_currency and symbol not in seen:
            seen.add(symbol)
            symbols.append(symbol)

    for raw in (*codes, *BASE_PAIR_CODES):
        code = normalize_code(raw)
        if not code or code == base_currency:
            continue
        mapped = market_symbol_for(code, base_currency, symbol_map)
        _add(mapped or code)
    return symbols


class RateResolver:
    """Resolve codes to base-currency rates from a quote snapshot.

    Resolution order, first hit wins: exact quote, mapped market symbol,
    cross rate through the quote currency, static fallback table, neutral 1.
    The resolver never mutates the snapshot.
    """

    def __init__(
        self,
        quotes: Mapping[str, MarketQuote],
        base_currency: str,
        logger: Logger | None = None,
        symbol_map: Mapping[str, Mapping[str, str]] | None = None,
        fallback_rates: Mapping[str, Decimal] | None = None,
    ) -> None:
        self._quotes = {
            normalize_code(symbol): quote for symbol, quote in quotes.items()
        }
        self._base = normalize_code(base_currency)
        self._logger = logger
        self._symbol_map = symbol_map
        self._fallback = (
            dict(fallback_rates)
            if fallback_rates is not None
            else dict(FALLBACK_RATES_BY_BASE.get(self._base, {}))
        )
        self._cache: dict[str, RateResolution] = {}

    @property
    def base_currency(self) -> str:
        return self._base

    def resolve(self, code: str | None) -> RateResolution:
        """Return the base-currency rate for a currency or instrument code."""
        normalized = normalize_code(code)
        if not normalized:
            return RateResolution("", NEUTRAL_RATE, True, RateSource.BASE)
        if normalized in self._cache:
            return self._cache[normalized]
        resolution = self._resolve(normalized, frozenset())
        self._cache[normalized] = resolution
        if not resolution.resolved and self._logger is not None:
            self._logger.warning(
                f"No rate for {normalized} to {self._base}; "
                "using neutral multiplier"
            )
        return resolution

    def rate(self, code: str | None) -> Decimal:
        return self.resolve(code).rate

    def _resolve(self, code: str, visiting: frozenset[str]) -> RateResolution:
        if code == self._base:
            return RateResolution(code, NEUTRAL_RATE, True, RateSource.BASE)

        quote = self._find_quote(code)
        if quote is not None and code not in visiting:
            quote_currency = normalize_code(quote.currency) or self._base
            if quote_currency == self._base:
                return RateResolution(
                    code, quote.price, True, RateSource.QUOTE
                )
            if quote_currency not in visiting | {code}:
                cross = self._resolve(quote_currency, visiting | {code})
                return RateResolution(
                    code,
                    quote.price * cross.rate,
                    cross.resolved,
                    RateSource.CROSS,
                )

        fallback = self._fallback.get(code)
        if fallback is not None:
            return RateResolution(code, fallback, True, RateSource.FALLBACK)
        return RateResolution(code, NEUTRAL_RATE, False, RateSource.NEUTRAL)

    def _find_quote(self, code: str) -> MarketQuote | None:
        candidates = [code]
        mapped = market_symbol_for(code, self._base, self._symbol_map)
        if mapped:
            candidates.append(normalize_code(mapped))
        for candidate in candidates:
            quote = self._quotes.get(candidate)
            if quote is not None and quote.price > 0:
                return quote
        return None


__all__ = [
    "NEUTRAL_RATE",
    "RateSource",
    "RateResolution",
    "RateResolver",
    "market_symbol_for",
    "collect_quote_symbols",
]
