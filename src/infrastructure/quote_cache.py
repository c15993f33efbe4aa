"""Time-bounded quote cache and the caching quote provider."""

from collections.abc import Callable, Sequence
import threading
import time

from src.application.ports.quote_provider import QuoteProviderPort
from src.domain.errors import QuoteProviderError
from src.domain.models import MarketQuote
from src.infrastructure.logging.logger import get_app_logger

DEFAULT_TTL_SECONDS = 300.0
DEFAULT_WAIT_SECONDS = 10.0


class TTLQuoteCache:
    """Thread-safe quote cache keyed by symbol with a fixed time-to-live."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._items: dict[str, tuple[float, MarketQuote]] = {}

    def get(self, symbol: str) -> MarketQuote | None:
        """Return a fresh quote for a symbol, dropping it when expired."""
        with self._lock:
            item = self._items.get(symbol)
            if item is None:
                return None
            stored_at, quote = item
            if self._clock() - stored_at >= self._ttl:
                del self._items[symbol]
                return None
            return quote

    def get_many(
        self,
        symbols: Sequence[str],
    ) -> tuple[dict[str, MarketQuote], list[str]]:
        """Split symbols into fresh hits and misses."""
        hits: dict[str, MarketQuote] = {}
        misses: list[str] = []
        for symbol in symbols:
            quote = self.get(symbol)
            if quote is None:
                misses.append(symbol)
            else:
                hits[symbol] = quote
        return hits, misses

    def put_many(self, quotes: dict[str, MarketQuote]) -> None:
        now = self._clock()
        with self._lock:
            for symbol, quote in quotes.items():
                self._items[symbol] = (now, quote)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class CachingQuoteProvider(QuoteProviderPort):
    """Quote provider that serves fresh quotes from a shared cache.

    Each missing symbol is claimed by one caller while it is fetched. Other
    callers needing that symbol wait for the claim instead of fetching it
    again, and callers needing unrelated symbols are not blocked.
    """

    def __init__(
        self,
        provider: QuoteProviderPort,
        cache: TTLQuoteCache | None = None,
        logger=None,
        wait_timeout: float = DEFAULT_WAIT_SECONDS,
    ) -> None:
        """Initialize the provider.

        Args:
            provider: Upstream provider used for cache misses.
            cache: Shared cache; a new one with the default TTL if omitted.
            logger: Optional logger compatible with logging.Logger-like API.
            wait_timeout: Seconds to wait for a symbol another caller is
                fetching.
        """
        self._provider = provider
        self._cache = cache or TTLQuoteCache()
        self._logger = logger or get_app_logger()
        self._wait_timeout = wait_timeout
        self._state_lock = threading.Lock()
        self._in_flight: dict[str, threading.Event] = {}

    def get_quotes(self, symbols: Sequence[str]) -> dict[str, MarketQuote]:
        """Return quotes for symbols, fetching only stale or missing ones.

        Raises:
            QuoteProviderError: If the upstream batch fails and nothing is
                cached for the requested symbols.
        """
        unique = list(dict.fromkeys(symbols))
        quotes, misses = self._cache.get_many(unique)
        if not misses:
            return quotes

        refreshed, owned, pending = self._claim(misses)
        quotes.update(refreshed)
        error: QuoteProviderError | None = None
        if owned:
            try:
                fetched = self._provider.get_quotes(owned)
            except QuoteProviderError as exc:
                error = exc
            else:
                self._cache.put_many(fetched)
                quotes.update(fetched)
                self._logger.debug(
                    f"Fetched {len(fetched)} of {len(owned)} missing quotes"
                )
            finally:
                self._release(owned)

        for event in pending.values():
            event.wait(self._wait_timeout)
        if pending:
            waited, _ = self._cache.get_many(list(pending))
            quotes.update(waited)

        if error is not None:
            if not quotes:
                raise error
            self._logger.warning(
                f"Quote refresh failed, serving {len(quotes)} cached "
                f"quotes: {error}"
            )
        return quotes

    def _claim(
        self,
        misses: Sequence[str],
    ) -> tuple[dict[str, MarketQuote], list[str], dict[str, threading.Event]]:
        """Split misses into fresh hits, symbols to fetch and symbols to await."""
        refreshed: dict[str, MarketQuote] = {}
        owned: list[str] = []
        pending: dict[str, threading.Event] = {}
        with self._state_lock:
            for symbol in misses:
                event = self._in_flight.get(symbol)
                if event is not None:
                    pending[symbol] = event
                    continue
                # A fetch may have finished since the first cache lookup.
                quote = self._cache.get(symbol)
                if quote is not None:
                    refreshed[symbol] = quote
                    continue
                self._in_flight[symbol] = threading.Event()
                owned.append(symbol)
        return refreshed, owned, pending

    def _release(self, symbols: Sequence[str]) -> None:
        with self._state_lock:
            for symbol in symbols:
                event = self._in_flight.pop(symbol, None)
                if event is not None:
                    event.set()


__all__ = [
    "TTLQuoteCache",
    "CachingQuoteProvider",
    "DEFAULT_TTL_SECONDS",
    "DEFAULT_WAIT_SECONDS",
]
