"""Port for the market quote provider."""

from collections.abc import Sequence
from typing import Protocol

from src.domain.models import MarketQuote


class QuoteProviderPort(Protocol):
    """Port returning current quotes for a batch of market symbols."""

    def get_quotes(self, symbols: Sequence[str]) -> dict[str, MarketQuote]:
        """Return quotes keyed by symbol.

        Symbols missing from the result are unavailable. Implementations
        raise ``QuoteProviderError`` only when the batch fails as a whole.
        """


__all__ = ["QuoteProviderPort"]
