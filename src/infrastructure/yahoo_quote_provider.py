"""HTTP quote provider for the Yahoo Finance quote endpoint."""

from collections.abc import Sequence
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

import requests

from src.application.ports.quote_provider import QuoteProviderPort
from src.domain.errors import QuoteProviderError
from src.domain.models import MarketQuote
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.settings import (
    DEFAULT_QUOTE_PROVIDER_URL,
    DEFAULT_QUOTE_TIMEOUT_SECONDS,
)

DEFAULT_QUOTE_CURRENCY = "USD"


class YahooQuoteProvider(QuoteProviderPort):
    """Batch quote lookup over HTTP with a bounded timeout."""

    def __init__(
        self,
        base_url: str = DEFAULT_QUOTE_PROVIDER_URL,
        *,
        timeout: float = DEFAULT_QUOTE_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
        logger=None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "Accept": "application/json",
            "User-Agent": "finance-engine/1.0",
        })
        self._logger = logger or get_app_logger()

    def get_quotes(self, symbols: Sequence[str]) -> dict[str, MarketQuote]:
        """Fetch quotes for a batch of symbols in one request.

        Args:
            symbols: Market symbols such as ``USDTRY=X`` or ``BTC-USD``.

        Returns:
            dict[str, MarketQuote]: Quotes keyed by requested symbol. Symbols
            the provider does not know are omitted.

        Raises:
            QuoteProviderError: If the request fails or the payload is not
                a quote response.
        """
        if not symbols:
            return {}
        params = {"symbols": ",".join(symbols)}
        try:
            response = self._session.get(
                self.base_url, params=params, timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise QuoteProviderError(f"Quote request failed: {exc}") from exc
        except ValueError as exc:
            raise QuoteProviderError(f"Quote response is not JSON: {exc}") from exc

        results = self._extract_results(payload)
        fetched_at = datetime.now(timezone.utc)
        requested = {symbol.upper(): symbol for symbol in symbols}
        quotes: dict[str, MarketQuote] = {}
        for item in results:
            quote = self._parse_quote(item, fetched_at)
            if quote is None:
                continue
            key = requested.get(quote.symbol.upper())
            if key is not None:
                quotes[key] = quote
        self._logger.info(
            f"Fetched {len(quotes)} of {len(symbols)} requested quotes"
        )
        return quotes

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()

    @staticmethod
    def _extract_results(payload: Any) -> list[dict[str, Any]]:
        if not isinstance(payload, dict):
            raise QuoteProviderError(
                f"Unexpected response format: {type(payload)}"
            )
        body = payload.get("quoteResponse")
        if not isinstance(body, dict):
            raise QuoteProviderError("Response has no quoteResponse object")
        results = body.get("result") or []
        return [item for item in results if isinstance(item, dict)]

    def _parse_quote(
        self,
        item: dict[str, Any],
        fetched_at: datetime,
    ) -> MarketQuote | None:
        symbol = item.get("symbol")
        raw_price = item.get("regularMarketPrice")
        if not symbol or raw_price is None:
            return None
        try:
            price = Decimal(str(raw_price))
            change = Decimal(str(item.get("regularMarketChangePercent") or 0))
        except InvalidOperation:
            self._logger.warning(f"Unparseable quote for {symbol}: {item}")
            return None
        return MarketQuote(
            symbol=str(symbol),
            price=price,
            currency=str(item.get("currency") or DEFAULT_QUOTE_CURRENCY).upper(),
            change_percent=change,
            fetched_at=fetched_at,
        )


__all__ = ["YahooQuoteProvider"]
