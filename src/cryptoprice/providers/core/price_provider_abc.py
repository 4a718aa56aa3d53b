"""Abstract base class for price providers."""
import asyncio
import logging
from abc import ABC
from collections.abc import Iterable
from decimal import Decimal
from typing import Any, ClassVar

import httpx

from cryptoprice import __version__
from cryptoprice.providers.core.error_mapper import (PROVIDER_EXCEPTIONS,
                                                     ProviderErrorMapper)
from cryptoprice.providers.core.exceptions import (MissingCredentialsError,
                                                   UnknownSymbolError,
                                                   UnsupportedCurrencyError)
from cryptoprice.providers.core.normalizer import QuoteNormalizer
from cryptoprice.providers.core.utils import dedupe, normalize_symbol
from cryptoprice.schemas import FetchResult, ProviderId, Quote

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
USER_AGENT = f"cryptoprice/{__version__}"

# What an implementation reports for one symbol: a quote or the reason it has none.
Outcome = Quote | BaseException


def build_http_client(timeout: float = DEFAULT_TIMEOUT) -> httpx.AsyncClient:
    """HTTP client shared by providers: JSON accept header, user agent, bounded timeout."""
    return httpx.AsyncClient(
        headers={"Accept": "application/json", "User-Agent": USER_AGENT},
        timeout=timeout,
    )


class PriceProviderABC(ABC):
    """Base interface for all price providers.

    Each provider implements this interface so the resolver can query any
    backend the same way. Implementations override either ``_fetch_batch``
    (one request for many symbols, ``batch_requests = True``) or
    ``_fetch_one`` (one request per symbol, ``batch_requests = False``).

    ``fetch_quotes`` never raises for provider trouble: credentials, currency,
    transport and payload failures all come back as per-symbol errors.
    """

    id: ClassVar[ProviderId]
    display_name: ClassVar[str]
    requires_credentials: ClassVar[bool] = False
    supported_currencies: ClassVar[frozenset[str]]
    batch_requests: ClassVar[bool] = True

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize provider.

        Args:
            client: Shared HTTP client. When omitted the provider creates and owns one.
            timeout: Upper bound in seconds for each request unit (batch or symbol).
        """
        self._owns_client = client is None
        self._client = client if client is not None else build_http_client(timeout)
        self._timeout = timeout
        self._normalizer = QuoteNormalizer(self.id, self.supported_currencies)
        self._error_mapper = ProviderErrorMapper(self.id, self.display_name)

    async def fetch_quotes(
        self,
        symbols: Iterable[str],
        currency: str,
        credentials: str | None = None,
    ) -> dict[str, FetchResult]:
        """Fetch quotes for the given symbols.

        Args:
            symbols: Tickers in any case (e.g. ["btc", "ETH"]); duplicates are collapsed.
            currency: Quote currency code (e.g. "usd").
            credentials: API key for providers that require one.

        Returns:
            One FetchResult per distinct normalized symbol, in first-seen order.
        """
        wanted = dedupe(normalize_symbol(s) for s in symbols)
        if not wanted:
            return {}

        if self.requires_credentials and not credentials:
            err = MissingCredentialsError(
                f"{self.display_name} requires an API key "
                "(use --api-key or set COINMARKETCAP_API_KEY)"
            )
            return {s: self._to_result(s, err) for s in wanted}

        try:
            code = self._normalizer.check_currency(currency)
        except UnsupportedCurrencyError as exc:
            return {s: self._to_result(s, exc) for s in wanted}

        # Symbols rejected up front are never sent, so no request failure can touch them.
        outcomes = self._reject_symbols(wanted)
        pending = [s for s in wanted if s not in outcomes]
        if pending and self.batch_requests:
            outcomes |= await self._run_batch(pending, code, credentials)
        elif pending:
            outcomes |= await self._run_each(pending, code, credentials)

        results: dict[str, FetchResult] = {}
        for symbol in wanted:
            outcome = outcomes.get(symbol)
            if outcome is None:
                outcome = UnknownSymbolError(
                    f"{self.display_name} has no data for '{symbol}'"
                )
            results[symbol] = self._to_result(symbol, outcome)
        return results

    def _reject_symbols(self, symbols: list[str]) -> dict[str, Outcome]:
        """Outcomes for symbols known to be unanswerable without a request."""
        return {}

    async def _fetch_batch(
        self, symbols: list[str], currency: str, credentials: str | None
    ) -> dict[str, Outcome]:
        """Fetch many symbols in one request. Missing keys mean unknown symbols."""
        raise NotImplementedError("Batch requests are not supported by this provider")

    async def _fetch_one(
        self, symbol: str, currency: str, credentials: str | None
    ) -> Quote:
        """Fetch a single symbol. Raise a ProviderError when there is no quote."""
        raise NotImplementedError("Per-symbol requests are not supported by this provider")

    async def _run_batch(
        self, symbols: list[str], currency: str, credentials: str | None
    ) -> dict[str, Outcome]:
        try:
            return await asyncio.wait_for(
                self._fetch_batch(symbols, currency, credentials), self._timeout
            )
        except PROVIDER_EXCEPTIONS as exc:
            logger.warning("%s batch request failed: %r", self.display_name, exc)
            return {s: exc for s in symbols}

    async def _run_each(
        self, symbols: list[str], currency: str, credentials: str | None
    ) -> dict[str, Outcome]:
        async def one(symbol: str) -> Outcome:
            try:
                return await asyncio.wait_for(
                    self._fetch_one(symbol, currency, credentials), self._timeout
                )
            except PROVIDER_EXCEPTIONS as exc:
                logger.warning("%s request for %s failed: %r", self.display_name, symbol, exc)
                return exc

        outcomes = await asyncio.gather(*(one(s) for s in symbols))
        return dict(zip(symbols, outcomes))

    async def _get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET url and decode JSON with Decimal floats. Raises httpx errors on failure."""
        response = await self._request(url, params=params, headers=headers)
        response.raise_for_status()
        return response.json(parse_float=Decimal)

    async def _request(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """GET url without checking the status, for APIs that explain errors in the body."""
        logger.debug("GET %s params=%s", url, params)
        response = await self._client.get(
            url, params=params, headers=headers, timeout=self._timeout
        )
        logger.debug(
            "%s responded %s (%d bytes)",
            self.display_name,
            response.status_code,
            len(response.content),
        )
        return response

    def _to_result(self, symbol: str, outcome: Outcome) -> FetchResult:
        if isinstance(outcome, Quote):
            return FetchResult.success(outcome)
        return FetchResult.failure(
            symbol, self._error_mapper.to_fetch_error(outcome, symbol=symbol)
        )

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "PriceProviderABC":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        """Async context manager exit - calls close()."""
        await self.close()
