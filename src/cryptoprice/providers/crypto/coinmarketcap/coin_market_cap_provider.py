"""CoinMarketCap price provider for cryptocurrencies."""
import logging
from decimal import Decimal
from typing import Any

import httpx
from pydantic import ValidationError

from cryptoprice.currencies import COINMARKETCAP_CURRENCIES
from cryptoprice.providers.core import (PayloadError, PriceProviderABC,
                                        ProviderApiError, UnknownSymbolError)
from cryptoprice.providers.core.price_provider_abc import Outcome
from cryptoprice.providers.crypto.coinmarketcap.models import (
    CmcCoin, CmcQuotesLatestParams, CmcQuotesLatestResponse)
from cryptoprice.schemas import ProviderId

logger = logging.getLogger(__name__)


class CoinMarketCapProvider(PriceProviderABC):
    """Price provider via the CoinMarketCap Pro API. Requires an API key.

    Tickers are sent as-is (upper-cased) in a single quotes/latest request;
    the key goes in the X-CMC_PRO_API_KEY header.
    """

    BASE_URL = "https://pro-api.coinmarketcap.com/v1"
    API_KEY_HEADER = "X-CMC_PRO_API_KEY"

    id = ProviderId.COINMARKETCAP
    display_name = "CoinMarketCap"
    requires_credentials = True
    supported_currencies = COINMARKETCAP_CURRENCIES

    def __init__(self, *, base_url: str | None = None, **kwargs) -> None:
        """Initialize the CoinMarketCap provider.

        Args:
            base_url: API root, e.g. a mock server in tests. Defaults to BASE_URL.
            **kwargs: client / timeout, see PriceProviderABC.
        """
        super().__init__(**kwargs)
        self._base_url = (base_url or self.BASE_URL).rstrip("/")

    async def _fetch_batch(
        self, symbols: list[str], currency: str, credentials: str | None
    ) -> dict[str, Outcome]:
        convert = currency.upper()
        params = CmcQuotesLatestParams(symbol=",".join(symbols), convert=convert)
        response = await self._request(
            f"{self._base_url}/cryptocurrency/quotes/latest",
            params=params.model_dump(),
            headers={self.API_KEY_HEADER: credentials or ""},
        )
        if response.is_error:
            raise self._status_error(response)
        body = CmcQuotesLatestResponse.model_validate(response.json(parse_float=Decimal))

        status = body.status
        if status is not None and status.error_message:
            if not body.data:
                raise ProviderApiError(
                    f"CoinMarketCap: {status.error_message} (error_code {status.error_code})"
                )
            logger.warning("CoinMarketCap: %s", status.error_message)

        logger.debug("CoinMarketCap returned %d of %d symbols", len(body.data), len(symbols))
        return {
            symbol: self._parse_entry(symbol, body.data.get(symbol), convert)
            for symbol in symbols
        }

    @staticmethod
    def _status_error(response: httpx.Response) -> ProviderApiError:
        """Non-2xx reply, with CoinMarketCap's own explanation when the body has one."""
        try:
            status = CmcQuotesLatestResponse.model_validate(response.json()).status
        except ValueError:
            status = None
        message = f"CoinMarketCap returned {response.status_code} {response.reason_phrase}".rstrip()
        if status is not None and status.error_message:
            message = f"{message}: {status.error_message}"
        return ProviderApiError(message, status_code=response.status_code)

    def _parse_entry(self, symbol: str, raw: Any, convert: str) -> Outcome:
        """Turn one data entry into a Quote, or the error for that symbol only."""
        if isinstance(raw, list):
            if not raw:
                return UnknownSymbolError(f"CoinMarketCap has no data for '{symbol}'")
            raw = raw[0]
        if raw is None:
            return UnknownSymbolError(f"CoinMarketCap has no data for '{symbol}'")
        try:
            coin = CmcCoin.model_validate(raw)
        except ValidationError as exc:
            return PayloadError(f"coin entry for '{symbol}' is malformed: {exc.error_count()} error(s)")

        quote = coin.quote.get(convert)
        if quote is None:
            return PayloadError(f"coin entry for '{symbol}' has no {convert} quote")
        if quote.price is None:
            return UnknownSymbolError(f"CoinMarketCap has no {convert} price for '{symbol}'")
        try:
            return self._normalizer.build_quote(
                symbol,
                convert,
                quote.price,
                name=coin.name,
                change_pct=quote.percent_change_24h,
                market_cap=quote.market_cap,
            )
        except PayloadError as exc:
            return exc
