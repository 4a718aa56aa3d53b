"""CoinGecko price provider for cryptocurrencies."""
import logging

from cryptoprice.currencies import COINGECKO_CURRENCIES
from cryptoprice.providers.core import (PayloadError,
                                        PriceProviderABC,
                                        UnknownSymbolError)
from cryptoprice.providers.core.price_provider_abc import Outcome
from cryptoprice.providers.crypto.coingecko.models import (
    COINGECKO_COINS, CoinGeckoCoin, CoinGeckoSimplePriceParams)
from cryptoprice.schemas import ProviderId

logger = logging.getLogger(__name__)


class CoinGeckoProvider(PriceProviderABC):
    """Price provider for cryptocurrencies via the free CoinGecko API.

    Tickers are translated to CoinGecko ids through a static table; one
    /simple/price request covers every mapped symbol. No API key is needed.
    """

    BASE_URL = "https://api.coingecko.com/api/v3"

    id = ProviderId.COINGECKO
    display_name = "CoinGecko"
    supported_currencies = COINGECKO_CURRENCIES

    def __init__(self, *, base_url: str | None = None, **kwargs) -> None:
        """Initialize the CoinGecko provider.

        Args:
            base_url: API root, e.g. a mock server in tests. Defaults to BASE_URL.
            **kwargs: client / timeout, see PriceProviderABC.
        """
        super().__init__(**kwargs)
        self._base_url = (base_url or self.BASE_URL).rstrip("/")

    @staticmethod
    def resolve(symbol: str) -> CoinGeckoCoin | None:
        """CoinGecko id and display name for a ticker, or None when unmapped."""
        return COINGECKO_COINS.get(symbol.upper())

    def _reject_symbols(self, symbols: list[str]) -> dict[str, Outcome]:
        rejected: dict[str, Outcome] = {}
        for symbol in symbols:
            if self.resolve(symbol) is None:
                logger.debug("No CoinGecko id for %s; not requesting it", symbol)
                rejected[symbol] = UnknownSymbolError(f"No CoinGecko id known for '{symbol}'")
        return rejected

    async def _fetch_batch(
        self, symbols: list[str], currency: str, credentials: str | None
    ) -> dict[str, Outcome]:
        coins = {symbol: self.resolve(symbol) for symbol in symbols}
        cur = currency.lower()
        ids = ",".join(dict.fromkeys(c.id for c in coins.values()))
        params = CoinGeckoSimplePriceParams(vs_currencies=cur).model_dump() | {"ids": ids}
        data = await self._get_json(f"{self._base_url}/simple/price", params=params)
        if not isinstance(data, dict):
            raise PayloadError(f"expected an object, got {type(data).__name__}")

        return {
            symbol: self._parse_row(symbol, coin, data.get(coin.id), cur)
            for symbol, coin in coins.items()
        }

    def _parse_row(
        self, symbol: str, coin: CoinGeckoCoin, row: object, cur: str
    ) -> Outcome:
        """Turn one /simple/price row into a Quote, or the error for that symbol only."""
        if row is None or row == {}:
            return UnknownSymbolError(f"CoinGecko has no data for '{coin.id}'")
        if not isinstance(row, dict):
            return PayloadError(f"row for '{coin.id}' is not an object")
        if row.get(cur) is None:
            return UnknownSymbolError(
                f"CoinGecko has no {cur.upper()} price for '{coin.id}'"
            )
        try:
            return self._normalizer.build_quote(
                symbol,
                cur,
                row[cur],
                name=coin.name,
                change_pct=row.get(f"{cur}_24h_change"),
                market_cap=row.get(f"{cur}_market_cap"),
            )
        except PayloadError as exc:
            return exc

