"""Price providers for cryptocurrencies and fiat exchange rates.

This module provides a unified interface (PriceProviderABC) for fetching
quotes from multiple sources:

- CoinGeckoProvider: free CoinGecko API, no key
- CoinMarketCapProvider: CoinMarketCap Pro API, API key required
- FrankfurterProvider: ECB fiat rates, used by calc mode

Example:
    async with CoinGeckoProvider() as provider:
        results = await provider.fetch_quotes(["btc", "eth"], "eur")
        print(results["BTC"].quote.price)
"""
from cryptoprice.providers.core import PriceProviderABC
from cryptoprice.providers.crypto import (CoinGeckoProvider,
                                          CoinMarketCapProvider)
from cryptoprice.providers.fiat import FrankfurterProvider

__all__ = [
    "CoinGeckoProvider",
    "CoinMarketCapProvider",
    "FrankfurterProvider",
    "PriceProviderABC",
]
