"""Cryptocurrency price providers."""
from cryptoprice.providers.crypto.coingecko import CoinGeckoProvider
from cryptoprice.providers.crypto.coinmarketcap import CoinMarketCapProvider

__all__ = ["CoinGeckoProvider", "CoinMarketCapProvider"]
