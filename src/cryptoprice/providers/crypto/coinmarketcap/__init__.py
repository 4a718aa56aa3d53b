"""CoinMarketCap provider."""
from cryptoprice.providers.crypto.coinmarketcap.coin_market_cap_provider import \
    CoinMarketCapProvider

__all__ = ["CoinMarketCapProvider"]
