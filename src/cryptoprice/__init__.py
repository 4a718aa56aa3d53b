"""Fetch cryptocurrency prices from CoinGecko or CoinMarketCap in the terminal."""

__version__ = "0.1.0"
