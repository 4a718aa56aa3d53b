"""Shared utilities for price providers."""
from collections.abc import Iterable


def normalize_symbol(symbol: str) -> str:
    """Strip and upper-case a ticker; blank tickers are rejected."""
    norm = symbol.strip().upper()
    if not norm:
        raise ValueError("Symbol must not be empty")
    return norm


def normalize_currency(currency: str) -> str:
    """Strip and upper-case a currency code."""
    norm = currency.strip().upper()
    if not norm:
        raise ValueError("Currency must not be empty")
    return norm


def dedupe(symbols: Iterable[str]) -> list[str]:
    """Distinct items in first-seen order."""
    return list(dict.fromkeys(symbols))
