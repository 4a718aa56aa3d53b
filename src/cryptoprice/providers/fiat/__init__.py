"""Fiat exchange-rate providers."""
from cryptoprice.providers.fiat.frankfurter import FrankfurterProvider

__all__ = ["FrankfurterProvider"]
