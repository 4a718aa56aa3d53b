"""Frankfurter fiat exchange-rate provider."""
from cryptoprice.providers.fiat.frankfurter.frankfurter_provider import \
    FrankfurterProvider

__all__ = ["FrankfurterProvider"]
