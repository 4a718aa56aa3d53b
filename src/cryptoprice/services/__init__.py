"""Service layer: quote resolution across providers and calc-mode conversion."""
from cryptoprice.services.calc import (ConversionService, FiatAmount,
                                       parse_fiat_amount)
from cryptoprice.services.resolver import QuoteResolver

__all__ = [
    "ConversionService",
    "FiatAmount",
    "QuoteResolver",
    "parse_fiat_amount",
]
