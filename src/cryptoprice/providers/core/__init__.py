"""Core provider abstractions."""
from cryptoprice.providers.core.error_mapper import (PROVIDER_EXCEPTIONS,
                                                     ProviderErrorMapper)
from cryptoprice.providers.core.exceptions import (ConfigError,
                                                   CryptoPriceError,
                                                   MissingCredentialsError,
                                                   PayloadError,
                                                   ProviderApiError,
                                                   ProviderError,
                                                   UnknownSymbolError,
                                                   UnsupportedCurrencyError)
from cryptoprice.providers.core.normalizer import (QuoteNormalizer,
                                                   optional_decimal,
                                                   to_decimal)
from cryptoprice.providers.core.price_provider_abc import (PriceProviderABC,
                                                           build_http_client)

__all__ = [
    "ConfigError",
    "CryptoPriceError",
    "MissingCredentialsError",
    "PROVIDER_EXCEPTIONS",
    "PayloadError",
    "PriceProviderABC",
    "ProviderApiError",
    "ProviderError",
    "ProviderErrorMapper",
    "QuoteNormalizer",
    "UnknownSymbolError",
    "UnsupportedCurrencyError",
    "build_http_client",
    "optional_decimal",
    "to_decimal",
]
