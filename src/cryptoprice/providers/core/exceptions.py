"""Exceptions raised by providers and by invocation-level validation."""
from cryptoprice.schemas import ErrorKind


class CryptoPriceError(Exception):
    """Base exception for application-level errors."""


class ConfigError(CryptoPriceError):
    """Invalid invocation: empty symbol list, unknown provider, bad settings file."""


class ProviderError(CryptoPriceError):
    """A provider could not produce a quote. Carries the taxonomy kind."""

    kind: ErrorKind = ErrorKind.PARSE_ERROR

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class MissingCredentialsError(ProviderError):
    kind = ErrorKind.MISSING_CREDENTIALS


class UnknownSymbolError(ProviderError):
    kind = ErrorKind.UNKNOWN_SYMBOL


class UnsupportedCurrencyError(ProviderError):
    kind = ErrorKind.UNSUPPORTED_CURRENCY


class PayloadError(ProviderError):
    """Response payload did not match the expected shape."""

    kind = ErrorKind.PARSE_ERROR


class ProviderApiError(ProviderError):
    """Provider reported an error in a response body (or a non-2xx status)."""

    kind = ErrorKind.HTTP_STATUS
