"""Pydantic schemas for quotes and per-symbol fetch outcomes. Built per invocation."""
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class ProviderId(str, Enum):
    """Identifiers of the supported price providers (used in CLI flags)."""

    COINGECKO = "coingecko"
    COINMARKETCAP = "cmc"

    @classmethod
    def parse(cls, value: str) -> "ProviderId":
        """Parse a provider id case-insensitively; 'coinmarketcap' is an alias of 'cmc'."""
        key = value.strip().lower()
        if key == "coinmarketcap":
            return cls.COINMARKETCAP
        return cls(key)


class ErrorKind(str, Enum):
    """Closed taxonomy of per-symbol failures."""

    MISSING_CREDENTIALS = "missing_credentials"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    HTTP_STATUS = "http_status"
    UNKNOWN_SYMBOL = "unknown_symbol"
    UNSUPPORTED_CURRENCY = "unsupported_currency"
    PARSE_ERROR = "parse_error"


class Quote(BaseModel):
    """Normalized price of one symbol in one currency from one provider."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str | None = None
    currency: str
    price: Decimal = Field(ge=0, allow_inf_nan=False)
    change_pct: Decimal | None = None  # 24h change, unset when the provider omits it
    market_cap: Decimal | None = None
    provider: ProviderId
    timestamp: datetime = Field(default_factory=utcnow)


class FetchError(BaseModel):
    """Why a symbol could not be quoted."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str
    status_code: int | None = None
    provider: ProviderId | None = None

    def __str__(self) -> str:
        if self.kind is ErrorKind.HTTP_STATUS and self.status_code is not None:
            return f"{self.kind.value}({self.status_code}): {self.message}"
        return f"{self.kind.value}: {self.message}"


class FetchResult(BaseModel):
    """Outcome for one requested symbol: exactly one of quote or error is set."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    quote: Quote | None = None
    error: FetchError | None = None

    @model_validator(mode="after")
    def _one_outcome(self) -> "FetchResult":
        if (self.quote is None) == (self.error is None):
            raise ValueError("FetchResult needs exactly one of quote or error")
        return self

    @property
    def ok(self) -> bool:
        return self.quote is not None

    @classmethod
    def success(cls, quote: Quote) -> "FetchResult":
        return cls(symbol=quote.symbol, quote=quote)

    @classmethod
    def failure(cls, symbol: str, error: FetchError) -> "FetchResult":
        return cls(symbol=symbol, error=error)


class Conversion(BaseModel):
    """A fiat amount converted into a coin or another fiat currency."""

    model_config = ConfigDict(frozen=True)

    from_amount: Decimal
    from_currency: str
    to_symbol: str
    to_name: str
    to_amount: Decimal
    rate: Decimal  # price of one target unit in from_currency
    provider: str
    timestamp: datetime = Field(default_factory=utcnow)


class ConversionResult(BaseModel):
    """Outcome for one calc-mode target."""

    model_config = ConfigDict(frozen=True)

    target: str
    conversion: Conversion | None = None
    error: FetchError | None = None

    @property
    def ok(self) -> bool:
        return self.conversion is not None


__all__ = [
    "Conversion",
    "ConversionResult",
    "ErrorKind",
    "FetchError",
    "FetchResult",
    "ProviderId",
    "Quote",
    "utcnow",
]
