"""Models for CoinMarketCap provider (API params and response shapes)."""
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field


class CmcQuotesLatestParams(BaseModel):
    """Params for /cryptocurrency/quotes/latest.

    Without skip_invalid one unknown symbol makes the whole request fail with 400.
    """

    symbol: str
    convert: str = "USD"
    skip_invalid: str = "true"


class CmcQuote(BaseModel):
    """One currency entry under a coin's 'quote' object."""

    price: Decimal | None = None
    percent_change_24h: Decimal | None = None
    market_cap: Decimal | None = None


class CmcCoin(BaseModel):
    """A coin entry in the 'data' object."""

    name: str
    symbol: str
    quote: dict[str, CmcQuote] = Field(default_factory=dict)


class CmcStatus(BaseModel):
    """Response 'status' block; a non-empty error_message means the call failed."""

    error_code: int = 0
    error_message: str | None = None


class CmcQuotesLatestResponse(BaseModel):
    """Top-level /cryptocurrency/quotes/latest body.

    Values in 'data' are a coin object, or a list of coins when several
    assets share a ticker; they are parsed per symbol so one bad entry does
    not spoil the others.
    """

    status: CmcStatus | None = None
    data: dict[str, Any] = Field(default_factory=dict)
