"""Map raw provider values onto the canonical Quote model."""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from cryptoprice.providers.core.exceptions import (PayloadError,
                                                   UnsupportedCurrencyError)
from cryptoprice.schemas import ProviderId, Quote, utcnow


def to_decimal(raw: Any, field: str = "value") -> Decimal:
    """Convert a provider number (Decimal, int, str or float) to an exact finite Decimal.

    Floats go through their shortest repr so 0.1 stays 0.1. Providers should
    decode JSON with parse_float=Decimal so this path is rarely needed.
    """
    if isinstance(raw, bool) or raw is None:
        raise PayloadError(f"{field} is not a number: {raw!r}")
    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, int):
        value = Decimal(raw)
    elif isinstance(raw, float):
        value = Decimal(repr(raw))
    elif isinstance(raw, str):
        try:
            value = Decimal(raw.strip())
        except InvalidOperation as exc:
            raise PayloadError(f"{field} is not a number: {raw!r}") from exc
    else:
        raise PayloadError(f"{field} has unexpected type {type(raw).__name__}")
    if not value.is_finite():
        raise PayloadError(f"{field} is not finite: {raw!r}")
    return value


def optional_decimal(raw: Any, field: str = "value") -> Decimal | None:
    """Like to_decimal, but None stays None (no data is not zero)."""
    if raw is None:
        return None
    return to_decimal(raw, field)


@dataclass(frozen=True)
class QuoteNormalizer:
    """Builds Quotes for one provider and validates requested currencies."""

    provider: ProviderId
    supported_currencies: frozenset[str]

    def check_currency(self, currency: str) -> str:
        """Return the upper-cased code or raise UnsupportedCurrencyError."""
        code = currency.strip().upper()
        if code not in self.supported_currencies:
            raise UnsupportedCurrencyError(
                f"Currency '{code}' is not supported by {self.provider.value}"
            )
        return code

    def build_quote(
        self,
        symbol: str,
        currency: str,
        price: Any,
        *,
        name: str | None = None,
        change_pct: Any = None,
        market_cap: Any = None,
        timestamp: datetime | None = None,
    ) -> Quote:
        """Normalize raw fields into a Quote. Price is mandatory and non-negative."""
        value = to_decimal(price, "price")
        if value < 0:
            raise PayloadError(f"price is negative: {value}")
        return Quote(
            symbol=symbol.upper(),
            name=name,
            currency=currency.upper(),
            price=value,
            change_pct=optional_decimal(change_pct, "change_pct"),
            market_cap=optional_decimal(market_cap, "market_cap"),
            provider=self.provider,
            timestamp=timestamp or utcnow(),
        )
