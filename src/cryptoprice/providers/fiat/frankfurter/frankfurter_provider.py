"""Frankfurter (ECB) exchange-rate provider for fiat-to-fiat conversion."""
import logging
from decimal import Decimal

import httpx
from pydantic import BaseModel

from cryptoprice.providers.core import (PayloadError, build_http_client,
                                        to_decimal)
from cryptoprice.providers.core.price_provider_abc import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)


class FrankfurterLatestParams(BaseModel):
    """Params for /latest."""

    base: str
    symbols: str

    def to_query(self) -> dict[str, str]:
        return {"from": self.base, "to": self.symbols}


class FrankfurterProvider:
    """Latest fiat rates from https://api.frankfurter.dev (no key required).

    A rate means "1 base = rate target", e.g. 1 USD = 0.85 EUR.
    """

    BASE_URL = "https://api.frankfurter.dev/v1"
    display_name = "Frankfurter/ECB"

    def __init__(
        self,
        *,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._base_url = (base_url or self.BASE_URL).rstrip("/")
        self._owns_client = client is None
        self._client = client if client is not None else build_http_client(timeout)
        self._timeout = timeout

    async def get_rates(self, base: str, targets: list[str]) -> dict[str, Decimal]:
        """Fetch rates from base into each target. Raises httpx/Provider errors."""
        params = FrankfurterLatestParams(
            base=base.upper(), symbols=",".join(t.upper() for t in targets)
        )
        url = f"{self._base_url}/latest"
        logger.debug("GET %s params=%s", url, params.to_query())
        response = await self._client.get(
            url, params=params.to_query(), timeout=self._timeout
        )
        response.raise_for_status()
        payload = response.json(parse_float=Decimal)
        rates = payload.get("rates") if isinstance(payload, dict) else None
        if not isinstance(rates, dict):
            raise PayloadError("Frankfurter response has no 'rates' object")
        logger.debug("Frankfurter rates: %s", rates)
        return {code.upper(): to_decimal(rate, f"rate {code}") for code, rate in rates.items()}

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            await self._client.aclose()
