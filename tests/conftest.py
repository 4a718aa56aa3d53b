"""
Shared test fixtures

- load_fixture / fixture_response: recorded provider payloads from tests/fixtures
- RecordingTransport: httpx.MockTransport that records every request
- StubProvider: in-memory per-symbol provider with optional delays and errors
- clean_env: isolates tests from the developer's env vars, .env and config file
"""

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import httpx
import pytest

from cryptoprice.providers.core import PriceProviderABC, UnknownSymbolError
from cryptoprice.schemas import ProviderId, Quote

FIXTURES_DIR = Path(__file__).parent / "fixtures"
FIXED_TS = datetime(2026, 1, 1, tzinfo=timezone.utc)


def load_fixture(name: str) -> bytes:
    return (FIXTURES_DIR / name).read_bytes()


def fixture_response(name: str, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=load_fixture(name),
        headers={"Content-Type": "application/json"},
    )


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


def make_client(transport: httpx.MockTransport) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=transport)


class StubProvider(PriceProviderABC):
    """Per-symbol provider answering from a dict, for resolver tests."""

    id = ProviderId.COINGECKO
    display_name = "Stub"
    supported_currencies = frozenset({"USD", "EUR"})
    batch_requests = False

    def __init__(
        self,
        prices: dict[str, str],
        *,
        provider_id: ProviderId = ProviderId.COINGECKO,
        delays: dict[str, float] | None = None,
        errors: dict[str, Exception] | None = None,
        timeout: float = 1.0,
    ) -> None:
        self.id = provider_id
        self.display_name = f"Stub-{provider_id.value}"
        self.prices = prices
        self.delays = delays or {}
        self.errors = errors or {}
        self.calls: list[str] = []
        super().__init__(
            client=make_client(httpx.MockTransport(lambda r: httpx.Response(500))),
            timeout=timeout,
        )

    async def _fetch_one(self, symbol: str, currency: str, credentials: str | None) -> Quote:
        self.calls.append(symbol)
        if symbol in self.delays:
            await asyncio.sleep(self.delays[symbol])
        if symbol in self.errors:
            raise self.errors[symbol]
        if symbol not in self.prices:
            raise UnknownSymbolError(f"stub has no data for '{symbol}'")
        return self._normalizer.build_quote(
            symbol, currency, Decimal(self.prices[symbol]), timestamp=FIXED_TS
        )


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No API key, no .env, no user config file."""
    monkeypatch.delenv("COINMARKETCAP_API_KEY", raising=False)
    for name in (
        "CRYPTOPRICE_DEFAULT_PROVIDER",
        "CRYPTOPRICE_DEFAULT_CURRENCY",
        "CRYPTOPRICE_REQUEST_TIMEOUT",
        "CRYPTOPRICE_INVOCATION_TIMEOUT",
        "CRYPTOPRICE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
    return tmp_path
