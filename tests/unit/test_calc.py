"""
Unit Tests for calc mode

Covers parsing '<amount><fiat>' tokens and converting an amount into crypto
and fiat targets.

Run with:
    pytest tests/unit/test_calc.py -v
"""

from decimal import Decimal

import httpx
import pytest

from cryptoprice.providers import FrankfurterProvider
from cryptoprice.providers.core import ConfigError
from cryptoprice.schemas import ErrorKind
from cryptoprice.services import (ConversionService, FiatAmount, QuoteResolver,
                                  parse_fiat_amount)
from tests.conftest import (RecordingTransport, StubProvider, fixture_response,
                            make_client)

FRANKFURTER_URL = "https://fx.test/v1"


def _service(
    prices: dict[str, str],
    fx_transport: httpx.MockTransport | None = None,
) -> tuple[ConversionService, StubProvider]:
    stub = StubProvider(prices)
    fx_transport = fx_transport or RecordingTransport(
        lambda r: fixture_response("frankfurter_latest_usd.json")
    )
    fiat = FrankfurterProvider(base_url=FRANKFURTER_URL, client=make_client(fx_transport))
    return ConversionService(QuoteResolver({stub.id: stub}), fiat), stub


USD_100 = FiatAmount(amount=Decimal("100"), currency="USD")


class TestParseFiatAmount:
    """Tests for parse_fiat_amount"""

    @pytest.mark.parametrize(
        "text, amount, currency",
        [
            ("3.5EUR", Decimal("3.5"), "EUR"),
            ("100usd", Decimal("100"), "USD"),
            (" 42gbp ", Decimal("42"), "GBP"),
            ("0.001Chf", Decimal("0.001"), "CHF"),
        ],
    )
    def test_amounts(self, text, amount, currency):
        parsed = parse_fiat_amount(text)
        assert parsed == FiatAmount(amount=amount, currency=currency)

    @pytest.mark.parametrize(
        "text",
        ["1inch", "3btc", "btc", "EUR", "-5USD", "0USD", "1.2.3EUR", "", "1e5USD"],
    )
    def test_not_amounts(self, text):
        """Verify coin tickers and invalid amounts fall through to a price lookup"""
        assert parse_fiat_amount(text) is None


class TestConvert:
    """Tests for ConversionService.convert"""

    @pytest.mark.asyncio
    async def test_crypto_and_fiat_targets_in_order(self):
        """Verify 100USD into xmr, eur, gbp keeps target order and exact math"""
        fx = RecordingTransport(lambda r: fixture_response("frankfurter_latest_usd.json"))
        service, _ = _service({"XMR": "150"}, fx)

        results = await service.convert(USD_100, ["xmr", "eur", "gbp"], "coingecko")

        assert [r.target for r in results] == ["XMR", "EUR", "GBP"]
        xmr, eur, gbp = (r.conversion for r in results)
        assert xmr.to_amount == Decimal(100) / Decimal(150)
        assert xmr.rate == Decimal("150")
        assert xmr.provider == "Stub-coingecko"
        assert eur.to_amount == Decimal("84.983")
        assert eur.rate == Decimal(1) / Decimal("0.84983")
        assert eur.to_name == "Euro"
        assert gbp.to_amount == Decimal("74.174")
        assert eur.provider == "Frankfurter/ECB"

        request = fx.requests[0]
        assert request.url.params["from"] == "USD"
        assert request.url.params["to"] == "EUR,GBP"

    @pytest.mark.asyncio
    async def test_fiat_only_skips_price_providers(self):
        service, stub = _service({"BTC": "50000"})

        (eur,) = await service.convert(USD_100, ["eur"], "coingecko")

        assert eur.ok
        assert stub.calls == []

    @pytest.mark.asyncio
    async def test_crypto_only_skips_fiat_provider(self):
        fx = RecordingTransport(lambda r: httpx.Response(500))
        service, _ = _service({"BTC": "50000"}, fx)

        (btc,) = await service.convert(USD_100, ["btc", "BTC"], "coingecko")

        assert btc.conversion.to_amount == Decimal("0.002")
        assert fx.requests == []

    @pytest.mark.asyncio
    async def test_missing_rate_is_unknown(self):
        service, _ = _service({})

        (chf,) = await service.convert(USD_100, ["chf"], "coingecko")

        assert chf.conversion is None
        assert chf.error.kind is ErrorKind.UNKNOWN_SYMBOL

    @pytest.mark.asyncio
    async def test_fiat_failure_does_not_spoil_crypto(self):
        fx = RecordingTransport(lambda r: httpx.Response(503))
        service, _ = _service({"BTC": "50000"}, fx)

        btc, eur = await service.convert(USD_100, ["btc", "eur"], "coingecko")

        assert btc.ok
        assert eur.error.kind is ErrorKind.HTTP_STATUS
        assert eur.error.status_code == 503

    @pytest.mark.asyncio
    async def test_unknown_coin(self):
        service, _ = _service({"BTC": "50000"})

        (nope,) = await service.convert(USD_100, ["notacoin"], "coingecko")

        assert nope.error.kind is ErrorKind.UNKNOWN_SYMBOL

    @pytest.mark.asyncio
    async def test_zero_price_cannot_be_converted(self):
        service, _ = _service({"DEAD": "0"})

        (dead,) = await service.convert(USD_100, ["dead"], "coingecko")

        assert dead.error.kind is ErrorKind.PARSE_ERROR

    @pytest.mark.asyncio
    async def test_no_targets(self):
        service, _ = _service({})
        with pytest.raises(ConfigError, match="at least one target"):
            await service.convert(USD_100, [], "coingecko")

    @pytest.mark.asyncio
    async def test_bad_provider_fails_before_requests(self):
        fx = RecordingTransport(lambda r: fixture_response("frankfurter_latest_usd.json"))
        service, _ = _service({"BTC": "1"}, fx)

        with pytest.raises(ConfigError):
            await service.convert(USD_100, ["eur", "btc"], "kraken")
        assert fx.requests == []
