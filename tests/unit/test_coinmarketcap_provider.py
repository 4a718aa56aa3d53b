"""
Unit Tests for CoinMarketCapProvider

Run with:
    pytest tests/unit/test_coinmarketcap_provider.py -v
"""

from decimal import Decimal

import httpx
import pytest

from cryptoprice.providers import CoinMarketCapProvider
from cryptoprice.schemas import ErrorKind, ProviderId
from tests.conftest import RecordingTransport, fixture_response, make_client

BASE_URL = "https://cmc.test/v1"
API_KEY = "test-api-key"


def _provider(transport: httpx.MockTransport) -> CoinMarketCapProvider:
    return CoinMarketCapProvider(base_url=BASE_URL, client=make_client(transport))


class TestCredentials:
    """Tests for the API key requirement"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("key", [None, ""])
    async def test_missing_key_fails_fast(self, key):
        """Verify every symbol gets missing_credentials and nothing is sent"""
        transport = RecordingTransport(lambda r: fixture_response("coinmarketcap_quotes_latest_usd.json"))
        provider = _provider(transport)

        results = await provider.fetch_quotes(["btc", "eth"], "usd", key)

        assert list(results) == ["BTC", "ETH"]
        assert {r.error.kind for r in results.values()} == {ErrorKind.MISSING_CREDENTIALS}
        assert len(transport.requests) == 0

    @pytest.mark.asyncio
    async def test_key_is_sent_as_header(self):
        transport = RecordingTransport(lambda r: fixture_response("coinmarketcap_quotes_latest_usd.json"))
        provider = _provider(transport)

        await provider.fetch_quotes(["btc", "eth"], "usd", API_KEY)

        request = transport.requests[0]
        assert request.headers["X-CMC_PRO_API_KEY"] == API_KEY
        assert request.url.path == "/v1/cryptocurrency/quotes/latest"
        assert request.url.params["symbol"] == "BTC,ETH"
        assert request.url.params["convert"] == "USD"
        assert request.url.params["skip_invalid"] == "true"


class TestParsing:
    """Tests for normalizing the quotes/latest payload"""

    @pytest.mark.asyncio
    async def test_parses_objects_and_lists(self):
        """Verify single-object and array entries both become Quotes"""
        transport = RecordingTransport(lambda r: fixture_response("coinmarketcap_quotes_latest_usd.json"))
        provider = _provider(transport)

        results = await provider.fetch_quotes(["btc", "eth"], "usd", API_KEY)

        btc, eth = results["BTC"].quote, results["ETH"].quote
        assert btc.price == Decimal("50000.12345678")
        assert btc.change_pct == Decimal("2.25")
        assert btc.market_cap == Decimal("1000000000.0")
        assert btc.name == "Bitcoin"
        assert btc.provider is ProviderId.COINMARKETCAP
        assert eth.price == Decimal("3000.0")
        assert eth.change_pct is None
        assert eth.currency == "USD"

    @pytest.mark.asyncio
    async def test_null_price_is_unknown_not_zero(self):
        transport = RecordingTransport(lambda r: fixture_response("coinmarketcap_quotes_latest_usd.json"))
        provider = _provider(transport)

        results = await provider.fetch_quotes(["btc", "dead", "nope"], "usd", API_KEY)

        assert results["BTC"].ok
        assert results["DEAD"].quote is None
        assert results["DEAD"].error.kind is ErrorKind.UNKNOWN_SYMBOL
        assert results["NOPE"].error.kind is ErrorKind.UNKNOWN_SYMBOL

    @pytest.mark.asyncio
    async def test_invalid_symbol_beside_valid_one(self):
        """Verify an invalid ticker does not turn the whole batch into a 400"""

        def handler(request: httpx.Request) -> httpx.Response:
            # quotes/latest rejects the request when an invalid symbol is not skipped
            if request.url.params.get("skip_invalid") != "true":
                return httpx.Response(
                    400,
                    json={"status": {"error_code": 400, "error_message": 'Invalid value for "symbol"'}},
                )
            return fixture_response("coinmarketcap_quotes_latest_usd.json")

        provider = _provider(RecordingTransport(handler))

        results = await provider.fetch_quotes(["btc", "notacoin"], "usd", API_KEY)

        assert results["BTC"].quote.price == Decimal("50000.12345678")
        assert results["NOTACOIN"].error.kind is ErrorKind.UNKNOWN_SYMBOL

    @pytest.mark.asyncio
    async def test_missing_convert_entry_is_parse_error(self):
        payload = {"data": {"BTC": {"name": "Bitcoin", "symbol": "BTC", "quote": {"EUR": {"price": 1}}}}}
        provider = _provider(RecordingTransport(lambda r: httpx.Response(200, json=payload)))

        results = await provider.fetch_quotes(["btc"], "usd", API_KEY)

        assert results["BTC"].error.kind is ErrorKind.PARSE_ERROR

    @pytest.mark.asyncio
    async def test_malformed_entry_fails_alone(self):
        payload = {
            "data": {
                "BTC": {"symbol": "BTC"},
                "ETH": {"name": "Ethereum", "symbol": "ETH", "quote": {"USD": {"price": 3000}}},
            }
        }
        provider = _provider(RecordingTransport(lambda r: httpx.Response(200, json=payload)))

        results = await provider.fetch_quotes(["btc", "eth"], "usd", API_KEY)

        assert results["BTC"].error.kind is ErrorKind.PARSE_ERROR
        assert results["ETH"].quote.price == Decimal(3000)


class TestBatchFailures:
    """Tests for whole-request failures"""

    @pytest.mark.asyncio
    async def test_non_success_status(self):
        provider = _provider(RecordingTransport(lambda r: httpx.Response(500, text="internal error")))

        results = await provider.fetch_quotes(["btc", "eth"], "usd", API_KEY)

        for result in results.values():
            assert result.error.kind is ErrorKind.HTTP_STATUS
            assert result.error.status_code == 500

    @pytest.mark.asyncio
    async def test_error_body_message_is_kept(self):
        """Verify a 401 keeps its HTTP code and CoinMarketCap's explanation"""
        provider = _provider(
            RecordingTransport(lambda r: fixture_response("coinmarketcap_error_status.json", 401))
        )

        results = await provider.fetch_quotes(["btc"], "usd", API_KEY)

        error = results["BTC"].error
        assert error.kind is ErrorKind.HTTP_STATUS
        assert error.status_code == 401
        assert "API key missing" in error.message

    @pytest.mark.asyncio
    async def test_error_status_in_successful_reply(self):
        provider = _provider(RecordingTransport(lambda r: fixture_response("coinmarketcap_error_status.json")))

        results = await provider.fetch_quotes(["btc"], "usd", API_KEY)

        error = results["BTC"].error
        assert error.kind is ErrorKind.HTTP_STATUS
        assert error.status_code is None
        assert "API key missing" in error.message
        assert "1002" in error.message

    @pytest.mark.asyncio
    async def test_malformed_json(self):
        provider = _provider(RecordingTransport(lambda r: httpx.Response(200, text="{broken-json")))

        results = await provider.fetch_quotes(["btc"], "usd", API_KEY)

        assert results["BTC"].error.kind is ErrorKind.PARSE_ERROR

    @pytest.mark.asyncio
    async def test_empty_data_is_unknown(self):
        payload = {"status": {"error_message": None}, "data": {}}
        provider = _provider(RecordingTransport(lambda r: httpx.Response(200, json=payload)))

        results = await provider.fetch_quotes(["btc"], "usd", API_KEY)

        assert results["BTC"].error.kind is ErrorKind.UNKNOWN_SYMBOL
