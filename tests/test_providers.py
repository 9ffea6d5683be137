import pytest

from cicilbtc.core.errors import FetchError, ValidationError
from cicilbtc.models.datatypes import FxQuote
from cicilbtc.providers.base import dig, positive_number, to_number
from cicilbtc.providers.fx import (
    ExchangeRateHostProvider, FrankfurterProvider, FxChain, OpenErApiProvider,
)
from cicilbtc.providers.market import (
    BinanceProvider, CoinbaseProvider, CoinGeckoProvider, PriceChain,
)
from cicilbtc.providers.sentiment import AlternativeMeProvider

from .conftest import (
    BINANCE_URL, COINBASE_URL, COINGECKO_URL, FNG_URL, FX1_URL, FX2_URL, FX3_URL,
)


def fixed_fx(rate, provider="fx.test"):
    return lambda: FxQuote(rate=rate, provider=provider)


# ── helpers ───────────────────────────────────────────────────────────────────

def test_dig_walks_dicts_and_lists():
    payload = {"data": [{"value": "55"}]}
    assert dig(payload, "data", 0, "value") == "55"
    assert dig(payload, "data", 1, "value") is None
    assert dig(payload, "missing", "x") is None
    assert dig(None, "data") is None


@pytest.mark.parametrize("raw, expected", [
    (60000, 60000), ("60000", 60000), ("60000.50", 60000.5), (1.0, 1),
    (None, None), ("abc", None), (True, None), ("nan", None), ([], None),
])
def test_to_number(raw, expected):
    assert to_number(raw) == expected


@pytest.mark.parametrize("raw", [None, 0, "0", "", "abc", -5, False])
def test_positive_number_rejects_unusable_values(raw):
    with pytest.raises(ValidationError):
        positive_number(raw, "FX1", "IDR rate")


# ── sentiment ─────────────────────────────────────────────────────────────────

def test_fng_parses_latest_point(http):
    http.ok(FNG_URL, {"data": [
        {"value": "55", "value_classification": "Greed", "timestamp": "1700000000"},
    ]})

    quote = AlternativeMeProvider().fetch()

    assert (quote.value, quote.label, quote.timestamp) == (55, "Greed", 1700000000)
    assert http.calls[0]["params"] == {"limit": 1, "format": "json"}


def test_fng_accepts_extreme_fear_zero(http):
    http.ok(FNG_URL, {"data": [
        {"value": "0", "value_classification": "Extreme Fear", "timestamp": "1700000000"},
    ]})
    assert AlternativeMeProvider().fetch().value == 0


@pytest.mark.parametrize("payload", [
    {"data": []},
    {},
    {"data": [{"value": "abc", "value_classification": "Greed", "timestamp": "1"}]},
    {"data": [{"value": "101", "value_classification": "Greed", "timestamp": "1"}]},
    {"data": [{"value": "50", "value_classification": "Neutral"}]},
    {"data": [{"value": "50", "timestamp": "1700000000"}]},
])
def test_fng_rejects_incomplete_payloads(http, payload):
    http.ok(FNG_URL, payload)
    with pytest.raises(ValidationError):
        AlternativeMeProvider().fetch()


# ── fx ────────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("cls, url, name", [
    (OpenErApiProvider, FX1_URL, "open.er-api.com"),
    (FrankfurterProvider, FX2_URL, "frankfurter.app"),
    (ExchangeRateHostProvider, FX3_URL, "exchangerate.host"),
])
def test_fx_providers_read_idr_rate(http, cls, url, name):
    http.ok(url, {"rates": {"IDR": 15800.5}})
    assert cls().fetch() == FxQuote(rate=15800.5, provider=name)


def test_fx_zero_rate_fails_and_chain_moves_on(http):
    http.ok(FX1_URL, {"rates": {"IDR": 0}})
    http.ok(FX2_URL, {"rates": {"IDR": 15750}})

    with pytest.raises(ValidationError):
        OpenErApiProvider().fetch()

    chain = FxChain([OpenErApiProvider(), FrankfurterProvider(), ExchangeRateHostProvider()])
    assert chain() == FxQuote(rate=15750, provider="frankfurter.app")
    assert FX3_URL not in http.urls()


def test_fx_chain_exhausted_raises_last_error(http):
    http.ok(FX1_URL, {"rates": {}})
    http.fail(FX2_URL, 502)
    http.fail(FX3_URL, 404)

    chain = FxChain([OpenErApiProvider(), FrankfurterProvider(), ExchangeRateHostProvider()])
    with pytest.raises(FetchError) as info:
        chain()
    assert info.value.label == "FX3"
    assert info.value.status == 404


# ── price ─────────────────────────────────────────────────────────────────────

def test_coingecko_returns_usd_and_idr(http):
    http.ok(COINGECKO_URL, {"bitcoin": {"usd": 60000, "idr": 960000000}})

    quote = CoinGeckoProvider().fetch()

    assert (quote.usd, quote.idr) == (60000, 960000000)
    assert quote.source_note == "BTC: CoinGecko (USD+IDR)"
    assert http.calls[0]["headers"].get("x-cg-demo-api-key") is None


def test_coingecko_sends_demo_key_when_configured(http):
    http.ok(COINGECKO_URL, {"bitcoin": {"usd": 1, "idr": 2}})
    CoinGeckoProvider(api_key="demo-123").fetch()
    assert http.calls[0]["headers"]["x-cg-demo-api-key"] == "demo-123"


def test_coingecko_missing_idr_is_invalid(http):
    http.ok(COINGECKO_URL, {"bitcoin": {"usd": 60000}})
    with pytest.raises(ValidationError):
        CoinGeckoProvider().fetch()


def test_binance_converts_with_fx_rate(http):
    http.ok(BINANCE_URL, {"symbol": "BTCUSDT", "price": "60000.00000000"})

    quote = BinanceProvider(fixed_fx(15800, "open.er-api.com")).fetch()

    assert quote.usd == 60000
    assert quote.idr == 948000000
    assert quote.source_note == "BTC: Binance (BTCUSDT) + FX: open.er-api.com"
    assert http.calls[0]["params"] == {"symbol": "BTCUSDT"}


def test_coinbase_converts_with_fx_rate(http):
    http.ok(COINBASE_URL, {"data": {"amount": "50000.5", "currency": "USD"}})

    quote = CoinbaseProvider(fixed_fx(2, "frankfurter.app")).fetch()

    assert quote.usd == 50000.5
    assert quote.idr == 100001
    assert quote.source_note == "BTC: Coinbase (BTC-USD) + FX: frankfurter.app"


def test_usd_provider_skips_fx_when_its_own_request_fails(http):
    http.fail(BINANCE_URL, 451)
    fx_calls = []

    def fx():
        fx_calls.append(1)
        return FxQuote(rate=1, provider="x")

    with pytest.raises(FetchError):
        BinanceProvider(fx).fetch()
    assert fx_calls == []


def test_price_request_precedes_fx_request(http):
    http.ok(COINBASE_URL, {"data": {"amount": "100"}})
    http.ok(FX1_URL, {"rates": {"IDR": 10}})

    CoinbaseProvider(FxChain([OpenErApiProvider()])).fetch()

    assert http.urls() == [COINBASE_URL, FX1_URL]


def test_price_chain_falls_back_in_order(http):
    http.fail(COINGECKO_URL, 429)
    http.ok(BINANCE_URL, {"price": "0"})
    http.ok(COINBASE_URL, {"data": {"amount": "61000"}})

    chain = PriceChain([
        CoinGeckoProvider(),
        BinanceProvider(fixed_fx(16000, "fx1")),
        CoinbaseProvider(fixed_fx(16000, "fx1")),
    ])
    quote = chain()

    assert quote.usd == 61000
    assert quote.idr == 976000000
    assert quote.source_note.startswith("BTC: Coinbase")
    assert http.urls() == [COINGECKO_URL, BINANCE_URL, COINBASE_URL]
