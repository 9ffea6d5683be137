"""Shared fixtures: a fake ``requests.get`` routed by URL."""

import logging
from datetime import datetime, timezone

import pytest
import requests

FNG_URL = "https://api.alternative.me/fng/"
COINGECKO_URL = "https://api.coingecko.com/api/v3/simple/price"
BINANCE_URL = "https://api.binance.com/api/v3/ticker/price"
COINBASE_URL = "https://api.coinbase.com/v2/prices/BTC-USD/spot"
FX1_URL = "https://open.er-api.com/v6/latest/USD"
FX2_URL = "https://api.frankfurter.app/latest"
FX3_URL = "https://api.exchangerate.host/latest"

FIXED_NOW = datetime(2025, 1, 15, 3, 4, 5, 678000, tzinfo=timezone.utc)


class FakeResponse:
    """Minimal stand-in for ``requests.Response``."""

    def __init__(self, payload=None, status_code=200, bad_json=False):
        self.payload = payload
        self.status_code = status_code
        self.bad_json = bad_json
        self.closed = False

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self.bad_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


class FakeHttp:
    """Callable replacing ``requests.get``.

    ``routes`` maps a URL (without query string) to a :class:`FakeResponse`,
    an exception instance to raise, or a list of those consumed in order.
    Unrouted URLs answer HTTP 503.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def route(self, url, *responses):
        self.routes[url] = list(responses) if len(responses) > 1 else responses[0]

    def ok(self, url, payload):
        self.route(url, FakeResponse(payload))

    def fail(self, url, status=500):
        self.route(url, FakeResponse(status_code=status))

    def urls(self):
        return [c["url"] for c in self.calls]

    def __call__(self, url, params=None, headers=None, timeout=None, **kwargs):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        outcome = self.routes.get(url, FakeResponse(status_code=503))
        if isinstance(outcome, list):
            outcome = outcome.pop(0) if len(outcome) > 1 else outcome[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def http(monkeypatch):
    fake = FakeHttp()
    monkeypatch.setattr(requests, "get", fake)
    return fake


@pytest.fixture
def no_sleep(monkeypatch):
    """Record retry delays instead of sleeping."""
    delays = []
    monkeypatch.setattr("cicilbtc.core.retry.sleep", delays.append)
    return delays


@pytest.fixture
def config(tmp_path):
    return {
        "log_path": str(tmp_path / "data" / "log.json"),
        "http": {"timeout_seconds": 12, "user_agent": "cicilbtc-bot/1.0"},
        "retry": {"max_attempts": 3, "delay_seconds": 1.5},
    }


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers attached by ``setup_logger`` during a test."""
    yield
    package_logger = logging.getLogger("cicilbtc")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
