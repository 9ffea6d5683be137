"""USD→IDR exchange-rate providers.

All three services answer with ``{"rates": {"IDR": <rate>, ...}, ...}``; they
differ only in URL and query parameters. Used only by price providers that
quote BTC in USD alone.
"""

from typing import Sequence

from cicilbtc.core.fallback import try_in_order
from cicilbtc.core.logger import logger
from cicilbtc.providers.base import FxProvider, dig, positive_number
from cicilbtc.models.datatypes import FxQuote


class _RatesFxProvider(FxProvider):
    url: str = ""
    params: dict = {}

    def fetch(self) -> FxQuote:
        payload = self._get_json(self.url, params=self.params or None)
        rate = positive_number(dig(payload, "rates", "IDR"), self.label, "IDR rate")
        logger.info(f"{self.label}: 1 USD = {rate} IDR ({self.name})")
        return FxQuote(rate=rate, provider=self.name)


class OpenErApiProvider(_RatesFxProvider):
    label = "FX1"
    name = "open.er-api.com"
    url = "https://open.er-api.com/v6/latest/USD"


class FrankfurterProvider(_RatesFxProvider):
    label = "FX2"
    name = "frankfurter.app"
    url = "https://api.frankfurter.app/latest"
    params = {"from": "USD", "to": "IDR"}


class ExchangeRateHostProvider(_RatesFxProvider):
    label = "FX3"
    name = "exchangerate.host"
    url = "https://api.exchangerate.host/latest"
    params = {"base": "USD", "symbols": "IDR"}


class FxChain:
    """Zero-argument callable running the FX providers in priority order.

    Args:
        providers: FX providers, highest priority first.
    """

    def __init__(self, providers: Sequence[FxProvider]) -> None:
        self.providers = list(providers)

    def __call__(self) -> FxQuote:
        return try_in_order("FX", *(p.fetch for p in self.providers))


def default_fx_providers(timeout: float, user_agent: str) -> list:
    """Return the three FX providers in production priority order."""
    return [
        OpenErApiProvider(timeout=timeout, user_agent=user_agent),
        FrankfurterProvider(timeout=timeout, user_agent=user_agent),
        ExchangeRateHostProvider(timeout=timeout, user_agent=user_agent),
    ]
