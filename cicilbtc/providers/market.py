"""BTC spot price providers.

    BTC1  CoinGecko  USD + IDR in one response
    BTC2  Binance    BTCUSDT, IDR via FX chain
    BTC3  Coinbase   BTC-USD, IDR via FX chain

USD-only providers call the FX chain after their own request succeeds, never
concurrently with it. The source note names the price service and, where
used, the FX service.
"""

from abc import abstractmethod
from typing import Callable, Optional, Sequence

from cicilbtc.core.fallback import try_in_order
from cicilbtc.core.http import DEFAULT_TIMEOUT_SECONDS, DEFAULT_USER_AGENT
from cicilbtc.core.logger import logger
from cicilbtc.providers.base import PriceProvider, dig, positive_number, to_number
from cicilbtc.models.datatypes import FxQuote, Number, PriceQuote

_COINGECKO_URL = "https://api.coingecko.com/api/v3/simple/price"
_BINANCE_URL = "https://api.binance.com/api/v3/ticker/price"
_COINBASE_URL = "https://api.coinbase.com/v2/prices/BTC-USD/spot"


class CoinGeckoProvider(PriceProvider):
    """CoinGecko ``/simple/price``, quotes USD and IDR directly.

    Args:
        api_key: Optional CoinGecko demo key, sent as ``x-cg-demo-api-key``.
    """

    label = "BTC1"
    name = "CoinGecko"

    def __init__(
        self,
        api_key: str = "",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        super().__init__(timeout=timeout, user_agent=user_agent)
        self.api_key = api_key

    def fetch(self) -> PriceQuote:
        headers = {"x-cg-demo-api-key": self.api_key} if self.api_key else None
        payload = self._get_json(
            _COINGECKO_URL,
            params={"ids": "bitcoin", "vs_currencies": "usd,idr"},
            headers=headers,
        )
        usd = positive_number(dig(payload, "bitcoin", "usd"), self.label, "usd price")
        idr = positive_number(dig(payload, "bitcoin", "idr"), self.label, "idr price")
        logger.info(f"{self.label}: BTC = {usd} USD / {idr} IDR")
        return PriceQuote(usd=usd, idr=idr, source_note="BTC: CoinGecko (USD+IDR)")


class _UsdPriceProvider(PriceProvider):
    """A USD-only price provider that converts to IDR through an FX chain.

    Args:
        fx_chain: Zero-argument callable returning an :class:`FxQuote`.
    """

    pair: str = ""

    def __init__(
        self,
        fx_chain: Callable[[], FxQuote],
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        super().__init__(timeout=timeout, user_agent=user_agent)
        self.fx_chain = fx_chain

    def fetch(self) -> PriceQuote:
        usd = self._fetch_usd()
        fx = self.fx_chain()
        idr = _convert(usd, fx.rate)
        logger.info(f"{self.label}: BTC = {usd} USD × {fx.rate} = {idr} IDR")
        return PriceQuote(
            usd=usd,
            idr=idr,
            source_note=f"BTC: {self.name} ({self.pair}) + FX: {fx.provider}",
        )

    @abstractmethod
    def _fetch_usd(self) -> Number:
        """Return the BTC price in USD from this provider alone."""
        pass


class BinanceProvider(_UsdPriceProvider):
    """Binance ``ticker/price`` for BTCUSDT (USDT treated as USD)."""

    label = "BTC2"
    name = "Binance"
    pair = "BTCUSDT"

    def _fetch_usd(self) -> Number:
        payload = self._get_json(_BINANCE_URL, params={"symbol": self.pair})
        return positive_number(dig(payload, "price"), self.label, "price")


class CoinbaseProvider(_UsdPriceProvider):
    """Coinbase ``prices/BTC-USD/spot``."""

    label = "BTC3"
    name = "Coinbase"
    pair = "BTC-USD"

    def _fetch_usd(self) -> Number:
        payload = self._get_json(_COINBASE_URL)
        return positive_number(dig(payload, "data", "amount"), self.label, "amount")


class PriceChain:
    """Zero-argument callable running the price providers in priority order."""

    def __init__(self, providers: Sequence[PriceProvider]) -> None:
        self.providers = list(providers)

    def __call__(self) -> PriceQuote:
        return try_in_order("BTC", *(p.fetch for p in self.providers))


def default_price_providers(
    fx_chain: Callable[[], FxQuote],
    timeout: float,
    user_agent: str,
    coingecko_api_key: Optional[str] = None,
) -> list:
    """Return the three price providers in production priority order."""
    return [
        CoinGeckoProvider(api_key=coingecko_api_key or "", timeout=timeout, user_agent=user_agent),
        BinanceProvider(fx_chain, timeout=timeout, user_agent=user_agent),
        CoinbaseProvider(fx_chain, timeout=timeout, user_agent=user_agent),
    ]


def _convert(usd: Number, rate: Number) -> Number:
    """``usd * rate``, collapsed to an int when the product is whole."""
    return to_number(usd * rate)
