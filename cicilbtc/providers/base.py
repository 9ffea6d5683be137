"""Abstract base classes for quote providers, plus shared field extraction."""

import math
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from cicilbtc.core.errors import ValidationError
from cicilbtc.core.http import DEFAULT_TIMEOUT_SECONDS, DEFAULT_USER_AGENT, fetch_json
from cicilbtc.models.datatypes import FxQuote, Number, PriceQuote, SentimentQuote


class HttpSource(ABC):
    """Common plumbing for a provider backed by one JSON endpoint.

    Subclasses set ``label`` (short tag used in errors and logs) and ``name``
    (human-readable service name used in source notes).
    """

    label: str = ""
    name: str = ""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent

    def _get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        return fetch_json(
            url, self.label,
            timeout=self.timeout, params=params,
            headers=headers, user_agent=self.user_agent,
        )


class SentimentProvider(HttpSource):
    """Abstract interface for fetching the latest Fear & Greed reading."""

    @abstractmethod
    def fetch(self) -> SentimentQuote:
        """
        Fetch the most recent index value.

        Returns:
            SentimentQuote: value, classification label and epoch timestamp.
        """
        pass


class PriceProvider(HttpSource):
    """Abstract interface for fetching the BTC spot price in USD and IDR."""

    @abstractmethod
    def fetch(self) -> PriceQuote:
        """
        Fetch the current BTC price.

        Returns:
            PriceQuote: USD and IDR prices with a note naming the source(s).
        """
        pass


class FxProvider(HttpSource):
    """Abstract interface for fetching the USD→IDR exchange rate."""

    @abstractmethod
    def fetch(self) -> FxQuote:
        """
        Fetch IDR per 1 USD.

        Returns:
            FxQuote: the rate and the provider name.
        """
        pass


# ── helpers ───────────────────────────────────────────────────────────────────

def dig(payload: Any, *path: Any) -> Any:
    """Walk nested dicts/lists by key or index, returning None on any miss.

    Example:
        ``dig({"data": [{"value": "55"}]}, "data", 0, "value")`` → ``"55"``
    """
    node = payload
    for key in path:
        if isinstance(key, int):
            if not isinstance(node, list) or not -len(node) <= key < len(node):
                return None
        elif not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    return node


def to_number(raw: Any) -> Optional[Number]:
    """Parse a JSON number or numeric string. Returns None if not numeric.

    Whole values come back as ``int`` so they serialise as ``60000``, not
    ``60000.0``.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return None
    else:
        return None

    if math.isnan(value) or math.isinf(value):
        return None
    return int(value) if value.is_integer() else value


def positive_number(raw: Any, label: str, field_name: str) -> Number:
    """Return ``raw`` as a number, failing on missing, non-numeric, zero or negative.

    Raises:
        ValidationError: ``raw`` is not a usable positive quantity.
    """
    value = to_number(raw)
    if not value or value < 0:
        raise ValidationError(label, f"invalid {field_name}: {raw!r}")
    return value
