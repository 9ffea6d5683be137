"""Crypto Fear & Greed index via alternative.me.

Response shape::

    {"data": [{"value": "55", "value_classification": "Greed",
               "timestamp": "1700000000", ...}], ...}

Only the latest data point is requested (``limit=1``).
"""

from cicilbtc.core.errors import ValidationError
from cicilbtc.core.logger import logger
from cicilbtc.providers.base import SentimentProvider, dig, to_number
from cicilbtc.models.datatypes import SentimentQuote

_FNG_URL = "https://api.alternative.me/fng/"


class AlternativeMeProvider(SentimentProvider):
    """alternative.me ``/fng/`` endpoint."""

    label = "FNG"
    name = "alternative.me"

    def fetch(self) -> SentimentQuote:
        payload = self._get_json(_FNG_URL, params={"limit": 1, "format": "json"})
        point = dig(payload, "data", 0)
        if not isinstance(point, dict):
            raise ValidationError(self.label, "no data")

        value = to_number(point.get("value"))
        if value is None or not 0 <= value <= 100:
            raise ValidationError(self.label, f"invalid value: {point.get('value')!r}")

        timestamp = to_number(point.get("timestamp"))
        if not timestamp or timestamp < 0:
            raise ValidationError(self.label, f"invalid timestamp: {point.get('timestamp')!r}")

        label = point.get("value_classification")
        if not label:
            raise ValidationError(self.label, "missing value_classification")

        quote = SentimentQuote(value=int(value), label=str(label), timestamp=int(timestamp))
        logger.info(f"{self.label}: {quote.value} ({quote.label}) @ {quote.timestamp}")
        return quote
