"""Data structures for the daily BTC / Fear & Greed logger."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

Number = Union[int, float]


@dataclass(frozen=True)
class SentimentQuote:
    """
    Latest Fear & Greed reading.
    """
    value: int
    label: str
    timestamp: int  # seconds since epoch


@dataclass(frozen=True)
class FxQuote:
    """
    Units of IDR per 1 USD, tagged with the service that produced it.
    """
    rate: Number
    provider: str


@dataclass(frozen=True)
class PriceQuote:
    """
    BTC spot price in USD and IDR.
    """
    usd: Number
    idr: Number
    source_note: str


@dataclass(frozen=True)
class LogEntry:
    """
    One day's record in the persisted log. Never updated once appended.
    """
    date: str  # YYYY-MM-DD, UTC
    fng_value: int
    fng_label: str
    fng_timestamp: int
    btc_usd: Number
    btc_idr: Number
    source: str
    created_at_utc: str  # ISO 8601

    def to_dict(self) -> Dict[str, Any]:
        """Return the record as written to ``log.json``."""
        return {
            "date": self.date,
            "fng_value": self.fng_value,
            "fng_label": self.fng_label,
            "fng_timestamp": self.fng_timestamp,
            "btc_usd": self.btc_usd,
            "btc_idr": self.btc_idr,
            "source": self.source,
            "created_at_utc": self.created_at_utc,
        }


@dataclass
class LogDocument:
    """
    The whole persisted log: first logged date plus date-ordered entries.
    """
    site_start: Optional[str] = None
    entries: List[Dict[str, Any]] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)  # other top-level keys, kept as-is

    def to_dict(self) -> Dict[str, Any]:
        return {"site_start": self.site_start, "entries": self.entries, **self.extra}
