"""Error types raised by the HTTP helper and the source providers."""

from typing import Optional


class ProviderError(Exception):
    """Base class for a single provider failing to produce a quote.

    Attributes:
        label: Short source label, e.g. ``"BTC2"`` or ``"FX1"``.
    """

    def __init__(self, label: str, message: str) -> None:
        super().__init__(f"{label} {message}")
        self.label = label


class FetchError(ProviderError):
    """HTTP status, network, timeout or body-parse failure.

    Exactly one of ``status`` and ``cause`` is normally set.
    """

    def __init__(
        self,
        label: str,
        status: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        if status is not None:
            message = f"HTTP {status}"
        else:
            message = f"request failed: {cause}"
        super().__init__(label, message)
        self.status = status
        self.cause = cause


class ValidationError(ProviderError):
    """Well-formed response that lacks a usable value for an expected field."""

    def __init__(self, label: str, detail: str = "invalid") -> None:
        super().__init__(label, detail)
        self.detail = detail
