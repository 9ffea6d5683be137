"""Ordered fallback across alternative providers of the same quote.

    provider #1 ──fail──▶ provider #2 ──fail──▶ … ──▶ provider #n
        │ ok                  │ ok                        │ ok / raises
        ▼                     ▼                           ▼
     result                result                result / last error

Failures of every provider except the last are logged and swallowed. The last
provider runs outside any ``try`` so its own exception reaches the caller.
"""

from typing import Callable, TypeVar

from cicilbtc.core.logger import logger

T = TypeVar("T")


def try_in_order(label: str, *providers: Callable[[], T]) -> T:
    """Return the result of the first provider that succeeds.

    Args:
        label: Chain name used in diagnostics, e.g. ``"BTC"`` or ``"FX"``.
        *providers: Zero-argument callables in priority order.

    Returns:
        The first successful provider's result.

    Raises:
        ValueError: No providers were given.
        Exception: Whatever the last provider raised.
    """
    if not providers:
        raise ValueError(f"{label}: no providers configured")

    *fallible, last = providers
    for attempt, provider in enumerate(fallible, start=1):
        try:
            return provider()
        except Exception as exc:
            logger.warning(f"{label} #{attempt} fail: {exc}")

    return last()
