"""Bounded-timeout JSON GET helper shared by every provider."""

from typing import Any, Dict, Optional

import requests

from cicilbtc.core.errors import FetchError
from cicilbtc.core.logger import logger

DEFAULT_TIMEOUT_SECONDS = 12.0
DEFAULT_USER_AGENT = "cicilbtc-bot/1.0"


def fetch_json(
    url: str,
    label: str,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    user_agent: str = DEFAULT_USER_AGENT,
) -> Any:
    """Issue one GET request and return the parsed JSON body.

    The response is closed on every exit path, including failures.

    Args:
        url: Endpoint URL.
        label: Source label carried by any raised :class:`FetchError`.
        timeout: Connect/read timeout in seconds.
        params: Optional query-string parameters.
        headers: Extra request headers (merged over the defaults).
        user_agent: Value of the ``User-Agent`` header.

    Returns:
        The decoded JSON document.

    Raises:
        FetchError: Non-2xx status, timeout, network error or non-JSON body.
    """
    request_headers = {
        "User-Agent": user_agent,
        "Accept": "application/json",
        "Cache-Control": "no-store",
    }
    if headers:
        request_headers.update(headers)

    logger.debug(f"{label}: GET {url}")
    try:
        with requests.get(url, params=params, headers=request_headers, timeout=timeout) as resp:
            if not resp.ok:
                raise FetchError(label, status=resp.status_code)
            try:
                return resp.json()
            except ValueError as exc:
                raise FetchError(label, cause=exc) from exc
    except requests.RequestException as exc:
        raise FetchError(label, cause=exc) from exc
