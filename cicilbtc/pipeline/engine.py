"""Daily engine: one Fear & Greed + BTC price entry per UTC day.

Flow per run:
  1. today     = current UTC date (YYYY-MM-DD)
  2. Skip      if ``log.json`` already has an entry for today (no network, no write)
  3. Fetch     sentiment chain ∥ price chain, whole pair retried up to 3 times
  4. Assemble  LogEntry with created_at_utc = now
  5. Persist   append + save, once

Nothing is written unless both categories succeed in the same attempt.
"""

import os
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from datetime import datetime, timezone
from functools import partial
from typing import Callable, Optional, Tuple

from cicilbtc.core.fallback import try_in_order
from cicilbtc.core.http import DEFAULT_TIMEOUT_SECONDS, DEFAULT_USER_AGENT
from cicilbtc.core.logger import logger
from cicilbtc.core.retry import with_retries
from cicilbtc.models.datatypes import LogEntry, PriceQuote, SentimentQuote
from cicilbtc.pipeline import log_store
from cicilbtc.providers.fx import FxChain, default_fx_providers
from cicilbtc.providers.market import PriceChain, default_price_providers
from cicilbtc.providers.sentiment import AlternativeMeProvider


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DailyLogEngine:
    """Runs the once-per-day fetch and append.

    Args:
        config: Parsed config.yaml dict (passed in; not re-loaded internally).
        now: Clock returning an aware UTC datetime. Defaults to the system clock.
        sentiment_chain: Override for the sentiment fetch (zero-argument callable).
        price_chain: Override for the price fetch (zero-argument callable).
    """

    def __init__(
        self,
        config: dict,
        now: Callable[[], datetime] = utc_now,
        sentiment_chain: Optional[Callable[[], SentimentQuote]] = None,
        price_chain: Optional[Callable[[], PriceQuote]] = None,
    ) -> None:
        self.config = config
        self.now = now
        self.log_path = config.get("log_path", log_store.DEFAULT_LOG_PATH)

        http_cfg = config.get("http", {}) or {}
        timeout = float(http_cfg.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS))
        user_agent = http_cfg.get("user_agent", DEFAULT_USER_AGENT)

        retry_cfg = config.get("retry", {}) or {}
        self.max_attempts = int(retry_cfg.get("max_attempts", 3))
        self.retry_delay = float(retry_cfg.get("delay_seconds", 1.5))

        if sentiment_chain is None:
            fng = AlternativeMeProvider(timeout=timeout, user_agent=user_agent)
            sentiment_chain = partial(try_in_order, "FNG", fng.fetch)
        if price_chain is None:
            fx_chain = FxChain(default_fx_providers(timeout, user_agent))
            price_chain = PriceChain(default_price_providers(
                fx_chain, timeout, user_agent,
                coingecko_api_key=os.getenv("COINGECKO_API_KEY", ""),
            ))
        self.sentiment_chain = sentiment_chain
        self.price_chain = price_chain

    # ── public ────────────────────────────────────────────────────────────────

    def run(self) -> Optional[LogEntry]:
        """Fetch and append today's entry unless it is already logged.

        Returns:
            The appended :class:`LogEntry`, or ``None`` when today was
            already present.

        Raises:
            Exception: The last failure once every attempt has failed. The
                log file is not touched in that case.
        """
        today = self.now().strftime("%Y-%m-%d")
        document = log_store.load(self.log_path)

        if log_store.has_entry_for(document, today):
            logger.info(f"Already logged for {today} - skip.")
            return None

        fetch_both = with_retries(
            max_attempts=self.max_attempts,
            initial_delay=self.retry_delay,
            backoff=1.0,
        )(self._fetch_both)
        fng, btc = fetch_both()

        entry = LogEntry(
            date=today,
            fng_value=fng.value,
            fng_label=fng.label,
            fng_timestamp=fng.timestamp,
            btc_usd=btc.usd,
            btc_idr=btc.idr,
            source=btc.source_note,
            created_at_utc=_iso_utc(self.now()),
        )

        log_store.append(document, entry)
        log_store.save(document, self.log_path)
        logger.info(f"Wrote entry: {entry.to_dict()}")
        return entry

    # ── internal ──────────────────────────────────────────────────────────────

    def _fetch_both(self) -> Tuple[SentimentQuote, PriceQuote]:
        """Run both chains concurrently; the first failure ends the attempt.

        The pool is shut down without waiting, so a chain still in flight
        after the other one failed does not hold up the retry.
        """
        pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="fetch")
        try:
            fng_future = pool.submit(self.sentiment_chain)
            btc_future = pool.submit(self.price_chain)
            done, _ = wait([fng_future, btc_future], return_when=FIRST_EXCEPTION)
            for future in (fng_future, btc_future):
                if future in done and future.exception() is not None:
                    raise future.exception()
            return fng_future.result(), btc_future.result()
        finally:
            pool.shutdown(wait=False, cancel_futures=True)


# ── helpers ───────────────────────────────────────────────────────────────────

def _iso_utc(moment: datetime) -> str:
    """Format as ``2025-01-01T00:00:00.000Z``."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
