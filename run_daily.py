"""Daily BTC / Fear & Greed logger entry point.

Usage:
    python run_daily.py

Triggered once a day by the scheduled workflow. Loads config.yaml (or the
path in ``CICILBTC_CONFIG``), appends today's entry to the log unless it is
already there, and exits 0 on success or skip, 1 on failure.
"""

import sys
from dotenv import load_dotenv

load_dotenv()  # must precede cicilbtc imports so env vars are available at module load

from cicilbtc.core.config import config_path_from_env, load_config  # noqa: E402
from cicilbtc.core.logger import logger, setup_logger_from_config  # noqa: E402
from cicilbtc.pipeline.engine import DailyLogEngine  # noqa: E402


def main() -> int:
    """Run the daily logger. Returns 0 on success or skip, 1 on failure."""
    try:
        config = load_config(config_path_from_env())
    except (FileNotFoundError, ValueError) as exc:
        logger.error(f"run_daily: failed to load config: {exc}")
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    try:
        setup_logger_from_config(config)
    except (OSError, ValueError) as exc:
        print(f"ERROR: could not set up logging: {exc}", file=sys.stderr)
        return 1

    try:
        entry = DailyLogEngine(config=config).run()
    except Exception as exc:
        logger.error(f"run_daily: DailyLogEngine raised: {exc}", exc_info=True)
        print(f"ERROR: daily run failed: {exc}", file=sys.stderr)
        return 1

    if entry is None:
        print("SKIP: today's entry already exists")
    else:
        print(f"SUCCESS: logged {entry.date} (FNG {entry.fng_value}, BTC {entry.btc_usd} USD)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
