"""Logging infrastructure for the daily run.

Modules log through the package logger ``cicilbtc``, which has no handlers
until :func:`setup_logger` is called (``run_daily.main`` does this once the
config is loaded). Importing the package creates no files.
"""

import logging
from pathlib import Path
from typing import Optional

LOGGER_NAME = "cicilbtc"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(module)s.%(funcName)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(LOGGER_NAME)


def setup_logger(level: str | int = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach console (and optionally file) handlers to the package logger.

    Calling it again replaces the handlers from the previous call, so a
    second run in the same process does not duplicate output.

    Args:
        level (str | int): Level name such as ``"DEBUG"`` or a ``logging`` constant.
        log_file (Optional[str]): Path of a UTF-8 log file; ``None`` logs to the console only.

    Returns:
        logging.Logger: The configured ``cicilbtc`` logger.

    Raises:
        ValueError: ``level`` is not a known level name.
    """
    resolved = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(resolved)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


def setup_logger_from_config(config: dict) -> logging.Logger:
    """Configure the package logger from the ``logging:`` section of config.yaml."""
    logging_cfg = config.get("logging", {}) or {}
    return setup_logger(
        level=logging_cfg.get("level", "INFO"),
        log_file=logging_cfg.get("file"),
    )
