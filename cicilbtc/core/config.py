"""Settings for the daily run: config.yaml merged over built-in defaults.

Environment (read from ``.env`` too):
    CICILBTC_CONFIG     path to the YAML file (default ``config.yaml``)
    COINGECKO_API_KEY   optional CoinGecko demo key, read by the engine
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_CONFIG_PATH = "config.yaml"

DEFAULTS: Dict[str, Any] = {
    "log_path": "data/log.json",
    "http": {"timeout_seconds": 12, "user_agent": "cicilbtc-bot/1.0"},
    "retry": {"max_attempts": 3, "delay_seconds": 1.5},
    "logging": {"level": "INFO", "file": None},
}


def config_path_from_env() -> str:
    """Return the config path, honouring the ``CICILBTC_CONFIG`` override."""
    return os.getenv("CICILBTC_CONFIG", DEFAULT_CONFIG_PATH)


def load_config(config_path: str | Path = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load config.yaml and fill in any missing keys from :data:`DEFAULTS`.

    Args:
        config_path (str | Path): Path to the configuration file. Defaults to "config.yaml".

    Returns:
        Dict[str, Any]: Settings with every section of :data:`DEFAULTS` present.

    Raises:
        FileNotFoundError: The file does not exist.
        ValueError: The file is empty, not a mapping, or a section has the wrong shape.
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found at {config_path}")

    with open(config_file, "r", encoding="utf-8") as file:
        config_data = yaml.safe_load(file)

    if not config_data:
        raise ValueError(f"Configuration file {config_path} is empty or invalid.")
    if not isinstance(config_data, dict):
        raise ValueError(f"Configuration file {config_path} must contain a mapping at the top level.")

    return _merge(DEFAULTS, config_data, config_path)


def _merge(defaults: Dict[str, Any], overrides: Dict[str, Any], source: str | Path) -> Dict[str, Any]:
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(merged.get(key), dict):
            if value is None:
                continue
            if not isinstance(value, dict):
                raise ValueError(f"{source}: '{key}' must be a mapping, got {type(value).__name__}")
            merged[key].update(value)
        else:
            merged[key] = value
    return merged
