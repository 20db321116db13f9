"""Configuration management for oseddl."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .adapters.http_catalogue import DEFAULT_DATA_URL
from .core.search import DEFAULT_THRESHOLD

logger = logging.getLogger(__name__)

OSEDDL_HOME = Path(os.environ.get("OSEDDL_HOME", Path.home() / ".oseddl"))
CONFIG_FILE = OSEDDL_HOME / "config" / "oseddl.conf"
DATA_DIR = OSEDDL_HOME / "data"


@dataclass
class Config:
    """oseddl configuration."""

    data_url: str = DEFAULT_DATA_URL
    request_timeout: float = 10.0
    search_threshold: float = DEFAULT_THRESHOLD
    favorites_file: str = ""
    # Display zone for deadlines; empty means the local zone
    timezone: str = ""

    @property
    def favorites_path(self) -> Path:
        if self.favorites_file:
            return Path(self.favorites_file).expanduser()
        return DATA_DIR / "favorites.json"


def _parse_float(key: str, value: str, default: float) -> float:
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Invalid number for {key.upper()}: {value!r}, using {default}")
        return default


def load_config() -> Config:
    """Load configuration from oseddl.conf file."""
    config = Config()

    if not CONFIG_FILE.exists():
        return config

    for line in CONFIG_FILE.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = value.strip()

        # Handle quoted values with inline comments: "value" # comment
        if value[:1] in ('"', "'"):
            quote = value[0]
            end_quote = value.find(quote, 1)
            value = value[1:end_quote] if end_quote != -1 else value[1:]
        elif "#" in value:
            value = value.split("#")[0].strip()

        match key:
            case "data_url":
                config.data_url = value
            case "request_timeout":
                config.request_timeout = _parse_float(key, value, config.request_timeout)
            case "search_threshold":
                threshold = _parse_float(key, value, config.search_threshold)
                if 0.0 <= threshold <= 1.0:
                    config.search_threshold = threshold
                else:
                    logger.warning(f"SEARCH_THRESHOLD must be between 0 and 1, got {threshold}")
            case "favorites_file":
                config.favorites_file = value
            case "timezone":
                config.timezone = value

    return config
