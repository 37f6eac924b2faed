"""
cryptorand persistent configuration.

Loads/saves CLI defaults from ~/.cryptorand/config.json. The library
primitives never read it.
"""

import copy
import json
from pathlib import Path
from typing import Any, Optional

from cryptorand.core.log import get_logger

logger = get_logger('config')


DEFAULTS = {
    "entropy": {
        "source": "system",
    },
    "string": {
        "length": 32,
        "charset": "alnum",
        "count": 1,
    },
    "check": {
        "samples": 10000,
    },
}

CONFIG_DIR = Path.home() / ".cryptorand"
CONFIG_FILE = CONFIG_DIR / "config.json"


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge override into base, returning a new dict."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class Config:
    """Persistent configuration with deep-merge defaults."""

    def __init__(self, config_file: Optional[Path] = None):
        self._file = Path(config_file) if config_file else CONFIG_FILE
        self._data = self._load()

    def _load(self) -> dict:
        """Load config from file, deep-merged with defaults."""
        if self._file.exists():
            try:
                with open(self._file, 'r') as f:
                    user_data = json.load(f)
                if isinstance(user_data, dict):
                    return _deep_merge(DEFAULTS, user_data)
                logger.warning("Ignoring %s: top level is not an object", self._file)
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("Ignoring unreadable config %s: %s", self._file, e)
        return copy.deepcopy(DEFAULTS)

    def get(self, section: str, key: str) -> Any:
        """Get a config value."""
        return self._data.get(section, {}).get(key)

    def set(self, section: str, key: str, value: Any) -> None:
        """Set a config value."""
        if section not in self._data:
            self._data[section] = {}
        self._data[section][key] = value

    def save(self) -> None:
        """Save config to file."""
        self._file.parent.mkdir(parents=True, exist_ok=True)
        with open(self._file, 'w') as f:
            json.dump(self._data, f, indent=2)
