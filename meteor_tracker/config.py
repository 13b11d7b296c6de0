"""
Configuration management for the meteor tracker.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

_LOG = logging.getLogger(__name__)

NASA_API_BASE = "https://api.nasa.gov"
DEMO_API_KEY = "DEMO_KEY"

CONFIG_PATH_ENV = "METEOR_TRACKER_CONFIG"
API_KEY_ENV = "NASA_API_KEY"

SORT_KEYS = ("date", "size", "distance")

DEFAULT_CONFIG = {
    "api_key": "",
    "base_url": NASA_API_BASE,
    "timeout": 10,
    "days_ahead": 7,
    "log_level": "INFO",
    "sort_by": "date",
    "show_only_hazardous": False,
}


class Config:
    """Configuration for the NASA client and dashboard."""

    def __init__(self, config_file_path: Optional[str] = None):
        """Initialize configuration."""
        if config_file_path is None:
            config_file_path = os.environ.get(CONFIG_PATH_ENV, "config.json")
        self._config_file_path = config_file_path
        self._config: Dict[str, Any] = {}
        self._env_api_key: Optional[str] = None
        self.load()

    def load(self) -> None:
        """Load configuration from file, then apply environment overrides."""
        self._config = DEFAULT_CONFIG.copy()
        try:
            if os.path.exists(self._config_file_path):
                with open(self._config_file_path, "r", encoding="utf-8") as file:
                    loaded = json.load(file)
                if not isinstance(loaded, dict):
                    raise ValueError(f"expected a JSON object, got {type(loaded).__name__}")
                self._config.update(loaded)
                _LOG.info("Configuration loaded from %s", self._config_file_path)
            else:
                _LOG.info("Configuration file not found, using defaults")
        except (OSError, ValueError) as ex:
            _LOG.error("Failed to load configuration: %s", ex)
            self._config = DEFAULT_CONFIG.copy()

        # kept apart from _config so save() never writes it to disk
        self._env_api_key = os.environ.get(API_KEY_ENV) or None

    def save(self) -> None:
        """Save configuration to file."""
        try:
            directory = os.path.dirname(self._config_file_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self._config_file_path, "w", encoding="utf-8") as file:
                json.dump(self._config, file, indent=2)
                _LOG.info("Configuration saved to %s", self._config_file_path)
        except OSError as ex:
            _LOG.error("Failed to save configuration: %s", ex)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set configuration value."""
        self._config[key] = value

    @property
    def api_key(self) -> str:
        """Get NASA API key, falling back to the public demo key."""
        return self._env_api_key or self._config.get("api_key") or DEMO_API_KEY

    @property
    def base_url(self) -> str:
        return self._config.get("base_url") or NASA_API_BASE

    @property
    def timeout(self) -> float:
        """Per-request timeout in seconds."""
        return float(self._config.get("timeout", 10))

    @property
    def days_ahead(self) -> int:
        """Length of the default upcoming window in days."""
        return int(self._config.get("days_ahead", 7))

    @property
    def log_level(self) -> str:
        return str(self._config.get("log_level", "INFO")).upper()

    @property
    def sort_by(self) -> str:
        """Initial sort key of the meteor list; unknown keys fall back to date."""
        value = self._config.get("sort_by", "date")
        if value not in SORT_KEYS:
            _LOG.warning("Unknown sort key %r, sorting by date", value)
            return "date"
        return value

    @property
    def show_only_hazardous(self) -> bool:
        return bool(self._config.get("show_only_hazardous", False))
