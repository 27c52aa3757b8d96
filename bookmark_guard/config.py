"""
Configuration management for Bookmark Guard.

This module handles loading and accessing configuration values from config.yaml.
It provides a centralized way to manage storage, provider, indicator and logging
settings without changing code.
"""

import yaml
from pathlib import Path
from typing import Any, Dict
import logging


class ConfigManager:
    """
    Manages configuration loading and access for Bookmark Guard.
    """

    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file
        """
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        try:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

            with open(self.config_path, 'r', encoding='utf-8') as f:
                self._config = yaml.safe_load(f) or {}

            logging.info(f"Configuration loaded from {self.config_path}")

        except (OSError, yaml.YAMLError) as e:
            logging.warning(f"Using default configuration: {e}")
            self._config = self._get_default_config()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values as fallback."""
        return {
            "storage": {
                "filename": "bookmark_guard.duckdb",
                "table": "guard_state"
            },
            "provider": {
                "bookmarks_file": "Bookmarks",
                "poll_interval": 2.0
            },
            "indicator": {
                "locked_glyph": "🔒"
            },
            "paths": {
                "log_file": "bookmark_guard.log"
            },
            "logging": {
                "level": "INFO",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        }

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the configuration value (e.g., "storage.filename")
            default: Default value if key is not found

        Returns:
            The configuration value

        Examples:
            config.get("storage.filename")  # Returns "bookmark_guard.duckdb"
            config.get("indicator.locked_glyph")  # Returns the lock glyph
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get an entire configuration section.

        Args:
            section: Name of the configuration section

        Returns:
            Dictionary containing the section configuration
        """
        return self._config.get(section, {})

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    # Convenience properties for commonly used values

    @property
    def storage_filename(self) -> str:
        """Get the DuckDB state file name."""
        return self.get("storage.filename", "bookmark_guard.duckdb")

    @property
    def storage_table(self) -> str:
        """Get the key-value table name."""
        return self.get("storage.table", "guard_state")

    @property
    def bookmarks_file(self) -> str:
        """Get the path of the Chromium Bookmarks file to protect."""
        return self.get("provider.bookmarks_file", "Bookmarks")

    @property
    def poll_interval(self) -> float:
        """Get the provider polling interval in seconds."""
        return float(self.get("provider.poll_interval", 2.0))

    @property
    def locked_glyph(self) -> str:
        """Get the badge text shown while protection is enabled."""
        return self.get("indicator.locked_glyph", "🔒")

    @property
    def log_filename(self) -> str:
        """Get log file name."""
        return self.get("paths.log_file", "bookmark_guard.log")


# Global configuration instance
config = ConfigManager()


def get_config() -> ConfigManager:
    """
    Get the global configuration instance.

    Returns:
        The global ConfigManager instance
    """
    return config
