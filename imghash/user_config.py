"""
User configuration management for imghash.

Supports configuration from multiple sources (in order of priority):
1. Runtime parameters (highest priority)
2. Environment variables
3. User config file (~/.imghash/config.json)
4. Default values from config.py (lowest priority)

Configuration file location: ~/.imghash/config.json

Example config.json:
{
    "database_file": "/data/photos.imghash",
    "max_distance": 5,
    "hasher": "average"
}

The database layer never reads any of this; callers resolve the database
path once with resolve_database_file() and pass it to load/save.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional
import logging

from .config import (
    DB_ENV_VAR,
    DEFAULT_DB_FILE,
    DEFAULT_MAX_DISTANCE,
    DEFAULT_HASHER,
)

logger = logging.getLogger(__name__)


class UserConfig:
    """
    Manages user configuration from file and environment variables.

    The config file is lazy-loaded and cached.
    """

    _instance: Optional['UserConfig'] = None
    _config_data: Optional[dict] = None

    def __new__(cls):
        """Singleton pattern to ensure one config instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def config_dir(self) -> Path:
        """Get the configuration directory path."""
        env_dir = os.getenv('IMGHASH_CONFIG_DIR')
        if env_dir:
            return Path(env_dir)

        return Path.home() / '.imghash'

    @property
    def config_file_path(self) -> Path:
        """Get the configuration file path."""
        return self.config_dir / 'config.json'

    def _load_config_file(self) -> dict:
        """Load configuration from JSON file."""
        if not self.config_file_path.exists():
            return {}

        try:
            with open(self.config_file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
                logger.debug(f"Loaded configuration from {self.config_file_path}")
                return data
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load config file {self.config_file_path}: {e}")
            return {}

    def _get_config_data(self) -> dict:
        """Get cached config data (lazy loading)."""
        if self._config_data is None:
            self._config_data = self._load_config_file()
        return self._config_data

    def reload(self):
        """Reload configuration from file."""
        self._config_data = None

    def get(self, key: str, default: Any = None, env_var: Optional[str] = None) -> Any:
        """
        Get a configuration value with priority:
        1. Environment variable (if env_var specified)
        2. Config file
        3. Default value

        Args:
            key: Configuration key
            default: Default value if not found
            env_var: Optional environment variable name to check

        Returns:
            Configuration value
        """
        if env_var:
            env_value = os.getenv(env_var)
            if env_value:
                return env_value

        config_data = self._get_config_data()
        if config_data.get(key) is not None:
            return config_data[key]

        return default

    @property
    def database_file(self) -> str:
        """Path to the fingerprint database file."""
        return str(self.get('database_file', default=DEFAULT_DB_FILE, env_var=DB_ENV_VAR))

    @property
    def max_distance(self) -> int:
        """Default Hamming distance for searches (0-64)."""
        value = self.get('max_distance', default=DEFAULT_MAX_DISTANCE, env_var='IMGHASH_MAX_DISTANCE')
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid max_distance {value!r}")
            return DEFAULT_MAX_DISTANCE

    @property
    def hasher(self) -> str:
        """Name of the fingerprint algorithm."""
        return str(self.get('hasher', default=DEFAULT_HASHER, env_var='IMGHASH_HASHER'))

    def create_example_config(self) -> bool:
        """Create an example configuration file."""
        example_config = {
            "_comment": "imghash user configuration",
            "database_file": None,
            "max_distance": DEFAULT_MAX_DISTANCE,
            "hasher": DEFAULT_HASHER,
        }

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, 'w', encoding='utf-8') as f:
                json.dump(example_config, f, indent=2)
            logger.info(f"Created example config file at {self.config_file_path}")
            return True
        except OSError as e:
            logger.error(f"Failed to create example config: {e}")
            return False


# Global instance
_user_config = UserConfig()


def get_user_config() -> UserConfig:
    """Get the global UserConfig instance."""
    return _user_config


def resolve_database_file(explicit: Optional[str] = None) -> str:
    """
    Resolve the database file path at the program boundary.

    Args:
        explicit: Path given by the caller (e.g. --db); wins when non-empty

    Returns:
        Database file path
    """
    if explicit:
        return str(explicit)
    return get_user_config().database_file


__all__ = ['UserConfig', 'get_user_config', 'resolve_database_file']
