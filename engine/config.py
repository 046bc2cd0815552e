"""
Configuration manager for Loot Rate Viewer.

Handles loading and managing application configuration from YAML files.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Any, List, Optional

import yaml
from utils.paths import CONFIG_PATH
from datasources.asset_url import DEFAULT_LISTING_URL, DEFAULT_RAW_URL, DEFAULT_ASSETS_URL
from datasources.listing import NAVIGATION_SELECTOR


class ConfigError(Exception):
    """Raised when an existing configuration file cannot be used."""


class ConfigManager:
    """Manages application configuration."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager."""
        self.logger = logging.getLogger(__name__)

        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = CONFIG_PATH

        self._config = None

    def load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file.

        A missing file yields the defaults.  A file that exists but cannot be
        read or parsed raises :class:`ConfigError`.
        """
        if not self.config_path.exists():
            self.logger.warning(f"Config file not found at {self.config_path}, using defaults")
            self._config = self.get_default_config()
            return self._config

        try:
            with self.config_path.open('r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            self.logger.error(f"Failed to load configuration: {e}")
            raise ConfigError(f"Cannot load {self.config_path}: {e}") from e

        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ConfigError(f"{self.config_path} must contain a mapping")

        # Merge with defaults to ensure all required keys exist
        self._config = self._merge_configs(self.get_default_config(), config)
        self.logger.info(f"Configuration loaded from {self.config_path}")
        return self._config

    def get_config(self) -> Dict[str, Any]:
        """Get current configuration, loading if necessary."""
        if self._config is None:
            return self.load_config()
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key (supports dot notation)."""
        config = self.get_config()

        keys = key.split('.')
        value = config

        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any):
        """Set configuration value by key (supports dot notation)."""
        config = self.get_config()

        keys = key.split('.')
        current = config

        for k in keys[:-1]:
            if k not in current:
                current[k] = {}
            current = current[k]

        current[keys[-1]] = value

    def save_config(self, config: Optional[Dict[str, Any]] = None, config_path: Optional[str] = None):
        """Save configuration to YAML file."""
        if config is not None:
            self._config = config

        if not self._config:
            self.logger.warning("No configuration to save")
            return

        save_path = Path(config_path) if config_path else self.config_path

        try:
            save_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = save_path.with_suffix(save_path.suffix + ".tmp")
            with open(tmp_path, 'w', encoding='utf-8') as f:
                yaml.dump(self._config, f, default_flow_style=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, save_path)

            self.logger.info(f"Configuration saved to {save_path}")

        except Exception as e:
            self.logger.error(f"Failed to save configuration: {e}")
            raise

    def get_default_config(self) -> Dict[str, Any]:
        """Return default configuration values."""
        return {
            'source': {
                'listing_url': DEFAULT_LISTING_URL,
                'raw_url': DEFAULT_RAW_URL,
                'assets_url': DEFAULT_ASSETS_URL,
                'table_suffix': ".ron",
                'tier_selector': NAVIGATION_SELECTOR,
            },
            'http': {
                'timeout_seconds': None,
                'retries': 2,
                'user_agent': "LootRateViewer/1.0",
            },
            'workers': {
                'files': 4,
                'names': 8,
                'listings': 8,
            },
            'labels': {
                'unknown': "unknown",
                'bundle': "bundle",
                'none': "none",
            },
            'tiers': {
                'key_prefix': "T",
            },
            'logging': {
                'level': "WARNING",
            },
        }

    def _merge_configs(self, default: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
        """Merge user configuration with defaults."""
        result = default.copy()

        for key, value in user.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def get_source_config(self) -> Dict[str, Any]:
        """Get remote asset source configuration."""
        return self.get('source', {})

    def get_labels(self) -> Dict[str, str]:
        """Get the sentinel labels used for unnamed loot."""
        return self.get('labels', {})

    def get_timeout(self) -> Optional[float]:
        """HTTP timeout in seconds, ``None`` to wait indefinitely."""
        value = self.get('http.timeout_seconds')
        return float(value) if value else None

    def get_workers(self, pool: str, default: int) -> int:
        return max(1, int(self.get(f'workers.{pool}', default) or default))

    def validate_config(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []
        config = self.get_config()

        for section in ('source', 'workers', 'labels'):
            if section not in config:
                errors.append(f"Missing required section: {section}")

        source = self.get_source_config()
        for key in ('listing_url', 'raw_url', 'assets_url'):
            url = source.get(key)
            if not url or not str(url).startswith(("http://", "https://")):
                errors.append(f"source.{key} must be an http(s) URL")

        for pool in ('files', 'names', 'listings'):
            value = self.get(f'workers.{pool}')
            if not isinstance(value, int) or value < 1:
                errors.append(f"workers.{pool} must be a positive integer")

        timeout = self.get('http.timeout_seconds')
        if timeout is not None and (not isinstance(timeout, (int, float)) or timeout <= 0):
            errors.append("http.timeout_seconds must be positive or null")

        return errors
