"""
Configuration manager for the Agro Dashboard application.

This module provides a class for loading, accessing, and saving configuration
from YAML files. It handles nested configuration properties using dot notation
and provides type-safe access to configuration values.

The manager is created once per session and handed to the services that need
it, so no module reads configuration through a global object.
"""

import copy
import os
import yaml
import logging
from typing import Any, Dict, Optional

from config.constants import (
    API_URL_ENV_VAR,
    DEFAULT_API_URL,
    DEFAULT_CONFIG,
    DEFAULT_CONFIG_PATH,
    DEFAULT_MAX_REFINEMENT_ATTEMPTS,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TABLE_ROW_LIMIT
)

# Set up logger
logger = logging.getLogger(__name__)

class ConfigManager:
    """
    YAML-backed settings for the dashboard: API address, request timeout,
    refinement budget and table size, read with dot notation keys.

    Attributes:
        config_path (str): Path to the YAML configuration file
        config (dict): The loaded configuration dictionary
    """

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        """
        Initialize the configuration manager

        Args:
            config_path (str): Path to the YAML configuration file
        """
        self.config_path = config_path
        self.config = {}

        # Load configuration
        self.load_config()

    def load_config(self) -> None:
        """
        Load configuration from YAML file

        If the configuration file doesn't exist, it will create a default one.
        If loading fails, the defaults are used.
        """
        # Start with default config
        self.config = copy.deepcopy(DEFAULT_CONFIG)

        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, 'r') as f:
                    loaded_config = yaml.safe_load(f) or {}
                    self._deep_merge(self.config, loaded_config)
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Error loading configuration file: {str(e)}")
        else:
            logger.info(f"Configuration file not found. Creating default at {self.config_path}")
            self._ensure_config_dir()
            self.save()

    def _ensure_config_dir(self) -> None:
        """Ensure the directory for the configuration file exists"""
        config_dir = os.path.dirname(self.config_path)
        if config_dir and not os.path.exists(config_dir):
            os.makedirs(config_dir, exist_ok=True)

    def _deep_merge(self, base: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
        """Merge ``update`` into ``base`` in place; nested sections merge key by key."""
        for key, value in update.items():
            if isinstance(value, dict) and key in base and isinstance(base[key], dict):
                base[key] = self._deep_merge(base[key], value)
            else:
                base[key] = value
        return base

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation

        Args:
            key: Configuration key (can be nested with dots, e.g. 'api.base_url')
            default: Default value to return if key not found

        Returns:
            The configuration value or default
        """
        parts = key.split('.')

        value = self.config
        for part in parts:
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]

        return value

    def get_int(self, key: str, default: Optional[int] = None) -> Optional[int]:
        value = self.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def get_float(self, key: str, default: Optional[float] = None) -> Optional[float]:
        """Float value, or ``default`` when missing or unparsable."""
        value = self.get(key, default)
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    def get_bool(self, key: str, default: Optional[bool] = None) -> Optional[bool]:
        """Strings such as "yes" or "on" count as True."""
        value = self.get(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ('true', 'yes', '1', 'on')
        return default

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value using dot notation

        Args:
            key: Configuration key (can be nested with dots)
            value: Value to set
        """
        parts = key.split('.')

        config = self.config
        for i, part in enumerate(parts):
            if i == len(parts) - 1:
                config[part] = value
            else:
                if part not in config or not isinstance(config[part], dict):
                    config[part] = {}
                config = config[part]

    def save(self) -> bool:
        """
        Save configuration to YAML file

        Returns:
            bool: True if save was successful, False otherwise
        """
        try:
            self._ensure_config_dir()
            with open(self.config_path, 'w') as f:
                yaml.dump(self.config, f, default_flow_style=False)
            return True
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error saving configuration: {str(e)}")
            return False

    # The environment wins over the YAML file so deployments can point at another API
    def get_api_base_url(self) -> str:
        """
        Get the statistics API base URL

        Returns:
            str: The base URL, without a trailing slash
        """
        url = os.environ.get(API_URL_ENV_VAR) or self.get('api.base_url', DEFAULT_API_URL)
        return str(url).rstrip('/')

    def get_request_timeout(self) -> float:
        """Get the HTTP timeout in seconds."""
        return self.get_float('api.timeout', float(DEFAULT_REQUEST_TIMEOUT))

    def get_max_refinement_attempts(self) -> int:
        """Get the automatic refinement budget."""
        return max(0, self.get_int('refinement.max_attempts', DEFAULT_MAX_REFINEMENT_ATTEMPTS))

    def get_table_row_limit(self) -> int:
        return self.get_int('dashboard.table_row_limit', DEFAULT_TABLE_ROW_LIMIT)
