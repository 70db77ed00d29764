"""Configuration management service"""

import logging
import os
import shutil
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ..api.exceptions import ConfigError
from ..constants import (
    ENV_API_VERSION,
    ENV_CONFIG_PATH,
    ENV_PASSWORD,
    ENV_POLL_INTERVAL,
    ENV_URL,
    ENV_USERNAME,
    PROJECT_CONFIG_FILE,
)
from ..models.config import ClientConfig

logger = logging.getLogger(__name__)


class ConfigService:
    """Loads and saves the client configuration file"""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize config service

        Args:
            config_path: Configuration file; defaults to $SFDC_TOOL_CONFIG,
                then .sfdc-tool.yaml in the working directory
        """
        if config_path is None:
            config_path = os.environ.get(ENV_CONFIG_PATH, PROJECT_CONFIG_FILE)
        self.config_path = Path(config_path)
        self._config: Optional[ClientConfig] = None

    @property
    def config(self) -> ClientConfig:
        """Get current configuration (lazy load)"""
        if self._config is None:
            self.load_config()
        return self._config

    def _read_file(self) -> Dict[str, Any]:
        if not self.config_path.exists():
            return {}

        # Expand environment variables in the file
        content = os.path.expandvars(self.config_path.read_text())

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid configuration file {self.config_path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file {self.config_path} must contain a mapping")
        return data

    @staticmethod
    def _apply_environment(data: Dict[str, Any]) -> Dict[str, Any]:
        credentials = dict(data.get("credentials") or {})
        for env_name, key in (
            (ENV_USERNAME, "username"),
            (ENV_PASSWORD, "password"),
            (ENV_URL, "url"),
            (ENV_API_VERSION, "api_version"),
        ):
            if os.environ.get(env_name):
                credentials[key] = os.environ[env_name]
        if credentials:
            data["credentials"] = credentials

        if os.environ.get(ENV_POLL_INTERVAL):
            polling = dict(data.get("polling") or {})
            try:
                polling["interval"] = float(os.environ[ENV_POLL_INTERVAL])
            except ValueError:
                raise ConfigError(f"{ENV_POLL_INTERVAL} must be a number")
            data["polling"] = polling

        return data

    def load_config(self) -> ClientConfig:
        """Load configuration from file and environment

        Returns:
            Loaded configuration

        Raises:
            ConfigError: If the configuration is missing or invalid
        """
        data = self._apply_environment(self._read_file())
        logger.debug("Loaded configuration from %s", self.config_path)

        try:
            self._config = ClientConfig.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration: {e}")

        return self._config

    def save_config(self, config: Optional[ClientConfig] = None) -> Path:
        """Save configuration to file

        Args:
            config: Configuration to save (uses current if not provided)

        Returns:
            Path to the written file
        """
        if config:
            self._config = config

        if not self._config:
            raise ConfigError("No configuration to save")

        # Create backup
        if self.config_path.exists():
            backup_path = self.config_path.with_suffix('.yaml.bak')
            shutil.copy2(self.config_path, backup_path)

        with open(self.config_path, 'w') as f:
            yaml.dump(self._config.to_dict(), f, default_flow_style=False, sort_keys=False)

        logger.info("Configuration saved to %s", self.config_path)
        return self.config_path
