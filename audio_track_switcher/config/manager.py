"""
Configuration management for the audio track switcher.

This module handles loading and validating configuration from YAML files.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from audio_track_switcher.config.models import SwitcherConfig
from audio_track_switcher.utils import ConfigurationError, get_logger

logger = get_logger(__name__)


class ConfigManager:
    """Manages switcher configuration."""

    DEFAULT_CONFIG_LOCATIONS = [
        Path.home() / ".audio-track-switcher.yaml",
        Path.home() / ".config" / "audio-track-switcher" / "config.yaml",
        Path.cwd() / ".audio-track-switcher.yaml",
    ]

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to configuration file
        """
        self.config_path = config_path
        self._config: Optional[SwitcherConfig] = None

    @property
    def config(self) -> SwitcherConfig:
        """
        Get current configuration, loading it if necessary.

        Raises:
            ConfigurationError: If configuration cannot be loaded
        """
        if self._config is None:
            self._config = self.load()
        return self._config

    def load(self, config_path: Optional[Path] = None) -> SwitcherConfig:
        """
        Load configuration from file or create default.

        Args:
            config_path: Optional path to configuration file

        Returns:
            Loaded SwitcherConfig

        Raises:
            ConfigurationError: If configuration file is missing or invalid
        """
        path = config_path or self.config_path

        if path:
            if not path.exists():
                raise ConfigurationError(f"Configuration file not found: {path}")
            self._config = self._load_from_file(path)
            return self._config

        for default_path in self.DEFAULT_CONFIG_LOCATIONS:
            if default_path.exists():
                logger.info(f"Loading configuration from {default_path}")
                self._config = self._load_from_file(default_path)
                return self._config

        logger.debug("No configuration file found, using defaults")
        self._config = SwitcherConfig.create_default()
        return self._config

    def _load_from_file(self, path: Path) -> SwitcherConfig:
        """
        Load configuration from YAML file.

        Raises:
            ConfigurationError: If file cannot be read or parsed
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration: {e}") from e

        if data is None:
            raise ConfigurationError(f"Configuration file is empty: {path}")
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration must be a mapping: {path}")

        try:
            config = SwitcherConfig(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        logger.debug(f"Successfully loaded configuration from {path}")
        return config

    def init_default_config(self, path: Optional[Path] = None, force: bool = False) -> Path:
        """
        Write a configuration file holding the defaults.

        Args:
            path: Target file (first default location if None)
            force: Overwrite an existing file

        Returns:
            Path to created configuration file

        Raises:
            ConfigurationError: If the file exists and force=False, or cannot be written
        """
        target_path = path or self.DEFAULT_CONFIG_LOCATIONS[0]

        if target_path.exists() and not force:
            raise ConfigurationError(
                f"Configuration file already exists: {target_path}. Use --force to overwrite."
            )

        data = SwitcherConfig.create_default().model_dump(mode="json")
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True)
            with open(target_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Failed to write configuration: {e}") from e

        logger.info(f"Default configuration written to {target_path}")
        return target_path


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_path: Optional[Path] = None) -> ConfigManager:
    """
    Get global configuration manager instance.

    A config_path given after the manager exists replaces the one it was
    created with.
    """
    global _config_manager

    if _config_manager is None:
        _config_manager = ConfigManager(config_path)
    elif config_path is not None and config_path != _config_manager.config_path:
        _config_manager.config_path = config_path
        _config_manager._config = None

    return _config_manager

