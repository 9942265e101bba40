"""Configuration management for the audio track switcher."""

from audio_track_switcher.config.manager import (
    ConfigManager,
    get_config_manager,
)
from audio_track_switcher.config.models import (
    LoggingConfig,
    RemuxConfig,
    SwitcherConfig,
    ToolsConfig,
)

__all__ = [
    # Manager
    "ConfigManager",
    "get_config_manager",
    # Models
    "LoggingConfig",
    "RemuxConfig",
    "SwitcherConfig",
    "ToolsConfig",
]
