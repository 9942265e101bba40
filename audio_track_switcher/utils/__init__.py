"""Shared utilities: errors and logging."""

from audio_track_switcher.utils.errors import (
    ConfigurationError,
    ExternalProcessError,
    LaunchError,
    MalformedOutputError,
    ProcessTimeoutError,
    StreamReadError,
    SwitcherError,
)
from audio_track_switcher.utils.logger import get_logger, log_performance, setup_logger

__all__ = [
    # Errors
    "ConfigurationError",
    "ExternalProcessError",
    "LaunchError",
    "MalformedOutputError",
    "ProcessTimeoutError",
    "StreamReadError",
    "SwitcherError",
    # Logging
    "get_logger",
    "log_performance",
    "setup_logger",
]
