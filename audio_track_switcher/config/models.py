"""
Configuration models using Pydantic.

This module defines the configuration structure for the audio track switcher.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ToolsConfig(BaseModel):
    """Locations of the external media tools."""

    ffmpeg_path: str = Field(default="ffmpeg", description="ffmpeg executable")
    ffprobe_path: str = Field(default="ffprobe", description="ffprobe executable")


class RemuxConfig(BaseModel):
    """Remux process supervision settings."""

    timeout: Optional[float] = Field(
        default=None, gt=0, description="Maximum remux time in seconds (None = no timeout)"
    )
    line_limit: int = Field(
        default=64 * 1024,
        ge=1024,
        description="Maximum length of a single progress line in bytes",
    )
    terminate_grace: float = Field(
        default=5.0, gt=0, description="Seconds to wait after SIGTERM before SIGKILL"
    )


class LoggingConfig(BaseModel):
    """Diagnostic logging configuration (always written to stderr)."""

    level: str = Field(default="WARNING", description="Log level")
    file: Optional[Path] = Field(default=None, description="Optional log file")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}")
        return v.upper()


class SwitcherConfig(BaseModel):
    """Main configuration."""

    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    remux: RemuxConfig = Field(default_factory=RemuxConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def create_default(cls) -> "SwitcherConfig":
        """Create default configuration."""
        return cls()
