"""Switcher operations."""

from audio_track_switcher.switcher.operations import TrackSwitcher

__all__ = ["TrackSwitcher"]
