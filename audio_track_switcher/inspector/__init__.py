"""Media track inspection."""

from audio_track_switcher.inspector.analyzer import TrackInspector

__all__ = ["TrackInspector"]
