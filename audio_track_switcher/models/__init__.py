"""Data models for the audio track switcher."""

from audio_track_switcher.models.media import AudioTrack, VideoInfo
from audio_track_switcher.models.messages import OutwardMessage
from audio_track_switcher.models.progress import (
    OutcomeEvent,
    ProgressEvent,
    ProgressRecord,
)
from audio_track_switcher.models.tasks import RemuxRequest

__all__ = [
    # Media models
    "AudioTrack",
    "VideoInfo",
    # Progress models
    "OutcomeEvent",
    "ProgressEvent",
    "ProgressRecord",
    # Requests and messages
    "OutwardMessage",
    "RemuxRequest",
]
