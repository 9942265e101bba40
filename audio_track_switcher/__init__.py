"""
Audio Track Switcher

List the audio tracks of video files and re-mux them with a chosen audio
track marked as default, reporting progress as JSON lines.
"""

__version__ = "0.1.0"

from audio_track_switcher.models import (
    AudioTrack,
    OutcomeEvent,
    OutwardMessage,
    ProgressEvent,
    RemuxRequest,
    VideoInfo,
)
from audio_track_switcher.utils import (
    ConfigurationError,
    ExternalProcessError,
    LaunchError,
    MalformedOutputError,
    StreamReadError,
    SwitcherError,
    get_logger,
    setup_logger,
)

__all__ = [
    "__version__",
    # Models
    "AudioTrack",
    "OutcomeEvent",
    "OutwardMessage",
    "ProgressEvent",
    "RemuxRequest",
    "VideoInfo",
    # Utils
    "ConfigurationError",
    "ExternalProcessError",
    "LaunchError",
    "MalformedOutputError",
    "StreamReadError",
    "SwitcherError",
    "get_logger",
    "setup_logger",
]
