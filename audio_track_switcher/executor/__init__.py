"""Process execution and progress parsing."""

from audio_track_switcher.executor.progress import (
    ProgressDemuxer,
    iter_progress,
    parse_progress_line,
)
from audio_track_switcher.executor.subprocess import (
    RemuxProcess,
    build_remux_command,
    run_ffprobe_async,
)

__all__ = [
    "ProgressDemuxer",
    "RemuxProcess",
    "build_remux_command",
    "iter_progress",
    "parse_progress_line",
    "run_ffprobe_async",
]
