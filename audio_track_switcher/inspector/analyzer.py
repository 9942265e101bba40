"""
Audio track inspection using FFprobe.

This module lists the audio streams of a media file.
"""

import json
from pathlib import Path
from typing import Any

from ..executor import run_ffprobe_async
from ..models import AudioTrack, VideoInfo
from ..utils import MalformedOutputError, get_logger, log_performance

logger = get_logger(__name__)

FFPROBE_AUDIO_ARGS = [
    "-print_format",
    "json",
    "-show_streams",
    "-select_streams",
    "a",
]


class TrackInspector:
    """Inspects media files using FFprobe to list their audio tracks."""

    def __init__(self, ffprobe_path: str = "ffprobe"):
        """
        Initialize track inspector.

        Args:
            ffprobe_path: Path to ffprobe executable (default: "ffprobe")
        """
        self._ffprobe_path = ffprobe_path

    @log_performance()
    async def list_tracks(self, video_path: Path) -> VideoInfo:
        """
        List the audio tracks of a media file.

        Args:
            video_path: Path to media file to inspect

        Returns:
            VideoInfo with one AudioTrack per audio stream (possibly none)

        Raises:
            LaunchError: If ffprobe cannot be started
            ExternalProcessError: If ffprobe fails
            MalformedOutputError: If ffprobe output is not valid JSON
        """
        logger.info(f"Inspecting media file: {video_path}")

        output = await run_ffprobe_async(
            video_path, FFPROBE_AUDIO_ARGS, ffprobe_path=self._ffprobe_path
        )
        probe_data = self._parse_output(output)

        info = VideoInfo(file_path=str(video_path))
        for stream in probe_data.get("streams") or []:
            track = self._parse_audio_stream(stream)
            logger.debug(f"Found audio track {track.index}: {track.display_name}")
            info.audio_tracks.append(track)

        logger.info(f"Found {len(info.audio_tracks)} audio track(s) in {video_path}")
        return info

    def _parse_output(self, output: str) -> dict[str, Any]:
        """
        Parse ffprobe JSON output.

        Raises:
            MalformedOutputError: If output is not a JSON object
        """
        try:
            data = json.loads(output)
        except json.JSONDecodeError as e:
            raise MalformedOutputError(f"Failed to parse ffprobe output: {e}") from e

        if not isinstance(data, dict):
            raise MalformedOutputError("Failed to parse ffprobe output: expected a JSON object")
        return data

    def _parse_audio_stream(self, stream: dict[str, Any]) -> AudioTrack:
        """Parse a single ffprobe stream entry."""
        tags = stream.get("tags") or {}
        return AudioTrack(
            index=int(stream.get("index", 0)),
            language=str(tags.get("language", "")),
            title=str(tags.get("title", "")),
            codec=str(stream.get("codec_name", "")),
        )
