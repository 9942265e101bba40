"""
Data models for media file information.

Only audio streams matter here: a track listing is the file path plus one
AudioTrack per audio stream reported by ffprobe.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class AudioTrack:
    """Information about an audio stream."""

    index: int
    language: str = ""
    title: str = ""
    codec: str = ""

    @property
    def display_name(self) -> str:
        """Get display name for the track."""
        parts = [self.language.upper() or "UND"]
        if self.title:
            parts.append(self.title)
        if self.codec:
            parts.append(self.codec)
        return " - ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "language": self.language,
            "title": self.title,
            "codec": self.codec,
        }


@dataclass
class VideoInfo:
    """Audio track listing of a video file."""

    file_path: str
    audio_tracks: list[AudioTrack] = field(default_factory=list)

    @property
    def has_audio(self) -> bool:
        """Check if the file has audio streams."""
        return len(self.audio_tracks) > 0

    def get_track(self, index: int) -> AudioTrack | None:
        """Get audio track by stream index."""
        for track in self.audio_tracks:
            if track.index == index:
                return track
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys used on the wire."""
        return {
            "filePath": self.file_path,
            "audioTracks": [track.to_dict() for track in self.audio_tracks],
        }
