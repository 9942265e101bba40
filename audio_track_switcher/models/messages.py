"""
Outward message model.

Every line written to standard output is one OutwardMessage serialized as a
JSON object. Unset optional fields are left out of the JSON entirely.
"""

from typing import Any, Optional

from pydantic import BaseModel

from audio_track_switcher.models.media import VideoInfo
from audio_track_switcher.models.progress import OutcomeEvent, ProgressEvent

PROGRESS_MESSAGE = "progress"
SWITCH_SUCCESS_MESSAGE = "Audio track switched successfully"
TRACKS_SUCCESS_MESSAGE = "Audio tracks retrieved successfully"


class OutwardMessage(BaseModel):
    """Single wire shape for progress, results and failures."""

    success: bool
    message: Optional[str] = None
    data: Optional[dict[str, Any]] = None

    def to_json(self) -> str:
        """Serialize to a single JSON line (without the newline)."""
        return self.model_dump_json(exclude_none=True)

    @property
    def is_progress(self) -> bool:
        return self.success and self.message == PROGRESS_MESSAGE

    @classmethod
    def ok(cls, message: str, data: Optional[dict[str, Any]] = None) -> "OutwardMessage":
        return cls(success=True, message=message, data=data)

    @classmethod
    def error(cls, message: str) -> "OutwardMessage":
        return cls(success=False, message=message)

    @classmethod
    def progress(cls, event: ProgressEvent) -> "OutwardMessage":
        return cls(success=True, message=PROGRESS_MESSAGE, data={"progress": event.percent})

    @classmethod
    def from_outcome(cls, outcome: OutcomeEvent) -> "OutwardMessage":
        if outcome.success:
            return cls.ok(SWITCH_SUCCESS_MESSAGE, {"outputPath": str(outcome.output_path)})
        return cls.error(outcome.diagnostic)

    @classmethod
    def from_video_info(cls, info: VideoInfo) -> "OutwardMessage":
        return cls.ok(TRACKS_SUCCESS_MESSAGE, info.to_dict())
