"""
Outward message stream.

Each OutwardMessage is serialized completely before anything is written,
then written as one line and flushed under a lock, so lines from different
writers never interleave and a partial JSON line is never emitted.
"""

import sys
import threading
from typing import Any, Optional, TextIO

from ..models import OutcomeEvent, OutwardMessage, ProgressEvent, VideoInfo
from ..utils import get_logger

logger = get_logger(__name__)


class MessageEmitter:
    """Writes OutwardMessages as JSON lines to a text stream."""

    def __init__(self, stream: Optional[TextIO] = None):
        """
        Initialize emitter.

        Args:
            stream: Output stream (standard output if None)
        """
        self._stream = stream
        self._lock = threading.Lock()
        self.count = 0

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so a replaced sys.stdout is honoured
        return self._stream or sys.stdout

    def emit(self, message: OutwardMessage) -> None:
        """Serialize and write a single message."""
        line = message.to_json() + "\n"
        with self._lock:
            self.stream.write(line)
            self.stream.flush()
            self.count += 1

    def progress(self, event: ProgressEvent) -> None:
        self.emit(OutwardMessage.progress(event))

    def outcome(self, outcome: OutcomeEvent) -> None:
        self.emit(OutwardMessage.from_outcome(outcome))

    def tracks(self, info: VideoInfo) -> None:
        self.emit(OutwardMessage.from_video_info(info))

    def success(self, message: str, data: Optional[dict[str, Any]] = None) -> None:
        self.emit(OutwardMessage.ok(message, data))

    def failure(self, message: str) -> None:
        logger.debug(f"Reporting failure: {message}")
        self.emit(OutwardMessage.error(message))
