"""
Operation boundary for track listing and track switching.

Both operations report exclusively through the MessageEmitter: progress
messages while work is running, followed by exactly one terminal message.
No error escapes an operation.
"""

from pathlib import Path
from typing import Optional

from ..config import SwitcherConfig
from ..executor import RemuxProcess
from ..inspector import TrackInspector
from ..models import OutcomeEvent, RemuxRequest, VideoInfo
from ..ui import MessageEmitter
from ..utils import SwitcherError, get_logger

logger = get_logger(__name__)


class TrackSwitcher:
    """Runs switcher operations and reports their results as messages."""

    def __init__(
        self,
        config: Optional[SwitcherConfig] = None,
        emitter: Optional[MessageEmitter] = None,
    ):
        """
        Initialize switcher.

        Args:
            config: Configuration (defaults if None)
            emitter: Message emitter (standard output if None)
        """
        self.config = config or SwitcherConfig.create_default()
        self.emitter = emitter or MessageEmitter()

    def create_process(self, request: RemuxRequest) -> RemuxProcess:
        """Create the supervisor for a remux request."""
        return RemuxProcess(
            request,
            ffmpeg_path=self.config.tools.ffmpeg_path,
            timeout=self.config.remux.timeout,
            line_limit=self.config.remux.line_limit,
            terminate_grace=self.config.remux.terminate_grace,
        )

    async def switch_track(self, request: RemuxRequest) -> OutcomeEvent:
        """
        Re-mux a file with the requested audio track marked default.

        Emits one progress message per progress event as it arrives, then
        one terminal message.

        Args:
            request: Remux request

        Returns:
            The outcome that was reported
        """
        progress_count = 0

        try:
            process = self.create_process(request)
            async for event in process.run():
                progress_count += 1
                self.emitter.progress(event)
            outcome = OutcomeEvent.succeeded(request.output_path)
        except SwitcherError as e:
            outcome = OutcomeEvent.failed(str(e))
        except Exception as e:
            logger.exception("Unexpected error while switching track")
            outcome = OutcomeEvent.failed(f"Unexpected error: {e}")

        logger.debug(f"Remux reported {progress_count} progress update(s)")
        self.emitter.outcome(outcome)
        return outcome

    async def get_tracks(self, video_path: Path) -> Optional[VideoInfo]:
        """
        List the audio tracks of a file.

        Args:
            video_path: Media file to inspect

        Returns:
            Track listing, or None if inspection failed
        """
        inspector = TrackInspector(ffprobe_path=self.config.tools.ffprobe_path)

        try:
            info = await inspector.list_tracks(video_path)
        except SwitcherError as e:
            self.emitter.failure(str(e))
            return None
        except Exception as e:
            logger.exception("Unexpected error while listing tracks")
            self.emitter.failure(f"Unexpected error: {e}")
            return None

        self.emitter.tracks(info)
        return info
