"""
Async subprocess supervision for ffmpeg and ffprobe.

RemuxProcess owns one ffmpeg remux from launch to exit: it pipes the
progress channel (stdout) and the diagnostic channel (stderr) before the
process starts, drains stderr in a background task for the whole run, feeds
stdout through the ProgressDemuxer while the process is running, and only
waits for exit once stdout has reached end-of-stream.
"""

import asyncio
import signal
from contextlib import suppress
from pathlib import Path
from typing import AsyncIterator, Optional

from ..models import ProgressEvent, RemuxRequest
from ..utils import (
    ExternalProcessError,
    LaunchError,
    ProcessTimeoutError,
    get_logger,
)
from .progress import ProgressDemuxer

logger = get_logger(__name__)

DEFAULT_LINE_LIMIT = 64 * 1024


def build_remux_command(request: RemuxRequest, ffmpeg_path: str = "ffmpeg") -> list[str]:
    """
    Build the ffmpeg command that re-muxes a file with a new default audio track.

    All streams are mapped and copied without re-encoding; the default flag
    is cleared on every audio stream and set on the requested one.

    Args:
        request: Remux request
        ffmpeg_path: ffmpeg executable

    Returns:
        FFmpeg command as list
    """
    return [
        ffmpeg_path,
        "-i",
        str(request.input_path),
        "-map",
        "0",
        "-c",
        "copy",
        "-disposition:a",
        "0",
        f"-disposition:a:{request.track_index}",
        "default",
        "-y",
        "-progress",
        "pipe:1",
        str(request.output_path),
    ]


def describe_exit(returncode: int) -> str:
    """Describe a process exit code, naming the signal for signal deaths."""
    if returncode < 0:
        try:
            return f"signal: {signal.Signals(-returncode).name}"
        except ValueError:
            return f"signal: {-returncode}"
    return f"exit status {returncode}"


class RemuxProcess:
    """
    Supervisor for a single ffmpeg remux.

    Provides:
    - Real-time progress events while ffmpeg is running
    - Concurrent stderr capture for failure diagnostics
    - Optional timeout handling
    - Process cleanup when the run fails or is abandoned
    """

    def __init__(
        self,
        request: RemuxRequest,
        ffmpeg_path: str = "ffmpeg",
        timeout: Optional[float] = None,
        line_limit: int = DEFAULT_LINE_LIMIT,
        terminate_grace: float = 5.0,
    ):
        """
        Initialize remux process.

        Args:
            request: Remux request to execute
            ffmpeg_path: ffmpeg executable
            timeout: Maximum execution time in seconds (None = no timeout)
            line_limit: Maximum length of a progress line in bytes
            terminate_grace: Seconds between SIGTERM and SIGKILL on termination
        """
        self.request = request
        self.command = build_remux_command(request, ffmpeg_path)
        self.timeout = timeout
        self.line_limit = line_limit
        self.terminate_grace = terminate_grace
        self._process: Optional[asyncio.subprocess.Process] = None
        self._stderr_task: Optional[asyncio.Task[str]] = None
        self._timeout_handle: Optional[asyncio.TimerHandle] = None
        self._timeout_task: Optional[asyncio.Task[None]] = None
        self._timed_out = False
        self._stderr_lines: list[str] = []
        self._started = False

    async def run(self) -> AsyncIterator[ProgressEvent]:
        """
        Run the remux, yielding progress events as ffmpeg reports them.

        The generator finishes normally when ffmpeg exits successfully.

        Yields:
            ProgressEvent for every completed progress interval

        Raises:
            LaunchError: If ffmpeg cannot be started
            StreamReadError: If the progress channel fails mid-stream
            ExternalProcessError: If ffmpeg exits abnormally
            ProcessTimeoutError: If the remux exceeds the timeout
        """
        if self._started:
            raise RuntimeError("RemuxProcess can only be run once")
        self._started = True

        logger.info(
            f"Switching default audio track of {self.request.input_path} "
            f"to track {self.request.track_index}"
        )
        logger.debug(f"Full command: {' '.join(self.command)}")

        await self._start()
        try:
            demuxer = ProgressDemuxer(self._stdout())
            async for event in demuxer.events():
                yield event

            # stdout is closed; only now wait for the exit status
            await self._wait()
        finally:
            await self._cleanup()

        logger.info(f"Remux completed: {self.request.output_path}")

    async def _start(self) -> None:
        """
        Spawn ffmpeg with both output channels piped.

        Raises:
            LaunchError: If the process cannot be started
        """
        try:
            self._process = await asyncio.create_subprocess_exec(
                *self.command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                limit=self.line_limit,
            )
        except OSError as e:
            logger.error(f"Failed to start ffmpeg: {e}")
            raise LaunchError(f"Failed to start ffmpeg: {e}", command=self.command) from e

        self._stderr_task = asyncio.create_task(self._read_stderr())

        if self.timeout:
            loop = asyncio.get_running_loop()
            self._timeout_handle = loop.call_later(self.timeout, self._on_timeout)

    def _stdout(self) -> asyncio.StreamReader:
        if not self._process or not self._process.stdout:
            raise RuntimeError("Process not started")
        return self._process.stdout

    async def _read_stderr(self) -> str:
        """
        Drain stderr for the lifetime of the process.

        Capture is best-effort: a read error ends the capture and keeps
        whatever was read so far.

        Returns:
            Captured diagnostic output
        """
        if not self._process or not self._process.stderr:
            return ""

        stderr_lines: list[str] = []
        try:
            while True:
                line_bytes = await self._process.stderr.readline()
                if not line_bytes:
                    break
                line = line_bytes.decode("utf-8", errors="replace").rstrip()
                if line:
                    stderr_lines.append(line)
        except (ValueError, OSError) as e:
            logger.warning(f"Diagnostic capture stopped early: {e}")

        self._stderr_lines = stderr_lines
        return "\n".join(stderr_lines)

    async def _collect_stderr(self) -> str:
        """Get captured diagnostics, or an empty string if none are available."""
        if self._stderr_task is None:
            return ""
        try:
            return await self._stderr_task
        except asyncio.CancelledError:
            return ""

    async def _wait(self) -> None:
        """
        Wait for ffmpeg to exit and resolve its disposition.

        Raises:
            ProcessTimeoutError: If the process was stopped by the timeout
            ExternalProcessError: If the process exited abnormally
        """
        if not self._process:
            raise RuntimeError("Process not started")

        returncode = await self._process.wait()
        stderr = await self._collect_stderr()

        if self._timed_out:
            raise ProcessTimeoutError(
                f"Process exceeded timeout of {self.timeout}s",
                timeout=self.timeout or 0.0,
            )

        if returncode != 0:
            exit_desc = describe_exit(returncode)
            logger.error(f"ffmpeg failed with {exit_desc}")
            raise ExternalProcessError(
                f"ffmpeg error: {exit_desc}\nOutput: {stderr}",
                command=self.command,
                stderr=stderr,
                returncode=returncode,
            )

    def _on_timeout(self) -> None:
        if not self.is_running:
            # Already exited; its own exit status decides the outcome
            return
        logger.error(f"ffmpeg process exceeded timeout of {self.timeout}s")
        self._timed_out = True
        self._timeout_task = asyncio.ensure_future(self.terminate())

    async def _cleanup(self) -> None:
        """Stop the timer, the process and the stderr reader if still active."""
        if self._timeout_handle:
            self._timeout_handle.cancel()

        await self.terminate()

        if self._timeout_task and not self._timeout_task.done():
            await self._timeout_task

        if self._stderr_task and not self._stderr_task.done():
            self._stderr_task.cancel()
            with suppress(asyncio.CancelledError):
                await self._stderr_task

    async def terminate(self) -> None:
        """
        Terminate the process gracefully.

        Sends SIGTERM, waits briefly, then sends SIGKILL if needed.
        """
        if not self._process or self._process.returncode is not None:
            return

        logger.info("Terminating ffmpeg process...")
        try:
            self._process.terminate()
            try:
                await asyncio.wait_for(self._process.wait(), timeout=self.terminate_grace)
                logger.info("Process terminated gracefully")
            except asyncio.TimeoutError:
                logger.warning("Forcing process termination...")
                self._process.kill()
                await self._process.wait()
                logger.info("Process killed")
        except ProcessLookupError:
            # Exited between the returncode check and the signal
            pass

    @property
    def is_running(self) -> bool:
        """Check if process is currently running."""
        return self._process is not None and self._process.returncode is None

    @property
    def returncode(self) -> Optional[int]:
        """Get process return code."""
        return self._process.returncode if self._process else None

    @property
    def stderr_output(self) -> list[str]:
        """Get captured stderr lines."""
        return self._stderr_lines.copy()


async def run_ffprobe_async(
    input_file: Path,
    additional_args: Optional[list[str]] = None,
    ffprobe_path: str = "ffprobe",
) -> str:
    """
    Run FFprobe command asynchronously.

    Args:
        input_file: Path to media file
        additional_args: Additional FFprobe arguments
        ffprobe_path: ffprobe executable

    Returns:
        FFprobe stdout as string

    Raises:
        LaunchError: If ffprobe cannot be started
        ExternalProcessError: If ffprobe exits abnormally
    """
    command = [ffprobe_path, "-v", "quiet"]

    if additional_args:
        command.extend(additional_args)

    command.append(str(input_file))
    logger.debug(f"Full command: {' '.join(command)}")

    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise LaunchError(f"Failed to execute ffprobe: {e}", command=command) from e

    stdout, stderr = await process.communicate()

    if process.returncode != 0:
        diagnostic = stderr.decode("utf-8", errors="replace").strip() if stderr else ""
        message = f"Failed to execute ffprobe: {describe_exit(process.returncode or 0)}"
        if diagnostic:
            message = f"{message}\nOutput: {diagnostic}"
        raise ExternalProcessError(
            message,
            command=command,
            stderr=diagnostic,
            returncode=process.returncode,
        )

    return stdout.decode("utf-8", errors="replace") if stdout else ""
