"""
Tests for the remux process supervisor.
"""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from audio_track_switcher.executor import RemuxProcess, build_remux_command, run_ffprobe_async
from audio_track_switcher.executor.subprocess import describe_exit
from audio_track_switcher.models import ProgressEvent, RemuxRequest
from audio_track_switcher.utils import (
    ExternalProcessError,
    LaunchError,
    ProcessTimeoutError,
    StreamReadError,
)

BLOCK_25 = "out_time_ms=500000\nduration=2000000\nprogress=continue\n\n"
BLOCK_50 = "out_time_ms=1000000\nduration=2000000\nprogress=continue\n\n"
BLOCK_END = "out_time_ms=2000000\nduration=2000000\nprogress=end\n\n"


@pytest.fixture
def remux_request(request_paths):
    input_path, output_path = request_paths
    return RemuxRequest(input_path=input_path, track_index=2, output_path=output_path)


async def collect(process: RemuxProcess) -> list[ProgressEvent]:
    return await asyncio.wait_for(_collect(process), timeout=20.0)


async def _collect(process: RemuxProcess) -> list[ProgressEvent]:
    return [event async for event in process.run()]


class TestBuildRemuxCommand:
    """Test the fixed ffmpeg argument template."""

    def test_command(self):
        request = RemuxRequest(Path("in.mkv"), 1, Path("out/out.mkv"))

        assert build_remux_command(request) == [
            "ffmpeg",
            "-i",
            "in.mkv",
            "-map",
            "0",
            "-c",
            "copy",
            "-disposition:a",
            "0",
            "-disposition:a:1",
            "default",
            "-y",
            "-progress",
            "pipe:1",
            str(Path("out/out.mkv")),
        ]

    def test_custom_ffmpeg_path(self):
        request = RemuxRequest(Path("in.mkv"), 0, Path("out.mkv"))
        command = build_remux_command(request, "/opt/ffmpeg/bin/ffmpeg")
        assert command[0] == "/opt/ffmpeg/bin/ffmpeg"
        assert "-disposition:a:0" in command


class TestDescribeExit:
    """Test exit status descriptions."""

    def test_exit_status(self):
        assert describe_exit(1) == "exit status 1"

    def test_signal(self):
        assert describe_exit(-9) == "signal: SIGKILL"


class TestRemuxProcess:
    """Test RemuxProcess against stand-in ffmpeg executables."""

    def test_initialization(self, remux_request):
        process = RemuxProcess(remux_request)
        assert process.command == build_remux_command(remux_request)
        assert process.timeout is None
        assert not process.is_running
        assert process.returncode is None

    @pytest.mark.asyncio
    async def test_success_yields_events(self, remux_request, fake_ffmpeg):
        ffmpeg = fake_ffmpeg(blocks=[BLOCK_25, BLOCK_50, BLOCK_END])
        process = RemuxProcess(remux_request, ffmpeg_path=ffmpeg)

        events = await collect(process)

        assert [e.percent for e in events] == [25.0, 50.0, 100.0]
        assert process.returncode == 0

    @pytest.mark.asyncio
    async def test_success_without_progress(self, remux_request, fake_ffmpeg):
        process = RemuxProcess(remux_request, ffmpeg_path=fake_ffmpeg())

        assert await collect(process) == []
        assert process.returncode == 0

    @pytest.mark.asyncio
    async def test_events_arrive_while_running(self, remux_request, fake_ffmpeg):
        ffmpeg = fake_ffmpeg(blocks=[BLOCK_25], tail_sleep=1.0)
        process = RemuxProcess(remux_request, ffmpeg_path=ffmpeg)

        events = process.run()
        first = await asyncio.wait_for(events.__anext__(), timeout=10.0)

        assert first == ProgressEvent(percent=25.0)
        assert process.is_running

        assert [e async for e in events] == []
        assert process.returncode == 0

    @pytest.mark.asyncio
    async def test_failure_carries_diagnostics(self, remux_request, fake_ffmpeg):
        ffmpeg = fake_ffmpeg(
            blocks=[BLOCK_25],
            stderr="Stream map '0:a:9' matches no streams.\n",
            exit_code=1,
        )
        process = RemuxProcess(remux_request, ffmpeg_path=ffmpeg)
        events = []

        with pytest.raises(ExternalProcessError) as exc_info:
            async for event in process.run():
                events.append(event)

        error = exc_info.value
        assert events == [ProgressEvent(percent=25.0)]
        assert error.returncode == 1
        assert "exit status 1" in str(error)
        assert "matches no streams" in str(error)
        assert "matches no streams" in error.stderr
        assert error.command == process.command

    @pytest.mark.asyncio
    async def test_failure_without_diagnostics(self, remux_request, fake_ffmpeg):
        process = RemuxProcess(remux_request, ffmpeg_path=fake_ffmpeg(exit_code=3))

        with pytest.raises(ExternalProcessError) as exc_info:
            await collect(process)

        assert exc_info.value.stderr == ""
        assert "exit status 3" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_large_stderr_does_not_stall(self, remux_request, fake_ffmpeg):
        # Far beyond any pipe buffer, written before any progress output
        ffmpeg = fake_ffmpeg(blocks=[BLOCK_END], stderr="warning line\n" * 100_000)
        process = RemuxProcess(remux_request, ffmpeg_path=ffmpeg)

        events = await collect(process)

        assert events == [ProgressEvent(percent=100.0)]
        assert len(process.stderr_output) == 100_000

    @pytest.mark.asyncio
    async def test_missing_executable(self, remux_request, tmp_path):
        process = RemuxProcess(remux_request, ffmpeg_path=str(tmp_path / "missing-ffmpeg"))

        with pytest.raises(LaunchError, match="Failed to start ffmpeg"):
            await collect(process)

    @pytest.mark.asyncio
    async def test_not_executable(self, remux_request, tmp_path):
        ffmpeg = tmp_path / "ffmpeg"
        ffmpeg.write_text("not a program")
        ffmpeg.chmod(0o644)
        process = RemuxProcess(remux_request, ffmpeg_path=str(ffmpeg))

        with pytest.raises(LaunchError):
            await collect(process)

    @pytest.mark.asyncio
    async def test_overlong_progress_line(self, remux_request, fake_ffmpeg):
        ffmpeg = fake_ffmpeg(blocks=["x" * 8192 + "\n"], tail_sleep=30.0)
        process = RemuxProcess(remux_request, ffmpeg_path=ffmpeg, line_limit=1024)

        with pytest.raises(StreamReadError):
            await collect(process)

        assert not process.is_running

    @pytest.mark.asyncio
    async def test_timeout(self, remux_request, fake_ffmpeg):
        ffmpeg = fake_ffmpeg(blocks=[BLOCK_25], tail_sleep=30.0)
        process = RemuxProcess(remux_request, ffmpeg_path=ffmpeg, timeout=0.5)

        with pytest.raises(ProcessTimeoutError, match="exceeded timeout") as exc_info:
            await collect(process)

        assert exc_info.value.timeout == 0.5
        assert not process.is_running

    @pytest.mark.asyncio
    async def test_timer_after_clean_exit_keeps_success(self, remux_request, fake_ffmpeg):
        ffmpeg = fake_ffmpeg(blocks=[BLOCK_25])
        process = RemuxProcess(remux_request, ffmpeg_path=ffmpeg, timeout=60.0)

        events = process.run()
        first = await asyncio.wait_for(events.__anext__(), timeout=10.0)
        for _ in range(200):
            if process.returncode is not None:
                break
            await asyncio.sleep(0.05)
        assert process.returncode == 0

        # Timer fires after exit but before the consumer has read to EOF
        process._on_timeout()

        assert first == ProgressEvent(percent=25.0)
        assert [e async for e in events] == []
        assert process.returncode == 0
        assert not process._timed_out

    @pytest.mark.asyncio
    async def test_abandoned_run_terminates_process(self, remux_request, fake_ffmpeg):
        ffmpeg = fake_ffmpeg(blocks=[BLOCK_25], tail_sleep=30.0)
        process = RemuxProcess(remux_request, ffmpeg_path=ffmpeg)

        events = process.run()
        await asyncio.wait_for(events.__anext__(), timeout=10.0)
        await events.aclose()

        assert not process.is_running

    @pytest.mark.asyncio
    async def test_run_only_once(self, remux_request, fake_ffmpeg):
        process = RemuxProcess(remux_request, ffmpeg_path=fake_ffmpeg())
        await collect(process)

        with pytest.raises(RuntimeError, match="only be run once"):
            await collect(process)


class TestRunFFprobe:
    """Test the ffprobe helper."""

    @pytest.mark.asyncio
    async def test_success(self):
        mock_process = MagicMock()
        mock_process.returncode = 0
        mock_process.communicate = AsyncMock(return_value=(b'{"streams": []}', b""))

        with patch("asyncio.create_subprocess_exec", return_value=mock_process) as mock_exec:
            output = await run_ffprobe_async(Path("video.mkv"), ["-show_streams"])

        assert output == '{"streams": []}'
        args = mock_exec.call_args[0]
        assert args == ("ffprobe", "-v", "quiet", "-show_streams", "video.mkv")

    @pytest.mark.asyncio
    async def test_failure(self):
        mock_process = MagicMock()
        mock_process.returncode = 1
        mock_process.communicate = AsyncMock(return_value=(b"", b"No such file or directory"))

        with patch("asyncio.create_subprocess_exec", return_value=mock_process):
            with pytest.raises(ExternalProcessError, match="Failed to execute ffprobe") as exc_info:
                await run_ffprobe_async(Path("missing.mkv"))

        assert exc_info.value.stderr == "No such file or directory"
        assert exc_info.value.returncode == 1

    @pytest.mark.asyncio
    async def test_launch_failure(self):
        with patch(
            "asyncio.create_subprocess_exec",
            side_effect=FileNotFoundError("ffprobe not found"),
        ):
            with pytest.raises(LaunchError, match="Failed to execute ffprobe"):
                await run_ffprobe_async(Path("video.mkv"))
