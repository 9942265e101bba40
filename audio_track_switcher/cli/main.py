"""
CLI interface for the audio track switcher.

Standard output is a JSON-lines message stream: every command answers with
OutwardMessages, including usage errors. Operation failures are reported in
the ``success`` field, never through the exit code. Logs go to stderr.
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click
import typer

from .. import __version__
from ..config import SwitcherConfig, get_config_manager
from ..models import RemuxRequest
from ..switcher import TrackSwitcher
from ..ui import MessageEmitter
from ..utils import SwitcherError, get_logger, setup_logger

# Initialize Typer app
app = typer.Typer(
    name="audio-track-switcher",
    help="List audio tracks and switch the default audio track of video files",
    add_completion=False,
)

# JSON message stream on stdout
emitter = MessageEmitter()

# Logger
logger = get_logger(__name__)

# Typer releases that bundle their own click raise TyperException subclasses
# instead of click.ClickException for usage errors
USAGE_ERRORS: tuple[type[Exception], ...] = (click.ClickException,) + (
    (typer.TyperException,) if hasattr(typer, "TyperException") else ()
)
ABORT_ERRORS: tuple[type[BaseException], ...] = (click.exceptions.Abort, typer.Abort)


class CLIState:
    """Global options shared by all commands."""

    def __init__(
        self,
        config_file: Optional[Path] = None,
        verbose: bool = False,
        log_file: Optional[Path] = None,
    ):
        self.config_file = config_file
        self.verbose = verbose
        self.log_file = log_file

    def load_config(self) -> SwitcherConfig:
        """
        Load configuration and apply its logging settings.

        Raises:
            ConfigurationError: If the configuration cannot be loaded
        """
        config = get_config_manager(self.config_file).config
        setup_logger(
            level=config.logging.level,
            log_file=self.log_file or config.logging.file,
            verbose=self.verbose,
        )
        return config


def _state(ctx: typer.Context) -> CLIState:
    return ctx.obj if isinstance(ctx.obj, CLIState) else CLIState()


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        dir_okay=False,
        help="Custom configuration file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging (stderr)",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log",
        help="Log file path",
    ),
) -> None:
    """
    List audio tracks and switch the default audio track of video files.
    """
    setup_logger(log_file=log_file, verbose=verbose)
    ctx.obj = CLIState(config_file=config_file, verbose=verbose, log_file=log_file)


@app.command("get-tracks")
def get_tracks_command(
    ctx: typer.Context,
    video_path: Optional[str] = typer.Argument(None, help="Video file to inspect"),
) -> None:
    """
    List the audio tracks of a video file.
    """
    if not video_path:
        emitter.failure("Video path not specified")
        return

    try:
        config = _state(ctx).load_config()
    except SwitcherError as e:
        emitter.failure(str(e))
        return

    _run(TrackSwitcher(config, emitter).get_tracks(Path(video_path)))


@app.command("switch-track")
def switch_track_command(
    ctx: typer.Context,
    input_path: Optional[str] = typer.Argument(None, help="Input video file"),
    track_index: Optional[str] = typer.Argument(None, help="Audio track to mark as default"),
    output_path: Optional[str] = typer.Argument(None, help="Output video file"),
) -> None:
    """
    Re-mux a video file with the chosen audio track marked as default.

    Progress is reported as it happens, followed by one final result.
    """
    if input_path is None or track_index is None or output_path is None:
        emitter.failure("Usage: switch-track <input_path> <track_index> <output_path>")
        return

    try:
        request = RemuxRequest(
            input_path=Path(input_path),
            track_index=int(track_index),
            output_path=Path(output_path),
        )
    except ValueError:
        emitter.failure(f"Invalid track index: {track_index}")
        return

    try:
        config = _state(ctx).load_config()
    except SwitcherError as e:
        emitter.failure(str(e))
        return

    # Ensure output directory exists
    try:
        request.output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        emitter.failure(f"Failed to create output directory: {e}")
        return

    _run(TrackSwitcher(config, emitter).switch_track(request))


@app.command("config")
def config_command(
    ctx: typer.Context,
    action: str = typer.Argument(..., help="Action: init, show"),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file for 'init' action",
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """
    Manage configuration files.

    Actions:
    - init: Create a default configuration file
    - show: Display current configuration
    """
    state = _state(ctx)
    manager = get_config_manager(state.config_file)

    try:
        if action == "init":
            output_path = output or Path(".audio-track-switcher.yaml")
            created = manager.init_default_config(output_path, force=force)
            emitter.success("Configuration file created", {"path": str(created)})

        elif action == "show":
            config = state.load_config()
            emitter.success("Current configuration", config.model_dump(mode="json"))

        else:
            emitter.failure(f"Unknown action: {action}. Valid actions: init, show")

    except SwitcherError as e:
        emitter.failure(str(e))


@app.command("version")
def version_command() -> None:
    """
    Display version information.
    """
    emitter.success("Audio Track Switcher", {"version": __version__})


def _run(coro) -> None:
    try:
        asyncio.run(coro)
    except KeyboardInterrupt:
        emitter.failure("Operation cancelled by user")
        sys.exit(130)


def main() -> None:
    """
    Main entry point for CLI.

    Usage errors are answered with a failure message like any other error.
    """
    try:
        app(standalone_mode=False)
    except ABORT_ERRORS:
        emitter.failure("Operation cancelled by user")
        sys.exit(130)
    except USAGE_ERRORS as e:
        emitter.failure(e.format_message())


if __name__ == "__main__":
    main()
