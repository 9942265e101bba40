"""
Shared fixtures.
"""

import sys
from pathlib import Path
from typing import Callable

import pytest

from audio_track_switcher.config import manager as config_manager_module


@pytest.fixture(autouse=True)
def reset_config_manager(monkeypatch, tmp_path):
    """Isolate tests from the global config manager and user config files."""
    monkeypatch.setattr(config_manager_module, "_config_manager", None)
    monkeypatch.setattr(
        config_manager_module.ConfigManager,
        "DEFAULT_CONFIG_LOCATIONS",
        [tmp_path / "no-such-config.yaml"],
    )


@pytest.fixture
def fake_ffmpeg(tmp_path) -> Callable[..., str]:
    """
    Factory for stand-in ffmpeg executables.

    The generated script ignores its arguments, writes the given progress
    blocks to stdout (sleeping between blocks if requested), writes the
    given text to stderr and exits with the given code.
    """

    def _make(
        blocks: list[str] | None = None,
        stderr: str = "",
        exit_code: int = 0,
        delay: float = 0.0,
        tail_sleep: float = 0.0,
        name: str = "ffmpeg",
    ) -> str:
        script = tmp_path / name
        script.write_text(
            f"#!{sys.executable}\n"
            "import sys, time\n"
            f"sys.stderr.write({stderr!r})\n"
            "sys.stderr.flush()\n"
            f"for block in {blocks or []!r}:\n"
            "    sys.stdout.write(block)\n"
            "    sys.stdout.flush()\n"
            f"    time.sleep({delay!r})\n"
            f"time.sleep({tail_sleep!r})\n"
            f"sys.exit({exit_code})\n"
        )
        script.chmod(0o755)
        return str(script)

    return _make


@pytest.fixture
def request_paths(tmp_path) -> tuple[Path, Path]:
    """Input and output paths for remux requests."""
    return tmp_path / "input.mkv", tmp_path / "out" / "output.mkv"

