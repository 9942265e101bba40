"""
Data models for remux requests.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RemuxRequest:
    """
    A request to re-mux a file with one audio track marked default.

    The caller is responsible for creating the output directory before the
    request is executed.
    """

    input_path: Path
    track_index: int
    output_path: Path

    def __post_init__(self) -> None:
        if isinstance(self.track_index, bool) or not isinstance(self.track_index, int):
            raise ValueError(f"Track index must be an integer: {self.track_index!r}")
        if self.track_index < 0:
            raise ValueError(f"Track index must be non-negative: {self.track_index}")
