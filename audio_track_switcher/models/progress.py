"""
Data models for remux progress reporting.

ffmpeg's ``-progress`` channel reports one block of ``key=value`` lines per
interval. A ProgressRecord holds one such block; it is immutable, so each
new field produces a new record and a boundary simply starts over from an
empty one.
"""

import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

ELAPSED_FIELD = "out_time_ms"
DURATION_FIELD = "duration"

# Plain decimal or exponent notation, ASCII digits only
NUMBER_PATTERN = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


def parse_number(value: str) -> float:
    """Parse a numeric field, falling back to 0.0 for anything non-numeric."""
    if not NUMBER_PATTERN.fullmatch(value):
        return 0.0
    number = float(value)
    return number if math.isfinite(number) else 0.0


@dataclass(frozen=True)
class ProgressEvent:
    """Completion percentage of a running remux (not clamped to 0-100)."""

    percent: float


@dataclass(frozen=True)
class ProgressRecord:
    """Fields reported by ffmpeg during a single progress interval."""

    fields: Mapping[str, str] = field(default_factory=dict)

    def with_field(self, key: str, value: str) -> "ProgressRecord":
        """Return a copy with key set to value (last write wins)."""
        return ProgressRecord({**self.fields, key: value})

    def has(self, key: str) -> bool:
        return self.fields.get(key, "") != ""

    @property
    def elapsed(self) -> float:
        return parse_number(self.fields.get(ELAPSED_FIELD, ""))

    @property
    def duration(self) -> float:
        return parse_number(self.fields.get(DURATION_FIELD, ""))

    @property
    def is_complete(self) -> bool:
        """Both timing fields are present."""
        return self.has(ELAPSED_FIELD) and self.has(DURATION_FIELD)

    def to_event(self) -> Optional[ProgressEvent]:
        """
        Convert the record into a progress event.

        Returns:
            ProgressEvent, or None when a timing field is missing or the
            duration is not positive
        """
        if not self.is_complete:
            return None

        duration = self.duration
        if duration <= 0:
            return None

        percent = self.elapsed / duration * 100
        if not math.isfinite(percent):
            return None

        return ProgressEvent(percent=percent)


@dataclass(frozen=True)
class OutcomeEvent:
    """Terminal result of a remux."""

    success: bool
    output_path: Optional[Path] = None
    diagnostic: str = ""

    @classmethod
    def succeeded(cls, output_path: Path) -> "OutcomeEvent":
        return cls(success=True, output_path=output_path)

    @classmethod
    def failed(cls, diagnostic: str) -> "OutcomeEvent":
        return cls(success=False, diagnostic=diagnostic)
