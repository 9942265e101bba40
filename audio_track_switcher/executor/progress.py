"""
Progress demuxer for ffmpeg's machine-readable progress channel.

``ffmpeg -progress pipe:1`` writes blocks of ``key=value`` lines, each block
terminated by an empty line. This module turns such a line stream into a
lazy sequence of ProgressEvent, one per completed block that carries both
timing fields.

The parsing itself is a pure transition function over ProgressRecord, so it
can be driven from a synthetic byte sequence as well as from a live
asyncio stream.
"""

import asyncio
from typing import AsyncIterator, Iterable, Iterator, Optional, Union

from ..models import ProgressEvent, ProgressRecord
from ..utils import StreamReadError, get_logger

logger = get_logger(__name__)

Line = Union[str, bytes]


def decode_line(line: Line) -> str:
    """
    Decode a raw line and strip its terminator.

    Args:
        line: Line as read from the stream, with or without trailing newline

    Returns:
        Line text without the trailing "\\n" / "\\r\\n"
    """
    if isinstance(line, bytes):
        line = line.decode("utf-8", errors="replace")
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def parse_progress_line(
    record: ProgressRecord, line: str
) -> tuple[ProgressRecord, Optional[ProgressEvent]]:
    """
    Apply one progress line to the current interval record.

    Args:
        record: Fields accumulated so far in this interval
        line: Decoded line without terminator

    Returns:
        Tuple of (record for the next line, event completed by this line)
    """
    if line == "":
        # Interval boundary: always start the next interval empty
        return ProgressRecord(), record.to_event()

    key, sep, value = line.partition("=")
    if not sep:
        return record, None

    return record.with_field(key, value), None


def iter_progress(lines: Iterable[Line]) -> Iterator[ProgressEvent]:
    """
    Lazily parse progress events from an iterable of lines.

    Accepts anything that yields lines, e.g. a list of strings or a binary
    file object.
    """
    record = ProgressRecord()
    for raw in lines:
        record, event = parse_progress_line(record, decode_line(raw))
        if event is not None:
            yield event


class ProgressDemuxer:
    """
    Async progress parser bound to a live stream.

    Events are yielded as soon as their boundary line has been read, while
    the producing process is still running. The sequence can only be
    consumed once.
    """

    def __init__(self, reader: asyncio.StreamReader):
        """
        Initialize demuxer.

        Args:
            reader: Stream carrying ffmpeg's progress output
        """
        self._reader = reader
        self._consumed = False
        self.lines_read = 0
        self.events_emitted = 0

    async def events(self) -> AsyncIterator[ProgressEvent]:
        """
        Stream progress events until the underlying stream ends.

        Yields:
            ProgressEvent for each completed interval

        Raises:
            StreamReadError: If reading the stream fails before end-of-stream
            RuntimeError: If the sequence was already consumed
        """
        if self._consumed:
            raise RuntimeError("Progress stream can only be consumed once")
        self._consumed = True

        record = ProgressRecord()
        async for line in self._stream_lines():
            record, event = parse_progress_line(record, line)
            if event is not None:
                self.events_emitted += 1
                yield event

        logger.debug(
            f"Progress stream closed after {self.lines_read} lines, "
            f"{self.events_emitted} events"
        )

    async def _stream_lines(self) -> AsyncIterator[str]:
        """
        Stream decoded lines from the reader.

        Yields:
            Individual lines without terminators
        """
        while True:
            try:
                line_bytes = await self._reader.readline()
            except (ValueError, OSError) as e:
                # ValueError is how StreamReader reports an over-long line
                raise StreamReadError(f"Error reading ffmpeg output: {e}") from e

            if not line_bytes:
                break

            self.lines_read += 1
            yield decode_line(line_bytes)
