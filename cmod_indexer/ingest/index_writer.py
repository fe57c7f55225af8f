"""Serialize index entries to the GROUP_* line format.

Values are written verbatim. A value holding a newline or a GROUP_ tag
will break the block structure; the format has no escaping.
"""

from dataclasses import dataclass
from typing import BinaryIO

from cmod_indexer.ingest.record_scanner import RecordLocation

DEFAULT_ENCODING = "utf-8"
# Undecodable input bytes survive a decode/encode round trip unchanged.
ENCODING_ERRORS = "surrogateescape"


@dataclass(frozen=True)
class OutputEntry:
    fields: list[tuple[str, str]]
    location: RecordLocation
    filename: str


def format_entry(entry: OutputEntry) -> str:
    """Render one entry as its block of GROUP_* lines."""
    lines = []
    for name, value in entry.fields:
        lines.append(f"GROUP_FIELD_NAME:{name}\n")
        lines.append(f"GROUP_FIELD_VALUE:{value}\n")
    lines.append(f"GROUP_OFFSET:{entry.location.offset}\n")
    lines.append(f"GROUP_LENGTH:{entry.location.length}\n")
    lines.append(f"GROUP_FILENAME:{entry.filename}\n")
    return "".join(lines)


class IndexWriter:
    """Appends entries to a binary output stream, one whole block at a time."""

    def __init__(self, stream: BinaryIO, encoding: str = DEFAULT_ENCODING):
        self.stream = stream
        self.encoding = encoding
        self.entries_written = 0

    def write(self, entry: OutputEntry) -> None:
        self.stream.write(format_entry(entry).encode(self.encoding, ENCODING_ERRORS))
        self.entries_written += 1
