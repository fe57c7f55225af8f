"""Byte-exact line scanner for delimited data files.

The first line is the header and is skipped unread. Every later non-empty
line becomes a record whose offset is measured from the first byte after the
header, and whose length excludes the line terminator (LF, CRLF or CR).
Blank lines produce no record but their bytes still count toward the
offsets of later records.
"""

import re
from dataclasses import dataclass
from typing import BinaryIO, Iterator

from cmod_indexer.errors import EmptyInputError

CHUNK_SIZE = 64 * 1024

_LF = 0x0A
_TERMINATOR_RE = re.compile(rb"[\r\n]")


@dataclass(frozen=True)
class RecordLocation:
    offset: int
    length: int


@dataclass(frozen=True)
class ScannedRecord:
    """One data line, still as bytes, with its position in the data area."""
    location: RecordLocation
    content: bytes


def iter_raw_lines(stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> Iterator[tuple[bytes, int]]:
    """Yield (content, terminator_length) for each line of a binary stream.

    Reads fixed-size chunks, so memory stays bounded by the longest line.
    A CR that ends a chunk is held back until the next chunk shows whether
    it starts a CRLF pair.
    """
    buf = b""
    start = 0
    eof = False

    while True:
        m = _TERMINATOR_RE.search(buf, start)
        if m is not None:
            pos = m.start()
            if buf[pos] == _LF:
                yield buf[start:pos], 1
                start = pos + 1
                continue
            # CR: need one more byte to tell CR from CRLF
            if pos + 1 < len(buf):
                if buf[pos + 1] == _LF:
                    yield buf[start:pos], 2
                    start = pos + 2
                else:
                    yield buf[start:pos], 1
                    start = pos + 1
                continue
            if eof:
                yield buf[start:pos], 1
                start = pos + 1
                continue

        if eof:
            if start < len(buf):
                yield buf[start:], 0
            return

        chunk = stream.read(chunk_size)
        if not chunk:
            eof = True
        else:
            buf = buf[start:] + chunk
            start = 0


class RecordScanner:
    """Single forward pass over a data file.

    Iterate :meth:`records` once. ``data_start``, ``records_seen``,
    ``blank_lines`` and ``bytes_read`` describe the pass so far.
    """

    def __init__(self, stream: BinaryIO, chunk_size: int = CHUNK_SIZE):
        self._lines = iter_raw_lines(stream, chunk_size)
        self.data_start: int | None = None
        self.bytes_read = 0
        self.records_seen = 0
        self.blank_lines = 0

    def records(self) -> Iterator[ScannedRecord]:
        header = next(self._lines, None)
        if header is None:
            raise EmptyInputError("Input is empty (no header line found)")
        content, term_len = header
        self.bytes_read = len(content) + term_len
        self.data_start = self.bytes_read

        for content, term_len in self._lines:
            line_start = self.bytes_read
            self.bytes_read += len(content) + term_len
            if not content:
                self.blank_lines += 1
                continue
            self.records_seen += 1
            yield ScannedRecord(
                location=RecordLocation(offset=line_start - self.data_start, length=len(content)),
                content=content,
            )
