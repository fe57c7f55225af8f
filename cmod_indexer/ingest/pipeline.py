"""Orchestrates one indexing run: delimited data file → GROUP_* index file."""

import codecs
import os
from contextlib import contextmanager, suppress
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator

from cmod_indexer.cache_manager import is_cache_fresh
from cmod_indexer.config import IndexerConfig
from cmod_indexer.errors import ConfigError, IndexerError, IndexIOError, ParseError
from cmod_indexer.ingest.index_writer import DEFAULT_ENCODING, ENCODING_ERRORS, IndexWriter, OutputEntry
from cmod_indexer.ingest.profile_selector import SelectedProfile, select_profile
from cmod_indexer.ingest.record_parser import parse_line
from cmod_indexer.ingest.record_scanner import RecordScanner


@dataclass(frozen=True)
class IndexStats:
    """Summary of one run."""
    input_path: str
    output_path: str
    profile: str
    records: int = 0
    blank_lines: int = 0
    bytes_read: int = 0
    skipped: bool = False


@contextmanager
def _opened(path: str, mode: str, what: str) -> Iterator[BinaryIO]:
    """Open a file for the run, reporting open and close failures as IndexIOError."""
    try:
        f = open(path, mode)
    except OSError as e:
        raise IndexIOError(f"Cannot open {what} '{path}': {e.strerror or e}") from e
    try:
        yield f
    except BaseException:
        # the error already in flight is the one to report
        with suppress(OSError):
            f.close()
        raise
    try:
        f.close()
    except OSError as e:
        raise IndexIOError(f"Error closing {what} '{path}': {e.strerror or e}") from e


def _mark_stale(path: str) -> None:
    """Backdate a partial output so a later skip_fresh run rebuilds it."""
    with suppress(OSError):
        os.utime(path, (0, 0))


def index_stream(
    in_stream: BinaryIO,
    out_stream: BinaryIO,
    selected: SelectedProfile,
    filename: str,
    encoding: str = DEFAULT_ENCODING,
) -> RecordScanner:
    """Index every record of in_stream into out_stream.

    Each record is parsed, mapped and written before the next one is read.
    The first unparseable record stops the run; blocks already written stay.
    Returns the finished scanner for its counters.
    """
    scanner = RecordScanner(in_stream)
    writer = IndexWriter(out_stream, encoding)

    for record in scanner.records():
        line = record.content.decode(encoding, ENCODING_ERRORS)
        try:
            fields = parse_line(line, selected.delimiter, record.location.offset)
        except ParseError as e:
            raise ParseError(e.offset, e.line, e.reason, path=filename) from None
        writer.write(OutputEntry(
            fields=selected.mapper.map_fields(fields),
            location=record.location,
            filename=filename,
        ))

    return scanner


def run_indexing(
    input_path: str | Path,
    output_path: str | Path,
    config: IndexerConfig,
    encoding: str = DEFAULT_ENCODING,
    skip_fresh: bool = False,
    verbose: bool = True,
) -> IndexStats:
    """Select the profile for input_path and write its index to output_path.

    GROUP_FILENAME carries input_path exactly as given. With skip_fresh, an
    output newer than both the input and the config file is left alone.
    """
    input_path = os.fspath(input_path)
    output_path = os.fspath(output_path)
    try:
        codecs.lookup(encoding)
    except LookupError as e:
        raise ConfigError(f"Unknown text encoding '{encoding}'") from e

    selected = select_profile(config, input_path)
    label = selected.profile.label

    if skip_fresh and is_cache_fresh(Path(output_path), Path(input_path), config.source_path):
        if verbose:
            print(f"Index {output_path} is up to date, skipping")
        return IndexStats(input_path, output_path, label, skipped=True)

    if verbose:
        print(f"Indexing {Path(input_path).name} with profile '{label}'...")

    try:
        with _opened(input_path, "rb", "input") as in_f, _opened(output_path, "wb", "output") as out_f:
            try:
                scanner = index_stream(in_f, out_f, selected, input_path, encoding)
            except OSError as e:
                raise IndexIOError(f"I/O error while indexing '{input_path}': {e.strerror or e}") from e
    except IndexerError:
        # partial output stays on disk but must never look up to date
        _mark_stale(output_path)
        raise

    stats = IndexStats(
        input_path=input_path,
        output_path=output_path,
        profile=label,
        records=scanner.records_seen,
        blank_lines=scanner.blank_lines,
        bytes_read=scanner.bytes_read,
    )
    if verbose:
        print(f"  {stats.records} records, {stats.blank_lines} blank lines skipped")
    return stats
