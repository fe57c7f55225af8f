"""Read a GROUP_* index file back into a Polars DataFrame.

One row per index block: a column per field name, plus the GROUP_OFFSET,
GROUP_LENGTH and GROUP_FILENAME columns. Values are read as-is, so a value
that spilled a newline into the index cannot be recovered.

A field name repeated within a block gets a numbered column (ID, ID_2, ...).
Text columns are String; a column holding bytes that are not valid UTF-8 is
Binary with the exact bytes from the index.
"""

from pathlib import Path
from typing import Iterator

import polars as pl

from cmod_indexer.ingest.index_writer import DEFAULT_ENCODING, ENCODING_ERRORS

LOCATION_COLUMNS = ["GROUP_OFFSET", "GROUP_LENGTH", "GROUP_FILENAME"]


def _unique_name(name: str, row: dict) -> str:
    if name not in row and name not in LOCATION_COLUMNS:
        return name
    n = 2
    while f"{name}_{n}" in row:
        n += 1
    return f"{name}_{n}"


def iter_index_blocks(index_path: Path, encoding: str = DEFAULT_ENCODING) -> Iterator[dict]:
    """Yield one dict per block of an index file.

    Raises ValueError on a line that is not a known GROUP_* tag or on a
    truncated final block.
    """
    row: dict = {}
    field_name = None

    # newline="\n": only LF ends an index line, any CR belongs to a value
    with open(index_path, "r", encoding=encoding, errors=ENCODING_ERRORS, newline="\n") as f:
        for line_no, raw_line in enumerate(f, start=1):
            line = raw_line[:-1] if raw_line.endswith("\n") else raw_line
            tag, sep, value = line.partition(":")
            if not sep:
                raise ValueError(f"{index_path}:{line_no}: not an index line: {line!r}")

            if tag == "GROUP_FIELD_NAME":
                field_name = value
            elif tag == "GROUP_FIELD_VALUE":
                if field_name is None:
                    raise ValueError(f"{index_path}:{line_no}: field value without a field name")
                row[_unique_name(field_name, row)] = value
                field_name = None
            elif tag in ("GROUP_OFFSET", "GROUP_LENGTH"):
                try:
                    row[tag] = int(value)
                except ValueError:
                    raise ValueError(f"{index_path}:{line_no}: {tag} is not an integer: {value!r}") from None
            elif tag == "GROUP_FILENAME":
                if "GROUP_OFFSET" not in row or "GROUP_LENGTH" not in row:
                    raise ValueError(f"{index_path}:{line_no}: block has no offset/length")
                row[tag] = value
                yield row
                row = {}
                field_name = None
            else:
                raise ValueError(f"{index_path}:{line_no}: unknown tag {tag!r}")

    if row or field_name is not None:
        raise ValueError(f"{index_path}: last index block is incomplete")


def _is_utf8(value: str) -> bool:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _text_series(name: str, values: list, encoding: str) -> pl.Series:
    """String series, or Binary if any value carries undecodable bytes."""
    if all(v is None or _is_utf8(v) for v in values):
        return pl.Series(name, values, dtype=pl.String)
    raw = [None if v is None else v.encode(encoding, ENCODING_ERRORS) for v in values]
    return pl.Series(name, raw, dtype=pl.Binary)


def read_index(index_path: Path, encoding: str = DEFAULT_ENCODING) -> pl.DataFrame:
    """Load an index file as a DataFrame, one row per indexed record."""
    rows = list(iter_index_blocks(Path(index_path), encoding))
    if not rows:
        return pl.DataFrame(schema={
            "GROUP_OFFSET": pl.Int64,
            "GROUP_LENGTH": pl.Int64,
            "GROUP_FILENAME": pl.String,
        })

    field_cols = list(dict.fromkeys(k for row in rows for k in row if k not in LOCATION_COLUMNS))
    columns = [_text_series(name, [row.get(name) for row in rows], encoding) for name in field_cols]
    columns.append(pl.Series("GROUP_OFFSET", [row["GROUP_OFFSET"] for row in rows], dtype=pl.Int64))
    columns.append(pl.Series("GROUP_LENGTH", [row["GROUP_LENGTH"] for row in rows], dtype=pl.Int64))
    columns.append(_text_series("GROUP_FILENAME", [row["GROUP_FILENAME"] for row in rows], encoding))
    return pl.DataFrame(columns)
