"""Column-number to field-name mapping for index output."""

import re
from dataclasses import dataclass
from typing import Any, Sequence

from cmod_indexer.errors import ConfigError

_COLUMN_KEY_RE = re.compile(r"\d+", re.ASCII)


def _column_number(key: Any) -> int | None:
    """Return the 1-based column for a map key, or None if the key is not one."""
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key if key >= 1 else None
    if isinstance(key, str) and _COLUMN_KEY_RE.fullmatch(key):
        col = int(key)
        return col if col >= 1 else None
    return None


def normalize_field_map(field_map: Any) -> tuple[tuple[int, str], ...]:
    """Turn a sparse ``{column: name}`` table into ascending (column, name) pairs.

    Keys that are not positive column numbers are ignored.
    """
    if not isinstance(field_map, dict):
        raise ConfigError("Profile must contain a 'map' mapping")

    columns: dict[int, str] = {}
    for key, name in field_map.items():
        col = _column_number(key)
        if col is None:
            continue
        columns[col] = "" if name is None else str(name)

    if not columns:
        raise ConfigError("Profile map is empty or invalid")
    return tuple(sorted(columns.items()))


@dataclass(frozen=True)
class FieldMapper:
    """Maps parsed field lists to ordered (name, value) pairs."""
    columns: tuple[tuple[int, str], ...]

    @classmethod
    def from_field_map(cls, field_map: Any) -> "FieldMapper":
        return cls(columns=normalize_field_map(field_map))

    def map_fields(self, fields: Sequence[str]) -> list[tuple[str, str]]:
        """Pick the mapped columns out of one record, in ascending column order.

        A column past the end of the record maps to the empty string.
        """
        n = len(fields)
        return [(name, fields[col - 1] if col <= n else "") for col, name in self.columns]
