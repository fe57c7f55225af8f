"""Configuration dataclasses and loader for the CMOD index generator."""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from cmod_indexer.errors import ConfigError

DEFAULT_DELIMITER = ";"
QUOTE_CHAR = '"'

# Keys that may hold the profile list, in order of preference.
# "configs" is the spelling used by older config files.
_PROFILE_LIST_KEYS = ("profiles", "configs")


@dataclass(frozen=True)
class Profile:
    """One config entry: filename pattern, field delimiter, column map.

    ``field_map`` is kept as loaded (sparse, any key order). It is validated
    and sorted by column when the profile is selected for a run.
    """
    match: str
    delimiter: str = DEFAULT_DELIMITER
    field_map: Any = None
    name: str = ""
    pattern: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not isinstance(self.delimiter, str) or len(self.delimiter) != 1:
            raise ConfigError(f"Profile '{self.label}': delimiter must be a single character, got {self.delimiter!r}")
        if self.delimiter == QUOTE_CHAR:
            raise ConfigError(f"Profile '{self.label}': delimiter cannot be the quote character")
        if self.delimiter in "\r\n":
            raise ConfigError(f"Profile '{self.label}': delimiter cannot be a line terminator")
        try:
            pattern = re.compile(self.match, re.IGNORECASE)
        except re.error as e:
            raise ConfigError(f"Profile match pattern {self.match!r} is not a valid regex: {e}") from e
        object.__setattr__(self, "pattern", pattern)

    @property
    def label(self) -> str:
        return self.name or self.match

    def matches(self, base_name: str) -> bool:
        """Case-insensitive, unanchored search of the pattern in base_name."""
        return bool(self.match) and self.pattern.search(base_name) is not None

    @classmethod
    def from_dict(cls, d: dict) -> "Profile":
        match = d.get("match")
        delimiter = d.get("delimiter")
        return cls(
            match="" if match is None else str(match),
            delimiter=DEFAULT_DELIMITER if delimiter is None else delimiter,
            field_map=d.get("map"),
            name=str(d.get("name") or ""),
        )


@dataclass(frozen=True)
class IndexerConfig:
    """Ordered profile list. Profiles are tried in list order."""
    profiles: tuple[Profile, ...] = ()
    source_path: Path | None = None

    @classmethod
    def from_dict(cls, doc: Any, source_path: Path | None = None) -> "IndexerConfig":
        """Build a config from an already-parsed document.

        Entries that are not mappings are ignored, like entries with an
        empty ``match``.
        """
        where = f"Config '{source_path}'" if source_path else "Config"
        if not isinstance(doc, dict):
            raise ConfigError(f"{where} is empty or invalid")

        raw_profiles = None
        for key in _PROFILE_LIST_KEYS:
            if key in doc:
                raw_profiles = doc[key]
                break
        if not isinstance(raw_profiles, list):
            raise ConfigError(f"{where} must contain 'profiles' as a list")

        profiles = tuple(Profile.from_dict(p) for p in raw_profiles if isinstance(p, dict))
        return cls(profiles=profiles, source_path=source_path)


def load_config(path: str | Path) -> IndexerConfig:
    """Read a YAML (or JSON) config file. Only the first document is used."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot open config '{path}': {e.strerror or e}") from e

    try:
        doc = next(iter(yaml.safe_load_all(text)), None)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config '{path}': {e}") from e

    return IndexerConfig.from_dict(doc, source_path=path)
