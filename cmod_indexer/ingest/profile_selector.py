"""Pick the config profile that applies to an input file."""

from dataclasses import dataclass
from pathlib import Path

from cmod_indexer.config import IndexerConfig, Profile
from cmod_indexer.errors import NoMatchingProfile
from cmod_indexer.ingest.column_mapper import FieldMapper


@dataclass(frozen=True)
class SelectedProfile:
    """A profile fixed for one run, with its column map already sorted."""
    profile: Profile
    mapper: FieldMapper

    @property
    def delimiter(self) -> str:
        return self.profile.delimiter


def select_profile(config: IndexerConfig, input_path: str | Path) -> SelectedProfile:
    """Return the first profile whose pattern matches the input's base name.

    Later matches are never considered. Raises NoMatchingProfile when nothing
    matches, ConfigError when the chosen profile has no usable map.
    """
    base_name = Path(input_path).name
    for profile in config.profiles:
        if profile.matches(base_name):
            return SelectedProfile(profile=profile, mapper=FieldMapper.from_field_map(profile.field_map))

    config_path = str(config.source_path) if config.source_path else None
    raise NoMatchingProfile(base_name, config_path)
