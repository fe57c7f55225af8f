"""Tests for config module."""

import pytest

from cmod_indexer.config import IndexerConfig, Profile, load_config
from cmod_indexer.errors import ConfigError


class TestProfile:
    def test_defaults(self):
        p = Profile(match="abc")
        assert p.delimiter == ";"
        assert p.field_map is None
        assert p.label == "abc"

    def test_named_profile_label(self):
        assert Profile(match="abc", name="Statements").label == "Statements"

    def test_case_insensitive_search(self):
        p = Profile(match="^ntq")
        assert p.matches("NTQBSWHF_.data.csv")
        assert not p.matches("data_NTQ.csv")

    def test_unanchored(self):
        assert Profile(match="bsw").matches("NTQBSWHF_.data.csv")

    def test_empty_match_never_matches(self):
        assert not Profile(match="").matches("anything.csv")

    def test_invalid_regex(self):
        with pytest.raises(ConfigError):
            Profile(match="([unclosed")

    def test_bad_delimiters(self):
        with pytest.raises(ConfigError):
            Profile(match="x", delimiter=";;")
        with pytest.raises(ConfigError):
            Profile(match="x", delimiter="")
        with pytest.raises(ConfigError):
            Profile(match="x", delimiter='"')

    def test_from_dict(self):
        p = Profile.from_dict({"match": "foo", "delimiter": ",", "map": {1: "A"}})
        assert p.match == "foo"
        assert p.delimiter == ","
        assert p.field_map == {1: "A"}

    def test_from_dict_missing_delimiter(self):
        p = Profile.from_dict({"match": "foo", "map": {1: "A"}})
        assert p.delimiter == ";"


class TestIndexerConfig:
    def test_profiles_in_order(self):
        cfg = IndexerConfig.from_dict({"profiles": [{"match": "a"}, {"match": "b"}]})
        assert [p.match for p in cfg.profiles] == ["a", "b"]

    def test_configs_alias(self):
        cfg = IndexerConfig.from_dict({"configs": [{"match": "a"}]})
        assert [p.match for p in cfg.profiles] == ["a"]

    def test_profiles_key_preferred(self):
        cfg = IndexerConfig.from_dict({"profiles": [{"match": "p"}], "configs": [{"match": "c"}]})
        assert [p.match for p in cfg.profiles] == ["p"]

    def test_non_mapping_entries_skipped(self):
        cfg = IndexerConfig.from_dict({"profiles": ["junk", 3, {"match": "a"}]})
        assert len(cfg.profiles) == 1

    def test_missing_profile_list(self):
        with pytest.raises(ConfigError):
            IndexerConfig.from_dict({"other": []})

    def test_profile_list_not_a_list(self):
        with pytest.raises(ConfigError):
            IndexerConfig.from_dict({"profiles": {"match": "a"}})

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError):
            IndexerConfig.from_dict(None)
        with pytest.raises(ConfigError):
            IndexerConfig.from_dict(["profiles"])


class TestLoadConfig:
    def test_yaml_file(self, tmp_path):
        path = tmp_path / "cmod_indexer.yml"
        path.write_text(
            "profiles:\n"
            "  - match: '^NTQ'\n"
            "    delimiter: ','\n"
            "    map:\n"
            "      3: ACCOUNT\n"
            "      1: NAME\n",
            encoding="utf-8",
        )
        cfg = load_config(path)
        assert cfg.source_path == path
        assert len(cfg.profiles) == 1
        p = cfg.profiles[0]
        assert p.delimiter == ","
        assert p.field_map == {3: "ACCOUNT", 1: "NAME"}

    def test_json_file(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text('{"profiles": [{"match": "x", "map": {"1": "A"}}]}', encoding="utf-8")
        cfg = load_config(path)
        assert cfg.profiles[0].field_map == {"1": "A"}

    def test_first_document_only(self, tmp_path):
        path = tmp_path / "multi.yml"
        path.write_text("profiles:\n  - match: first\n---\nprofiles:\n  - match: second\n", encoding="utf-8")
        cfg = load_config(path)
        assert [p.match for p in cfg.profiles] == ["first"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot open config"):
            load_config(tmp_path / "nope.yml")

    def test_yaml_syntax_error(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("profiles: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Failed to parse"):
            load_config(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ConfigError, match="empty or invalid"):
            load_config(path)


def test_line_terminator_delimiter_rejected():
    with pytest.raises(ConfigError, match="line terminator"):
        Profile(match="x", delimiter="\n")
    with pytest.raises(ConfigError, match="line terminator"):
        Profile(match="x", delimiter="\r")
