"""Tests for column_mapper module."""

import pytest

from cmod_indexer.errors import ConfigError
from cmod_indexer.ingest.column_mapper import FieldMapper, normalize_field_map


class TestNormalizeFieldMap:
    def test_sorted_by_column(self):
        assert normalize_field_map({3: "F3", 1: "F1"}) == ((1, "F1"), (3, "F3"))

    def test_numeric_sort_not_lexical(self):
        assert normalize_field_map({"10": "TEN", "2": "TWO"}) == ((2, "TWO"), (10, "TEN"))

    def test_string_digit_keys(self):
        assert normalize_field_map({"1": "A", 2: "B"}) == ((1, "A"), (2, "B"))

    def test_invalid_keys_ignored(self):
        cols = normalize_field_map({0: "zero", -1: "neg", "x": "X", "1a": "bad", True: "flag", 4: "D"})
        assert cols == ((4, "D"),)

    def test_names_become_strings(self):
        assert normalize_field_map({1: 2024}) == ((1, "2024"),)

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError):
            normalize_field_map(["a", "b"])
        with pytest.raises(ConfigError):
            normalize_field_map(None)

    def test_empty_after_filtering(self):
        with pytest.raises(ConfigError):
            normalize_field_map({})
        with pytest.raises(ConfigError):
            normalize_field_map({"name": "x"})


class TestFieldMapper:
    def test_ascending_column_order(self):
        mapper = FieldMapper.from_field_map({3: "F3", 1: "F1"})
        assert mapper.map_fields(["x", "y", "z"]) == [("F1", "x"), ("F3", "z")]

    def test_declaration_order_irrelevant(self):
        a = FieldMapper.from_field_map({1: "F1", 3: "F3"})
        b = FieldMapper.from_field_map({3: "F3", 1: "F1"})
        assert a == b

    def test_missing_column_is_empty(self):
        mapper = FieldMapper.from_field_map({1: "F1", 5: "F5"})
        assert mapper.map_fields(["only"]) == [("F1", "only"), ("F5", "")]

    def test_values_untouched(self):
        mapper = FieldMapper.from_field_map({1: "F1"})
        assert mapper.map_fields(["  padded  "]) == [("F1", "  padded  ")]
