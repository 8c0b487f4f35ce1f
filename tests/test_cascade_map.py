"""
Unit tests for cascade map building and affected-field resolution.
"""

import pytest

from cascading.cascade_map import affected_fields, all_altered_fields, build_cascade_map
from cascading.exceptions import MalformedCascadeError
from cascading.types import RESERVED_FIELD_NAMES


CONFIG = {
    "Category": {
        "Bug": {"Priority": ["1", "2"], "Severity": "All", "HINT": "Bugs need a severity"},
        "Feature": {"Priority": "All", "Area": ["UI", "API"]},
        "Task": {"HINT": "Tasks are not restricted"},
    },
    "Area": {
        "UI": {"Severity": ["low", "medium"]},
    },
}


def test_build_cascade_map_none_returns_empty_map():
    assert build_cascade_map(None) == {}


def test_build_cascade_map_collects_alters_without_duplicates():
    cascade_map = build_cascade_map(CONFIG)
    assert cascade_map["Category"].alters == ["Priority", "Severity", "Area"]
    assert cascade_map["Area"].alters == ["Severity"]


def test_build_cascade_map_keeps_rule_set():
    cascade_map = build_cascade_map(CONFIG)
    assert cascade_map["Category"].cascades == CONFIG["Category"]


def test_build_cascade_map_excludes_reserved_keys_from_alters():
    cascade_map = build_cascade_map(CONFIG)
    for entry in cascade_map.values():
        for reserved in RESERVED_FIELD_NAMES:
            assert reserved not in entry.alters


def test_build_cascade_map_stringifies_parent_values():
    cascade_map = build_cascade_map({"Priority": {1: {"Severity": ["high"]}}})
    assert "1" in cascade_map["Priority"].cascades


def test_build_cascade_map_rejects_non_mapping_definition():
    with pytest.raises(MalformedCascadeError):
        build_cascade_map({"Category": {"Bug": ["Priority"]}})


def test_malformed_cascade_error_is_a_type_error():
    with pytest.raises(TypeError):
        build_cascade_map({"Category": "Bug"})


def test_affected_fields_empty_value_returns_union_of_all_definitions():
    cascade_map = build_cascade_map(CONFIG)
    assert affected_fields(cascade_map, "Category", "") == ["Priority", "Severity", "Area"]
    assert affected_fields(cascade_map, "Category", None) == ["Priority", "Severity", "Area"]


def test_affected_fields_known_value_returns_definition_keys():
    cascade_map = build_cascade_map(CONFIG)
    assert affected_fields(cascade_map, "Category", "Bug") == ["Priority", "Severity"]
    assert affected_fields(cascade_map, "Category", "Feature") == ["Priority", "Area"]


def test_affected_fields_hint_only_definition_affects_nothing():
    cascade_map = build_cascade_map(CONFIG)
    assert affected_fields(cascade_map, "Category", "Task") == []


def test_affected_fields_unknown_value_returns_empty():
    cascade_map = build_cascade_map(CONFIG)
    assert affected_fields(cascade_map, "Category", "Epic") == []


def test_affected_fields_unknown_parent_raises_key_error():
    cascade_map = build_cascade_map(CONFIG)
    with pytest.raises(KeyError):
        affected_fields(cascade_map, "State", "Active")


def test_all_altered_fields_spans_every_parent():
    cascade_map = build_cascade_map(CONFIG)
    assert all_altered_fields(cascade_map) == ["Priority", "Severity", "Area"]
