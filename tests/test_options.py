"""
Unit tests for the option intersection engine.
"""

import pytest

from cascading.cascade_map import build_cascade_map
from cascading.host import InMemoryWorkItemForm
from cascading.options import OptionIntersectionEngine, intersect_options


SCHEMA = {
    "Category": ["Bug", "Feature"],
    "Priority": [1, 2, 3, 4],
    "F": ["a", "b", "c", "d", "e"],
}


def _engine(config, values=None, schema=None):
    form = InMemoryWorkItemForm(allowed_values=schema or SCHEMA, values=values or {})
    return OptionIntersectionEngine(build_cascade_map(config), form), form


def test_intersect_options_keeps_order_of_current():
    assert intersect_options(["c", "b", "a"], ["a", "b"]) == ["b", "a"]


def test_intersect_options_removes_duplicates():
    assert intersect_options(["a", "a", "b"], ["a", "b"]) == ["a", "b"]


def test_intersect_options_is_commutative_as_sets():
    left, right = ["a", "b", "c"], ["b", "c", "d"]
    assert set(intersect_options(left, right)) == set(intersect_options(right, left)) == {"b", "c"}


def test_intersect_options_is_idempotent():
    options = ["a", "b"]
    assert intersect_options(intersect_options(options, options), options) == options


@pytest.mark.asyncio
async def test_explicit_list_is_used_for_matching_value():
    config = {"Category": {"Bug": {"Priority": ["1", "2"]}, "Feature": {"Priority": "All"}}}
    engine, _ = _engine(config, values={"Category": "Bug"})
    assert await engine.compute(["Priority"]) == {"Priority": ["1", "2"]}


@pytest.mark.asyncio
async def test_all_token_uses_full_schema_values_as_strings():
    config = {"Category": {"Bug": {"Priority": ["1", "2"]}, "Feature": {"Priority": "All"}}}
    engine, _ = _engine(config, values={"Category": "Feature"})
    assert await engine.compute(["Priority"]) == {"Priority": ["1", "2", "3", "4"]}


@pytest.mark.asyncio
async def test_empty_parent_value_uses_full_schema_values():
    config = {"Category": {"Bug": {"Priority": ["1", "2"]}}}
    engine, _ = _engine(config, values={"Category": ""})
    assert await engine.compute(["Priority"]) == {"Priority": ["1", "2", "3", "4"]}


@pytest.mark.asyncio
async def test_parent_value_without_rule_does_not_restrict():
    config = {"Category": {"Bug": {"Priority": ["1", "2"]}}}
    engine, _ = _engine(config, values={"Category": "Feature"})
    assert await engine.compute(["Priority"]) == {"Priority": ["1", "2", "3", "4"]}


@pytest.mark.asyncio
async def test_two_parents_intersect():
    config = {
        "P1": {"x": {"F": ["a", "b", "c"]}},
        "P2": {"y": {"F": ["b", "c", "d"]}},
    }
    engine, _ = _engine(config, values={"P1": "x", "P2": "y"})
    options = await engine.compute(["F"])
    assert set(options["F"]) == {"b", "c"}


@pytest.mark.asyncio
async def test_parent_order_does_not_change_result():
    p1 = {"x": {"F": ["a", "b", "c"]}}
    p2 = {"y": {"F": ["c", "b", "d"]}}
    values = {"P1": "x", "P2": "y"}
    forward, _ = _engine({"P1": p1, "P2": p2}, values=values)
    backward, _ = _engine({"P2": p2, "P1": p1}, values=values)
    assert set((await forward.compute(["F"]))["F"]) == set((await backward.compute(["F"]))["F"])


@pytest.mark.asyncio
async def test_mutually_exclusive_lists_yield_empty_options():
    config = {
        "P1": {"x": {"F": ["a"]}},
        "P2": {"y": {"F": ["b"]}},
    }
    engine, _ = _engine(config, values={"P1": "x", "P2": "y"})
    assert await engine.compute(["F"]) == {"F": []}


@pytest.mark.asyncio
async def test_unconstrained_second_parent_keeps_first_restriction():
    config = {
        "P1": {"x": {"F": ["a", "b"]}},
        "P2": {"y": {"F": ["b", "c"]}},
    }
    engine, _ = _engine(config, values={"P1": "x", "P2": ""})
    assert await engine.compute(["F"]) == {"F": ["a", "b"]}


@pytest.mark.asyncio
async def test_result_follows_affected_field_order():
    config = {"Category": {"Bug": {"Priority": ["1"], "F": ["a"]}}}
    engine, _ = _engine(config, values={"Category": "Bug"})
    options = await engine.compute(["F", "Priority"])
    assert list(options.keys()) == ["F", "Priority"]


@pytest.mark.asyncio
async def test_reserved_keys_never_become_options():
    config = {"Category": {"Bug": {"Priority": ["1"], "HINT": "Pick a priority"}}}
    engine, _ = _engine(config, values={"Category": "Bug"})
    options = await engine.compute(["Priority"])
    assert "HINT" not in options
