"""Tests for the nested document merge."""
from __future__ import annotations

import copy

from brandbridge.engine.merge import merge_maps


def test_disjoint_leaves_are_all_kept():
    base = {"login": {"title": "Default"}, "footer": "x"}
    override = {"login": {"subtitle": "Hi"}, "header": "y"}

    merged = merge_maps(base, override)

    assert merged == {
        "login": {"title": "Default", "subtitle": "Hi"},
        "footer": "x",
        "header": "y",
    }


def test_override_wins_on_overlapping_leaves():
    base = {"login": {"title": "Default", "button": "Continue"}}
    override = {"login": {"title": "Sign in"}}

    assert merge_maps(base, override) == {
        "login": {"title": "Sign in", "button": "Continue"},
    }


def test_override_wins_at_depth():
    base = {"a": {"b": {"c": 1, "d": 2}}}
    override = {"a": {"b": {"c": 10}}}

    assert merge_maps(base, override) == {"a": {"b": {"c": 10, "d": 2}}}


def test_empty_merged_branches_are_dropped():
    base = {"login": {}, "signup": {"nested": {}}, "title": "t"}
    override = {"login": {}}

    assert merge_maps(base, override) == {"title": "t"}


def test_merge_with_empty_override_prunes_empty_sub_objects():
    base = {"login": {"title": "x", "inner": {}}, "empty": {}, "scalar": 1}

    assert merge_maps(base, {}) == {"login": {"title": "x"}, "scalar": 1}


def test_merge_with_empty_base_returns_override():
    override = {"login": {"title": "Sign in", "empty": {}}, "other": {}}

    assert merge_maps({}, override) == override


def test_scalar_override_does_not_replace_base_branch():
    base = {"login": {"title": "Default"}}
    override = {"login": "disabled"}

    assert merge_maps(base, override) == {"login": {"title": "Default"}}


def test_scalar_override_fills_empty_base_branch():
    base = {"login": {"inner": {}}}
    override = {"login": "disabled"}

    assert merge_maps(base, override) == {"login": "disabled"}


def test_inputs_are_not_mutated():
    base = {"login": {"title": "Default"}}
    override = {"login": {"subtitle": "Hi"}}
    base_before = copy.deepcopy(base)
    override_before = copy.deepcopy(override)

    merge_maps(base, override)

    assert base == base_before
    assert override == override_before
