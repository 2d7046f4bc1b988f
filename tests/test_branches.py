"""Tests for default-branch detection."""

from __future__ import annotations

import itertools

from modtag.branches import detect_default_branch, find_default_branch
from modtag.models import RefSnapshot


def test_remote_head_selects_main() -> None:
    remote = {"HEAD": "a", "main": "a", "dev": "b"}
    heads = {"main": "a", "dev": "b"}

    assert detect_default_branch(remote, heads) == "main"


def test_remote_head_selects_master() -> None:
    remote = {"HEAD": "a", "master": "a", "main": "z"}
    heads = {"master": "a", "main": "z"}

    assert detect_default_branch(remote, heads) == "master"


def test_remote_head_choice_requires_local_agreement() -> None:
    remote = {"HEAD": "a", "main": "a", "dev": "b"}
    heads = {"main": "stale", "dev": "b"}

    # main disagrees locally; dev is the only sensibly named agreeing branch.
    assert detect_default_branch(remote, heads) == "dev"


def test_single_alphanumeric_branch_without_head() -> None:
    remote = {"trunk": "a", "feature/x": "b", "v1.2": "c"}
    heads = {"trunk": "a", "feature/x": "b", "v1.2": "c"}

    assert detect_default_branch(remote, heads) == "trunk"


def test_ambiguous_candidates_are_indeterminate() -> None:
    remote = {"main": "a", "dev": "b"}
    heads = {"main": "a", "dev": "b"}

    assert detect_default_branch(remote, heads) is None


def test_no_local_branch_is_indeterminate() -> None:
    assert detect_default_branch({"HEAD": "a", "main": "a"}, {}) is None
    assert detect_default_branch({}, {"main": "a"}) is None


def test_detected_branch_always_agrees_with_local_head() -> None:
    names = ["HEAD", "main", "master", "dev"]
    values = ["a", "b"]
    for remote_values in itertools.product(values + [None], repeat=len(names)):
        remote = {name: value for name, value in zip(names, remote_values) if value is not None}
        for local_values in itertools.product(values + [None], repeat=3):
            heads = {
                name: value
                for name, value in zip(["main", "master", "dev"], local_values)
                if value is not None
            }
            branch = detect_default_branch(remote, heads)
            if branch is not None:
                assert branch != "HEAD"
                assert heads[branch] == remote[branch]


def test_find_default_branch_prefers_origin() -> None:
    snapshot = RefSnapshot(
        heads={"main": "a", "trunk": "b"},
        remotes={
            "aaa-mirror": {"trunk": "b"},
            "origin": {"HEAD": "a", "main": "a"},
        },
    )

    assert find_default_branch(snapshot) == "main"


def test_find_default_branch_falls_back_to_other_remotes() -> None:
    snapshot = RefSnapshot(
        heads={"main": "a"},
        remotes={"origin": {"main": "old", "dev": "x"}, "upstream": {"HEAD": "a", "main": "a"}},
    )

    assert find_default_branch(snapshot) == "main"
    assert find_default_branch(snapshot, ("upstream", "origin")) == "main"


def test_find_default_branch_without_remotes() -> None:
    assert find_default_branch(RefSnapshot(heads={"main": "a"})) is None
