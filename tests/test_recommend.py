"""Tests for the release recommendation state machine."""

from __future__ import annotations

from pathlib import Path

import pytest

from modtag.errors import ClassificationError
from modtag.models import Bump, RecommendationState
from modtag.recommend import recommend
from modtag.versions import VersionIndex
from tests._fixtures.fake_git import RecordingClassifier

REPO = Path("/repo")


def test_no_versions_recommends_initial_release_regardless_of_branch() -> None:
    classifier = RecordingClassifier(Bump.MAJOR)
    index = VersionIndex.build({"nightly": "a"})

    for branch, tip in [(None, None), ("main", "a"), ("main", "b")]:
        rec = recommend(index, branch, tip, classifier, REPO)
        assert rec.state is RecommendationState.NO_VERSIONS
        assert rec.triple == (0, 1, 0)
    assert classifier.calls == []


def test_unknown_branch_computes_nothing() -> None:
    classifier = RecordingClassifier(Bump.MINOR)
    rec = recommend(VersionIndex.build({"v1.0.0": "a"}), None, None, classifier, REPO)

    assert rec.state is RecommendationState.BRANCH_UNKNOWN
    assert rec.triple == (0, 0, 0)
    assert classifier.calls == []


def test_tip_with_latest_tag_is_up_to_date() -> None:
    classifier = RecordingClassifier(Bump.MAJOR)
    index = VersionIndex.build({"v1.0.0": "old", "v1.1.0": "tip"})

    rec = recommend(index, "main", "tip", classifier, REPO)

    assert rec.state is RecommendationState.UP_TO_DATE
    assert rec.triple == (0, 0, 0)
    assert classifier.calls == []


def test_tip_with_older_tag_is_behind_release() -> None:
    classifier = RecordingClassifier(Bump.MINOR)
    index = VersionIndex.build({"v1.0.0": "tip", "v1.1.0": "elsewhere"})

    rec = recommend(index, "main", "tip", classifier, REPO)

    assert rec.state is RecommendationState.BEHIND_RELEASE
    assert rec.triple == (0, 0, 0)
    assert classifier.calls == []


def test_minor_change_after_latest_tag() -> None:
    classifier = RecordingClassifier(Bump.MINOR, "Minor: added function New")
    index = VersionIndex.build({"v1.2.3": "c1", "v1.3.0": "c2"})

    rec = recommend(index, "main", "tip", classifier, REPO)

    assert rec.state is RecommendationState.NEEDS_RELEASE
    assert rec.triple == (1, 4, 0)
    assert rec.verdict is Bump.MINOR
    assert rec.detail == "Minor: added function New"
    assert not rec.needs_new_suffix
    assert classifier.calls == [(REPO, "v1.3.0", "tip")]


@pytest.mark.parametrize(
    ("latest", "bump", "expected", "needs_suffix"),
    [
        ("v1.2.3", Bump.MAJOR, (2, 0, 0), True),
        ("v0.4.2", Bump.MAJOR, (1, 0, 0), False),
        ("v1.2.3", Bump.PATCH, (1, 2, 4), False),
        ("v1.2.3-rc.1", Bump.PATCH, (1, 2, 3), False),
        ("v1.2.3-rc.1", Bump.MINOR, (1, 3, 0), False),
        ("v1.2.3", Bump.NONE, (1, 2, 3), False),
        ("v2.5.0", Bump.MAJOR, (3, 0, 0), True),
    ],
)
def test_bump_mapping(latest: str, bump: Bump, expected: tuple, needs_suffix: bool) -> None:
    classifier = RecordingClassifier(bump)

    rec = recommend(VersionIndex.build({latest: "old"}), "main", "tip", classifier, REPO)

    assert rec.triple == expected
    assert rec.needs_new_suffix is needs_suffix
    assert len(classifier.calls) == 1


def test_classifier_receives_prefixed_tag() -> None:
    classifier = RecordingClassifier(Bump.PATCH)
    index = VersionIndex.build({"tools/gen/v0.3.0": "old", "v9.0.0": "root"}, "tools/gen/")

    rec = recommend(index, "main", "tip", classifier, REPO)

    assert classifier.calls == [(REPO, "tools/gen/v0.3.0", "tip")]
    assert rec.triple == (0, 3, 1)


def test_classifier_failure_propagates() -> None:
    class Failing:
        def classify(self, repo_path, older, newer):  # type: ignore[no-untyped-def]
            raise ClassificationError("cannot diff")

    with pytest.raises(ClassificationError):
        recommend(VersionIndex.build({"v1.0.0": "old"}), "main", "tip", Failing(), REPO)
