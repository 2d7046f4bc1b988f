"""Decide whether a module needs a new release tag and which one."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .compat import CompatibilityClassifier
from .logging import get_logger
from .models import Bump, Recommendation, RecommendationState
from .versions import VersionIndex

INITIAL_VERSION = (0, 1, 0)

_logger = get_logger("recommend")


def recommend(
    index: VersionIndex,
    default_branch: Optional[str],
    tip: Optional[str],
    classifier: CompatibilityClassifier,
    repo_path: Path,
) -> Recommendation:
    """Run the release state machine for one module.

    The classifier is consulted only when versions exist, the default branch
    and its tip are known, and the tip carries no version tag at all. A tip
    tagged with an older version is behind released history; that has to be
    sorted out by hand, so no bump is computed for it.
    """
    latest = index.latest
    if latest is None:
        return Recommendation(RecommendationState.NO_VERSIONS, *INITIAL_VERSION)

    if default_branch is None or tip is None:
        return Recommendation(RecommendationState.BRANCH_UNKNOWN)

    if index.latest_is_at(tip):
        return Recommendation(RecommendationState.UP_TO_DATE)

    if index.has_version_at(tip):
        return Recommendation(RecommendationState.BEHIND_RELEASE)

    classification = classifier.classify(repo_path, latest.name, tip)
    _logger.info("%s..%s classified as %s", latest.name, default_branch, classification.bump.value)

    major, minor, patch = latest.major, latest.minor, latest.patch
    if classification.bump is Bump.MAJOR:
        major, minor, patch = major + 1, 0, 0
    elif classification.bump is Bump.MINOR:
        minor, patch = minor + 1, 0
    elif classification.bump is Bump.PATCH and not latest.is_prerelease:
        # A prerelease already stands in for the patch release it precedes.
        patch += 1

    return Recommendation(
        RecommendationState.NEEDS_RELEASE,
        major,
        minor,
        patch,
        verdict=classification.bump,
        detail=classification.detail,
        needs_new_suffix=major > latest.major and major > 1,
    )


__all__ = ["INITIAL_VERSION", "recommend"]
