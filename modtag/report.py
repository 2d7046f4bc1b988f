"""Human-readable and JSON renderings of check results."""

from __future__ import annotations

import json
from typing import Iterable, Mapping, TextIO

from .models import Bump, RecommendationState, Result, SuffixStatus

INFO = "ℹ️"
OK = "✅"
WARNING = "⛔️"


def describe(result: Result, stream: TextIO, *, quiet: bool = False) -> int:
    """Write one line per finding about ``result`` and return the warning count.

    Quiet mode keeps only the warnings.
    """
    warnings = 0

    def warn(message: str) -> None:
        nonlocal warnings
        warnings += 1
        _show(stream, WARNING, message)

    def info(message: str) -> None:
        if not quiet:
            _show(stream, INFO, message)

    def ok(message: str) -> None:
        if not quiet:
            _show(stream, OK, message)

    modpath = result.modpath
    latest = result.latest_version

    info(f"Module path: {modpath}")
    if result.version_prefix:
        info(
            f"Version prefix: {result.version_prefix} "
            "(this prefix is stripped from version tags appearing in this report)"
        )

    if result.default_branch is not None:
        ok(f"Default branch: {result.default_branch}")
        info(f"Latest commit hash: {result.latest_commit}")
    else:
        warn("Could not determine default branch")

    if latest is not None:
        ok(f"Latest version tag: {latest}")

        if result.latest_version_is_prerelease:
            warn(f"Latest version {latest} is a prerelease")
        else:
            ok(f"Latest version {latest} is not a prerelease")

        if result.latest_version_unstable:
            warn(f"Latest version {latest} is unstable")
        else:
            ok(f"Latest version {latest} is stable")

        if result.version_suffix is SuffixStatus.OK:
            if result.latest_major > 1:
                ok(f"Module path {modpath} has suffix matching major version {result.latest_major}")
            else:
                ok(f"Module path {modpath} neither needs nor has a version suffix")
        elif result.version_suffix is SuffixStatus.MISMATCH:
            warn(f"Module path {modpath} version suffix does not agree with latest version {latest}")
        elif result.version_suffix is SuffixStatus.MISSING:
            warn(f"Module path {modpath} lacks suffix matching major version {result.latest_major}")
        elif result.version_suffix is SuffixStatus.UNWANTED:
            warn(f"Module path {modpath} contains an unwanted version suffix")

        if result.state is RecommendationState.UP_TO_DATE:
            ok("Latest commit on the default branch has latest version tag")
        elif result.state is RecommendationState.BEHIND_RELEASE:
            warn(
                "Latest commit on the default branch has version tag, "
                f"but it is not latest version {latest}"
            )
        elif result.state is RecommendationState.NEEDS_RELEASE:
            warn("Latest commit on the default branch lacks version tag")
            if result.classifier_verdict is Bump.NONE:
                ok("Compatibility analysis: no new version tag required")
            else:
                warn(f"Compatibility analysis: {result.classifier_detail}")
                warn(f"Recommended new version: {result.new_tag}")
                if result.needs_new_suffix:
                    warn(f"Module path will require new version suffix /v{result.new_major}")
    else:
        warn("No version tags")
        info(f"Recommended first version: {result.new_tag}")

    if result.modpath_mismatch:
        warn(
            f"Module path {modpath} does not agree with module subdir "
            f"in repository {result.module_subdir}"
        )
    elif result.module_subdir:
        ok(f"Module path {modpath} agrees with module subdir in repository {result.module_subdir}")

    return warnings


def describe_all(results: Iterable[Result], stream: TextIO, *, quiet: bool = False) -> int:
    """Describe several results under per-module headings."""
    warnings = 0
    for position, result in enumerate(results):
        if position:
            stream.write("\n")
        stream.write(f"{result.module_subdir or '.'}:\n\n")
        warnings += describe(result, stream, quiet=quiet)
    return warnings


def to_json(payload: Result | Mapping[str, Result]) -> str:
    """Render one result, or a mapping of subdir to result, as indented JSON."""
    if isinstance(payload, Result):
        data: object = payload.to_dict()
    else:
        data = {key: value.to_dict() for key, value in payload.items()}
    return json.dumps(data, indent=2, sort_keys=True)


def _show(stream: TextIO, marker: str, message: str) -> None:
    stream.write(f"{marker} {message}\n")


__all__ = ["describe", "describe_all", "to_json"]
