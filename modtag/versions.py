"""Semantic-version tag parsing and indexing."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

from .errors import InvariantError
from .models import VersionTag

_NUMERIC = r"0|[1-9][0-9]*"
_PRERELEASE_ID = r"(?:0|[1-9][0-9]*|[0-9]*[A-Za-z-][0-9A-Za-z-]*)"
_BUILD_ID = r"[0-9A-Za-z-]+"

SEMVER_PATTERN = re.compile(
    rf"^v(?P<major>{_NUMERIC})\.(?P<minor>{_NUMERIC})\.(?P<patch>{_NUMERIC})"
    rf"(?:-(?P<prerelease>{_PRERELEASE_ID}(?:\.{_PRERELEASE_ID})*))?"
    rf"(?:\+(?P<build>{_BUILD_ID}(?:\.{_BUILD_ID})*))?$"
)


def is_valid_version(text: str) -> bool:
    """Return True for ``vMAJOR.MINOR.PATCH[-pre][+build]`` strings."""
    return SEMVER_PATTERN.match(text) is not None


def parse_version_tag(name: str, prefix: str = "") -> Optional[VersionTag]:
    """Parse ``name`` as a version tag under ``prefix``.

    Returns None when the tag does not start with the prefix exactly or the
    remainder is not a semantic version.
    """
    if prefix and not name.startswith(prefix):
        return None
    match = SEMVER_PATTERN.match(name[len(prefix) :])
    if match is None:
        return None
    prerelease = match.group("prerelease")
    build = match.group("build")
    return VersionTag(
        name=name,
        prefix=prefix,
        major=int(match.group("major")),
        minor=int(match.group("minor")),
        patch=int(match.group("patch")),
        prerelease=tuple(prerelease.split(".")) if prerelease else (),
        build=tuple(build.split(".")) if build else (),
    )


def version_components(bare: str) -> tuple[int, int, int]:
    """Extract major, minor and patch from an already validated version."""
    match = SEMVER_PATTERN.match(bare)
    if match is None:
        raise InvariantError(f"parsing version {bare}")
    return int(match.group("major")), int(match.group("minor")), int(match.group("patch"))


@dataclass(frozen=True)
class VersionIndex:
    """Version tags of one module, ordered by semantic-version precedence."""

    prefix: str
    versions: tuple[VersionTag, ...]
    commits: Mapping[str, str]

    @classmethod
    def build(cls, tags: Mapping[str, str], prefix: str = "") -> "VersionIndex":
        """Index the tags that are versions under ``prefix``.

        ``tags`` maps tag names to the commits they resolve to.
        """
        found: List[VersionTag] = []
        commits: Dict[str, str] = {}
        for name, commit in tags.items():
            tag = parse_version_tag(name, prefix)
            if tag is None:
                continue
            found.append(tag)
            commits[name] = commit
        found.sort(key=VersionTag.precedence_key)
        return cls(prefix=prefix, versions=tuple(found), commits=commits)

    @property
    def latest(self) -> Optional[VersionTag]:
        return self.versions[-1] if self.versions else None

    def __len__(self) -> int:
        return len(self.versions)

    def commit_of(self, tag: VersionTag) -> str:
        return self.commits[tag.name]

    def tags_at(self, commit: str) -> Iterable[VersionTag]:
        """Yield the version tags that resolve to ``commit``."""
        return (tag for tag in self.versions if self.commits[tag.name] == commit)

    def has_version_at(self, commit: str) -> bool:
        return any(True for _ in self.tags_at(commit))

    def latest_is_at(self, commit: str) -> bool:
        latest = self.latest
        return latest is not None and self.commits[latest.name] == commit


__all__ = [
    "SEMVER_PATTERN",
    "VersionIndex",
    "is_valid_version",
    "parse_version_tag",
    "version_components",
]
