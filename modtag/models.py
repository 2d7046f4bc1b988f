"""Core data models shared across modtag components."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


def _freeze(mapping: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class RefSnapshot:
    """Classified ref state of a repository at one point in time."""

    heads: Mapping[str, str] = field(default_factory=dict)
    remotes: Mapping[str, Mapping[str, str]] = field(default_factory=dict)
    tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "heads", _freeze(self.heads))
        object.__setattr__(
            self,
            "remotes",
            MappingProxyType({name: _freeze(refs) for name, refs in self.remotes.items()}),
        )
        object.__setattr__(self, "tags", _freeze(self.tags))


@dataclass(frozen=True, eq=True)
class VersionTag:
    """A tag whose name, after its prefix, is a semantic version."""

    name: str
    prefix: str
    major: int
    minor: int
    patch: int
    prerelease: Tuple[str, ...] = ()
    build: Tuple[str, ...] = ()

    @property
    def bare(self) -> str:
        """The tag name with the module prefix stripped, e.g. ``v1.2.3-rc.1``."""
        return self.name[len(self.prefix) :]

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    @property
    def is_unstable(self) -> bool:
        return self.major == 0 or self.is_prerelease

    def precedence_key(self) -> tuple:
        """Sort key implementing semantic-version precedence.

        A release sorts above its prereleases. Prerelease identifiers compare
        numerically when numeric, lexically otherwise, with numeric ones lower.
        Build metadata does not affect precedence; the tag name breaks the
        remaining ties so that sorting never depends on discovery order.
        """
        identifiers = tuple(
            (0, int(part), "") if part.isdigit() else (1, 0, part) for part in self.prerelease
        )
        return (
            self.major,
            self.minor,
            self.patch,
            0 if self.prerelease else 1,
            identifiers,
            self.name,
        )

    def __lt__(self, other: "VersionTag") -> bool:
        return self.precedence_key() < other.precedence_key()

    def __le__(self, other: "VersionTag") -> bool:
        return self.precedence_key() <= other.precedence_key()

    def __gt__(self, other: "VersionTag") -> bool:
        return self.precedence_key() > other.precedence_key()

    def __ge__(self, other: "VersionTag") -> bool:
        return self.precedence_key() >= other.precedence_key()


@dataclass(frozen=True)
class ModulePath:
    """Declared import path of a module, split around any major-version suffix."""

    path: str
    base_path: str
    suffix_major: Optional[int] = None

    @property
    def has_suffix(self) -> bool:
        return self.suffix_major is not None


class SuffixStatus(str, Enum):
    """Agreement between a module path's version suffix and the latest major."""

    OK = "ok"
    MISSING = "missing"
    UNWANTED = "unwanted"
    MISMATCH = "mismatch"


class Bump(str, Enum):
    """Minimum version bump reported by the compatibility classifier."""

    NONE = "none"
    PATCH = "patchlevel"
    MINOR = "minor"
    MAJOR = "major"


class RecommendationState(str, Enum):
    NO_VERSIONS = "no_versions"
    BRANCH_UNKNOWN = "branch_unknown"
    UP_TO_DATE = "up_to_date"
    BEHIND_RELEASE = "behind_release"
    NEEDS_RELEASE = "needs_release"


@dataclass(frozen=True)
class Recommendation:
    """Outcome of the recommendation engine for one module."""

    state: RecommendationState
    new_major: int = 0
    new_minor: int = 0
    new_patch: int = 0
    verdict: Optional[Bump] = None
    detail: Optional[str] = None
    needs_new_suffix: bool = False

    @property
    def triple(self) -> Tuple[int, int, int]:
        return (self.new_major, self.new_minor, self.new_patch)


@dataclass(frozen=True)
class Result:
    """Full verdict for one module in a repository."""

    module_subdir: str
    version_prefix: str
    modpath: str
    modpath_mismatch: bool
    version_suffix: SuffixStatus
    state: RecommendationState
    latest_version: Optional[str] = None
    latest_major: int = 0
    latest_minor: int = 0
    latest_patch: int = 0
    latest_version_is_prerelease: bool = False
    latest_version_unstable: bool = False
    no_versions: bool = True
    default_branch: Optional[str] = None
    latest_commit: Optional[str] = None
    latest_commit_has_version_tag: bool = False
    latest_commit_has_latest_version: bool = False
    classifier_verdict: Optional[Bump] = None
    classifier_detail: Optional[str] = None
    new_major: int = 0
    new_minor: int = 0
    new_patch: int = 0
    needs_new_suffix: bool = False

    @property
    def new_version(self) -> str:
        return f"v{self.new_major}.{self.new_minor}.{self.new_patch}"

    @property
    def new_tag(self) -> str:
        return f"{self.version_prefix}{self.new_version}"

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-ready mapping with enum members rendered as strings."""
        payload: Dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, Enum):
                value = value.value
            payload[item.name] = value
        return payload


__all__ = [
    "Bump",
    "ModulePath",
    "Recommendation",
    "RecommendationState",
    "RefSnapshot",
    "Result",
    "SuffixStatus",
    "VersionTag",
]
