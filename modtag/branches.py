"""Heuristic default-branch detection from ref state."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from .models import RefSnapshot

REMOTE_HEAD = "HEAD"
PREFERRED_NAMES = ("main", "master")
DEFAULT_REMOTE_PRIORITY = ("origin",)


def detect_default_branch(
    remote_refs: Mapping[str, str], heads: Mapping[str, str]
) -> Optional[str]:
    """Pick the branch of one remote that acts as its default branch.

    A branch only qualifies when the local head of the same name points at
    the same commit as the remote-tracking ref.
    """
    if not remote_refs:
        return None

    def agrees(name: str) -> bool:
        return name in remote_refs and heads.get(name) == remote_refs[name]

    head_hash = remote_refs.get(REMOTE_HEAD)
    if head_hash is not None:
        for name in PREFERRED_NAMES:
            if remote_refs.get(name) == head_hash and agrees(name):
                return name

    candidates = [
        name
        for name in remote_refs
        if name != REMOTE_HEAD and name.isalnum() and agrees(name)
    ]
    if len(candidates) == 1:
        return candidates[0]
    return None


def find_default_branch(
    snapshot: RefSnapshot, priority: Sequence[str] = DEFAULT_REMOTE_PRIORITY
) -> Optional[str]:
    """Try the priority remotes in order, then every other remote by name."""
    ordered = [name for name in priority if name in snapshot.remotes]
    ordered.extend(sorted(name for name in snapshot.remotes if name not in ordered))
    for remote in ordered:
        branch = detect_default_branch(snapshot.remotes[remote], snapshot.heads)
        if branch is not None:
            return branch
    return None


__all__ = ["detect_default_branch", "find_default_branch"]
