"""Build a classified snapshot of a repository's refs."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Protocol, Sequence, Tuple

from ..logging import get_logger
from ..models import RefSnapshot

HEADS_PREFIX = "refs/heads/"
REMOTES_PREFIX = "refs/remotes/"
TAGS_PREFIX = "refs/tags/"

_logger = get_logger("refs")


class RefSource(Protocol):
    """The subset of :class:`~modtag.git.client.GitClient` used for snapshots."""

    def list_refs(self, repo_path: Path) -> Sequence[Tuple[str, str]]: ...

    def tag_commit(self, repo_path: Path, tag: str) -> str: ...


def build_snapshot(source: RefSource, repo_path: Path) -> RefSnapshot:
    """List refs once and sort them into heads, remote-tracking refs and tags.

    Tags are recorded against the commit they resolve to, so annotated tags
    compare equal to the branch heads they were placed on. Refs outside the
    three namespaces (notes, stash, pull-request refs) are ignored. Any
    listing or resolution failure propagates as ``RefListingError``.
    """
    heads: Dict[str, str] = {}
    remotes: Dict[str, Dict[str, str]] = {}
    tags: Dict[str, str] = {}

    for name, hash_ in source.list_refs(repo_path):
        if name.startswith(HEADS_PREFIX):
            heads[name[len(HEADS_PREFIX) :]] = hash_

        elif name.startswith(REMOTES_PREFIX):
            remote, sep, ref = name[len(REMOTES_PREFIX) :].partition("/")
            if not sep or not remote or not ref:
                continue
            remotes.setdefault(remote, {})[ref] = hash_

        elif name.startswith(TAGS_PREFIX):
            tag = name[len(TAGS_PREFIX) :]
            tags[tag] = source.tag_commit(repo_path, tag)

    _logger.debug(
        "Snapshot of %s: %d heads, %d remotes, %d tags",
        repo_path,
        len(heads),
        len(remotes),
        len(tags),
    )
    return RefSnapshot(heads=heads, remotes=remotes, tags=tags)
