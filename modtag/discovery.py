"""Locating repositories and Go modules on disk."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator

from .errors import DiscoveryError
from .modpath import MANIFEST_NAME

_EXCLUDED_DIRS = {
    ".git",
    "vendor",
    "testdata",
}


def iter_module_dirs(repo_path: Path, exclude: Iterable[str] = ()) -> Iterator[Path]:
    """Yield every directory under ``repo_path`` that holds a go.mod, sorted.

    Directories the go tool ignores (``vendor``, ``testdata`` and names
    starting with ``.`` or ``_``) are not descended into.
    """
    excluded = _EXCLUDED_DIRS | set(exclude)
    root = Path(repo_path)
    for current, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            name
            for name in dirnames
            if name not in excluded and not name.startswith((".", "_"))
        )
        if MANIFEST_NAME in filenames:
            yield Path(current)


def search_upward(start: Path | str, name: str) -> Path:
    """Return the nearest directory at or above ``start`` that contains ``name``."""
    current = Path(start).expanduser().resolve()
    while True:
        if (current / name).exists():
            return current
        if current.parent == current:
            raise DiscoveryError(f"no {name} found above {start}")
        current = current.parent


__all__ = ["iter_module_dirs", "search_upward"]
