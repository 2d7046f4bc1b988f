"""Module path decomposition, suffix policy and go.mod reading."""

from __future__ import annotations

import re
from pathlib import Path

from .errors import ManifestError
from .models import ModulePath, SuffixStatus

MANIFEST_NAME = "go.mod"

_SUFFIX_PATTERN = re.compile(r"/v([1-9][0-9]*)$")
_MODULE_DIRECTIVE = re.compile(r"""^\s*module\s+(?:"(?P<quoted>[^"]+)"|(?P<bare>[^\s"/(][^\s"]*))""")


def decompose(path: str) -> ModulePath:
    """Split a module path into its base path and any ``/vN`` suffix."""
    match = _SUFFIX_PATTERN.search(path)
    if match is None:
        return ModulePath(path=path, base_path=path)
    return ModulePath(path=path, base_path=path[: match.start()], suffix_major=int(match.group(1)))


def suffix_status(module_path: ModulePath, latest_major: int) -> SuffixStatus:
    """Compare the path's version suffix with the latest major version.

    Majors 0 and 1 share the unsuffixed path, so a ``/v0`` or ``/v1`` suffix
    is always unwanted and any major of 2 or more needs a matching suffix.
    """
    if not module_path.has_suffix:
        return SuffixStatus.MISSING if latest_major > 1 else SuffixStatus.OK
    if module_path.suffix_major in (0, 1):
        return SuffixStatus.UNWANTED
    if module_path.suffix_major == latest_major:
        return SuffixStatus.OK
    return SuffixStatus.MISMATCH


def modpath_mismatch(module_path: ModulePath, subdir: str) -> bool:
    """True when a module in ``subdir`` has a base path not ending in it."""
    if not subdir:
        return False
    return not module_path.base_path.endswith("/" + subdir)


def read_module_path(module_dir: Path) -> str:
    """Return the import path declared by the ``module`` directive in go.mod."""
    manifest = Path(module_dir) / MANIFEST_NAME
    try:
        text = manifest.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestError(f"reading {manifest}: {exc}") from exc

    for line in text.splitlines():
        code = line.split("//", 1)[0]
        match = _MODULE_DIRECTIVE.match(code)
        if match:
            return match.group("quoted") or match.group("bare")
    raise ManifestError(f"parsing {manifest}: no module directive")


__all__ = [
    "MANIFEST_NAME",
    "decompose",
    "modpath_mismatch",
    "read_module_path",
    "suffix_status",
]
