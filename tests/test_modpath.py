"""Tests for module path decomposition and suffix policy."""

from __future__ import annotations

from pathlib import Path

import pytest

from modtag.errors import ManifestError
from modtag.models import ModulePath, SuffixStatus
from modtag.modpath import decompose, modpath_mismatch, read_module_path, suffix_status


@pytest.mark.parametrize(
    ("path", "base", "suffix"),
    [
        ("example.com/mod", "example.com/mod", None),
        ("example.com/mod/v2", "example.com/mod", 2),
        ("example.com/mod/v1", "example.com/mod", 1),
        ("example.com/mod/v12", "example.com/mod", 12),
        ("example.com/mod/v0", "example.com/mod/v0", None),
        ("example.com/mod/v02", "example.com/mod/v02", None),
        ("example.com/mod/v2x", "example.com/mod/v2x", None),
        ("example.com/modv2", "example.com/modv2", None),
    ],
)
def test_decompose(path: str, base: str, suffix: int | None) -> None:
    module_path = decompose(path)

    assert module_path.path == path
    assert module_path.base_path == base
    assert module_path.suffix_major == suffix
    assert module_path.has_suffix is (suffix is not None)


@pytest.mark.parametrize(
    ("suffix", "latest_major", "expected"),
    [
        (None, 0, SuffixStatus.OK),
        (None, 1, SuffixStatus.OK),
        (None, 2, SuffixStatus.MISSING),
        (None, 7, SuffixStatus.MISSING),
        (0, 0, SuffixStatus.UNWANTED),
        (1, 1, SuffixStatus.UNWANTED),
        (1, 3, SuffixStatus.UNWANTED),
        (2, 2, SuffixStatus.OK),
        (5, 5, SuffixStatus.OK),
        (2, 1, SuffixStatus.MISMATCH),
        (2, 3, SuffixStatus.MISMATCH),
        (3, 0, SuffixStatus.MISMATCH),
    ],
)
def test_suffix_policy_table(suffix: int | None, latest_major: int, expected: SuffixStatus) -> None:
    module_path = ModulePath(path="x", base_path="x", suffix_major=suffix)

    assert suffix_status(module_path, latest_major) is expected


def test_suffix_policy_is_total() -> None:
    for suffix in [None, *range(0, 6)]:
        for latest_major in range(0, 6):
            status = suffix_status(ModulePath("x", "x", suffix), latest_major)
            assert status in set(SuffixStatus)


@pytest.mark.parametrize(
    ("path", "subdir", "mismatch"),
    [
        ("example.com/repo", "", False),
        ("example.com/repo/tools/gen", "tools/gen", False),
        ("example.com/repo/tools/gen/v3", "tools/gen", False),
        ("example.com/repo", "tools/gen", True),
        ("example.com/repo/gen", "tools/gen", True),
        ("example.com/repo/xtools/gen", "tools/gen", True),
    ],
)
def test_modpath_mismatch(path: str, subdir: str, mismatch: bool) -> None:
    assert modpath_mismatch(decompose(path), subdir) is mismatch


def test_read_module_path_variants(tmp_path: Path) -> None:
    (tmp_path / "go.mod").write_text(
        "// leading comment\nmodule \"example.com/quoted/v2\" // trailing\n\ngo 1.22\n",
        encoding="utf-8",
    )
    assert read_module_path(tmp_path) == "example.com/quoted/v2"

    (tmp_path / "go.mod").write_text("module example.com/bare\n", encoding="utf-8")
    assert read_module_path(tmp_path) == "example.com/bare"


def test_read_module_path_requires_manifest(tmp_path: Path) -> None:
    with pytest.raises(ManifestError, match="reading"):
        read_module_path(tmp_path)


def test_read_module_path_requires_module_directive(tmp_path: Path) -> None:
    (tmp_path / "go.mod").write_text("go 1.22\n\nrequire example.com/dep v1.0.0\n", encoding="utf-8")

    with pytest.raises(ManifestError, match="no module directive"):
        read_module_path(tmp_path)


def test_read_module_path_rejects_undecodable_manifest(tmp_path: Path) -> None:
    (tmp_path / "go.mod").write_bytes(b"module \xff\xfe\n")

    with pytest.raises(ManifestError, match="reading"):
        read_module_path(tmp_path)
