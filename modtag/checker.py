"""Per-module checks and repository-wide scans."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .branches import DEFAULT_REMOTE_PRIORITY, find_default_branch
from .compat import CompatibilityClassifier, ModverClassifier
from .discovery import iter_module_dirs
from .errors import ModtagError, PathResolutionError
from .git.client import GitClient
from .git.refs import build_snapshot
from .logging import get_logger
from .modpath import decompose, modpath_mismatch, read_module_path, suffix_status
from .models import RefSnapshot, Result
from .recommend import recommend
from .versions import VersionIndex, version_components


@dataclass
class ScanOutcome:
    """Results of checking every module in a repository.

    A module whose check failed appears in ``errors`` and not in ``results``.
    """

    results: Dict[str, Result] = field(default_factory=dict)
    errors: Dict[str, ModtagError] = field(default_factory=dict)

    def sorted(self) -> List[Result]:
        return [self.results[key] for key in sorted(self.results)]


def resolve_subdir(repo_path: Path | str, module_dir: Path | str) -> str:
    """Express ``module_dir`` as a POSIX path relative to the repository root.

    Relative module directories are taken relative to the repository (a
    leading copy of ``repo_path`` is tolerated). The repository root itself
    maps to the empty string.
    """
    repo = Path(repo_path).expanduser().resolve()
    module = Path(module_dir).expanduser()
    if not module.is_absolute():
        try:
            module = module.relative_to(Path(repo_path))
        except ValueError:
            pass
        module = repo / module
    module = module.resolve()
    try:
        relative = module.relative_to(repo)
    except ValueError as exc:
        raise PathResolutionError(f"module dir {module} is not in repository {repo}") from exc
    return "" if relative == Path(".") else relative.as_posix()


class Checker:
    """Checks Go modules in a git repository against their tag history."""

    def __init__(
        self,
        client: GitClient | None = None,
        classifier: CompatibilityClassifier | None = None,
        *,
        remotes: Sequence[str] = DEFAULT_REMOTE_PRIORITY,
        manifest_reader: Callable[[Path], str] = read_module_path,
        exclude_dirs: Iterable[str] = (),
        workers: int = 1,
    ) -> None:
        self.client = client or GitClient()
        self.classifier = classifier or ModverClassifier(self.client)
        self.remotes = tuple(remotes)
        self.manifest_reader = manifest_reader
        self.exclude_dirs = tuple(exclude_dirs)
        self.workers = max(1, workers)
        self.logger = get_logger("checker")

    def check(self, repo_dir: Path | str, module_dir: Path | str = "") -> Result:
        """Check the module rooted at ``module_dir`` (the repo root by default)."""
        repo = Path(repo_dir).expanduser().resolve()
        subdir = resolve_subdir(repo_dir, module_dir or repo)
        snapshot = build_snapshot(self.client, repo)
        return self._check(repo, subdir, snapshot)

    def check_all(self, repo_dir: Path | str) -> ScanOutcome:
        """Check every module in the repository, isolating per-module failures.

        Refs are listed once and shared by all modules; a failure to list them
        therefore aborts the scan.
        """
        repo = Path(repo_dir).expanduser().resolve()
        subdirs = [
            resolve_subdir(repo, path) for path in iter_module_dirs(repo, self.exclude_dirs)
        ]
        self.logger.info("Found %d module(s) in %s", len(subdirs), repo)
        snapshot = build_snapshot(self.client, repo)

        outcome = ScanOutcome()
        for subdir, result, error in self._run_all(repo, subdirs, snapshot):
            if error is not None:
                self.logger.warning("Checking module %s failed: %s", subdir or ".", error)
                outcome.errors[subdir] = error
            elif result is not None:
                outcome.results[subdir] = result
        return outcome

    # ------------------------------------------------------------------
    # Internals

    def _run_all(
        self, repo: Path, subdirs: Sequence[str], snapshot: RefSnapshot
    ) -> List[Tuple[str, Optional[Result], Optional[ModtagError]]]:
        if self.workers == 1 or len(subdirs) < 2:
            return [self._guarded(repo, subdir, snapshot) for subdir in subdirs]
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            futures = [pool.submit(self._guarded, repo, subdir, snapshot) for subdir in subdirs]
            return [future.result() for future in futures]

    def _guarded(
        self, repo: Path, subdir: str, snapshot: RefSnapshot
    ) -> Tuple[str, Optional[Result], Optional[ModtagError]]:
        try:
            return subdir, self._check(repo, subdir, snapshot), None
        except ModtagError as exc:
            return subdir, None, exc

    def _check(self, repo: Path, subdir: str, snapshot: RefSnapshot) -> Result:
        prefix = f"{subdir}/" if subdir else ""
        self.logger.info("Checking module %s", subdir or ".")

        index = VersionIndex.build(snapshot.tags, prefix)
        latest = index.latest
        latest_major = latest_minor = latest_patch = 0
        if latest is not None:
            latest_major, latest_minor, latest_patch = version_components(latest.bare)

        modpath = self.manifest_reader(repo / subdir if subdir else repo)
        module_path = decompose(modpath)

        default_branch = find_default_branch(snapshot, self.remotes)
        tip = snapshot.heads.get(default_branch) if default_branch else None
        self.logger.debug("Default branch %s at %s", default_branch, tip)

        recommendation = recommend(index, default_branch, tip, self.classifier, repo)

        return Result(
            module_subdir=subdir,
            version_prefix=prefix,
            modpath=modpath,
            modpath_mismatch=modpath_mismatch(module_path, subdir),
            version_suffix=suffix_status(module_path, latest_major),
            state=recommendation.state,
            latest_version=latest.bare if latest is not None else None,
            latest_major=latest_major,
            latest_minor=latest_minor,
            latest_patch=latest_patch,
            latest_version_is_prerelease=latest.is_prerelease if latest is not None else False,
            latest_version_unstable=latest.is_unstable if latest is not None else False,
            no_versions=latest is None,
            default_branch=default_branch,
            latest_commit=tip,
            latest_commit_has_version_tag=tip is not None and index.has_version_at(tip),
            latest_commit_has_latest_version=tip is not None and index.latest_is_at(tip),
            classifier_verdict=recommendation.verdict,
            classifier_detail=recommendation.detail,
            new_major=recommendation.new_major,
            new_minor=recommendation.new_minor,
            new_patch=recommendation.new_patch,
            needs_new_suffix=recommendation.needs_new_suffix,
        )


__all__ = ["Checker", "ScanOutcome", "resolve_subdir"]
