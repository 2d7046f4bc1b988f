"""Thin wrapper around the git executable."""

from __future__ import annotations

import subprocess
import time
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from ..errors import ModtagError, RefListingError, UncleanRepository
from ..logging import get_logger

Runner = Callable[..., str]


class GitClient:
    """Runs the handful of git commands modtag needs.

    Every command goes through one runner callable so tests can substitute a
    recorder. The optional ``timeout`` is an overall budget: it is turned into a
    deadline when the client is created and each subprocess receives whatever
    time remains.
    """

    def __init__(
        self,
        git: str | None = None,
        *,
        timeout: float | None = None,
        runner: Runner | None = None,
    ) -> None:
        self.git = git or "git"
        self._runner = runner or self._default_runner
        self._deadline = time.monotonic() + timeout if timeout is not None else None
        self.logger = get_logger("git")

    def list_refs(self, repo_path: Path) -> List[Tuple[str, str]]:
        """Return ``(name, hash)`` for every ref reported by ``git show-ref``."""
        try:
            output = self._run(["show-ref"], cwd=repo_path, capture_output=True)
        except subprocess.CalledProcessError as exc:
            # show-ref exits 1 without output when the repository has no refs.
            if exc.returncode == 1 and not (exc.stdout or "").strip():
                return []
            raise RefListingError(f"git show-ref failed in {repo_path}: {_stderr(exc)}") from exc
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise RefListingError(f"git show-ref failed in {repo_path}: {exc}") from exc

        refs: List[Tuple[str, str]] = []
        for line in output.splitlines():
            parts = line.split()
            if len(parts) != 2:
                continue
            hash_, name = parts
            refs.append((name, hash_))
        return refs

    def tag_commit(self, repo_path: Path, tag: str) -> str:
        """Return the commit a tag ultimately points at, peeling annotated tags."""
        args = ["rev-parse", "--verify", "--quiet", f"refs/tags/{tag}^{{commit}}"]
        try:
            output = self._run(args, cwd=repo_path, capture_output=True)
        except subprocess.CalledProcessError as exc:
            raise RefListingError(f"cannot resolve commit for tag {tag}: {_stderr(exc)}") from exc
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise RefListingError(f"cannot resolve commit for tag {tag}: {exc}") from exc
        commit = output.strip()
        if not commit:
            raise RefListingError(f"cannot resolve commit for tag {tag}")
        return commit

    def is_clean(self, repo_path: Path) -> bool:
        """Return True when the working tree has no tracked modifications."""
        try:
            output = self._run(["status", "--porcelain"], cwd=repo_path, capture_output=True)
        except (subprocess.CalledProcessError, OSError, subprocess.TimeoutExpired) as exc:
            raise UncleanRepository(f"cannot determine status of {repo_path}: {exc}") from exc
        for line in output.splitlines():
            if not line.strip() or line.startswith("??"):
                continue
            return False
        return True

    def create_tag(
        self,
        repo_path: Path,
        tag: str,
        commit: str,
        *,
        message: str,
        sign: bool = False,
    ) -> None:
        """Create an annotated (optionally signed) tag pointing at ``commit``."""
        args = ["tag", "-m", message]
        if sign:
            args.append("-s")
        args.extend([tag, commit])
        try:
            self._run(args, cwd=repo_path, capture_output=True)
        except subprocess.CalledProcessError as exc:
            raise ModtagError(f"git tag {tag} failed: {_stderr(exc)}") from exc
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise ModtagError(f"git tag {tag} failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Helpers

    def remaining(self) -> Optional[float]:
        """Seconds left before the overall deadline, or None without one."""
        if self._deadline is None:
            return None
        return self._deadline - time.monotonic()

    def run(self, args: Iterable[str], *, cwd: Path, capture_output: bool = False) -> str:
        """Run an arbitrary command under this client's deadline."""
        return self._invoke(list(args), cwd=cwd, capture_output=capture_output)

    def _run(self, args: Iterable[str], *, cwd: Path, capture_output: bool = False) -> str:
        return self._invoke([self.git, *args], cwd=cwd, capture_output=capture_output)

    def _invoke(self, command: List[str], *, cwd: Path, capture_output: bool) -> str:
        timeout = self.remaining()
        if timeout is not None and timeout <= 0:
            raise subprocess.TimeoutExpired(command, 0)
        self.logger.debug("Running %s in %s", " ".join(command), cwd)
        return self._runner(command, cwd=cwd, capture_output=capture_output, timeout=timeout)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
        timeout: float | None = None,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=capture_output,
            timeout=timeout,
        )
        return completed.stdout if capture_output else ""


def _stderr(exc: subprocess.CalledProcessError) -> str:
    detail = (exc.stderr or "").strip() if isinstance(exc.stderr, str) else ""
    return detail or f"exit status {exc.returncode}"
