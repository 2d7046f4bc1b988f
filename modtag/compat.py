"""Compatibility classification between two revisions of a module."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .errors import ClassificationError
from .git.client import GitClient
from .logging import get_logger
from .models import Bump

_VERDICTS = {
    "none": Bump.NONE,
    "patchlevel": Bump.PATCH,
    "patch": Bump.PATCH,
    "minor": Bump.MINOR,
    "major": Bump.MAJOR,
}


@dataclass(frozen=True)
class Classification:
    """Minimum bump required between two revisions, with the tool's explanation."""

    bump: Bump
    detail: str


class CompatibilityClassifier(Protocol):
    def classify(self, repo_path: Path, older: str, newer: str) -> Classification: ...


class ModverClassifier:
    """Asks the ``modver`` tool how the module API changed between revisions.

    ``modver`` prints a line such as ``Minor: new exported function Foo``;
    the word before the colon is the verdict.
    """

    def __init__(self, client: GitClient, command: str = "modver") -> None:
        self.client = client
        self.command = command
        self.logger = get_logger("compat")

    def classify(self, repo_path: Path, older: str, newer: str) -> Classification:
        args = [
            self.command,
            "-git",
            str(Path(repo_path) / ".git"),
            "-gitcmd",
            self.client.git,
            older,
            newer,
        ]
        try:
            output = self.client.run(args, cwd=Path(repo_path), capture_output=True)
        except subprocess.CalledProcessError as exc:
            stderr = exc.stderr.strip() if isinstance(exc.stderr, str) else ""
            raise ClassificationError(
                f"comparing {older} to {newer}: {stderr or f'exit status {exc.returncode}'}"
            ) from exc
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise ClassificationError(f"comparing {older} to {newer}: {exc}") from exc

        classification = parse_verdict(output)
        self.logger.debug("%s -> %s: %s", older, newer, classification.detail)
        return classification


def parse_verdict(output: str) -> Classification:
    """Turn the first non-empty line of classifier output into a Classification."""
    for line in output.splitlines():
        detail = line.strip()
        if not detail:
            continue
        words = detail.split(":", 1)[0].split()
        bump = _VERDICTS.get(words[0].lower()) if words else None
        if bump is None:
            raise ClassificationError(f"unrecognized classifier output: {detail}")
        return Classification(bump=bump, detail=detail)
    raise ClassificationError("classifier produced no output")


__all__ = [
    "Classification",
    "CompatibilityClassifier",
    "ModverClassifier",
    "parse_verdict",
]
