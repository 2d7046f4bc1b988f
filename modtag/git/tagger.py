"""Creating recommended version tags."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..errors import MajorBumpRefused, UncleanRepository
from ..logging import get_logger
from ..models import Bump, Result
from .client import GitClient

DEFAULT_MESSAGE = "Version {tag} added by modtag"


class Tagger:
    """Adds the tag recommended by a :class:`~modtag.models.Result`."""

    def __init__(
        self,
        client: GitClient | None = None,
        *,
        message_template: str = DEFAULT_MESSAGE,
    ) -> None:
        self.client = client or GitClient()
        self.message_template = message_template
        self.logger = get_logger("tagger")

    def maybe_add_tag(
        self,
        repo_path: Path | str,
        result: Result,
        *,
        message: str | None = None,
        sign: bool = False,
    ) -> Optional[str]:
        """Create the recommended tag, returning its name, or None when none is due.

        Major-version bumps are never tagged automatically; they raise
        ``MajorBumpRefused`` so the caller can report them distinctly. The
        working tree is checked for tracked changes right before tagging. That
        check and the tag creation are separate git invocations, so a change
        landing in between is not detected.
        """
        reason = self._skip_reason(result)
        if reason is not None:
            self.logger.info("Not tagging module %s: %s", result.module_subdir or ".", reason)
            return None

        tag = result.new_tag
        if result.new_major != result.latest_major:
            raise MajorBumpRefused(f"will not add new major-version tag {tag}")

        repo = Path(repo_path)
        if not self.client.is_clean(repo):
            raise UncleanRepository(f"repository {repo} has uncommitted changes")

        commit = str(result.latest_commit)
        text = message or self.message_template.format(tag=tag)
        self.client.create_tag(repo, tag, commit, message=text, sign=sign)
        self.logger.info("Added tag %s at %s", tag, commit)
        return tag

    @staticmethod
    def _skip_reason(result: Result) -> Optional[str]:
        if result.default_branch is None:
            return "default branch unknown"
        if result.latest_commit is None:
            return "latest commit unknown"
        if result.latest_commit_has_version_tag:
            return "latest commit already has a version tag"
        if (result.new_major, result.new_minor, result.new_patch) == (0, 0, 0):
            return "no new version recommended"
        if result.classifier_verdict is Bump.NONE:
            return "no new version required"
        if result.new_version == result.latest_version:
            return f"{result.new_version} already exists"
        return None


__all__ = ["DEFAULT_MESSAGE", "Tagger"]
