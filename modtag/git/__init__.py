"""Git collaborators: ref listing, tag resolution and tag creation."""

from .client import GitClient
from .refs import build_snapshot
from .tagger import Tagger

__all__ = ["GitClient", "Tagger", "build_snapshot"]
