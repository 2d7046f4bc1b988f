"""Check Go module version tags in git repositories and recommend the next one."""

from .checker import Checker, ScanOutcome
from .errors import ModtagError
from .models import Bump, RecommendationState, RefSnapshot, Result, SuffixStatus, VersionTag

__version__ = "0.1.0"

__all__ = [
    "Bump",
    "Checker",
    "ModtagError",
    "RecommendationState",
    "RefSnapshot",
    "Result",
    "ScanOutcome",
    "SuffixStatus",
    "VersionTag",
    "__version__",
]
