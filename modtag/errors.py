"""Error taxonomy for modtag.

Inconsistencies found in a module (a missing version suffix, a stale tip, an
undetectable default branch and so on) are reported as findings on a
:class:`~modtag.models.Result`, never raised. The exceptions here cover the
cases where a result cannot be produced at all, plus the policy refusals the
CLI turns into exit codes.
"""

from __future__ import annotations

import math
from typing import Iterable


class ModtagError(RuntimeError):
    """Base class for all modtag failures."""


class ConfigError(ModtagError):
    """Raised when the configuration file cannot be parsed."""


class RefListingError(ModtagError):
    """Raised when the repository refs cannot be listed or resolved."""


class ManifestError(ModtagError):
    """Raised when a module's go.mod is missing or lacks a module directive."""


class ClassificationError(ModtagError):
    """Raised when the compatibility classifier cannot compare two revisions."""


class PathResolutionError(ModtagError):
    """Raised when a module directory does not lie within its repository."""


class DiscoveryError(ModtagError):
    """Raised when a repository or module directory cannot be located."""


class UncleanRepository(ModtagError):
    """Raised when a tag would be added to a working tree with tracked changes."""


class InvariantError(ModtagError):
    """Raised when an internal consistency check fails."""


# Exit status of ``--status`` runs that reported at least one warning.
WARNINGS_EXIT_CODE = 2


class ExitError(ModtagError):
    """A failure that maps to a specific process exit code."""

    code = 1


class MajorBumpRefused(ExitError):
    """Raised instead of creating a tag that bumps the major version."""

    code = 3


def compose_exit_codes(codes: Iterable[int]) -> int:
    """Combine independent exit signals into one code.

    Distinct signals compose to their least common multiple, so a run that
    both found warnings (2) and refused a major bump (3) exits with 6 and a
    script can still test either condition with a modulus.
    """
    result = 0
    for code in codes:
        if code <= 0:
            continue
        result = code if result == 0 else math.lcm(result, code)
    return result


__all__ = [
    "ClassificationError",
    "ConfigError",
    "DiscoveryError",
    "ExitError",
    "InvariantError",
    "MajorBumpRefused",
    "ManifestError",
    "ModtagError",
    "PathResolutionError",
    "RefListingError",
    "UncleanRepository",
    "WARNINGS_EXIT_CODE",
    "compose_exit_codes",
]
