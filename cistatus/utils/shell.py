"""Shell lookup for task commands."""

from __future__ import annotations

import shutil


def resolve_shell(name: str) -> str:
    """Return the absolute path of ``name`` on PATH, or ``name`` unchanged.

    An unresolvable shell is left for Popen to reject, which the runner
    reports as a failed task rather than a fatal error.
    """
    return shutil.which(name) or name
