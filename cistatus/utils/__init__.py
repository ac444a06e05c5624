"""Shared utility functions for cistatus."""

from __future__ import annotations

from cistatus.utils.env import _parse_env_bool
from cistatus.utils.github_api import gh_api_post, safe_urlopen
from cistatus.utils.shell import resolve_shell

__all__ = [
    "_parse_env_bool",
    "gh_api_post",
    "safe_urlopen",
    "resolve_shell",
]
