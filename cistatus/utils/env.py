"""Environment variable helpers."""

from __future__ import annotations

TRUE_VALUES = {"1", "true", "yes", "y", "on"}
FALSE_VALUES = {"0", "false", "no", "n", "off", ""}


def _parse_env_bool(value: str | None, default: bool = False) -> bool:
    """Interpret an environment variable as a boolean.

    Unset or unrecognised values fall back to ``default``.
    """
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    return default
