"""Run configuration for ci-status."""

from __future__ import annotations

from cistatus.config.loader import load_config_file, merge_config
from cistatus.config.schema import CONFIG_SCHEMA, validate_file_config
from cistatus.config.settings import (
    DEFAULT_API_URL,
    DEFAULT_CONTEXT,
    DEFAULT_SHELL,
    TOKEN_ENV,
    RunConfig,
    resolve_token,
    validate_config,
)

__all__ = [
    "CONFIG_SCHEMA",
    "DEFAULT_API_URL",
    "DEFAULT_CONTEXT",
    "DEFAULT_SHELL",
    "TOKEN_ENV",
    "RunConfig",
    "load_config_file",
    "merge_config",
    "resolve_token",
    "validate_config",
    "validate_file_config",
]
