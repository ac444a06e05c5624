"""
ci-status - Configuration Loader

Merges configuration from multiple sources with proper precedence:
  1. Command-line flags (highest priority)
  2. The YAML file passed with --config
  3. Built-in defaults (lowest priority)

CI provider variables are applied afterwards and only fill fields that are
still empty.
"""

from __future__ import annotations

from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from cistatus.config.schema import validate_file_config
from cistatus.config.settings import RunConfig
from cistatus.errors import ConfigError, ConfigValidationError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML mapping; an empty file yields an empty dict."""
    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigValidationError(f"{path}: top level must be a mapping")
    return content


def load_config_file(path: Path) -> dict[str, Any]:
    """Load and validate a ci-status config file."""
    data = load_yaml_file(path)
    errors = validate_file_config(data)
    if errors:
        raise ConfigValidationError(
            f"Config validation failed for {path}:\n  " + "\n  ".join(errors),
            errors,
        )
    return data


def merge_config(file_values: dict[str, Any], overrides: dict[str, Any]) -> RunConfig:
    """Build a RunConfig from file values and explicit overrides.

    ``None`` in ``overrides`` means "not given" and leaves the file value or
    default in place.
    """
    known = {f.name for f in fields(RunConfig)}
    values: dict[str, Any] = {k: v for k, v in file_values.items() if k in known}
    for key, value in overrides.items():
        if key in known and value is not None:
            values[key] = value
    return RunConfig(**values)
