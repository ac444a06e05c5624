"""Schema for the optional ci-status YAML config file."""

from __future__ import annotations

from typing import Any

from jsonschema import Draft7Validator

_STRING_KEYS = [
    "owner",
    "repo",
    "revision",
    "context",
    "description",
    "target_url",
    "artifacts_dir",
    "api_url",
    "shell",
]
_BOOL_KEYS = ["simulate", "verbose", "show_output", "suppress_command_echo"]

CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "ci-status config",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        **{key: {"type": "string"} for key in _STRING_KEYS},
        **{key: {"type": "boolean"} for key in _BOOL_KEYS},
    },
}
CONFIG_SCHEMA["properties"]["context"]["minLength"] = 1
CONFIG_SCHEMA["properties"]["api_url"]["pattern"] = "^https://"


def validate_file_config(data: dict[str, Any]) -> list[str]:
    """Validate config file data.

    Returns:
        Sorted list of validation error strings.
    """
    validator = Draft7Validator(CONFIG_SCHEMA)
    errors: list[str] = []
    for err in validator.iter_errors(data):
        path = ".".join(str(p) for p in err.path) or "<root>"
        errors.append(f"{path}: {err.message}")
    return sorted(errors)
