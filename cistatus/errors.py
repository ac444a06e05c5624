"""Fatal error types.

Anything raised from here aborts the run. Task command failures are not
errors: they end up in the final commit status instead.
"""

from __future__ import annotations

from cistatus.exit_codes import EXIT_INTERNAL_ERROR, EXIT_USAGE


class CiStatusError(RuntimeError):
    """Base class for errors that terminate ci-status."""

    exit_code = EXIT_INTERNAL_ERROR


class ConfigError(CiStatusError):
    """A required parameter is missing or cannot be resolved."""

    exit_code = EXIT_USAGE


class ConfigValidationError(ConfigError):
    """Raised when a config file fails schema validation."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class StatusReportError(CiStatusError):
    """Posting a commit status failed."""


class StatusTransitionError(CiStatusError):
    """A commit status was moved out of a terminal state."""


class LogArtifactError(CiStatusError):
    """The log artifact could not be created or written."""
