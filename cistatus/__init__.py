"""Run a CI task and report its outcome as a GitHub commit status."""

__version__ = "0.3.0"
