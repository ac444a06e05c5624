"""Logging setup for the ci-status CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Send cistatus log records to stderr through rich.

    Command output is written to stderr separately, as raw bytes, so the two
    interleave in the order they were produced.
    """
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger("cistatus")
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
