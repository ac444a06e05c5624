"""Command-line entry point for ci-status."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

from cistatus import __version__
from cistatus.config.loader import load_config_file, merge_config
from cistatus.errors import CiStatusError
from cistatus.orchestrator import run_status_task
from cistatus.utils.log import configure_logging

logger = logging.getLogger(__name__)

# argparse dest -> RunConfig field
OVERRIDE_FIELDS = {
    "token": "token",
    "username": "owner",
    "repo": "repo",
    "rev": "revision",
    "verbose": "verbose",
    "fake_github": "simulate",
    "show_output": "show_output",
    "suppress_command_echo": "suppress_command_echo",
    "target_url": "target_url",
    "context": "context",
    "description": "description",
    "artifacts_dir": "artifacts_dir",
    "api_url": "api_url",
    "shell": "shell",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ci-status",
        description="Run a CI task and report it as a GitHub commit status",
    )
    parser.add_argument("--version", action="version", version=f"ci-status {__version__}")
    parser.add_argument(
        "--token",
        help="GitHub API token, restricted to repo:status scope (default: $GITHUB_API_TOKEN)",
    )
    parser.add_argument("--username", "--owner", dest="username", help="Repository owner")
    parser.add_argument("--repo", help="Repository name")
    parser.add_argument("--rev", "--revision", dest="rev", help="Git commit/revision specifier")
    parser.add_argument("--verbose", action="store_true", default=None, help="Extra logging")
    parser.add_argument(
        "--fake_github",
        "--fake-github",
        "--simulate",
        dest="fake_github",
        action="store_true",
        default=None,
        help="For testing purposes, don't talk to GitHub, just log actions",
    )
    parser.add_argument(
        "--show_output",
        "--show-output",
        dest="show_output",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Display command output in addition to the log file (default: on)",
    )
    parser.add_argument(
        "-H",
        "--suppress-command-echo",
        dest="suppress_command_echo",
        action="store_true",
        default=None,
        help="Don't print the command; use when it contains secret tokens",
    )
    parser.add_argument(
        "--target_url",
        "--target-url",
        dest="target_url",
        help="URL the status should link to",
    )
    parser.add_argument(
        "--context",
        help="Unique identifier for this status, like 'compile', 'test' or 'deploy' (default: status)",
    )
    parser.add_argument("--description", help="Description of the task (required)")
    parser.add_argument("--artifacts-dir", dest="artifacts_dir", help="Directory for the log artifact")
    parser.add_argument("--config", type=Path, help="YAML file with default option values")
    parser.add_argument("--api-url", dest="api_url", help="GitHub API base URL (default: https://api.github.com)")
    parser.add_argument("--shell", help="Shell used to run the command (default: bash)")
    parser.add_argument("command", nargs="?", default="", help="Shell command to run")
    return parser


def config_overrides(args: argparse.Namespace) -> dict[str, Any]:
    return {field: getattr(args, dest, None) for dest, field in OVERRIDE_FIELDS.items()}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(bool(args.verbose))

    try:
        file_values = load_config_file(args.config) if args.config else {}
        config = merge_config(file_values, config_overrides(args))
        if config.verbose and not args.verbose:
            configure_logging(True)
        return run_status_task(config, args.command)
    except CiStatusError as exc:
        logger.error("error: %s", exc)
        return exc.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
