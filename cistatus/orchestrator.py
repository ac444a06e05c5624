"""Wrap a task command in a pending -> success/failure commit status."""

from __future__ import annotations

import logging
import os
from typing import Mapping

from cistatus.config.settings import RunConfig, resolve_token, validate_config
from cistatus.errors import ConfigError
from cistatus.exit_codes import EXIT_FAILURE, EXIT_SUCCESS
from cistatus.providers import resolve_config
from cistatus.reporter import StatusReporter, build_reporter
from cistatus.status import CommitStatus, StatusState
from cistatus.task_runner import TaskRunner

logger = logging.getLogger(__name__)


def prepare_config(config: RunConfig, env: Mapping[str, str] | None = None) -> RunConfig:
    """Complete and validate ``config``. Raises ConfigError before any network use."""
    env_map = dict(env) if env is not None else dict(os.environ)
    if not config.description:
        raise ConfigError("Please provide a description")
    config = resolve_token(config, env_map)
    config = resolve_config(config, env_map)
    validate_config(config)
    return config


def run_status_task(
    config: RunConfig,
    command: str,
    env: Mapping[str, str] | None = None,
    reporter: StatusReporter | None = None,
    runner: TaskRunner | None = None,
) -> int:
    """Report pending, run ``command``, report the outcome.

    Returns EXIT_SUCCESS or EXIT_FAILURE according to the command. Config,
    status posting and log file problems raise and abort the run; if the
    pending post fails the command is never started.
    """
    if not command:
        raise ConfigError("No command provided")
    config = prepare_config(config, env)
    if reporter is None:
        reporter = build_reporter(config)
    if runner is None:
        runner = TaskRunner(shell=config.shell)

    status = CommitStatus(
        context=config.context,
        description=config.description,
        target_url=config.target_url,
    )
    reporter.post(config.owner, config.repo, config.revision, status)

    result = runner.run(
        command,
        config.log_path,
        tee_to_console=config.show_output,
        echo_command=not config.suppress_command_echo,
    )
    status.finish(result.succeeded)
    reporter.post(config.owner, config.repo, config.revision, status)

    if status.state is StatusState.SUCCESS:
        return EXIT_SUCCESS
    return EXIT_FAILURE
