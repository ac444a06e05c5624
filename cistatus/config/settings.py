"""The resolved parameter set for a single ci-status run."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping

from cistatus.errors import ConfigError

DEFAULT_CONTEXT = "status"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_SHELL = "bash"
TOKEN_ENV = "GITHUB_API_TOKEN"


@dataclass(frozen=True)
class RunConfig:
    """Parameters for one wrapped task.

    Built once from flags and the optional config file, then completed by the
    CI provider resolver. Instances are immutable; resolution steps return
    copies.
    """

    owner: str = ""
    repo: str = ""
    revision: str = ""
    token: str = ""
    context: str = DEFAULT_CONTEXT
    description: str = ""
    target_url: str = ""
    artifacts_dir: str = ""
    simulate: bool = False
    verbose: bool = False
    show_output: bool = True
    suppress_command_echo: bool = False
    api_url: str = DEFAULT_API_URL
    shell: str = DEFAULT_SHELL

    @property
    def log_filename(self) -> str:
        return f"{self.context}.txt"

    @property
    def log_path(self) -> Path:
        return Path(self.artifacts_dir or ".") / self.log_filename

    def missing_required(self) -> list[str]:
        required = {
            "owner": self.owner,
            "repo": self.repo,
            "revision": self.revision,
            "description": self.description,
            "context": self.context,
        }
        if not self.simulate:
            required["token"] = self.token
        return [name for name, value in required.items() if not value]

    def __repr__(self) -> str:
        token = "***" if self.token else ""
        return (
            f"RunConfig(owner={self.owner!r}, repo={self.repo!r}, revision={self.revision!r}, "
            f"token={token!r}, context={self.context!r}, simulate={self.simulate!r})"
        )


def resolve_token(config: RunConfig, env: Mapping[str, str]) -> RunConfig:
    """Fill the API token from the environment when it is needed and missing."""
    if config.simulate or config.token:
        return config
    token = env.get(TOKEN_ENV, "")
    if not token:
        raise ConfigError(f"No value for {TOKEN_ENV}, aborting...")
    return replace(config, token=token)


def validate_config(config: RunConfig) -> None:
    """Fail before any network call when required fields are still empty."""
    missing = config.missing_required()
    if missing:
        raise ConfigError(f"Missing required parameters: {', '.join(missing)}")
