"""Post commit statuses to GitHub, or pretend to."""

from __future__ import annotations

import logging
import urllib.error
from typing import Protocol
from urllib.parse import quote

from cistatus.config.settings import DEFAULT_API_URL, RunConfig
from cistatus.errors import StatusReportError
from cistatus.status import CommitStatus, StatusState
from cistatus.utils.github_api import gh_api_post

logger = logging.getLogger(__name__)


class StatusReporter(Protocol):
    def post(self, owner: str, repo: str, revision: str, status: CommitStatus) -> None: ...


class GitHubStatusReporter:
    """Create commit statuses through the GitHub REST API.

    Any failure raises :class:`StatusReportError`. There is no retry: a run
    whose status cannot be recorded is aborted.
    """

    def __init__(self, token: str, api_url: str = DEFAULT_API_URL, verbose: bool = False, timeout: int = 30):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.verbose = verbose
        self.timeout = timeout

    def status_url(self, owner: str, repo: str, revision: str) -> str:
        return f"{self.api_url}/repos/{quote(owner)}/{quote(repo)}/statuses/{quote(revision)}"

    def post(self, owner: str, repo: str, revision: str, status: CommitStatus) -> None:
        url = self.status_url(owner, repo, revision)
        try:
            response = gh_api_post(url, self.token, status.to_payload(), timeout=self.timeout)
        except urllib.error.HTTPError as exc:
            try:
                detail = exc.read().decode("utf-8", errors="replace").strip()
            except OSError:
                detail = ""
            message = f"HTTP {exc.code} {exc.reason} posting status to {url}"
            if detail:
                message = f"{message}: {detail}"
            raise StatusReportError(message) from exc
        except (urllib.error.URLError, OSError, ValueError) as exc:
            raise StatusReportError(f"Failed to post status to {url}: {exc}") from exc

        if self.verbose:
            logger.info("Response: HTTP %s", response.status)
            for name, value in response.headers.items():
                logger.info("  %s: %s", name, value)
            logger.info("%s", response.body)
        logger.info("Updated status for '%s' to '%s'", status.context, status.state.value)


class SimulatedStatusReporter:
    """Log what would be posted without touching the network."""

    def __init__(self) -> None:
        self.posted: list[StatusState] = []

    def post(self, owner: str, repo: str, revision: str, status: CommitStatus) -> None:
        self.posted.append(status.state)
        logger.info("[Fake Github] Updating status for '%s' to %s", status.context, status.state.value)


def build_reporter(config: RunConfig) -> StatusReporter:
    if config.simulate:
        return SimulatedStatusReporter()
    return GitHubStatusReporter(config.token, api_url=config.api_url, verbose=config.verbose)
