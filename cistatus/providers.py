"""Fill run parameters from the CI provider's environment.

Each provider only fills fields that are still empty. When a field has to be
filled and the provider variable for it is unset, resolution fails instead of
reporting against a partial identity.
"""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from typing import Mapping

from cistatus.config.settings import RunConfig
from cistatus.errors import ConfigError
from cistatus.utils.env import _parse_env_bool

logger = logging.getLogger(__name__)

CIRCLE_ARTIFACT_URL = (
    "https://circleci.com/api/v1.1/project/github/{owner}/{repo}/{build_num}"
    "/artifacts/{node_index}{artifacts_dir}/{name}"
)
TRAVIS_BUILD_URL = "https://travis-ci.org/{owner}/{repo}/builds/{build_id}"
GITHUB_RUN_URL = "{server}/{owner}/{repo}/actions/runs/{run_id}"


def _default_to_env(current: str, env: Mapping[str, str], name: str) -> str:
    if current:
        return current
    value = env.get(name, "")
    if not value:
        raise ConfigError(f"No value for {name}, aborting...")
    return value


def _split_slug(slug: str, name: str) -> tuple[str, str]:
    owner, sep, repo = slug.partition("/")
    if not sep or not owner or not repo:
        raise ConfigError(f"Malformed {name} {slug!r}, expected owner/repo")
    return owner, repo


class CircleCIProvider:
    name = "circleci"

    def detect(self, env: Mapping[str, str]) -> bool:
        return _parse_env_bool(env.get("CIRCLECI"))

    def apply(self, config: RunConfig, env: Mapping[str, str]) -> RunConfig:
        owner = _default_to_env(config.owner, env, "CIRCLE_PROJECT_USERNAME")
        repo = _default_to_env(config.repo, env, "CIRCLE_PROJECT_REPONAME")
        revision = _default_to_env(config.revision, env, "CIRCLE_SHA1")
        artifacts_dir = _default_to_env(config.artifacts_dir, env, "CIRCLE_ARTIFACTS")
        target_url = config.target_url
        if not target_url:
            target_url = CIRCLE_ARTIFACT_URL.format(
                owner=owner,
                repo=repo,
                build_num=env.get("CIRCLE_BUILD_NUM", ""),
                node_index=env.get("CIRCLE_NODE_INDEX", ""),
                artifacts_dir=artifacts_dir,
                name=config.log_filename,
            )
        return replace(
            config,
            owner=owner,
            repo=repo,
            revision=revision,
            artifacts_dir=artifacts_dir,
            target_url=target_url,
        )


class TravisProvider:
    name = "travis"

    def detect(self, env: Mapping[str, str]) -> bool:
        return _parse_env_bool(env.get("TRAVIS"))

    def apply(self, config: RunConfig, env: Mapping[str, str]) -> RunConfig:
        owner, repo = config.owner, config.repo
        if not owner or not repo:
            slug = _default_to_env("", env, "TRAVIS_REPO_SLUG")
            slug_owner, slug_repo = _split_slug(slug, "TRAVIS_REPO_SLUG")
            owner = owner or slug_owner
            repo = repo or slug_repo
        revision = _default_to_env(config.revision, env, "TRAVIS_COMMIT")
        target_url = config.target_url
        build_id = env.get("TRAVIS_BUILD_ID", "")
        if not target_url and build_id:
            target_url = TRAVIS_BUILD_URL.format(owner=owner, repo=repo, build_id=build_id)
        return replace(config, owner=owner, repo=repo, revision=revision, target_url=target_url)


class GitHubActionsProvider:
    name = "github-actions"

    def detect(self, env: Mapping[str, str]) -> bool:
        return _parse_env_bool(env.get("GITHUB_ACTIONS"))

    def apply(self, config: RunConfig, env: Mapping[str, str]) -> RunConfig:
        owner, repo = config.owner, config.repo
        if not owner or not repo:
            slug = _default_to_env("", env, "GITHUB_REPOSITORY")
            slug_owner, slug_repo = _split_slug(slug, "GITHUB_REPOSITORY")
            owner = owner or slug_owner
            repo = repo or slug_repo
        revision = _default_to_env(config.revision, env, "GITHUB_SHA")
        target_url = config.target_url
        run_id = env.get("GITHUB_RUN_ID", "")
        if not target_url and run_id:
            server = env.get("GITHUB_SERVER_URL") or "https://github.com"
            target_url = GITHUB_RUN_URL.format(server=server.rstrip("/"), owner=owner, repo=repo, run_id=run_id)
        return replace(config, owner=owner, repo=repo, revision=revision, target_url=target_url)


PROVIDERS = [CircleCIProvider(), TravisProvider(), GitHubActionsProvider()]


def detect_provider(env: Mapping[str, str]):
    for provider in PROVIDERS:
        if provider.detect(env):
            return provider
    return None


def resolve_config(config: RunConfig, env: Mapping[str, str] | None = None) -> RunConfig:
    """Return ``config`` with empty fields filled from the detected CI provider."""
    env_map = dict(env) if env is not None else dict(os.environ)
    if not _parse_env_bool(env_map.get("CI")):
        logger.info("No CI detected, continuing anyways.")
        return config
    provider = detect_provider(env_map)
    if provider is None:
        logger.warning("CI not recognized, continuing anyways.")
        return config
    logger.debug("Detected CI provider: %s", provider.name)
    return provider.apply(config, env_map)
