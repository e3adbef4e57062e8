"""Provider capability set and construction from configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Protocol

from gitflow.core.config import ConfigError, ProviderConfig
from gitflow.core.result import Err, Ok, Result
from gitflow.provider.github import GitHubProvider
from gitflow.provider.gitlab import GitLabProvider
from gitflow.provider.http import HttpClient, RealHttpClient
from gitflow.provider.models import CreatePROptions, ProviderError, PullRequest, Release

__all__ = ["Provider", "create_provider"]


class Provider(Protocol):
    """Hosting provider operations used by the pr and release workflows."""

    name: str

    def validate_auth(self) -> Result[None, ProviderError]: ...
    def get_default_branch(self) -> Result[str, ProviderError]: ...
    def create_pr(self, options: CreatePROptions) -> Result[PullRequest, ProviderError]: ...
    def get_pr(self, number: int) -> Result[PullRequest, ProviderError]: ...
    def list_prs(self, state: str = "open") -> Result[list[PullRequest], ProviderError]: ...
    def create_release(self, tag: str, name: str, body: str) -> Result[Release, ProviderError]: ...
    def update_release(self, tag: str, name: str, body: str) -> Result[Release, ProviderError]: ...


def create_provider(
    config: ProviderConfig,
    env: Mapping[str, str] | None = None,
    *,
    http: HttpClient | None = None,
) -> Result[Provider, ConfigError]:
    """Build the provider named by ``config.type``.

    The API token is read from the environment variable named by
    ``config.token_env``; it never lives in the config file.
    """
    env = os.environ if env is None else env
    kind = config.type.strip().lower()
    if not kind:
        return Err(
            ConfigError(
                "provider is not configured",
                hint="set [provider] type = \"github\" or \"gitlab\" in .gitflow.toml",
            )
        )
    if kind not in ("github", "gitlab"):
        return Err(ConfigError(f"unsupported provider type: {kind}"))

    token = env.get(config.token_env, "").strip() if config.token_env else ""
    if not token:
        return Err(
            ConfigError(
                f"provider token missing, set env var {config.token_env or '<provider.token_env>'}"
            )
        )
    if not config.owner.strip():
        return Err(ConfigError("provider owner is required"))
    if not config.repo.strip():
        return Err(ConfigError("provider repo is required"))

    client = http if http is not None else RealHttpClient()
    if kind == "github":
        return Ok(
            GitHubProvider(
                token=token,
                owner=config.owner,
                repo=config.repo,
                http=client,
                base_url=config.base_url,
            )
        )
    return Ok(
        GitLabProvider(
            token=token,
            owner=config.owner,
            repo=config.repo,
            http=client,
            base_url=config.base_url,
        )
    )
