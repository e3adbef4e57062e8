"""Hosting provider integrations (GitHub, GitLab)."""

from gitflow.provider.base import Provider, create_provider
from gitflow.provider.github import GitHubProvider
from gitflow.provider.gitlab import GitLabProvider
from gitflow.provider.http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from gitflow.provider.models import CreatePROptions, ProviderError, PullRequest, Release

__all__ = [
    "CreatePROptions",
    "GitHubProvider",
    "GitLabProvider",
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "Provider",
    "ProviderError",
    "PullRequest",
    "RealHttpClient",
    "Release",
    "create_provider",
]
