"""Tests for provider construction and error mapping."""

from __future__ import annotations

import pytest

from gitflow.core.config import ProviderConfig
from gitflow.core.result import Err, Ok
from gitflow.provider.base import create_provider
from gitflow.provider.github import GitHubProvider
from gitflow.provider.gitlab import GitLabProvider
from gitflow.provider.http import HttpError, MockHttpClient
from gitflow.provider.models import http_to_provider_error

ENV = {"GH_TOKEN": "secret"}


def _config(**overrides: str) -> ProviderConfig:
    values = {"type": "github", "token_env": "GH_TOKEN", "owner": "acme", "repo": "widgets"}
    values.update(overrides)
    return ProviderConfig(**values)


def test_github() -> None:
    result = create_provider(_config(), ENV, http=MockHttpClient())
    assert isinstance(result, Ok)
    assert isinstance(result.value, GitHubProvider)
    assert result.value.name == "github"


def test_gitlab() -> None:
    result = create_provider(_config(type="gitlab"), ENV, http=MockHttpClient())
    assert isinstance(result, Ok)
    assert isinstance(result.value, GitLabProvider)


@pytest.mark.parametrize(
    ("config", "fragment"),
    [
        (ProviderConfig(), "not configured"),
        (_config(type="bitbucket"), "unsupported"),
        (_config(token_env="OTHER"), "OTHER"),
        (_config(owner=""), "owner"),
        (_config(repo=""), "repo"),
    ],
)
def test_errors(config: ProviderConfig, fragment: str) -> None:
    result = create_provider(config, ENV, http=MockHttpClient())
    assert isinstance(result, Err)
    assert fragment in result.error.message


def test_blank_token_is_missing() -> None:
    result = create_provider(_config(), {"GH_TOKEN": "  "}, http=MockHttpClient())
    assert isinstance(result, Err)


class TestHttpErrorMapping:
    def test_status_is_api(self) -> None:
        error = http_to_provider_error(HttpError(url="u", status=500, message="boom"), "github")
        assert error.kind == "api"
        assert error.status == 500
        assert error.message == "github api error: boom"

    def test_network(self) -> None:
        error = http_to_provider_error(HttpError(url="u", status=0, message="refused"), "gitlab")
        assert error.kind == "network"

    def test_decode(self) -> None:
        error = http_to_provider_error(
            HttpError(url="u", status=0, message="JSON parse error: x"), "github"
        )
        assert error.kind == "decode"
