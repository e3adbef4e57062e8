"""Provider value types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from gitflow.provider.http import HttpError

__all__ = [
    "CreatePROptions",
    "ProviderError",
    "ProviderErrorKind",
    "PullRequest",
    "Release",
    "http_to_provider_error",
]

ProviderErrorKind = Literal[
    "api",
    "network",
    "decode",
    "not_implemented",
    "release_exists",
]


@dataclass(frozen=True, slots=True)
class ProviderError:
    """Error from a hosting provider call.

    ``kind == "release_exists"`` is the one the release flow recovers from
    (it switches to updating the existing release).
    """

    kind: ProviderErrorKind
    message: str
    status: int = 0
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class PullRequest:
    number: int
    title: str
    state: str = ""
    description: str = ""
    author: str = ""
    head_branch: str = ""
    base_branch: str = ""
    url: str = ""
    draft: bool = False
    reviewers: tuple[str, ...] = ()
    labels: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Release:
    tag: str
    name: str
    url: str = ""


@dataclass(frozen=True, slots=True)
class CreatePROptions:
    title: str
    head_branch: str
    base_branch: str
    description: str = ""
    draft: bool = False
    reviewers: tuple[str, ...] = ()
    labels: tuple[str, ...] = ()


def http_to_provider_error(error: HttpError, api: str) -> ProviderError:
    if error.status == 0:
        kind: ProviderErrorKind = (
            "decode" if error.message.startswith("JSON parse error") else "network"
        )
        return ProviderError(kind=kind, message=f"{api} request failed: {error.message}")
    return ProviderError(
        kind="api",
        message=f"{api} api error: {error.message}",
        status=error.status,
    )
