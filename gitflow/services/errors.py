"""Workflow error taxonomy.

Every workflow returns ``Err(WorkflowError)`` for expected failures. ``kind``
decides the exit code; ``hint`` is an optional suggested next step.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from gitflow.core.config import ConfigError
from gitflow.git.models import GitError
from gitflow.provider.models import ProviderError

__all__ = [
    "WorkflowError",
    "WorkflowErrorKind",
    "from_config_error",
    "from_git_error",
    "from_provider_error",
    "precondition",
]

WorkflowErrorKind = Literal["precondition", "config", "git", "provider"]


@dataclass(frozen=True, slots=True)
class WorkflowError:
    kind: WorkflowErrorKind
    message: str
    hint: str | None = None


def precondition(message: str, hint: str | None = None) -> WorkflowError:
    return WorkflowError(kind="precondition", message=message, hint=hint)


def from_git_error(error: GitError, hint: str | None = None) -> WorkflowError:
    return WorkflowError(kind="git", message=str(error), hint=hint)


def from_config_error(error: ConfigError) -> WorkflowError:
    message = error.message
    if error.path is not None:
        message = f"{message} ({error.path})"
    return WorkflowError(kind="config", message=message, hint=error.hint)


def from_provider_error(error: ProviderError) -> WorkflowError:
    return WorkflowError(kind="provider", message=error.message, hint=error.hint)
