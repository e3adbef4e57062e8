"""Commit staged changes, optionally enforcing conventional commit messages."""

from __future__ import annotations

from dataclasses import dataclass

from gitflow.core.config import CommitConfig, Config
from gitflow.core.result import Err, Ok, Result
from gitflow.git.repository import GitAdapter
from gitflow.output.console import ConsoleProtocol
from gitflow.services.errors import WorkflowError, from_git_error, precondition

__all__ = ["CommitOptions", "CommitResult", "CommitService", "build_commit_message"]


@dataclass(frozen=True, slots=True)
class CommitOptions:
    message: str = ""
    body: str = ""
    type: str = ""
    scope: str = ""
    breaking: bool = False
    all: bool = False


@dataclass(frozen=True, slots=True)
class CommitResult:
    message: str


def _with_body(header: str, body: str) -> str:
    body = body.strip()
    return f"{header}\n\n{body}" if body else header


def build_commit_message(
    policy: CommitConfig, options: CommitOptions
) -> Result[str, WorkflowError]:
    """Assemble the commit message, ``type(scope)!: summary`` when conventional."""
    summary = options.message.strip()

    if not policy.conventional:
        if not summary:
            return Err(precondition("message is required"))
        return Ok(_with_body(summary, options.body))

    commit_type = options.type.strip()
    if not commit_type:
        return Err(
            precondition(
                "type is required for conventional commits",
                hint=f"use one of: {', '.join(policy.types)}",
            )
        )
    if policy.types and commit_type not in policy.types:
        return Err(
            precondition(
                f"commit type {commit_type} is not allowed",
                hint=f"use one of: {', '.join(policy.types)}",
            )
        )
    if not summary:
        return Err(precondition("summary is required for conventional commits"))

    scope = options.scope.strip()
    if policy.require_scope and not scope:
        return Err(precondition("scope is required by commits.require_scope"))
    if scope and policy.scopes and scope not in policy.scopes:
        return Err(
            precondition(
                f"commit scope {scope} is not allowed",
                hint=f"use one of: {', '.join(policy.scopes)}",
            )
        )

    header = f"{commit_type}({scope})" if scope else commit_type
    if options.breaking:
        header += "!"
    return Ok(_with_body(f"{header}: {summary}", options.body))


class CommitService:
    def __init__(self, *, repo: GitAdapter, config: Config, console: ConsoleProtocol) -> None:
        self._repo = repo
        self._config = config
        self._console = console

    def run(self, options: CommitOptions) -> Result[CommitResult, WorkflowError]:
        if options.all:
            self._console.step("staging all changes")
            added = self._repo.add_all()
            if isinstance(added, Err):
                return Err(from_git_error(added.error))

        staged = self._repo.has_staged_changes()
        if isinstance(staged, Err):
            return Err(from_git_error(staged.error))
        if not staged.value:
            return Err(
                precondition("no staged changes to commit", hint="stage files or pass --all")
            )

        message = build_commit_message(self._config.commits, options)
        if isinstance(message, Err):
            return message

        committed = self._repo.commit(message.value)
        if isinstance(committed, Err):
            return Err(from_git_error(committed.error))
        return Ok(CommitResult(message=message.value))
