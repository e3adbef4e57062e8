"""Start a new work branch from the up-to-date base branch."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from gitflow.core.config import Config
from gitflow.core.result import Err, Ok, Result
from gitflow.git.repository import GitAdapter
from gitflow.output.console import ConsoleProtocol
from gitflow.services.errors import WorkflowError, from_git_error, precondition

__all__ = [
    "BRANCH_KINDS",
    "BranchKind",
    "StartOptions",
    "StartResult",
    "StartService",
    "branch_prefix",
    "slugify",
]

BranchKind = Literal["feature", "bugfix", "hotfix"]
BRANCH_KINDS: tuple[str, ...] = ("feature", "bugfix", "hotfix")

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Branch-safe form of a free-text name: ``"Fix Login_page!"`` -> ``fix-login-page``."""
    text = name.strip().lower().replace("_", " ")
    text = _NON_SLUG.sub(" ", text)
    slug = "-".join(text.split())
    return slug or "work"


def branch_prefix(config: Config, kind: str) -> str:
    match kind:
        case "bugfix":
            return config.branches.bugfix_prefix or "bugfix/"
        case "hotfix":
            return config.branches.hotfix_prefix or "hotfix/"
        case _:
            return config.branches.feature_prefix or "feature/"


@dataclass(frozen=True, slots=True)
class StartOptions:
    kind: str
    name: str
    remote: str = "origin"
    auto_push: bool | None = None


@dataclass(frozen=True, slots=True)
class StartResult:
    base_branch: str
    new_branch: str
    pushed: bool


class StartService:
    def __init__(self, *, repo: GitAdapter, config: Config, console: ConsoleProtocol) -> None:
        self._repo = repo
        self._config = config
        self._console = console

    def run(self, options: StartOptions) -> Result[StartResult, WorkflowError]:
        if options.kind not in BRANCH_KINDS:
            return Err(
                precondition(
                    f"unknown branch kind: {options.kind}",
                    hint=f"use one of: {', '.join(BRANCH_KINDS)}",
                )
            )
        if not options.name.strip():
            return Err(precondition("branch name is required"))

        remote = options.remote or "origin"
        policy = self._config.workflows.start
        base = self._config.base_branch

        dirty = self._repo.is_dirty()
        if isinstance(dirty, Err):
            return Err(from_git_error(dirty.error))
        if dirty.value:
            return Err(
                precondition(
                    "working tree is not clean",
                    hint="commit or stash your changes before starting a branch",
                )
            )

        has_remote = self._repo.has_remote(remote)
        if isinstance(has_remote, Err):
            return Err(from_git_error(has_remote.error))
        if not has_remote.value:
            return Err(precondition(f"remote {remote} not found"))

        if policy.fetch_first:
            self._console.step(f"fetching {remote}")
            fetched = self._repo.fetch(remote)
            if isinstance(fetched, Err):
                return Err(from_git_error(fetched.error))

        self._console.step(f"updating {base}")
        checked_out = self._repo.checkout(base)
        if isinstance(checked_out, Err):
            return Err(from_git_error(checked_out.error))
        pulled = self._repo.pull(remote, base)
        if isinstance(pulled, Err):
            return Err(from_git_error(pulled.error))

        new_branch = branch_prefix(self._config, options.kind) + slugify(options.name)
        created = self._repo.checkout_new(new_branch)
        if isinstance(created, Err):
            return Err(from_git_error(created.error))

        auto_push = policy.auto_push if options.auto_push is None else options.auto_push
        if auto_push:
            self._console.step(f"pushing {new_branch} to {remote}")
            pushed = self._repo.push_set_upstream(remote, new_branch)
            if isinstance(pushed, Err):
                return Err(from_git_error(pushed.error))

        return Ok(StartResult(base_branch=base, new_branch=new_branch, pushed=auto_push))
