"""Shared fixtures: an in-memory git adapter for workflow tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from gitflow.core.result import Err, Ok, Result
from gitflow.git.models import BranchSummary, CommitRecord, GitError
from gitflow.output.console import MockConsole


def _calls() -> list[tuple[str, ...]]:
    return []


@dataclass
class FakeGitAdapter:
    """GitAdapter backed by plain attributes.

    Every mutating call is recorded in ``calls``; ``fail`` maps a method name
    to the error message that method should return.
    """

    root: Path = Path("/repo")
    branch: str = "feature/login"
    dirty: bool = False
    remotes: set[str] = field(default_factory=lambda: {"origin"})
    branches: list[BranchSummary] = field(default_factory=list)
    merged: list[str] = field(default_factory=list)
    ages: dict[str, int] = field(default_factory=dict)
    tags: list[str] = field(default_factory=list)
    commits: list[CommitRecord] = field(default_factory=list)
    staged: bool = True
    fail: dict[str, str] = field(default_factory=dict)
    calls: list[tuple[str, ...]] = field(default_factory=_calls)

    def _record(self, name: str, *args: str) -> Result[None, GitError]:
        self.calls.append((name, *args))
        if name in self.fail:
            return Err(GitError(command=name, message=self.fail[name]))
        return Ok(None)

    def _check(self, name: str) -> GitError | None:
        if name in self.fail:
            return GitError(command=name, message=self.fail[name])
        return None

    def toplevel(self) -> Result[Path, GitError]:
        error = self._check("toplevel")
        return Err(error) if error else Ok(self.root)

    def current_branch(self) -> Result[str, GitError]:
        error = self._check("current_branch")
        return Err(error) if error else Ok(self.branch)

    def is_dirty(self) -> Result[bool, GitError]:
        error = self._check("is_dirty")
        return Err(error) if error else Ok(self.dirty)

    def has_remote(self, remote: str) -> Result[bool, GitError]:
        return Ok(remote in self.remotes)

    def fetch(self, remote: str) -> Result[None, GitError]:
        return self._record("fetch", remote)

    def checkout(self, branch: str) -> Result[None, GitError]:
        result = self._record("checkout", branch)
        if isinstance(result, Ok):
            self.branch = branch
        return result

    def checkout_new(self, branch: str) -> Result[None, GitError]:
        result = self._record("checkout_new", branch)
        if isinstance(result, Ok):
            self.branch = branch
        return result

    def pull(self, remote: str, branch: str) -> Result[None, GitError]:
        return self._record("pull", remote, branch)

    def rebase(self, target: str) -> Result[None, GitError]:
        return self._record("rebase", target)

    def merge(self, target: str) -> Result[None, GitError]:
        return self._record("merge", target)

    def push(self, remote: str, branch: str, force_with_lease: bool) -> Result[None, GitError]:
        return self._record("push", remote, branch, "force" if force_with_lease else "plain")

    def push_set_upstream(self, remote: str, branch: str) -> Result[None, GitError]:
        return self._record("push_set_upstream", remote, branch)

    def list_local_branches(self, base: str) -> Result[list[BranchSummary], GitError]:
        error = self._check("list_local_branches")
        return Err(error) if error else Ok(list(self.branches))

    def merged_branches(self, base: str) -> Result[list[str], GitError]:
        error = self._check("merged_branches")
        return Err(error) if error else Ok([b for b in self.merged if b != base])

    def branch_age_days(self, branch: str) -> Result[int, GitError]:
        if branch not in self.ages:
            return Err(GitError(command="log", message=f"unknown branch {branch}"))
        return Ok(self.ages[branch])

    def delete_branch(self, branch: str, force: bool) -> Result[None, GitError]:
        return self._record("delete_branch", branch, "force" if force else "safe")

    def delete_remote_branch(self, remote: str, branch: str) -> Result[None, GitError]:
        return self._record("delete_remote_branch", remote, branch)

    def list_tags(self) -> Result[list[str], GitError]:
        error = self._check("list_tags")
        return Err(error) if error else Ok(list(self.tags))

    def commits_between(self, from_ref: str, to_ref: str) -> Result[list[CommitRecord], GitError]:
        error = self._check("commits_between")
        return Err(error) if error else Ok(list(self.commits))

    def tag_exists(self, tag: str) -> Result[bool, GitError]:
        return Ok(tag in self.tags)

    def create_annotated_tag(self, tag: str, message: str) -> Result[None, GitError]:
        if tag in self.tags:
            self.calls.append(("create_annotated_tag", tag))
            return Err(GitError(command=f"tag {tag}", message="tag already exists"))
        result = self._record("create_annotated_tag", tag)
        if isinstance(result, Ok):
            self.tags.append(tag)
        return result

    def add_all(self) -> Result[None, GitError]:
        result = self._record("add_all")
        if isinstance(result, Ok):
            self.staged = True
        return result

    def has_staged_changes(self) -> Result[bool, GitError]:
        return Ok(self.staged)

    def commit(self, message: str) -> Result[None, GitError]:
        return self._record("commit", message)

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def fake_git() -> FakeGitAdapter:
    return FakeGitAdapter()


@pytest.fixture
def console() -> MockConsole:
    return MockConsole()
