"""Read-only repository views: status and branch listing."""

from __future__ import annotations

from dataclasses import dataclass

from gitflow.core.config import Config
from gitflow.core.result import Err, Ok, Result
from gitflow.git.models import BranchSummary
from gitflow.git.repository import GitAdapter
from gitflow.services.errors import WorkflowError, from_git_error

__all__ = ["BranchListing", "RepoStatus", "get_status", "list_branches"]


@dataclass(frozen=True, slots=True)
class RepoStatus:
    branch: str
    dirty: bool


@dataclass(frozen=True, slots=True)
class BranchListing:
    base: str
    branches: tuple[BranchSummary, ...]


def get_status(repo: GitAdapter) -> Result[RepoStatus, WorkflowError]:
    branch = repo.current_branch()
    if isinstance(branch, Err):
        return Err(from_git_error(branch.error, hint="failed to determine current branch"))
    dirty = repo.is_dirty()
    if isinstance(dirty, Err):
        return Err(from_git_error(dirty.error, hint="failed to determine working tree state"))
    return Ok(RepoStatus(branch=branch.value, dirty=dirty.value))


def list_branches(
    repo: GitAdapter, config: Config, base: str | None = None
) -> Result[BranchListing, WorkflowError]:
    """Local branches with age and ahead/behind counts against ``base``."""
    base_branch = (base or "").strip() or config.base_branch
    branches = repo.list_local_branches(base_branch)
    if isinstance(branches, Err):
        return Err(from_git_error(branches.error))
    return Ok(BranchListing(base=base_branch, branches=tuple(branches.value)))
