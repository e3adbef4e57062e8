"""Git operations module.

Usage:
    from gitflow.git import Repository

    repo = Repository(Path("/path/to/repo"))
    branch = repo.current_branch()
    if branch.is_ok():
        print(f"Branch: {branch.unwrap()}")
"""

from gitflow.git.models import BranchSummary, CommitRecord, GitError
from gitflow.git.repository import GitAdapter, Repository

__all__ = [
    "BranchSummary",
    "CommitRecord",
    "GitAdapter",
    "GitError",
    "Repository",
]
