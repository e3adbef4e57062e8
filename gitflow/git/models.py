"""Value types produced by the git adapter."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["BranchSummary", "CommitRecord", "GitError"]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed (e.g. "rebase main")
        message: Error text reported by git
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1

    def __str__(self) -> str:
        return f"git {self.command} failed: {self.message}"


@dataclass(frozen=True, slots=True)
class CommitRecord:
    """One commit between a base ref (exclusive) and HEAD (inclusive).

    ``date`` is the committer date formatted ``YYYY-MM-DD``.
    """

    hash: str
    subject: str
    body: str = ""
    date: str = ""


@dataclass(frozen=True, slots=True)
class BranchSummary:
    """A local branch, measured against a base branch.

    ``age_days`` is None when the tip commit date could not be read.
    """

    name: str
    is_current: bool = False
    age_days: int | None = 0
    ahead: int = 0
    behind: int = 0
    last_commit_subject: str = ""
    author: str = ""
