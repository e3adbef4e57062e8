"""Git repository adapter.

``Repository`` issues individual git subcommands against one working copy and
parses their text output. Every operation returns a Result; workflows never see
raw process output.

``GitAdapter`` is the capability surface the workflows depend on, so tests can
substitute an in-memory fake.

Usage:
    repo = Repository(Path("/path/to/repo"))

    match repo.is_dirty():
        case Ok(True):
            print("working tree has changes")
        case Ok(False):
            print("clean")
        case Err(e):
            print(f"git failed: {e.message}")
"""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from gitflow.core.result import Err, Ok, Result
from gitflow.git.models import BranchSummary, CommitRecord, GitError
from gitflow.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0
_NETWORK_COMMANDS = frozenset({"fetch", "pull", "push", "clone"})

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_SECONDS_PER_DAY = 24 * 60 * 60

__all__ = ["GitAdapter", "Repository"]


class GitAdapter(Protocol):
    """Version-control capabilities consumed by the workflows."""

    def current_branch(self) -> Result[str, GitError]: ...
    def is_dirty(self) -> Result[bool, GitError]: ...
    def fetch(self, remote: str) -> Result[None, GitError]: ...
    def checkout(self, branch: str) -> Result[None, GitError]: ...
    def checkout_new(self, branch: str) -> Result[None, GitError]: ...
    def pull(self, remote: str, branch: str) -> Result[None, GitError]: ...
    def rebase(self, target: str) -> Result[None, GitError]: ...
    def merge(self, target: str) -> Result[None, GitError]: ...
    def push(self, remote: str, branch: str, force_with_lease: bool) -> Result[None, GitError]: ...
    def push_set_upstream(self, remote: str, branch: str) -> Result[None, GitError]: ...
    def has_remote(self, remote: str) -> Result[bool, GitError]: ...
    def list_local_branches(self, base: str) -> Result[list[BranchSummary], GitError]: ...
    def merged_branches(self, base: str) -> Result[list[str], GitError]: ...
    def branch_age_days(self, branch: str) -> Result[int, GitError]: ...
    def delete_branch(self, branch: str, force: bool) -> Result[None, GitError]: ...
    def delete_remote_branch(self, remote: str, branch: str) -> Result[None, GitError]: ...
    def list_tags(self) -> Result[list[str], GitError]: ...
    def commits_between(self, from_ref: str, to_ref: str) -> Result[list[CommitRecord], GitError]: ...
    def tag_exists(self, tag: str) -> Result[bool, GitError]: ...
    def create_annotated_tag(self, tag: str, message: str) -> Result[None, GitError]: ...
    def add_all(self) -> Result[None, GitError]: ...
    def has_staged_changes(self) -> Result[bool, GitError]: ...
    def commit(self, message: str) -> Result[None, GitError]: ...
    def toplevel(self) -> Result[Path, GitError]: ...


class Repository:
    """Git repository abstraction backed by the ``git`` executable.

    Attributes:
        path: Path to the working copy (any directory inside it works)
    """

    def __init__(self, path: Path, *, clock: Callable[[], float] = time.time) -> None:
        self.path = path
        self._clock = clock

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    def toplevel(self) -> Result[Path, GitError]:
        return self._git(["rev-parse", "--show-toplevel"]).map(lambda out: Path(out.strip()))

    def current_branch(self) -> Result[str, GitError]:
        """Checked-out branch name ("HEAD" when detached)."""
        result = self._git(["symbolic-ref", "--short", "HEAD"])
        if isinstance(result, Ok) and result.value.strip():
            return Ok(result.value.strip())
        return self._git(["rev-parse", "--abbrev-ref", "HEAD"]).map(str.strip)

    def is_dirty(self) -> Result[bool, GitError]:
        """True if the working tree has staged, unstaged or untracked changes."""
        return self._git(["status", "--porcelain", "--untracked-files=all"]).map(
            lambda out: out.strip() != ""
        )

    def has_remote(self, remote: str) -> Result[bool, GitError]:
        return self._git(["remote"]).map(
            lambda out: remote in {line.strip() for line in out.splitlines()}
        )

    def has_staged_changes(self) -> Result[bool, GitError]:
        result = self._git(["diff", "--cached", "--quiet"])
        if isinstance(result, Ok):
            return Ok(False)
        if result.error.returncode == 1:
            return Ok(True)
        return result

    # -------------------------------------------------------------------------
    # Branches
    # -------------------------------------------------------------------------

    def list_local_branches(self, base: str) -> Result[list[BranchSummary], GitError]:
        """Summarize every local branch relative to ``base``.

        Age and ahead/behind lookups that fail are defaulted (age None,
        counts 0) instead of failing the whole listing.
        """
        base = base.strip() or "main"

        current = self.current_branch()
        if isinstance(current, Err):
            return current

        fmt = "%(refname:short)%1f%(authorname)%1f%(subject)"
        result = self._git(["for-each-ref", f"--format={fmt}", "refs/heads/"])
        if isinstance(result, Err):
            return result

        branches: list[BranchSummary] = []
        for line in result.value.splitlines():
            parts = line.split(_FIELD_SEP)
            if len(parts) != 3 or not parts[0].strip():
                continue
            name, author, subject = (p.strip() for p in parts)

            age = self.branch_age_days(name)
            ahead, behind = 0, 0
            if name != base:
                counts = self._ahead_behind(name, base)
                if isinstance(counts, Ok):
                    ahead, behind = counts.value

            branches.append(
                BranchSummary(
                    name=name,
                    is_current=name == current.value,
                    age_days=age.value if isinstance(age, Ok) else None,
                    ahead=ahead,
                    behind=behind,
                    last_commit_subject=subject,
                    author=author,
                )
            )
        return Ok(branches)

    def merged_branches(self, base: str) -> Result[list[str], GitError]:
        """Local branches whose tip is an ancestor of ``base`` (base excluded)."""
        result = self._git(["branch", "--merged", base, "--format=%(refname:short)"])
        if isinstance(result, Err):
            return result
        names = [ln.strip() for ln in result.value.splitlines()]
        return Ok([n for n in names if n and n != base])

    def branch_age_days(self, branch: str) -> Result[int, GitError]:
        """Whole days since the branch tip was committed (never negative)."""
        result = self._git(["log", "-1", "--format=%ct", branch])
        if isinstance(result, Err):
            return result
        try:
            committed_at = int(result.value.strip())
        except ValueError:
            return Err(
                GitError(
                    command=f"log -1 {branch}",
                    message=f"unexpected commit timestamp: {result.value.strip()!r}",
                )
            )
        age_seconds = self._clock() - committed_at
        return Ok(max(0, int(age_seconds // _SECONDS_PER_DAY)))

    def _ahead_behind(self, branch: str, base: str) -> Result[tuple[int, int], GitError]:
        result = self._git(["rev-list", "--left-right", "--count", f"{base}...{branch}"])
        if isinstance(result, Err):
            return result
        fields = result.value.split()
        if len(fields) != 2 or not all(f.isdigit() for f in fields):
            return Err(
                GitError(
                    command="rev-list --left-right",
                    message=f"unexpected rev-list output: {result.value.strip()!r}",
                )
            )
        behind, ahead = int(fields[0]), int(fields[1])
        return Ok((ahead, behind))

    def checkout(self, branch: str) -> Result[None, GitError]:
        return self._git_unit(["checkout", branch])

    def checkout_new(self, branch: str) -> Result[None, GitError]:
        return self._git_unit(["checkout", "-b", branch])

    def delete_branch(self, branch: str, force: bool) -> Result[None, GitError]:
        """Delete a local branch; without ``force`` git refuses unmerged work."""
        return self._git_unit(["branch", "-D" if force else "-d", branch])

    # -------------------------------------------------------------------------
    # Remote
    # -------------------------------------------------------------------------

    def fetch(self, remote: str) -> Result[None, GitError]:
        return self._git_unit(["fetch", remote])

    def pull(self, remote: str, branch: str) -> Result[None, GitError]:
        return self._git_unit(["pull", remote, branch])

    def push(self, remote: str, branch: str, force_with_lease: bool) -> Result[None, GitError]:
        args = ["push"]
        if force_with_lease:
            args.append("--force-with-lease")
        return self._git_unit([*args, remote, branch])

    def push_set_upstream(self, remote: str, branch: str) -> Result[None, GitError]:
        return self._git_unit(["push", "-u", remote, branch])

    def delete_remote_branch(self, remote: str, branch: str) -> Result[None, GitError]:
        return self._git_unit(["push", remote, "--delete", branch])

    # -------------------------------------------------------------------------
    # Integration
    # -------------------------------------------------------------------------

    def rebase(self, target: str) -> Result[None, GitError]:
        return self._git_unit(["rebase", target])

    def merge(self, target: str) -> Result[None, GitError]:
        return self._git_unit(["merge", target])

    def add_all(self) -> Result[None, GitError]:
        return self._git_unit(["add", "-A"])

    def commit(self, message: str) -> Result[None, GitError]:
        return self._git_unit(["commit", "-m", message])

    # -------------------------------------------------------------------------
    # Tags and history
    # -------------------------------------------------------------------------

    def list_tags(self) -> Result[list[str], GitError]:
        return self._git(["tag", "--list"]).map(
            lambda out: [ln.strip() for ln in out.splitlines() if ln.strip()]
        )

    def commits_between(self, from_ref: str, to_ref: str) -> Result[list[CommitRecord], GitError]:
        """Commits reachable from ``to_ref`` but not ``from_ref``, newest first.

        An empty ``from_ref`` means the whole history of ``to_ref``.
        """
        to_ref = to_ref or "HEAD"
        rev_range = f"{from_ref}..{to_ref}" if from_ref else to_ref
        fmt = "%H%x1f%s%x1f%b%x1f%cs%x1e"
        result = self._git(["log", f"--pretty=format:{fmt}", rev_range])
        if isinstance(result, Err):
            return result
        return Ok(_parse_log(result.value))

    def tag_exists(self, tag: str) -> Result[bool, GitError]:
        result = self._git(["show-ref", "--tags", "--verify", "--quiet", f"refs/tags/{tag}"])
        if isinstance(result, Ok):
            return Ok(True)
        if result.error.returncode == 1:
            return Ok(False)
        return result

    def create_annotated_tag(self, tag: str, message: str) -> Result[None, GitError]:
        exists = self.tag_exists(tag)
        if isinstance(exists, Err):
            return exists
        if exists.value:
            return Err(GitError(command=f"tag -a {tag}", message=f"tag {tag} already exists"))
        return self._git_unit(["tag", "-a", tag, "-m", message])

    # -------------------------------------------------------------------------
    # Plumbing
    # -------------------------------------------------------------------------

    def _git(self, args: list[str]) -> Result[str, GitError]:
        """Run a git command in this repository, mapping failures to GitError."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS if command in _NETWORK_COMMANDS else _GIT_TIMEOUT_SECONDS
        )
        result = run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)
        return result.map_err(
            lambda e: GitError(
                command=" ".join(args[:2]),
                message=e.detail,
                returncode=e.returncode,
            )
        )

    def _git_unit(self, args: list[str]) -> Result[None, GitError]:
        return self._git(args).map(lambda _: None)


def _parse_log(output: str) -> list[CommitRecord]:
    """Parse ``git log`` records separated by \\x1e with \\x1f-separated fields."""
    commits: list[CommitRecord] = []
    for entry in output.split(_RECORD_SEP):
        entry = entry.strip()
        if not entry:
            continue
        parts = entry.split(_FIELD_SEP)
        if len(parts) < 4:
            continue
        commits.append(
            CommitRecord(
                hash=parts[0].strip(),
                subject=parts[1].strip(),
                body=parts[2].strip(),
                date=parts[3].strip(),
            )
        )
    return commits
