"""Branch cleanup: classify local branches and delete the safe ones.

``plan_cleanup`` is a pure decision function over branch summaries.
``CleanupService`` gathers the inputs from git, asks for confirmation and
performs the deletions.

Deletion is not transactional: if the third of five deletions fails, the first
two stay deleted and the error is reported.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Sequence
from dataclasses import dataclass
from typing import Literal

from gitflow.core.config import Config
from gitflow.core.result import Err, Ok, Result
from gitflow.git.models import BranchSummary
from gitflow.git.repository import GitAdapter
from gitflow.output.console import ConsoleProtocol
from gitflow.services.errors import WorkflowError, from_git_error, precondition

__all__ = [
    "CleanupCandidate",
    "CleanupOptions",
    "CleanupReason",
    "CleanupResult",
    "CleanupService",
    "ConfirmFn",
    "deletion_plan",
    "plan_cleanup",
]

CleanupReason = Literal[
    "protected",
    "current",
    "merged",
    "not merged",
    "stale",
    "recent",
    "age check failed",
]


@dataclass(frozen=True, slots=True)
class CleanupCandidate:
    """One local branch and the cleanup decision taken for it.

    ``will_delete`` is never True for ``protected`` or ``current``.
    """

    name: str
    reason: CleanupReason
    age_days: int | None = None
    ahead: int = 0
    behind: int = 0
    will_delete: bool = False
    remote_also: bool = False


def _classify(
    branch: BranchSummary,
    *,
    merged: Collection[str],
    current_branch: str,
    protected: Collection[str],
    age_threshold_days: int,
    merged_only: bool,
) -> tuple[CleanupReason, bool]:
    if branch.name in protected:
        return "protected", False
    if branch.name == current_branch:
        return "current", False
    if branch.name in merged:
        return "merged", True
    if merged_only:
        return "not merged", False
    if age_threshold_days <= 0:
        return "recent", False
    if branch.age_days is None:
        return "age check failed", False
    if branch.age_days >= age_threshold_days:
        return "stale", True
    return "recent", False


def _sort_key(candidate: CleanupCandidate) -> tuple[str, int, str]:
    age = candidate.age_days if candidate.age_days is not None else -1
    return (candidate.reason, -age, candidate.name)


def plan_cleanup(
    branches: Sequence[BranchSummary],
    merged: Collection[str],
    current_branch: str,
    base_branch: str,
    protected: Collection[str],
    age_threshold_days: int,
    merged_only: bool,
    *,
    delete_remote: bool = False,
) -> list[CleanupCandidate]:
    """Classify every branch; the first matching rule wins.

    Rules, in order: protected (including the base branch), current, merged,
    not merged (when ``merged_only``), stale (age at or past the threshold),
    recent. A threshold of 0 or less disables the age test.

    Returns all candidates sorted by ``(reason, age desc, name)``.
    """
    protected_set = {*protected, base_branch}
    merged_set = set(merged)

    candidates: list[CleanupCandidate] = []
    for branch in branches:
        reason, will_delete = _classify(
            branch,
            merged=merged_set,
            current_branch=current_branch,
            protected=protected_set,
            age_threshold_days=age_threshold_days,
            merged_only=merged_only,
        )
        candidates.append(
            CleanupCandidate(
                name=branch.name,
                reason=reason,
                age_days=branch.age_days,
                ahead=branch.ahead,
                behind=branch.behind,
                will_delete=will_delete,
                remote_also=will_delete and delete_remote,
            )
        )
    return sorted(candidates, key=_sort_key)


def deletion_plan(
    candidates: Sequence[CleanupCandidate],
    selection: Collection[str] | None = None,
) -> list[CleanupCandidate]:
    """Deletable candidates, optionally narrowed to an explicit selection.

    Names in ``selection`` that are not deletable are ignored.
    """
    plan = [c for c in candidates if c.will_delete]
    if selection is not None:
        chosen = set(selection)
        plan = [c for c in plan if c.name in chosen]
    return plan


# -----------------------------------------------------------------------------
# Service
# -----------------------------------------------------------------------------

ConfirmFn = Callable[[Sequence[CleanupCandidate], bool], bool]
"""Called with the deletion plan and whether remote refs go too; True proceeds."""


@dataclass(frozen=True, slots=True)
class CleanupOptions:
    remote: str = "origin"
    yes: bool = False
    all: bool = False
    dry_run: bool = False
    age_threshold_days: int | None = None
    merged_only: bool | None = None
    delete_remote: bool = False
    selection: tuple[str, ...] | None = None


@dataclass(frozen=True, slots=True)
class CleanupResult:
    base_branch: str
    current_branch: str
    candidates: tuple[CleanupCandidate, ...]
    plan: tuple[CleanupCandidate, ...] = ()
    deleted: tuple[str, ...] = ()
    remote_deleted: tuple[str, ...] = ()
    confirmed: bool = False


def _decline(plan: Sequence[CleanupCandidate], delete_remote: bool) -> bool:
    return False


class CleanupService:
    """Delete merged (and optionally stale) local branches.

    Without ``--yes`` the injected ``confirm`` callable decides; the default
    declines, so a non-interactive caller can never delete by accident.
    """

    def __init__(
        self,
        *,
        repo: GitAdapter,
        config: Config,
        console: ConsoleProtocol,
        confirm: ConfirmFn = _decline,
    ) -> None:
        self._repo = repo
        self._config = config
        self._console = console
        self._confirm = confirm

    def plan(self, options: CleanupOptions) -> Result[CleanupResult, WorkflowError]:
        """Check preconditions and compute the candidates without deleting."""
        remote = options.remote or "origin"

        dirty = self._repo.is_dirty()
        if isinstance(dirty, Err):
            return Err(from_git_error(dirty.error))
        if dirty.value:
            return Err(
                precondition(
                    "working tree is not clean",
                    hint="commit or stash your changes before cleaning up",
                )
            )

        current = self._repo.current_branch()
        if isinstance(current, Err):
            return Err(from_git_error(current.error))

        has_remote = self._repo.has_remote(remote)
        if isinstance(has_remote, Err):
            return Err(from_git_error(has_remote.error))
        if not has_remote.value:
            return Err(precondition(f"remote {remote} not found"))

        policy = self._config.workflows.cleanup
        base = self._config.base_branch
        threshold = (
            options.age_threshold_days
            if options.age_threshold_days is not None
            else policy.age_threshold_days
        )
        merged_only = policy.merged_only if options.merged_only is None else options.merged_only
        if options.all:
            merged_only = False

        self._console.step(f"listing branches merged into {base}")
        merged = self._repo.merged_branches(base)
        if isinstance(merged, Err):
            return Err(from_git_error(merged.error))

        branches = self._repo.list_local_branches(base)
        if isinstance(branches, Err):
            return Err(from_git_error(branches.error))

        candidates = plan_cleanup(
            branches.value,
            merged.value,
            current.value,
            base,
            policy.protected_branches,
            threshold,
            merged_only,
            delete_remote=options.delete_remote,
        )
        plan = deletion_plan(candidates, options.selection)
        return Ok(
            CleanupResult(
                base_branch=base,
                current_branch=current.value,
                candidates=tuple(candidates),
                plan=tuple(plan),
            )
        )

    def run(self, options: CleanupOptions) -> Result[CleanupResult, WorkflowError]:
        planned = self.plan(options)
        if isinstance(planned, Err):
            return planned
        return self.execute(planned.value, options)

    def execute(
        self, result: CleanupResult, options: CleanupOptions
    ) -> Result[CleanupResult, WorkflowError]:
        """Confirm and delete the branches in an already computed ``result.plan``.

        Git is not consulted again, so exactly the planned branches are deleted.
        """
        if not result.plan or options.dry_run:
            return Ok(result)

        if not options.yes and not self._confirm(result.plan, options.delete_remote):
            return Ok(result)

        remote = options.remote or "origin"
        deleted: list[str] = []
        remote_deleted: list[str] = []
        for candidate in result.plan:
            self._console.step(f"deleting {candidate.name}")
            local = self._repo.delete_branch(candidate.name, False)
            if isinstance(local, Err):
                return Err(
                    from_git_error(
                        local.error,
                        hint=_partial_hint(deleted),
                    )
                )
            deleted.append(candidate.name)

            if candidate.remote_also:
                self._console.step(f"deleting {remote}/{candidate.name}")
                pushed = self._repo.delete_remote_branch(remote, candidate.name)
                if isinstance(pushed, Err):
                    return Err(from_git_error(pushed.error, hint=_partial_hint(deleted)))
                remote_deleted.append(candidate.name)

        return Ok(
            CleanupResult(
                base_branch=result.base_branch,
                current_branch=result.current_branch,
                candidates=result.candidates,
                plan=result.plan,
                deleted=tuple(deleted),
                remote_deleted=tuple(remote_deleted),
                confirmed=True,
            )
        )


def _partial_hint(deleted: Sequence[str]) -> str | None:
    if not deleted:
        return None
    return f"already deleted: {', '.join(deleted)}"
