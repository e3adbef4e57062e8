"""Branch sync: bring the current branch up to date with its base.

The sync runs as a linear state machine::

    idle -> verified -> base_updated -> integrated -> pushed

Each handler performs one transition and returns the next session or an
error. Nothing is rolled back: a failure while updating the base branch can
leave the working copy on the base branch, and a rebase conflict is left for
the user to resolve or abort.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from typing import Literal

from gitflow.core.config import SYNC_STRATEGIES, Config
from gitflow.core.result import Err, Ok, Result
from gitflow.git.models import GitError
from gitflow.git.repository import GitAdapter
from gitflow.output.console import ConsoleProtocol
from gitflow.services.errors import WorkflowError, from_git_error, precondition

__all__ = [
    "SyncOptions",
    "SyncPlan",
    "SyncService",
    "SyncState",
]

SyncState = Literal["idle", "verified", "base_updated", "integrated", "pushed"]


@dataclass(frozen=True, slots=True)
class SyncOptions:
    remote: str = "origin"
    strategy: str | None = None
    auto_push: bool | None = None
    force_push: bool | None = None


@dataclass(frozen=True, slots=True)
class SyncPlan:
    """Sync progress; the final value is the sync result."""

    base_branch: str
    current_branch: str = ""
    strategy: str = "rebase"
    remote: str = "origin"
    auto_push: bool = True
    force_push: bool = True
    state: SyncState = "idle"
    pushed: bool = False
    force_pushed: bool = False


@dataclass(frozen=True, slots=True)
class _Finish:
    pass


_FINISH = _Finish()

StepOutcome = SyncPlan | _Finish
StepHandler = Callable[[SyncPlan], Result[StepOutcome, WorkflowError]]


def _run_state_machine(
    initial: SyncPlan, handlers: Mapping[SyncState, StepHandler]
) -> Result[SyncPlan, WorkflowError]:
    current = initial
    while True:
        handler = handlers.get(current.state)
        if handler is None:
            return Err(WorkflowError(kind="config", message=f"unknown sync state: {current.state}"))

        outcome = handler(current)
        if isinstance(outcome, Err):
            return outcome
        if isinstance(outcome.value, _Finish):
            return Ok(current)
        current = outcome.value


class SyncService:
    def __init__(self, *, repo: GitAdapter, config: Config, console: ConsoleProtocol) -> None:
        self._repo = repo
        self._config = config
        self._console = console

    def run(self, options: SyncOptions) -> Result[SyncPlan, WorkflowError]:
        policy = self._config.workflows.sync
        initial = SyncPlan(
            base_branch=self._config.base_branch,
            strategy=(options.strategy or policy.strategy or "rebase").strip().lower(),
            remote=options.remote or "origin",
            auto_push=policy.auto_push if options.auto_push is None else options.auto_push,
            force_push=policy.force_push if options.force_push is None else options.force_push,
        )
        handlers: dict[SyncState, StepHandler] = {
            "idle": self._verify,
            "verified": self._update_base,
            "base_updated": self._integrate,
            "integrated": self._push,
            "pushed": lambda _: Ok(_FINISH),
        }
        return _run_state_machine(initial, handlers)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def _verify(self, plan: SyncPlan) -> Result[StepOutcome, WorkflowError]:
        dirty = self._repo.is_dirty()
        if isinstance(dirty, Err):
            return Err(from_git_error(dirty.error))
        if dirty.value:
            return Err(
                precondition(
                    "working tree is not clean",
                    hint="commit or stash your changes before syncing",
                )
            )

        current = self._repo.current_branch()
        if isinstance(current, Err):
            return Err(from_git_error(current.error))
        if current.value.strip() == plan.base_branch.strip():
            return Err(precondition(f"already on base branch {plan.base_branch}"))

        has_remote = self._repo.has_remote(plan.remote)
        if isinstance(has_remote, Err):
            return Err(from_git_error(has_remote.error))
        if not has_remote.value:
            return Err(precondition(f"remote {plan.remote} not found"))

        if plan.strategy not in SYNC_STRATEGIES:
            return Err(
                WorkflowError(
                    kind="config",
                    message=f"unsupported sync strategy: {plan.strategy}",
                    hint="use rebase or merge",
                )
            )

        return Ok(replace(plan, current_branch=current.value.strip(), state="verified"))

    def _update_base(self, plan: SyncPlan) -> Result[StepOutcome, WorkflowError]:
        steps: list[tuple[str, Callable[[], Result[None, GitError]]]] = [
            (f"fetching {plan.remote}", lambda: self._repo.fetch(plan.remote)),
            (f"checking out {plan.base_branch}", lambda: self._repo.checkout(plan.base_branch)),
            (
                f"pulling {plan.remote}/{plan.base_branch}",
                lambda: self._repo.pull(plan.remote, plan.base_branch),
            ),
            (
                f"checking out {plan.current_branch}",
                lambda: self._repo.checkout(plan.current_branch),
            ),
        ]
        for label, action in steps:
            self._console.step(label)
            result = action()
            if isinstance(result, Err):
                return Err(from_git_error(result.error))
        return Ok(replace(plan, state="base_updated"))

    def _integrate(self, plan: SyncPlan) -> Result[StepOutcome, WorkflowError]:
        self._console.step(f"{plan.strategy} onto {plan.base_branch}")
        if plan.strategy == "rebase":
            result = self._repo.rebase(plan.base_branch)
            hint = "resolve the conflicts and run git rebase --continue, or git rebase --abort"
        else:
            result = self._repo.merge(plan.base_branch)
            hint = "resolve the conflicts and commit, or run git merge --abort"
        if isinstance(result, Err):
            return Err(from_git_error(result.error, hint=hint))
        return Ok(replace(plan, state="integrated"))

    def _push(self, plan: SyncPlan) -> Result[StepOutcome, WorkflowError]:
        if not plan.auto_push:
            return Ok(replace(plan, state="pushed"))

        use_force = plan.strategy == "rebase" and plan.force_push
        self._console.step(
            f"pushing {plan.current_branch}" + (" (force-with-lease)" if use_force else "")
        )
        result = self._repo.push(plan.remote, plan.current_branch, use_force)
        if isinstance(result, Err):
            return Err(from_git_error(result.error))
        return Ok(replace(plan, state="pushed", pushed=True, force_pushed=use_force))
