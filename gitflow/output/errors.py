"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitflow.core.errors import ErrorCode
from gitflow.output.console import Style
from gitflow.services.errors import WorkflowError

if TYPE_CHECKING:
    from gitflow.output.console import ConsoleProtocol

__all__ = ["print_workflow_error", "workflow_error_exit_code"]


def print_workflow_error(error: WorkflowError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def workflow_error_exit_code(error: WorkflowError) -> int:
    match error.kind:
        case "precondition":
            return int(ErrorCode.USER_ERROR)
        case "config":
            return int(ErrorCode.CONFIG_ERROR)
        case "provider":
            return int(ErrorCode.PROVIDER_ERROR)
        case "git":
            return int(ErrorCode.GIT_ERROR)
    return int(ErrorCode.USER_ERROR)
