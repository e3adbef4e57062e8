"""Shared helpers for CLI commands."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Literal, TypeVar

import typer

from gitflow.core.result import Err, Ok, Result
from gitflow.output.errors import print_workflow_error, workflow_error_exit_code
from gitflow.services.errors import WorkflowError

if TYPE_CHECKING:
    from gitflow.cli.context import CLIContext, GlobalFlags
    from gitflow.output.console import ConsoleProtocol


T = TypeVar("T")

OutputFormat = Literal["text", "json", "env"]


def global_flags(ctx: typer.Context) -> GlobalFlags | None:
    """Flags stored on the root context by the app callback."""
    from gitflow.cli.context import GlobalFlags

    obj: object = ctx.find_root().obj
    return obj if isinstance(obj, GlobalFlags) else None


def unwrap_or_exit(result: Result[T, WorkflowError], ctx: CLIContext) -> T:
    """Return the Ok value, or print the workflow error and exit with its code."""
    if isinstance(result, Err):
        print_workflow_error(result.error, ctx.console)
        raise typer.Exit(code=workflow_error_exit_code(result.error))
    return result.value


def parse_output_format(json_flag: bool, env_flag: bool) -> Result[OutputFormat, WorkflowError]:
    if json_flag and env_flag:
        return Err(WorkflowError(kind="config", message="choose only one of --json or --env"))
    if json_flag:
        return Ok("json")
    if env_flag:
        return Ok("env")
    return Ok("text")


def escape_env_value(value: str) -> str:
    return value.replace("\n", "\\n")


def emit_json(console: ConsoleProtocol, payload: object) -> None:
    console.raw(json.dumps(payload))


def emit_env(console: ConsoleProtocol, pairs: list[tuple[str, str]]) -> None:
    for key, value in pairs:
        console.raw(f"{key}={escape_env_value(value)}")
