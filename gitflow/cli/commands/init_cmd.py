from __future__ import annotations

from pathlib import Path

import typer

from gitflow.cli.commands._helpers import global_flags
from gitflow.cli.context import resolve_repo_root
from gitflow.core.errors import ErrorCode
from gitflow.core.result import Err
from gitflow.output.console import RichConsole, Style
from gitflow.output.errors import print_workflow_error, workflow_error_exit_code
from gitflow.services.init import init_config


def init(
    app_ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file."),
) -> None:
    """Write a default .gitflow.toml at the repository root."""
    flags = global_flags(app_ctx)
    console = RichConsole(color=not (flags and flags.no_color))
    root = resolve_repo_root(Path.cwd())

    result = init_config(root, force=force)
    if isinstance(result, Err):
        print_workflow_error(result.error, console)
        raise typer.Exit(code=workflow_error_exit_code(result.error))

    console.success(f"wrote {result.value}")
    console.print("Edit the file to configure branches, workflows and the provider.", Style.DIM)
    raise typer.Exit(code=int(ErrorCode.OK))
