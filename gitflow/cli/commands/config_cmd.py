from __future__ import annotations

import typer

from gitflow.cli.commands._helpers import global_flags
from gitflow.cli.context import build_context
from gitflow.core.config import render_config, validate_strict
from gitflow.core.errors import ErrorCode
from gitflow.output.console import Style


config_app = typer.Typer(
    add_completion=False, no_args_is_help=True, help="Show or validate the configuration."
)


@config_app.command("show")
def show(app_ctx: typer.Context) -> None:
    """Print the effective configuration and where it came from."""
    ctx = build_context(global_flags(app_ctx))
    source = str(ctx.config_path) if ctx.config_path is not None else "built-in defaults"
    ctx.console.print(f"# source: {source}", Style.DIM)
    ctx.console.raw(render_config(ctx.config).rstrip("\n"))


@config_app.command("validate")
def validate(app_ctx: typer.Context) -> None:
    """Check the configuration file strictly, reporting every problem."""
    ctx = build_context(global_flags(app_ctx))
    if ctx.config_path is None:
        ctx.console.info("no .gitflow.toml found; built-in defaults are in use")
        return

    problems = validate_strict(ctx.config)
    if problems:
        for problem in problems:
            ctx.console.error(problem)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))
    ctx.console.success(f"{ctx.config_path} is valid")
