from __future__ import annotations

import typer

from gitflow.cli.commands._helpers import global_flags, unwrap_or_exit
from gitflow.cli.context import build_context
from gitflow.core.errors import ErrorCode
from gitflow.output.console import Style
from gitflow.services.start import StartOptions, StartService


def start(
    app_ctx: typer.Context,
    name: list[str] = typer.Argument(..., help="Branch name (free text, slugified)."),
    bugfix: bool = typer.Option(False, "--bugfix", help="Use the bugfix prefix."),
    hotfix: bool = typer.Option(False, "--hotfix", help="Use the hotfix prefix."),
    remote: str = typer.Option("origin", "--remote", help="Remote name."),
    no_push: bool = typer.Option(False, "--no-push", help="Do not push the new branch."),
) -> None:
    """Start a new branch from the updated base branch."""
    if bugfix and hotfix:
        typer.echo("error: choose only one of --bugfix or --hotfix", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    ctx = build_context(global_flags(app_ctx))
    kind = "bugfix" if bugfix else "hotfix" if hotfix else "feature"
    service = StartService(repo=ctx.repo, config=ctx.config, console=ctx.console)
    out = unwrap_or_exit(
        service.run(
            StartOptions(
                kind=kind,
                name=" ".join(name),
                remote=remote,
                auto_push=False if no_push else None,
            )
        ),
        ctx,
    )

    ctx.console.header("Start branch")
    if ctx.config_path is not None:
        ctx.console.print(f"Config: {ctx.config_path}", Style.DIM)
    ctx.console.print(f"Base branch: {out.base_branch}")
    ctx.console.print(f"New branch: {out.new_branch}")
    if out.pushed:
        ctx.console.success("Remote: pushed")
    else:
        ctx.console.warning("Remote: not pushed")
