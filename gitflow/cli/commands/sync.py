from __future__ import annotations

import typer

from gitflow.cli.commands._helpers import global_flags, unwrap_or_exit
from gitflow.cli.context import build_context
from gitflow.core.errors import ErrorCode
from gitflow.services.sync import SyncOptions, SyncService


def sync(
    app_ctx: typer.Context,
    merge: bool = typer.Option(False, "--merge", help="Use the merge strategy."),
    rebase: bool = typer.Option(False, "--rebase", help="Use the rebase strategy."),
    no_push: bool = typer.Option(False, "--no-push", help="Do not push after syncing."),
    force: bool = typer.Option(
        False, "--force", help="Allow force-with-lease when rebasing and pushing."
    ),
    remote: str = typer.Option("origin", "--remote", help="Remote name."),
) -> None:
    """Sync the current branch with the base branch (rebase or merge)."""
    if merge and rebase:
        typer.echo("error: choose only one of --merge or --rebase", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    ctx = build_context(global_flags(app_ctx))
    strategy = "merge" if merge else "rebase" if rebase else None
    service = SyncService(repo=ctx.repo, config=ctx.config, console=ctx.console)
    out = unwrap_or_exit(
        service.run(
            SyncOptions(
                remote=remote,
                strategy=strategy,
                auto_push=False if no_push else None,
                force_push=True if force else None,
            )
        ),
        ctx,
    )

    ctx.console.header("Sync branch")
    ctx.console.print(f"Base branch: {out.base_branch}")
    ctx.console.print(f"Current branch: {out.current_branch}")
    ctx.console.print(f"Strategy: {out.strategy}")
    if out.force_pushed:
        ctx.console.warning("Remote: pushed with force-with-lease")
    elif out.pushed:
        ctx.console.success("Remote: pushed")
    else:
        ctx.console.print("Remote: not pushed")
