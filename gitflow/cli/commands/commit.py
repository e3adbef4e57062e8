from __future__ import annotations

import typer

from gitflow.cli.commands._helpers import global_flags, unwrap_or_exit
from gitflow.cli.context import build_context
from gitflow.services.commit import CommitOptions, CommitService


def commit(
    app_ctx: typer.Context,
    message: str = typer.Option("", "--message", "-m", help="Commit summary."),
    body: str = typer.Option("", "--body", "-b", help="Commit body."),
    type_: str = typer.Option("", "--type", "-t", help="Conventional commit type."),
    scope: str = typer.Option("", "--scope", "-s", help="Conventional commit scope."),
    breaking: bool = typer.Option(False, "--breaking", help="Mark as a breaking change."),
    all_files: bool = typer.Option(False, "--all", "-a", help="Stage all changes first."),
) -> None:
    """Create a commit, enforcing the configured commit message policy."""
    ctx = build_context(global_flags(app_ctx))
    service = CommitService(repo=ctx.repo, config=ctx.config, console=ctx.console)
    out = unwrap_or_exit(
        service.run(
            CommitOptions(
                message=message,
                body=body,
                type=type_,
                scope=scope,
                breaking=breaking,
                all=all_files,
            )
        ),
        ctx,
    )
    header = out.message.splitlines()[0] if out.message else ""
    ctx.console.success(f"committed: {header}")
