from __future__ import annotations

import typer

from gitflow.cli.commands._helpers import global_flags, unwrap_or_exit
from gitflow.cli.context import build_context
from gitflow.services.status import list_branches


branch_app = typer.Typer(add_completion=False, no_args_is_help=True, help="Inspect branches.")


@branch_app.command("list")
def list_cmd(
    app_ctx: typer.Context,
    base: str | None = typer.Option(None, "--base", help="Compare against this branch."),
) -> None:
    """List local branches with age and ahead/behind counts."""
    ctx = build_context(global_flags(app_ctx))
    listing = unwrap_or_exit(list_branches(ctx.repo, ctx.config, base), ctx)

    if not listing.branches:
        ctx.console.info("no local branches")
        return

    rows = [
        (
            ("* " if b.is_current else "  ") + b.name,
            "?" if b.age_days is None else str(b.age_days),
            str(b.ahead),
            str(b.behind),
            b.author,
            b.last_commit_subject,
        )
        for b in listing.branches
    ]
    ctx.console.table(
        ("branch", "age (days)", "ahead", "behind", "author", "last commit"),
        rows,
        title=f"Branches relative to {listing.base}",
    )
