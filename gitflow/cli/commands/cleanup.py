from __future__ import annotations

from dataclasses import replace

import typer

from gitflow.cli.commands._helpers import global_flags, unwrap_or_exit
from gitflow.cli.context import CLIContext, build_context
from gitflow.cli.prompt import make_confirm, select_branches
from gitflow.output.console import Style
from gitflow.services.cleanup import (
    CleanupOptions,
    CleanupResult,
    CleanupService,
    deletion_plan,
)


def _render_candidates(ctx: CLIContext, result: CleanupResult) -> None:
    rows = [
        (
            c.name,
            c.reason,
            "?" if c.age_days is None else str(c.age_days),
            f"+{c.ahead}/-{c.behind}",
            "yes" if c.will_delete else "no",
        )
        for c in result.candidates
    ]
    ctx.console.table(
        ("branch", "reason", "age (days)", "ahead/behind", "delete"),
        rows,
        title=f"Branches relative to {result.base_branch}",
    )


def cleanup(
    app_ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Delete without confirmation."),
    all_branches: bool = typer.Option(
        False, "--all", help="Also delete stale branches that are not merged."
    ),
    age: int | None = typer.Option(None, "--age", min=0, help="Stale threshold in days."),
    remote: bool = typer.Option(
        False, "--remote", help="Also delete the remote branch after the local one."
    ),
    remote_name: str = typer.Option("origin", "--remote-name", help="Remote name."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Only show what would be deleted."),
    select: bool = typer.Option(
        False, "--select", help="Pick which deletable branches to remove."
    ),
) -> None:
    """Delete merged (and optionally stale) local branches."""
    ctx = build_context(global_flags(app_ctx))
    service = CleanupService(
        repo=ctx.repo,
        config=ctx.config,
        console=ctx.console,
        confirm=make_confirm(ctx.console),
    )
    options = CleanupOptions(
        remote=remote_name,
        yes=yes,
        all=all_branches,
        dry_run=dry_run,
        age_threshold_days=age,
        delete_remote=remote,
    )

    planned = unwrap_or_exit(service.plan(options), ctx)
    _render_candidates(ctx, planned)
    if not planned.plan:
        ctx.console.success("nothing to clean up")
        return
    if dry_run:
        ctx.console.info(f"dry run: {len(planned.plan)} branch(es) would be deleted")
        return

    if select:
        chosen = select_branches(ctx.console, planned.plan)
        if not chosen:
            ctx.console.info("no branches selected")
            return
        planned = replace(planned, plan=tuple(deletion_plan(planned.plan, chosen)))

    out = unwrap_or_exit(service.execute(planned, options), ctx)
    if not out.confirmed:
        ctx.console.warning("cleanup aborted")
        return

    for name in out.deleted:
        remote_note = " (remote too)" if name in out.remote_deleted else ""
        ctx.console.print(f"deleted {name}{remote_note}", Style.DIM)
    ctx.console.success(f"deleted {len(out.deleted)} branch(es)")
