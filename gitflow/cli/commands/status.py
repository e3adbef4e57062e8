from __future__ import annotations

import typer

from gitflow.cli.commands._helpers import global_flags, unwrap_or_exit
from gitflow.cli.context import build_context
from gitflow.output.console import Style
from gitflow.services.status import get_status


def status(app_ctx: typer.Context) -> None:
    """Show the current branch and whether the working tree is clean."""
    ctx = build_context(global_flags(app_ctx))
    st = unwrap_or_exit(get_status(ctx.repo), ctx)

    ctx.console.header("Repository status")
    ctx.console.print(f"Repository: {ctx.root}", Style.DIM)
    ctx.console.print(f"Branch: {st.branch}")
    if st.dirty:
        ctx.console.warning("Working tree: dirty")
    else:
        ctx.console.success("Working tree: clean")
