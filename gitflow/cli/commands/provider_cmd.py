from __future__ import annotations

import typer

from gitflow.cli.commands._helpers import global_flags, unwrap_or_exit
from gitflow.cli.context import build_context
from gitflow.provider import create_provider
from gitflow.services.errors import from_config_error, from_provider_error


provider_app = typer.Typer(
    add_completion=False, no_args_is_help=True, help="Check the hosting provider setup."
)


@provider_app.command("check")
def check(app_ctx: typer.Context) -> None:
    """Validate the provider token and show the repository default branch."""
    ctx = build_context(global_flags(app_ctx))
    provider = unwrap_or_exit(create_provider(ctx.config.provider).map_err(from_config_error), ctx)

    unwrap_or_exit(provider.validate_auth().map_err(from_provider_error), ctx)
    ctx.console.success(f"{provider.name}: authenticated")

    branch = unwrap_or_exit(provider.get_default_branch().map_err(from_provider_error), ctx)
    ctx.console.print(f"Default branch: {branch}")
    if branch != ctx.config.base_branch:
        ctx.console.warning(
            f"configured base branch is {ctx.config.base_branch}, provider default is {branch}"
        )
