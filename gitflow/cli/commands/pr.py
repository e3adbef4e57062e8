from __future__ import annotations

import typer

from gitflow.cli.commands._helpers import global_flags, unwrap_or_exit
from gitflow.cli.context import CLIContext, build_context
from gitflow.core.result import Result
from gitflow.output.console import Style
from gitflow.provider import CreatePROptions, Provider, PullRequest, create_provider
from gitflow.services.errors import (
    WorkflowError,
    from_config_error,
    from_git_error,
    from_provider_error,
)


pr_app = typer.Typer(add_completion=False, no_args_is_help=True, help="Work with pull requests.")


def _split_csv(value: str | None) -> tuple[str, ...] | None:
    if value is None:
        return None
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _provider(ctx: CLIContext) -> Result[Provider, WorkflowError]:
    return create_provider(ctx.config.provider).map_err(from_config_error)


def _print_pr(ctx: CLIContext, pr: PullRequest) -> None:
    draft = " (draft)" if pr.draft else ""
    ctx.console.header(f"#{pr.number} {pr.title}{draft}")
    ctx.console.print(f"{pr.head_branch} -> {pr.base_branch}  [{pr.state}]")
    if pr.author:
        ctx.console.print(f"Author: {pr.author}")
    if pr.url:
        ctx.console.print(pr.url, Style.DIM)
    if pr.description:
        ctx.console.newline()
        ctx.console.print(pr.description)


@pr_app.command("create")
def create(
    app_ctx: typer.Context,
    title: str = typer.Option(..., "--title", help="Pull request title."),
    body: str = typer.Option("", "--body", help="Pull request description."),
    base: str | None = typer.Option(None, "--base", help="Target branch (default: base branch)."),
    reviewers: str | None = typer.Option(None, "--reviewers", help="Comma-separated reviewers."),
    labels: str | None = typer.Option(None, "--labels", help="Comma-separated labels."),
    draft: bool | None = typer.Option(None, "--draft/--ready", help="Open as a draft."),
) -> None:
    """Open a pull request from the current branch."""
    ctx = build_context(global_flags(app_ctx))
    provider = unwrap_or_exit(_provider(ctx), ctx)

    head_branch = unwrap_or_exit(ctx.repo.current_branch().map_err(from_git_error), ctx)

    policy = ctx.config.workflows.pr
    options = CreatePROptions(
        title=title,
        head_branch=head_branch,
        base_branch=base or ctx.config.base_branch,
        description=body,
        draft=policy.draft if draft is None else draft,
        reviewers=_split_csv(reviewers) or policy.default_reviewers,
        labels=_split_csv(labels) or policy.labels,
    )
    pr = unwrap_or_exit(provider.create_pr(options).map_err(from_provider_error), ctx)
    ctx.console.success(f"opened pull request #{pr.number}")
    if pr.url:
        ctx.console.print(pr.url, Style.DIM)


@pr_app.command("list")
def list_cmd(
    app_ctx: typer.Context,
    state: str = typer.Option("open", "--state", help="open, closed or all."),
) -> None:
    """List pull requests."""
    ctx = build_context(global_flags(app_ctx))
    provider = unwrap_or_exit(_provider(ctx), ctx)

    prs = unwrap_or_exit(provider.list_prs(state).map_err(from_provider_error), ctx)
    if not prs:
        ctx.console.info(f"no {state} pull requests")
        return
    ctx.console.table(
        ("#", "title", "head", "base", "author"),
        [(str(p.number), p.title, p.head_branch, p.base_branch, p.author) for p in prs],
        title=f"Pull requests ({state})",
    )


@pr_app.command("view")
def view(
    app_ctx: typer.Context,
    number: int = typer.Argument(..., help="Pull request number."),
) -> None:
    """Show one pull request."""
    ctx = build_context(global_flags(app_ctx))
    provider = unwrap_or_exit(_provider(ctx), ctx)

    pr = unwrap_or_exit(provider.get_pr(number).map_err(from_provider_error), ctx)
    _print_pr(ctx, pr)
