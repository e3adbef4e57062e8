from __future__ import annotations

import typer

from gitflow.cli.commands._helpers import (
    emit_env,
    emit_json,
    global_flags,
    parse_output_format,
    unwrap_or_exit,
)
from gitflow.cli.context import CLIContext, build_context
from gitflow.output.console import Style
from gitflow.release.service import (
    ReleaseOptions,
    ReleaseResult,
    compute_release,
    create_release_tag,
    publish_release,
)


release_app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Compute versions and changelogs, tag and publish releases.",
)


def _print_summary(ctx: CLIContext, result: ReleaseResult) -> None:
    ctx.console.table(
        ("field", "value"),
        [
            ("current version", str(result.base_version)),
            ("base tag", result.base_tag or "(none)"),
            ("next version", str(result.next_version)),
            ("tag", result.tag),
            ("commits", str(result.commit_count)),
        ],
        title="Release",
    )


@release_app.command("preview")
def preview(
    app_ctx: typer.Context,
    version: str | None = typer.Option(None, "--version", help="Use this version (X.Y.Z)."),
    json_out: bool = typer.Option(False, "--json", help="Print a JSON object."),
    env_out: bool = typer.Option(False, "--env", help="Print KEY=VALUE lines."),
) -> None:
    """Show the next version and its changelog without changing anything."""
    ctx = build_context(global_flags(app_ctx))
    fmt = unwrap_or_exit(parse_output_format(json_out, env_out), ctx)
    result = unwrap_or_exit(
        compute_release(ctx.repo, ctx.config, ReleaseOptions(dry_run=True, version_override=version)),
        ctx,
    )

    if fmt == "json":
        emit_json(
            ctx.console,
            {
                "current_version": str(result.base_version),
                "next_version": str(result.next_version),
                "commit_count": result.commit_count,
                "changelog": result.changelog,
            },
        )
        return
    if fmt == "env":
        emit_env(
            ctx.console,
            [
                ("GITFLOW_RELEASE_CURRENT_VERSION", str(result.base_version)),
                ("GITFLOW_RELEASE_NEXT_VERSION", str(result.next_version)),
                ("GITFLOW_RELEASE_COMMIT_COUNT", str(result.commit_count)),
                ("GITFLOW_RELEASE_CHANGELOG", result.changelog),
            ],
        )
        return

    _print_summary(ctx, result)
    ctx.console.newline()
    ctx.console.raw(result.changelog)


@release_app.command("create")
def create(
    app_ctx: typer.Context,
    dry_run: bool = typer.Option(False, "--dry-run", help="Do not create the tag."),
    version: str | None = typer.Option(None, "--version", help="Use this version (X.Y.Z)."),
) -> None:
    """Create an annotated release tag whose message is the changelog."""
    ctx = build_context(global_flags(app_ctx))
    result = unwrap_or_exit(
        create_release_tag(
            ctx.repo,
            ctx.config,
            ReleaseOptions(dry_run=dry_run, version_override=version),
            ctx.console,
        ),
        ctx,
    )

    _print_summary(ctx, result)
    if dry_run:
        ctx.console.info(f"dry run: tag {result.tag} not created")
        ctx.console.newline()
        ctx.console.raw(result.changelog)
        return
    ctx.console.success(f"created tag {result.tag}")
    ctx.console.print(f"push it with: git push origin {result.tag}", Style.DIM)


@release_app.command("version")
def version_cmd(
    app_ctx: typer.Context,
    json_out: bool = typer.Option(False, "--json", help="Print a JSON object."),
    env_out: bool = typer.Option(False, "--env", help="Print KEY=VALUE lines."),
) -> None:
    """Print the next version only."""
    ctx = build_context(global_flags(app_ctx))
    fmt = unwrap_or_exit(parse_output_format(json_out, env_out), ctx)
    result = unwrap_or_exit(
        compute_release(ctx.repo, ctx.config, ReleaseOptions(dry_run=True)), ctx
    )

    next_version = str(result.next_version)
    if fmt == "json":
        emit_json(ctx.console, {"version": next_version})
    elif fmt == "env":
        emit_env(ctx.console, [("GITFLOW_RELEASE_VERSION", next_version)])
    else:
        ctx.console.raw(next_version)


@release_app.command("changelog")
def changelog(
    app_ctx: typer.Context,
    version: str | None = typer.Option(None, "--version", help="Use this version (X.Y.Z)."),
) -> None:
    """Print the changelog of the next release only."""
    ctx = build_context(global_flags(app_ctx))
    result = unwrap_or_exit(
        compute_release(ctx.repo, ctx.config, ReleaseOptions(dry_run=True, version_override=version)),
        ctx,
    )
    ctx.console.raw(result.changelog)


@release_app.command("publish")
def publish(
    app_ctx: typer.Context,
    dry_run: bool = typer.Option(False, "--dry-run", help="Do not call the provider."),
    json_out: bool = typer.Option(False, "--json", help="Print a JSON object."),
    env_out: bool = typer.Option(False, "--env", help="Print KEY=VALUE lines."),
    provider: str | None = typer.Option(
        None, "--provider", help="Provider type (overrides config)."
    ),
) -> None:
    """Publish the changelog as a provider release named after the tag."""
    ctx = build_context(global_flags(app_ctx))
    fmt = unwrap_or_exit(parse_output_format(json_out, env_out), ctx)
    result = unwrap_or_exit(
        compute_release(ctx.repo, ctx.config, ReleaseOptions(dry_run=True)), ctx
    )
    published = unwrap_or_exit(
        publish_release(
            result,
            ctx.config,
            ctx.console,
            dry_run=dry_run,
            provider_type=provider,
        ),
        ctx,
    )

    if fmt == "json":
        emit_json(
            ctx.console,
            {
                "provider": published.provider,
                "version": str(result.next_version),
                "url": published.url,
                "dry_run": published.dry_run,
            },
        )
        return
    if fmt == "env":
        emit_env(
            ctx.console,
            [
                ("GITFLOW_RELEASE_PROVIDER", published.provider),
                ("GITFLOW_RELEASE_VERSION", str(result.next_version)),
                ("GITFLOW_RELEASE_URL", published.url),
                ("GITFLOW_RELEASE_DRY_RUN", "true" if published.dry_run else "false"),
            ],
        )
        return

    if published.dry_run:
        ctx.console.info(f"dry run: would publish {published.tag} to {published.provider}")
        return
    verb = "updated" if published.updated else "published"
    ctx.console.success(f"{verb} {published.tag} on {published.provider}")
    if published.url:
        ctx.console.print(published.url, Style.DIM)
