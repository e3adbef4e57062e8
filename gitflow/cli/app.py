from __future__ import annotations

import typer

from gitflow import __version__
from gitflow.cli.commands.branch import branch_app
from gitflow.cli.commands.cleanup import cleanup
from gitflow.cli.commands.commit import commit
from gitflow.cli.commands.config_cmd import config_app
from gitflow.cli.commands.doctor import doctor
from gitflow.cli.commands.init_cmd import init
from gitflow.cli.commands.pr import pr_app
from gitflow.cli.commands.provider_cmd import provider_app
from gitflow.cli.commands.release_cmd import release_app
from gitflow.cli.commands.start import start
from gitflow.cli.commands.status import status
from gitflow.cli.commands.sync import sync
from gitflow.cli.context import GlobalFlags


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Git workflow helper: start, sync, clean up branches and cut releases.",
)


# Commands
app.command()(init)
app.command()(status)
app.command()(start)
app.command()(sync)
app.command()(cleanup)
app.command()(commit)
app.command()(doctor)

# Sub-apps
app.add_typer(branch_app, name="branch")
app.add_typer(config_app, name="config")
app.add_typer(release_app, name="release")
app.add_typer(pr_app, name="pr")
app.add_typer(provider_app, name="provider")


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show progress steps."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)

    ctx.obj = GlobalFlags(no_color=no_color, verbose=verbose)


def main() -> None:
    app()
