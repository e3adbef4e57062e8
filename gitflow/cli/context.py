from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from gitflow.core.config import Config, load_config_from_dir
from gitflow.core.errors import ErrorCode
from gitflow.core.result import Err
from gitflow.git.repository import Repository
from gitflow.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class UIOptions:
    """Effective output settings: config values with CLI flags applied on top."""

    color: bool = True
    emoji: bool = False
    verbose: bool = False


@dataclass(frozen=True, slots=True)
class GlobalFlags:
    """Flags given before the command name (``gitflow --no-color sync``)."""

    no_color: bool = False
    verbose: bool = False


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    repo: Repository
    config: Config
    config_path: Path | None
    console: ConsoleProtocol
    ui: UIOptions


def resolve_ui(config: Config, flags: GlobalFlags | None) -> UIOptions:
    flags = flags or GlobalFlags()
    return UIOptions(
        color=config.ui.color and not flags.no_color,
        emoji=config.ui.emoji,
        verbose=config.ui.verbose or flags.verbose,
    )


def resolve_repo_root(cwd: Path) -> Path:
    """Top-level directory of the repository containing ``cwd``, or exit."""
    root_result = Repository(cwd).toplevel()
    if isinstance(root_result, Err):
        typer.echo(f"error: not a git repository: {root_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    return root_result.value


def build_context(flags: GlobalFlags | None = None) -> CLIContext:
    cwd = Path.cwd()
    root = resolve_repo_root(cwd)

    loaded = load_config_from_dir(cwd, git_root=root)
    if isinstance(loaded, Err):
        error = loaded.error
        where = f" ({error.path})" if error.path is not None else ""
        typer.echo(f"error: {error.message}{where}", err=True)
        if error.hint:
            typer.echo(f"hint: {error.hint}", err=True)
        raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))

    ui = resolve_ui(loaded.value.config, flags)
    return CLIContext(
        root=root,
        repo=Repository(root),
        config=loaded.value.config,
        config_path=loaded.value.path,
        console=RichConsole(color=ui.color, emoji=ui.emoji, verbose=ui.verbose),
        ui=ui,
    )
