from __future__ import annotations

from pathlib import Path

import typer

from gitflow.cli.commands._helpers import global_flags
from gitflow.core.errors import ErrorCode
from gitflow.git.repository import Repository
from gitflow.output.console import RichConsole, Style
from gitflow.services.doctor import CheckStatus, run_doctor


def doctor(app_ctx: typer.Context) -> None:
    """Check the repository, config file and provider token."""
    flags = global_flags(app_ctx)
    console = RichConsole(color=not (flags and flags.no_color))
    cwd = Path.cwd()

    report = run_doctor(Repository(cwd), start_dir=cwd)
    console.header("gitflow doctor")
    for check in report.checks:
        line = f"{check.name}: {check.message}"
        match check.status:
            case CheckStatus.OK:
                console.success(line)
            case CheckStatus.WARNING:
                console.warning(line)
            case CheckStatus.ERROR:
                console.error(line)
        if check.hint:
            console.print(f"  hint: {check.hint}", Style.DIM)

    if report.has_errors:
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
