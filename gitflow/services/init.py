"""Write a starter ``.gitflow.toml`` into a repository."""

from __future__ import annotations

from pathlib import Path

from gitflow.core.config import CONFIG_FILENAME, Config, write_config
from gitflow.core.result import Err, Ok, Result
from gitflow.services.errors import WorkflowError, from_config_error, precondition

__all__ = ["init_config"]


def init_config(
    repo_root: Path, *, force: bool = False, config: Config | None = None
) -> Result[Path, WorkflowError]:
    """Write ``config`` (defaults when None) and return the file path.

    An existing file is kept unless ``force`` is set.
    """
    path = repo_root / CONFIG_FILENAME
    if path.exists() and not force:
        return Err(
            precondition(
                f"{CONFIG_FILENAME} already exists",
                hint="use --force to overwrite",
            )
        )
    written = write_config(path, config or Config())
    if isinstance(written, Err):
        return Err(from_config_error(written.error))
    return Ok(written.value)
