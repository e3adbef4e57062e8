"""Repository and configuration health checks."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

from gitflow.core.config import CONFIG_FILENAME, load_config_from_dir, validate_strict
from gitflow.core.result import Err
from gitflow.git.repository import GitAdapter

__all__ = ["CheckResult", "CheckStatus", "DoctorReport", "run_doctor"]


class CheckStatus(Enum):
    OK = auto()
    WARNING = auto()
    ERROR = auto()


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Result of a single check.

    Attributes:
        name: What was checked (e.g. "Working tree")
        status: Whether the check passed, warned, or failed
        message: Human-readable result message
        hint: Optional next step
    """

    name: str
    status: CheckStatus
    message: str
    hint: str | None = None

    @property
    def is_error(self) -> bool:
        return self.status == CheckStatus.ERROR

    @classmethod
    def success(cls, name: str, message: str) -> CheckResult:
        return cls(name=name, status=CheckStatus.OK, message=message)

    @classmethod
    def warning(cls, name: str, message: str, hint: str | None = None) -> CheckResult:
        return cls(name=name, status=CheckStatus.WARNING, message=message, hint=hint)

    @classmethod
    def error(cls, name: str, message: str, hint: str | None = None) -> CheckResult:
        return cls(name=name, status=CheckStatus.ERROR, message=message, hint=hint)


@dataclass(frozen=True, slots=True)
class DoctorReport:
    checks: tuple[CheckResult, ...]

    @property
    def has_errors(self) -> bool:
        return any(c.is_error for c in self.checks)


def run_doctor(
    repo: GitAdapter,
    *,
    start_dir: Path,
    env: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> DoctorReport:
    """Inspect the repository, the config file and the provider token.

    Never fails: every problem becomes an ERROR or WARNING check.
    """
    env = os.environ if env is None else env
    checks: list[CheckResult] = []

    root = repo.toplevel()
    if isinstance(root, Err):
        checks.append(CheckResult.error("Git repository", root.error.message))
        return DoctorReport(checks=tuple(checks))
    checks.append(CheckResult.success("Git repository", f"Repository detected at {root.value}"))

    dirty = repo.is_dirty()
    if isinstance(dirty, Err):
        checks.append(CheckResult.error("Working tree", dirty.error.message))
    elif dirty.value:
        checks.append(CheckResult.warning("Working tree", "Working tree has uncommitted changes"))
    else:
        checks.append(CheckResult.success("Working tree", "Working tree is clean"))

    config_file = root.value / CONFIG_FILENAME
    if config_file.is_file():
        checks.append(CheckResult.success("Config presence", f"Found {config_file}"))
    else:
        checks.append(
            CheckResult.warning(
                "Config presence", "Config file not found", hint="run gitflow init"
            )
        )

    loaded = load_config_from_dir(start_dir, git_root=root.value, env=env, home=home)
    if isinstance(loaded, Err):
        checks.append(CheckResult.error("Config validity", loaded.error.message))
        checks.append(
            CheckResult.warning(
                "Provider token", "Skipping provider token check due to invalid config"
            )
        )
        return DoctorReport(checks=tuple(checks))

    problems = validate_strict(loaded.value.config)
    if loaded.value.path is None:
        checks.append(CheckResult.warning("Config validity", "Using built-in defaults"))
    elif problems:
        checks.append(CheckResult.error("Config validity", "; ".join(problems)))
    else:
        checks.append(CheckResult.success("Config validity", "Config valid"))

    provider = loaded.value.config.provider
    if not provider.enabled:
        checks.append(CheckResult.success("Provider token", "Provider not configured"))
    elif not provider.token_env:
        checks.append(CheckResult.warning("Provider token", "provider.token_env is not set"))
    elif not env.get(provider.token_env, "").strip():
        checks.append(
            CheckResult.warning(
                "Provider token", f"Missing {provider.token_env} environment variable"
            )
        )
    else:
        checks.append(CheckResult.success("Provider token", f"{provider.token_env} is set"))

    return DoctorReport(checks=tuple(checks))
