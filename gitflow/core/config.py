"""Typed configuration loading and access.

Configuration lives in a single ``.gitflow.toml`` file. It is discovered once
per invocation, parsed into frozen dataclasses and passed down explicitly;
nothing in the workflows mutates it. Overrides (environment variables, CLI
flags) produce a new instance via ``dataclasses.replace``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Literal, TypeVar

import tomlkit

from .result import Err, Ok, Result
from .structured import (
    StrDict,
    as_str_dict,
    get_bool,
    get_int,
    get_str,
    get_str_list,
    get_table,
)

__all__ = [
    "BranchConfig",
    "CleanupConfig",
    "CommitConfig",
    "Config",
    "ConfigError",
    "LoadedConfig",
    "PRConfig",
    "ProviderConfig",
    "ReleaseConfig",
    "StartConfig",
    "SyncConfig",
    "UIConfig",
    "WorkflowConfig",
    "CONFIG_FILENAME",
    "SECTION_KEYS",
    "apply_env_overrides",
    "find_config",
    "load_config",
    "load_config_from_dir",
    "render_config",
    "validate_config",
    "validate_strict",
    "write_config",
]

CONFIG_FILENAME = ".gitflow.toml"

SyncStrategy = Literal["rebase", "merge"]
BumpKind = Literal["major", "minor", "patch"]
SectionKey = Literal["breaking", "features", "fixes", "other"]

SYNC_STRATEGIES: tuple[str, ...] = ("rebase", "merge")
BUMP_KINDS: tuple[str, ...] = ("major", "minor", "patch")
PROVIDER_TYPES: tuple[str, ...] = ("github", "gitlab")
SECTION_KEYS: tuple[str, ...] = ("breaking", "features", "fixes", "other")

DEFAULT_PROTECTED_BRANCHES = ("main", "master", "develop")
DEFAULT_COMMIT_TYPES = ("feat", "fix", "docs", "refactor", "test", "chore")
DEFAULT_AGE_THRESHOLD_DAYS = 30


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded, parsed or validated."""

    message: str
    path: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """Optional hosting provider integration."""

    type: str = ""
    base_url: str = ""
    token_env: str = ""
    owner: str = ""
    repo: str = ""

    @property
    def enabled(self) -> bool:
        return self.type.strip() != ""


@dataclass(frozen=True, slots=True)
class BranchConfig:
    """Branch naming conventions."""

    feature_prefix: str = "feature/"
    bugfix_prefix: str = "bugfix/"
    hotfix_prefix: str = "hotfix/"
    main_branch: str = "main"
    develop_branch: str = ""


@dataclass(frozen=True, slots=True)
class StartConfig:
    base_branch: str = "main"
    auto_push: bool = True
    fetch_first: bool = True


@dataclass(frozen=True, slots=True)
class PRConfig:
    draft: bool = False
    default_reviewers: tuple[str, ...] = ()
    labels: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class SyncConfig:
    strategy: str = "rebase"
    auto_push: bool = True
    force_push: bool = True


@dataclass(frozen=True, slots=True)
class CleanupConfig:
    """Cleanup policy.

    ``age_threshold_days <= 0`` disables the stale-by-age test.
    """

    merged_only: bool = True
    age_threshold_days: int = DEFAULT_AGE_THRESHOLD_DAYS
    protected_branches: tuple[str, ...] = DEFAULT_PROTECTED_BRANCHES


@dataclass(frozen=True, slots=True)
class WorkflowConfig:
    start: StartConfig = field(default_factory=StartConfig)
    pr: PRConfig = field(default_factory=PRConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    cleanup: CleanupConfig = field(default_factory=CleanupConfig)


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    tag_prefix: str = "v"
    default_bump: str = "patch"
    changelog_sections: tuple[str, ...] = SECTION_KEYS


@dataclass(frozen=True, slots=True)
class CommitConfig:
    conventional: bool = False
    types: tuple[str, ...] = DEFAULT_COMMIT_TYPES
    scopes: tuple[str, ...] = ()
    require_scope: bool = False


@dataclass(frozen=True, slots=True)
class UIConfig:
    color: bool = True
    emoji: bool = False
    verbose: bool = False


T = TypeVar("T")


def _pick(value: T | None, default: T) -> T:
    return default if value is None else value


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    branches: BranchConfig = field(default_factory=BranchConfig)
    workflows: WorkflowConfig = field(default_factory=WorkflowConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)
    commits: CommitConfig = field(default_factory=CommitConfig)
    ui: UIConfig = field(default_factory=UIConfig)

    @property
    def base_branch(self) -> str:
        """Branch that feature branches start from and sync against."""
        return (
            self.workflows.start.base_branch.strip()
            or self.branches.main_branch.strip()
            or "main"
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML), filling defaults."""
        provider: StrDict = get_table(data, "provider") or {}
        branches: StrDict = get_table(data, "branches") or {}
        workflows: StrDict = get_table(data, "workflows") or {}
        start: StrDict = get_table(workflows, "start") or {}
        pr: StrDict = get_table(workflows, "pr") or {}
        sync: StrDict = get_table(workflows, "sync") or {}
        cleanup: StrDict = get_table(workflows, "cleanup") or {}
        release: StrDict = get_table(data, "release") or {}
        commits: StrDict = get_table(data, "commits") or {}
        ui: StrDict = get_table(data, "ui") or {}

        d_branches = BranchConfig()
        main_branch = get_str(branches, "main_branch") or d_branches.main_branch

        return cls(
            provider=ProviderConfig(
                type=(get_str(provider, "type") or "").lower(),
                base_url=get_str(provider, "base_url") or "",
                token_env=get_str(provider, "token_env") or "",
                owner=get_str(provider, "owner") or "",
                repo=get_str(provider, "repo") or "",
            ),
            branches=BranchConfig(
                feature_prefix=get_str(branches, "feature_prefix") or d_branches.feature_prefix,
                bugfix_prefix=get_str(branches, "bugfix_prefix") or d_branches.bugfix_prefix,
                hotfix_prefix=get_str(branches, "hotfix_prefix") or d_branches.hotfix_prefix,
                main_branch=main_branch,
                develop_branch=get_str(branches, "develop_branch") or "",
            ),
            workflows=WorkflowConfig(
                start=StartConfig(
                    base_branch=get_str(start, "base_branch") or main_branch,
                    auto_push=_pick(get_bool(start, "auto_push"), True),
                    fetch_first=_pick(get_bool(start, "fetch_first"), True),
                ),
                pr=PRConfig(
                    draft=_pick(get_bool(pr, "draft"), False),
                    default_reviewers=_pick(get_str_list(pr, "default_reviewers"), ()),
                    labels=_pick(get_str_list(pr, "labels"), ()),
                ),
                sync=SyncConfig(
                    strategy=(get_str(sync, "strategy") or "rebase").lower(),
                    auto_push=_pick(get_bool(sync, "auto_push"), True),
                    force_push=_pick(get_bool(sync, "force_push"), True),
                ),
                cleanup=CleanupConfig(
                    merged_only=_pick(get_bool(cleanup, "merged_only"), True),
                    age_threshold_days=_pick(
                        get_int(cleanup, "age_threshold_days"), DEFAULT_AGE_THRESHOLD_DAYS
                    ),
                    protected_branches=get_str_list(cleanup, "protected_branches")
                    or DEFAULT_PROTECTED_BRANCHES,
                ),
            ),
            release=ReleaseConfig(
                tag_prefix=_pick(get_str(release, "tag_prefix"), "v"),
                default_bump=(get_str(release, "default_bump") or "patch").lower(),
                changelog_sections=get_str_list(release, "changelog_sections") or SECTION_KEYS,
            ),
            commits=CommitConfig(
                conventional=_pick(get_bool(commits, "conventional"), False),
                types=_pick(get_str_list(commits, "types"), DEFAULT_COMMIT_TYPES),
                scopes=_pick(get_str_list(commits, "scopes"), ()),
                require_scope=_pick(get_bool(commits, "require_scope"), False),
            ),
            ui=UIConfig(
                color=_pick(get_bool(ui, "color"), True),
                emoji=_pick(get_bool(ui, "emoji"), False),
                verbose=_pick(get_bool(ui, "verbose"), False),
            ),
        )

    def to_dict(self) -> StrDict:
        """Plain-data view of the config, table layout matching the TOML file."""
        return {
            "provider": {
                "type": self.provider.type,
                "base_url": self.provider.base_url,
                "token_env": self.provider.token_env,
                "owner": self.provider.owner,
                "repo": self.provider.repo,
            },
            "branches": {
                "feature_prefix": self.branches.feature_prefix,
                "bugfix_prefix": self.branches.bugfix_prefix,
                "hotfix_prefix": self.branches.hotfix_prefix,
                "main_branch": self.branches.main_branch,
                "develop_branch": self.branches.develop_branch,
            },
            "workflows": {
                "start": {
                    "base_branch": self.workflows.start.base_branch,
                    "auto_push": self.workflows.start.auto_push,
                    "fetch_first": self.workflows.start.fetch_first,
                },
                "pr": {
                    "draft": self.workflows.pr.draft,
                    "default_reviewers": list(self.workflows.pr.default_reviewers),
                    "labels": list(self.workflows.pr.labels),
                },
                "sync": {
                    "strategy": self.workflows.sync.strategy,
                    "auto_push": self.workflows.sync.auto_push,
                    "force_push": self.workflows.sync.force_push,
                },
                "cleanup": {
                    "merged_only": self.workflows.cleanup.merged_only,
                    "age_threshold_days": self.workflows.cleanup.age_threshold_days,
                    "protected_branches": list(self.workflows.cleanup.protected_branches),
                },
            },
            "release": {
                "tag_prefix": self.release.tag_prefix,
                "default_bump": self.release.default_bump,
                "changelog_sections": list(self.release.changelog_sections),
            },
            "commits": {
                "conventional": self.commits.conventional,
                "types": list(self.commits.types),
                "scopes": list(self.commits.scopes),
                "require_scope": self.commits.require_scope,
            },
            "ui": {
                "color": self.ui.color,
                "emoji": self.ui.emoji,
                "verbose": self.ui.verbose,
            },
        }


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------


def validate_strict(config: Config) -> list[str]:
    """Collect every problem in ``config`` (empty list means valid)."""
    errs: list[str] = []

    if not config.branches.main_branch:
        errs.append("branches.main_branch is required")
    if not config.branches.feature_prefix:
        errs.append("branches.feature_prefix is required")
    if not config.workflows.start.base_branch:
        errs.append("workflows.start.base_branch is required")
    if config.workflows.sync.strategy not in SYNC_STRATEGIES:
        errs.append("workflows.sync.strategy must be rebase or merge")
    if config.workflows.cleanup.age_threshold_days < 0:
        errs.append("workflows.cleanup.age_threshold_days must be >= 0")

    if config.release.default_bump not in BUMP_KINDS:
        errs.append("release.default_bump must be major, minor or patch")
    if any(ch.isspace() for ch in config.release.tag_prefix):
        errs.append("release.tag_prefix must not contain whitespace")
    unknown = [s for s in config.release.changelog_sections if s not in SECTION_KEYS]
    if unknown:
        errs.append(
            "release.changelog_sections has unknown keys: "
            + ", ".join(unknown)
            + f" (expected {', '.join(SECTION_KEYS)})"
        )

    if config.provider.enabled:
        if config.provider.type not in PROVIDER_TYPES:
            errs.append("provider.type must be github or gitlab")
        if not config.provider.token_env:
            errs.append("provider.token_env is required when provider is enabled")
        if not config.provider.owner:
            errs.append("provider.owner is required when provider is enabled")
        if not config.provider.repo:
            errs.append("provider.repo is required when provider is enabled")

    if config.commits.conventional and not config.commits.types:
        errs.append("commits.types must be set when commits.conventional is true")

    return errs


def validate_config(config: Config, path: Path | None = None) -> Result[Config, ConfigError]:
    """Reject settings the workflows cannot act on.

    This is the gate every loaded config passes through, so a bad
    ``default_bump`` or ``strategy`` is reported here and never during
    version resolution or sync.
    """
    if config.workflows.sync.strategy not in SYNC_STRATEGIES:
        return Err(
            ConfigError(
                f"unsupported sync strategy: {config.workflows.sync.strategy}",
                path=path,
                hint="workflows.sync.strategy must be rebase or merge",
            )
        )
    if config.release.default_bump not in BUMP_KINDS:
        return Err(
            ConfigError(
                f"unsupported release default bump: {config.release.default_bump}",
                path=path,
                hint="release.default_bump must be major, minor or patch",
            )
        )
    if config.provider.enabled and config.provider.type not in PROVIDER_TYPES:
        return Err(ConfigError(f"unsupported provider type: {config.provider.type}", path=path))
    if config.workflows.cleanup.age_threshold_days < 0:
        return Err(
            ConfigError("workflows.cleanup.age_threshold_days must be >= 0", path=path)
        )
    if any(ch.isspace() for ch in config.release.tag_prefix):
        return Err(
            ConfigError(
                f"malformed tag prefix: {config.release.tag_prefix!r}",
                path=path,
                hint="release.tag_prefix must not contain whitespace",
            )
        )
    for key in config.release.changelog_sections:
        if key not in SECTION_KEYS:
            return Err(ConfigError(f"unknown changelog section: {key}", path=path))
    return Ok(config)


# -----------------------------------------------------------------------------
# Environment overrides
# -----------------------------------------------------------------------------

_TRUE = {"1", "t", "true"}
_FALSE = {"0", "f", "false"}


def _parse_bool(name: str, value: str) -> Result[bool, ConfigError]:
    v = value.strip().lower()
    if v in _TRUE:
        return Ok(True)
    if v in _FALSE:
        return Ok(False)
    return Err(ConfigError(f"invalid {name}: {value!r}", hint="use true or false"))


def apply_env_overrides(
    config: Config, env: Mapping[str, str] | None = None
) -> Result[Config, ConfigError]:
    """Apply ``GITFLOW_*`` environment overrides, returning a new Config."""
    env = os.environ if env is None else env
    release = config.release
    ui = config.ui

    if "GITFLOW_RELEASE_TAG_PREFIX" in env:
        release = replace(release, tag_prefix=env["GITFLOW_RELEASE_TAG_PREFIX"].strip())
    if "GITFLOW_RELEASE_DEFAULT_BUMP" in env:
        bump = env["GITFLOW_RELEASE_DEFAULT_BUMP"].strip().lower()
        release = replace(release, default_bump=bump or "patch")

    for name, attr, invert in (
        ("GITFLOW_UI_NO_COLOR", "color", True),
        ("GITFLOW_UI_EMOJI", "emoji", False),
        ("GITFLOW_UI_VERBOSE", "verbose", False),
    ):
        if name not in env:
            continue
        parsed = _parse_bool(name, env[name])
        if isinstance(parsed, Err):
            return parsed
        ui = replace(ui, **{attr: (not parsed.value) if invert else parsed.value})

    return Ok(replace(config, release=release, ui=ui))


# -----------------------------------------------------------------------------
# Discovery / IO
# -----------------------------------------------------------------------------


def find_config(
    start_dir: Path,
    *,
    git_root: Path | None = None,
    home: Path | None = None,
) -> Path | None:
    """Locate the config file: start dir, then repository root, then home."""
    candidates = [start_dir]
    if git_root is not None:
        candidates.append(git_root)
    candidates.append(home if home is not None else Path.home())

    for directory in candidates:
        path = directory / CONFIG_FILENAME
        if path.is_file():
            return path
    return None


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load, parse and validate configuration from a TOML file."""
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        config = Config.from_dict(result.value)
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))
    return validate_config(config, path)


@dataclass(frozen=True, slots=True)
class LoadedConfig:
    """Effective config plus the file it came from (None for built-in defaults)."""

    config: Config
    path: Path | None


def load_config_from_dir(
    start_dir: Path,
    *,
    git_root: Path | None = None,
    env: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> Result[LoadedConfig, ConfigError]:
    """Discover and load the config, falling back to defaults, then apply env."""
    path = find_config(start_dir, git_root=git_root, home=home)
    if path is None:
        config = Config()
    else:
        loaded = load_config(path)
        if isinstance(loaded, Err):
            return loaded
        config = loaded.value

    overridden = apply_env_overrides(config, env)
    if isinstance(overridden, Err):
        return overridden
    validated = validate_config(overridden.value, path)
    if isinstance(validated, Err):
        return validated
    return Ok(LoadedConfig(config=validated.value, path=path))


def render_config(config: Config) -> str:
    """Serialize a Config as TOML text."""
    return tomlkit.dumps(config.to_dict())


def write_config(path: Path, config: Config) -> Result[Path, ConfigError]:
    try:
        path.write_text(render_config(config), encoding="utf-8")
    except OSError as e:
        return Err(ConfigError(f"failed to write config file: {e}", path=path))
    return Ok(path)
