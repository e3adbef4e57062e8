"""Release computation, tagging and publishing.

``compute_release`` is read-only: it resolves the latest version tag, collects
the commits since then and derives the next version and changelog.
``create_release_tag`` and ``publish_release`` are the two side effects built
on top of it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import date

from gitflow.core.config import Config
from gitflow.core.result import Err, Ok, Result
from gitflow.git.repository import GitAdapter
from gitflow.output.console import ConsoleProtocol
from gitflow.provider.base import create_provider
from gitflow.provider.http import HttpClient
from gitflow.release.changelog import release_date, render_changelog
from gitflow.release.commits import bump_version, classify_commits
from gitflow.release.semver import SemanticVersion, parse_version, resolve_latest
from gitflow.services.errors import (
    WorkflowError,
    from_config_error,
    from_git_error,
    from_provider_error,
    precondition,
)

__all__ = [
    "PublishResult",
    "ReleaseOptions",
    "ReleaseResult",
    "compute_release",
    "create_release_tag",
    "publish_release",
]


@dataclass(frozen=True, slots=True)
class ReleaseOptions:
    dry_run: bool = False
    version_override: str | None = None


@dataclass(frozen=True, slots=True)
class ReleaseResult:
    base_version: SemanticVersion
    next_version: SemanticVersion
    commit_count: int
    changelog: str
    tag: str
    base_tag: str = ""


@dataclass(frozen=True, slots=True)
class PublishResult:
    provider: str
    tag: str
    url: str = ""
    dry_run: bool = False
    updated: bool = False


def compute_release(
    repo: GitAdapter,
    config: Config,
    options: ReleaseOptions,
    *,
    today: date | None = None,
) -> Result[ReleaseResult, WorkflowError]:
    """Work out the next release from tags and commit history.

    An explicit version override is used as-is, even when it is not greater
    than the latest tagged version.
    """
    override: SemanticVersion | None = None
    if options.version_override is not None:
        override = parse_version(options.version_override.strip())
        if override is None:
            return Err(
                WorkflowError(
                    kind="config",
                    message=f"invalid version: {options.version_override}",
                    hint="expected X.Y.Z",
                )
            )

    if not options.dry_run:
        dirty = repo.is_dirty()
        if isinstance(dirty, Err):
            return Err(from_git_error(dirty.error))
        if dirty.value:
            return Err(
                precondition(
                    "working tree is dirty",
                    hint="commit or stash your changes, or use --dry-run",
                )
            )

    policy = config.release
    tags = repo.list_tags()
    if isinstance(tags, Err):
        return Err(from_git_error(tags.error))
    base_version, base_tag = resolve_latest(tags.value, policy.tag_prefix)

    commits = repo.commits_between(base_tag, "HEAD")
    if isinstance(commits, Err):
        return Err(from_git_error(commits.error))

    groups = classify_commits(commits.value)
    next_version = override or bump_version(base_version, groups, policy.default_bump)
    changelog = render_changelog(
        next_version,
        policy.tag_prefix,
        release_date(commits.value, today),
        groups,
        policy.changelog_sections,
    )
    return Ok(
        ReleaseResult(
            base_version=base_version,
            next_version=next_version,
            commit_count=len(commits.value),
            changelog=changelog,
            tag=f"{policy.tag_prefix}{next_version}",
            base_tag=base_tag,
        )
    )


def create_release_tag(
    repo: GitAdapter,
    config: Config,
    options: ReleaseOptions,
    console: ConsoleProtocol,
    *,
    today: date | None = None,
) -> Result[ReleaseResult, WorkflowError]:
    """Compute the release and create an annotated tag holding the changelog."""
    computed = compute_release(repo, config, options, today=today)
    if isinstance(computed, Err):
        return computed
    result = computed.value

    if options.dry_run:
        console.step(f"dry run: would create tag {result.tag}")
        return Ok(result)

    console.step(f"creating tag {result.tag}")
    tagged = repo.create_annotated_tag(result.tag, result.changelog)
    if isinstance(tagged, Err):
        return Err(from_git_error(tagged.error, hint=f"git tag -d {result.tag} to retry"))
    return Ok(result)


def publish_release(
    result: ReleaseResult,
    config: Config,
    console: ConsoleProtocol,
    *,
    dry_run: bool = False,
    provider_type: str | None = None,
    env: Mapping[str, str] | None = None,
    http: HttpClient | None = None,
) -> Result[PublishResult, WorkflowError]:
    """Create the provider release for ``result.tag``, updating it if it exists."""
    provider_config = config.provider
    if provider_type:
        provider_config = replace(provider_config, type=provider_type.strip().lower())
    if not provider_config.enabled:
        return Err(
            WorkflowError(
                kind="config",
                message="provider is not configured",
                hint="set [provider] in .gitflow.toml or pass --provider",
            )
        )

    if dry_run:
        return Ok(PublishResult(provider=provider_config.type, tag=result.tag, dry_run=True))

    created = create_provider(provider_config, env, http=http)
    if isinstance(created, Err):
        return Err(from_config_error(created.error))
    provider = created.value

    console.step(f"publishing {result.tag} to {provider.name}")
    published = provider.create_release(result.tag, result.tag, result.changelog)
    updated = False
    if isinstance(published, Err) and published.error.kind == "release_exists":
        console.step(f"release {result.tag} exists, updating")
        published = provider.update_release(result.tag, result.tag, result.changelog)
        updated = True
    if isinstance(published, Err):
        return Err(from_provider_error(published.error))

    return Ok(
        PublishResult(
            provider=provider.name,
            tag=result.tag,
            url=published.value.url,
            updated=updated,
        )
    )
