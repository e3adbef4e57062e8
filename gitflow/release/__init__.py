"""Release versioning: commit classification, version bumps, changelogs."""

from gitflow.release.changelog import release_date, render_changelog
from gitflow.release.commits import (
    CommitCategory,
    CommitGroups,
    apply_default_bump,
    bump_version,
    classify,
    classify_commits,
)
from gitflow.release.semver import SemanticVersion, parse_version, parse_version_tag, resolve_latest

__all__ = [
    "CommitCategory",
    "CommitGroups",
    "SemanticVersion",
    "apply_default_bump",
    "bump_version",
    "classify",
    "classify_commits",
    "parse_version",
    "parse_version_tag",
    "release_date",
    "render_changelog",
    "resolve_latest",
]
