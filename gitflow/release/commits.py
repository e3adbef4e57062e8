"""Conventional-commit classification and version bumping.

Only the commit subject decides the category; the body can only add the
breaking flag (``BREAKING CHANGE`` anywhere in it).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from gitflow.git.models import CommitRecord
from gitflow.release.semver import SemanticVersion

__all__ = [
    "CommitCategory",
    "CommitGroups",
    "apply_default_bump",
    "bump_version",
    "classify",
    "classify_commits",
]

CommitCategory = Literal["breaking", "feature", "fix", "other", "unclassified"]

_CATEGORY_BY_TYPE: dict[str, CommitCategory] = {
    "feat": "feature",
    "fix": "fix",
    "perf": "fix",
    "refactor": "other",
    "docs": "other",
    "test": "other",
    "chore": "other",
}

BREAKING_MARKER = "BREAKING CHANGE"


@dataclass(frozen=True, slots=True)
class CommitGroups:
    """Commit subjects per changelog section, in log order (newest first)."""

    breaking: tuple[str, ...] = ()
    features: tuple[str, ...] = ()
    fixes: tuple[str, ...] = ()
    other: tuple[str, ...] = ()

    def section(self, key: str) -> tuple[str, ...]:
        match key:
            case "breaking":
                return self.breaking
            case "features":
                return self.features
            case "fixes":
                return self.fixes
            case "other":
                return self.other
            case _:
                return ()

    @property
    def is_empty(self) -> bool:
        return not (self.breaking or self.features or self.fixes or self.other)


def classify(subject: str, body: str = "") -> tuple[CommitCategory, bool]:
    """Return ``(category, is_breaking)`` for one commit.

    ``feat(api)!: drop v1`` is a breaking feature; ``update readme`` is
    unclassified.
    """
    category: CommitCategory = "unclassified"
    breaking = False

    head, sep, _ = subject.partition(":")
    if sep:
        token = head.strip()
        if token.endswith("!"):
            breaking = True
            token = token[:-1]
        token = token.split("(", 1)[0].strip()
        category = _CATEGORY_BY_TYPE.get(token, "unclassified")

    if BREAKING_MARKER in body:
        breaking = True
    return category, breaking


def classify_commits(commits: Iterable[CommitRecord]) -> CommitGroups:
    breaking: list[str] = []
    features: list[str] = []
    fixes: list[str] = []
    other: list[str] = []

    for commit in commits:
        category, is_breaking = classify(commit.subject, commit.body)
        if is_breaking:
            breaking.append(commit.subject)
            continue
        match category:
            case "feature":
                features.append(commit.subject)
            case "fix":
                fixes.append(commit.subject)
            case "other":
                other.append(commit.subject)
            case _:
                pass

    return CommitGroups(
        breaking=tuple(breaking),
        features=tuple(features),
        fixes=tuple(fixes),
        other=tuple(other),
    )


def apply_default_bump(base: SemanticVersion, default_bump: str) -> SemanticVersion:
    """Bump used when no commit implies one; anything unknown counts as patch."""
    match default_bump:
        case "major":
            return base.bump("major")
        case "minor":
            return base.bump("minor")
        case _:
            return base.bump("patch")


def bump_version(base: SemanticVersion, groups: CommitGroups, default_bump: str) -> SemanticVersion:
    if groups.breaking:
        return base.bump("major")
    if groups.features:
        return base.bump("minor")
    if groups.fixes:
        return base.bump("patch")
    return apply_default_bump(base, default_bump)
