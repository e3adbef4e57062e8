"""Markdown changelog rendering."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from gitflow.core.config import SECTION_KEYS
from gitflow.git.models import CommitRecord
from gitflow.release.commits import CommitGroups
from gitflow.release.semver import SemanticVersion

__all__ = ["SECTION_TITLES", "release_date", "render_changelog"]

SECTION_TITLES: dict[str, str] = {
    "breaking": "Breaking Changes",
    "features": "Features",
    "fixes": "Fixes",
    "other": "Other",
}


def render_changelog(
    version: SemanticVersion,
    prefix: str,
    release_day: str,
    groups: CommitGroups,
    section_order: Sequence[str] = SECTION_KEYS,
) -> str:
    """Render one release entry.

    Sections are emitted in ``section_order``; empty sections and unknown keys
    are skipped. The result carries no trailing whitespace, so rendering the
    same inputs twice gives identical text.
    """
    header = f"## {prefix}{version}"
    if release_day:
        header += f" - {release_day}"
    lines = [header]

    for key in section_order or SECTION_KEYS:
        title = SECTION_TITLES.get(key)
        entries = groups.section(key)
        if title is None or not entries:
            continue
        lines.append("")
        lines.append(f"### {title}")
        lines.extend(f"- {entry}" for entry in entries)

    return "\n".join(lines).strip()


def release_date(commits: Sequence[CommitRecord], today: date | None = None) -> str:
    """Date of the newest commit, or today when there is nothing to release."""
    if commits and commits[0].date:
        return commits[0].date
    return (today or date.today()).isoformat()
