"""Semantic versions and version tags."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from gitflow.core.config import BumpKind

_VERSION_RE = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)")

__all__ = [
    "SemanticVersion",
    "parse_version",
    "parse_version_tag",
    "resolve_latest",
]


@dataclass(frozen=True, slots=True, order=True)
class SemanticVersion:
    major: int = 0
    minor: int = 0
    patch: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def bump(self, kind: BumpKind) -> SemanticVersion:
        match kind:
            case "major":
                return SemanticVersion(self.major + 1, 0, 0)
            case "minor":
                return SemanticVersion(self.major, self.minor + 1, 0)
            case "patch":
                return SemanticVersion(self.major, self.minor, self.patch + 1)
            case _:
                raise AssertionError(f"unexpected bump kind: {kind}")


def parse_version(text: str) -> SemanticVersion | None:
    """Parse ``X.Y.Z`` where each part is only digits."""
    m = _VERSION_RE.fullmatch(text)
    if m is None:
        return None
    return SemanticVersion(int(m.group(1)), int(m.group(2)), int(m.group(3)))


def parse_version_tag(tag: str, prefix: str) -> SemanticVersion | None:
    if not tag.startswith(prefix):
        return None
    return parse_version(tag[len(prefix) :])


def resolve_latest(tags: Iterable[str], prefix: str) -> tuple[SemanticVersion, str]:
    """Highest version among ``prefix``-tagged tags and the tag it came from.

    Tags that do not parse are skipped. With no matching tag the result is
    ``(0.0.0, "")`` so that history is read from the first commit.
    """
    best: tuple[SemanticVersion, str] | None = None
    for tag in tags:
        version = parse_version_tag(tag, prefix)
        if version is None:
            continue
        if best is None or version > best[0]:
            best = (version, tag)
    if best is None:
        return SemanticVersion(), ""
    return best
