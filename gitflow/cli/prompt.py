"""Interactive prompts for the cleanup command."""

from __future__ import annotations

from collections.abc import Sequence

import typer

from gitflow.output.console import ConsoleProtocol, Style
from gitflow.services.cleanup import CleanupCandidate, ConfirmFn


def _age_label(candidate: CleanupCandidate) -> str:
    return "?" if candidate.age_days is None else f"{candidate.age_days}d"


def make_confirm(console: ConsoleProtocol) -> ConfirmFn:
    """Confirmation callback printing the plan and requiring a typed ``yes``."""

    def confirm(plan: Sequence[CleanupCandidate], delete_remote: bool) -> bool:
        console.header("Branches to delete")
        for candidate in plan:
            line = f"  {candidate.name}  reason={candidate.reason} age={_age_label(candidate)}"
            if candidate.remote_also:
                line += " remote=yes"
            console.print(line)
        console.newline()
        answer: str = typer.prompt("Proceed, type yes to confirm", default="", show_default=False)
        return answer.strip().lower() == "yes"

    return confirm


def parse_selection(answer: str, count: int) -> list[int] | None:
    """Parse ``"1,3-4"`` into zero-based indexes; None if malformed or out of range."""
    indexes: list[int] = []
    for part in answer.replace(" ", "").split(","):
        if not part:
            continue
        lo_text, sep, hi_text = part.partition("-")
        if not lo_text.isdigit() or (sep and not hi_text.isdigit()):
            return None
        lo = int(lo_text)
        hi = int(hi_text) if sep else lo
        if lo < 1 or hi > count or lo > hi:
            return None
        indexes.extend(range(lo - 1, hi))
    return sorted(set(indexes))


def select_branches(
    console: ConsoleProtocol, candidates: Sequence[CleanupCandidate]
) -> tuple[str, ...]:
    """Let the user pick which deletable branches to remove (empty means none)."""
    console.header("Deletable branches")
    for i, candidate in enumerate(candidates, start=1):
        console.print(f"  {i}. {candidate.name} ({candidate.reason}, {_age_label(candidate)})")
    console.print("Enter numbers or ranges (e.g. 1,3-4); empty selects none", Style.DIM)

    while True:
        answer: str = typer.prompt("Select", default="", show_default=False)
        indexes = parse_selection(answer, len(candidates))
        if indexes is not None:
            return tuple(candidates[i].name for i in indexes)
        console.warning(f"invalid selection: {answer}")
