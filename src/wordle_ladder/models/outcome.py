"""In-memory puzzle outcomes produced by extraction and consumed by scoring."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Outcome:
    """A participant's result for one puzzle.

    Attributes:
        participant: Canonical participant id.
        attempts: Guesses used (1..6), or None when the puzzle was failed.
    """

    participant: str
    attempts: int | None

    @property
    def failed(self) -> bool:
        return self.attempts is None


@dataclass
class PuzzleResult:
    """All extracted outcomes for one puzzle instance."""

    puzzle_id: str
    outcomes: list[Outcome] = field(default_factory=list)

    @property
    def participants(self) -> list[str]:
        return [o.participant for o in self.outcomes]
