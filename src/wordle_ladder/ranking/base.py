"""Base protocol and value types for puzzle rating systems."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from wordle_ladder.models import Outcome


@dataclass(frozen=True)
class PriorState:
    """Committed state of a participant before the puzzle being scored.

    Attributes:
        rating: Rating before this puzzle.
        games_played: Plays recorded for other puzzles.
    """

    rating: float
    games_played: int = 0


@dataclass
class RatingUpdate:
    """Result of rating one puzzle."""

    puzzle_id: str
    ratings_before: dict[str, float] = field(default_factory=dict)
    ratings_after: dict[str, float] = field(default_factory=dict)
    deltas: dict[str, float] = field(default_factory=dict)
    k_factors: dict[str, float] = field(default_factory=dict)


@runtime_checkable
class RatingSystem(Protocol):
    """Protocol for algorithms that rate all outcomes of one puzzle at once.

    Implementations must be pure: all prior state comes in through ``prior``.
    """

    initial_rating: float

    def update(
        self,
        puzzle_id: str,
        outcomes: Sequence[Outcome],
        prior: Mapping[str, PriorState],
    ) -> RatingUpdate:
        """Compute new ratings for every participant of a puzzle.

        Args:
            puzzle_id: Puzzle being scored.
            outcomes: One outcome per participant.
            prior: Pre-puzzle state keyed by participant. Missing
                participants are treated as unseen.

        Returns:
            RatingUpdate with before/after ratings and deltas.
        """
        ...
