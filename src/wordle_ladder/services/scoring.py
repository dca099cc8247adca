"""Scoring service: rate one puzzle and persist the result atomically."""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from wordle_ladder.core.errors import DuplicateParticipantError
from wordle_ladder.models import Outcome, Play, PuzzleResult
from wordle_ladder.ranking import PointsTable, RatingSystem, RatingUpdate
from wordle_ladder.ranking.elo import find_duplicates
from wordle_ladder.services.storage import LeaderboardStore

logger = structlog.get_logger()


@dataclass
class PuzzleScore:
    """Committed outcome of scoring one puzzle."""

    puzzle_id: str
    outcomes: list[Outcome]
    points: dict[str, int] = field(default_factory=dict)
    update: RatingUpdate | None = None

    @property
    def ratings(self) -> dict[str, float]:
        return self.update.ratings_after if self.update else {}

    @property
    def deltas(self) -> dict[str, float]:
        return self.update.deltas if self.update else {}


class ScoringService:
    """Reads prior state, rates a puzzle and commits plays and ratings.

    Only one puzzle is written at a time per store: the read of "before"
    ratings, the computation and the commit all happen under the store's
    writer lock, shared by every service writing to it.
    """

    def __init__(
        self,
        store: LeaderboardStore,
        rating_system: RatingSystem,
        points: PointsTable,
    ) -> None:
        """Initialize scoring service.

        Args:
            store: Persistence layer for plays and ratings.
            rating_system: Pure rating algorithm.
            points: Points lookup per outcome.
        """
        self.store = store
        self.rating_system = rating_system
        self.points = points

    async def record_puzzle(self, result: PuzzleResult) -> PuzzleScore:
        """Score a puzzle and commit it.

        Re-recording a puzzle upserts the play rows of the participants in
        ``result`` and applies a fresh update computed from the current
        committed ratings. Rows for participants absent from ``result`` are
        left as they were.

        Args:
            result: Extracted outcomes for one puzzle.

        Returns:
            PuzzleScore with points, before/after ratings and deltas.

        Raises:
            DuplicateParticipantError: If a participant has two outcomes.
            CommitError: If the write failed; nothing was persisted.
        """
        duplicates = find_duplicates(result.outcomes)
        if duplicates:
            raise DuplicateParticipantError(result.puzzle_id, duplicates)

        async with self.store.writer():
            prior = await self.store.fetch_prior_state(
                result.participants, exclude_puzzle=result.puzzle_id
            )
            update = self.rating_system.update(result.puzzle_id, result.outcomes, prior)

            plays = [
                Play(
                    puzzle_id=result.puzzle_id,
                    participant=o.participant,
                    attempts=o.attempts,
                    points=self.points.points_for(o.attempts),
                )
                for o in result.outcomes
            ]
            await self.store.commit(result.puzzle_id, plays, update.ratings_after)

        score = PuzzleScore(
            puzzle_id=result.puzzle_id,
            outcomes=list(result.outcomes),
            points={p.participant: p.points for p in plays},
            update=update,
        )
        logger.info(
            "puzzle_recorded",
            puzzle=result.puzzle_id,
            participants=len(result.outcomes),
        )
        return score
