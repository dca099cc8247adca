"""Pairwise Elo calculations for daily Wordle puzzles."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence

from wordle_ladder.core.errors import DuplicateParticipantError
from wordle_ladder.models import Outcome

from .base import PriorState, RatingUpdate


def calculate_expected_score(rating_a: float, rating_b: float) -> float:
    """Calculate expected score for player A against player B.

    Uses the standard Elo formula:
    E_A = 1 / (1 + 10^((R_B - R_A) / 400))

    Args:
        rating_a: Rating of player A.
        rating_b: Rating of player B.

    Returns:
        Expected score of A (0.0 to 1.0).
    """
    return 1.0 / (1.0 + 10 ** ((rating_b - rating_a) / 400))


def pairwise_score(attempts_a: int | None, attempts_b: int | None) -> float:
    """Score of A against B for one puzzle: 1 win, 0 loss, 0.5 tie.

    Fewer guesses wins, any solve beats a failure, and two failures tie.
    """
    if attempts_a == attempts_b:
        return 0.5
    if attempts_a is None:
        return 0.0
    if attempts_b is None:
        return 1.0
    return 1.0 if attempts_a < attempts_b else 0.0


def learning_rate(
    games_played: int,
    base: float = 35.0,
    step: float = 2.0,
    floor: float = 10.0,
) -> float:
    """K-factor for a participant with ``games_played`` prior plays."""
    return max(base - step * games_played, floor)


def find_duplicates(outcomes: Sequence[Outcome]) -> set[str]:
    """Participants listed more than once in an outcome set."""
    counts = Counter(o.participant for o in outcomes)
    return {p for p, n in counts.items() if n > 1}


class PairwiseEloEngine:
    """Rates a puzzle by comparing every participant against every other.

    Each participant's delta is the sum over all opponents of
    ``K * (score - expected)``, always against pre-puzzle ratings, so the
    order in which opponents are visited never matters.

    Attributes:
        initial_rating: Rating for participants with no prior state.
        k_base: K-factor for a first play.
        k_step: K reduction per prior play.
        k_floor: Minimum K-factor.
    """

    def __init__(
        self,
        initial_rating: float = 1500.0,
        k_base: float = 35.0,
        k_step: float = 2.0,
        k_floor: float = 10.0,
    ) -> None:
        self.initial_rating = initial_rating
        self.k_base = k_base
        self.k_step = k_step
        self.k_floor = k_floor

    def k_factor(self, games_played: int) -> float:
        return learning_rate(games_played, self.k_base, self.k_step, self.k_floor)

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
            prior: Pre-puzzle state keyed by participant.

        Returns:
            RatingUpdate with before/after ratings, deltas and K-factors.

        Raises:
            DuplicateParticipantError: If a participant appears twice.
        """
        duplicates = find_duplicates(outcomes)
        if duplicates:
            raise DuplicateParticipantError(puzzle_id, duplicates)

        default = PriorState(rating=self.initial_rating)
        update = RatingUpdate(puzzle_id=puzzle_id)
        for o in outcomes:
            state = prior.get(o.participant, default)
            update.ratings_before[o.participant] = state.rating
            update.k_factors[o.participant] = self.k_factor(state.games_played)
            update.deltas[o.participant] = 0.0

        before = update.ratings_before
        for a in outcomes:
            k = update.k_factors[a.participant]
            for b in outcomes:
                if a.participant == b.participant:
                    continue
                score = pairwise_score(a.attempts, b.attempts)
                expected = calculate_expected_score(before[a.participant], before[b.participant])
                update.deltas[a.participant] += k * (score - expected)

        update.ratings_after = {p: before[p] + d for p, d in update.deltas.items()}
        return update
