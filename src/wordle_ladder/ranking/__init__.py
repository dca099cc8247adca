"""Ranking module for the Wordle ladder.

Provides the pairwise Elo rating system and the fixed points table.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from wordle_ladder.ranking.base import PriorState, RatingSystem, RatingUpdate
from wordle_ladder.ranking.elo import (
    PairwiseEloEngine,
    calculate_expected_score,
    learning_rate,
    pairwise_score,
)
from wordle_ladder.ranking.points import DEFAULT_POINTS, PointsTable

if TYPE_CHECKING:
    from wordle_ladder.core.config import LeaderboardConfig


def create_rating_system(config: LeaderboardConfig) -> RatingSystem:
    """Create the rating system described by config.

    Args:
        config: Leaderboard configuration.

    Returns:
        Configured rating system.
    """
    return PairwiseEloEngine(
        initial_rating=config.ranking.initial_rating,
        k_base=config.ranking.k_base,
        k_step=config.ranking.k_step,
        k_floor=config.ranking.k_floor,
    )


__all__ = [
    "DEFAULT_POINTS",
    "PairwiseEloEngine",
    "PointsTable",
    "PriorState",
    "RatingSystem",
    "RatingUpdate",
    "calculate_expected_score",
    "create_rating_system",
    "learning_rate",
    "pairwise_score",
]
