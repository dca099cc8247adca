"""Read-side leaderboard projection."""

from __future__ import annotations

from wordle_ladder.models import PlayerStats
from wordle_ladder.services.storage import LeaderboardStore


class LeaderboardService:
    """Summary statistics per participant, derived from committed history."""

    def __init__(self, store: LeaderboardStore) -> None:
        self.store = store

    async def list_stats(self, limit: int | None = None) -> list[PlayerStats]:
        """Get leaderboard rows ordered by rating, highest first.

        Args:
            limit: Optional number of rows to return.

        Returns:
            PlayerStats rows. Performs no writes.
        """
        stats = await self.store.fetch_stats()
        if limit is not None:
            if limit <= 0:
                msg = "limit must be greater than 0"
                raise ValueError(msg)
            return stats[:limit]
        return stats

    async def get_player(self, participant: str) -> PlayerStats | None:
        """Get one participant's row, or None if they have never played."""
        stats = await self.store.fetch_stats()
        return next((s for s in stats if s.participant == participant), None)
