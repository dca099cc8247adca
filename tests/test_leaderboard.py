"""Tests for the leaderboard read model."""

import pytest

from wordle_ladder.models import Play
from wordle_ladder.services import LeaderboardService


@pytest.fixture
async def leaderboard(store):
    await store.commit(
        "1",
        [
            Play(puzzle_id="1", participant="a", attempts=2, points=18),
            Play(puzzle_id="1", participant="b", attempts=4, points=12),
            Play(puzzle_id="1", participant="c", attempts=None, points=-5),
        ],
        {"a": 1535.0, "b": 1500.0, "c": 1465.0},
    )
    return LeaderboardService(store)


class TestLeaderboardService:
    """Tests for LeaderboardService."""

    async def test_list_stats_ordered_by_rating(self, leaderboard):
        rows = await leaderboard.list_stats()
        assert [r.participant for r in rows] == ["a", "b", "c"]

    async def test_limit(self, leaderboard):
        rows = await leaderboard.list_stats(limit=2)
        assert [r.participant for r in rows] == ["a", "b"]

    async def test_invalid_limit(self, leaderboard):
        with pytest.raises(ValueError, match="greater than 0"):
            await leaderboard.list_stats(limit=0)

    async def test_get_player(self, leaderboard):
        row = await leaderboard.get_player("c")
        assert row.total_points == -5
        assert row.wins == 0
        assert await leaderboard.get_player("nobody") is None

    async def test_reads_do_not_write(self, leaderboard, store):
        await leaderboard.list_stats()
        await leaderboard.get_player("a")

        assert len(await store.fetch_plays()) == 3
