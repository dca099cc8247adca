"""Tests for play and rating persistence."""

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from wordle_ladder.core.errors import CommitError
from wordle_ladder.models import Play
from wordle_ladder.services.storage import LeaderboardStore


def play(puzzle_id: str, participant: str, attempts: int | None, points: int) -> Play:
    return Play(puzzle_id=puzzle_id, participant=participant, attempts=attempts, points=points)


class TestReads:
    """Tests for reads against an empty or populated store."""

    async def test_unseen_participant_has_initial_rating(self, store):
        assert await store.fetch_rating("nobody") == 1500.0

    async def test_custom_initial_rating(self, db_url):
        store = LeaderboardStore(db_url, initial_rating=1200.0)
        try:
            assert await store.fetch_rating("nobody") == 1200.0
        finally:
            await store.close()

    async def test_play_count(self, store):
        await store.commit("1", [play("1", "a", 3, 15)], {"a": 1510.0})
        await store.commit("2", [play("2", "a", None, -5)], {"a": 1490.0})

        assert await store.fetch_play_count("a") == 2
        assert await store.fetch_play_count("a", exclude_puzzle="2") == 1
        assert await store.fetch_play_count("b") == 0

    async def test_prior_state(self, store):
        await store.commit(
            "1", [play("1", "a", 3, 15), play("1", "b", 4, 12)], {"a": 1517.5, "b": 1482.5}
        )
        await store.commit("2", [play("2", "a", 2, 18)], {"a": 1517.5})

        prior = await store.fetch_prior_state(["a", "b", "c"], exclude_puzzle="2")

        assert prior["a"].rating == 1517.5
        assert prior["a"].games_played == 1
        assert prior["b"].games_played == 1
        assert prior["c"].rating == 1500.0
        assert prior["c"].games_played == 0

    async def test_fetch_plays(self, store):
        await store.commit("7", [play("7", "b", 4, 12), play("7", "a", 3, 15)], {})
        await store.commit("8", [play("8", "a", 1, 25)], {})

        rows = await store.fetch_plays("7")

        assert [(p.participant, p.attempts) for p in rows] == [("a", 3), ("b", 4)]
        assert len(await store.fetch_plays()) == 3


class TestCommit:
    """Tests for the atomic puzzle write."""

    async def test_commit_writes_plays_and_ratings(self, store):
        await store.commit(
            "100",
            [play("100", "a", 3, 15), play("100", "b", None, -5)],
            {"a": 1535.0, "b": 1465.0},
        )

        assert await store.fetch_rating("a") == 1535.0
        assert await store.fetch_rating("b") == 1465.0
        rows = await store.fetch_plays("100")
        assert [(p.participant, p.attempts, p.points) for p in rows] == [
            ("a", 3, 15),
            ("b", None, -5),
        ]

    async def test_recommit_replaces_play_row(self, store):
        """At most one row per (puzzle, participant)."""
        await store.commit("100", [play("100", "a", 3, 15)], {"a": 1500.0})
        await store.commit("100", [play("100", "a", 5, 10)], {"a": 1500.0})

        rows = await store.fetch_plays("100")
        assert len(rows) == 1
        assert rows[0].attempts == 5
        assert rows[0].points == 10

    async def test_failed_commit_persists_nothing(self, store, monkeypatch):
        await store.commit("1", [play("1", "a", 3, 15)], {"a": 1510.0})

        def fail_commit(self):
            raise OperationalError("COMMIT", {}, Exception("disk full"))

        monkeypatch.setattr(Session, "commit", fail_commit)

        with pytest.raises(CommitError, match="Puzzle 2"):
            await store.commit("2", [play("2", "a", 1, 25)], {"a": 1600.0})

        monkeypatch.undo()
        assert await store.fetch_rating("a") == 1510.0
        assert await store.fetch_plays("2") == []


class TestStats:
    """Tests for the aggregate leaderboard query."""

    async def test_aggregates(self, store):
        await store.commit(
            "1",
            [play("1", "a", 3, 15), play("1", "b", 4, 12), play("1", "c", None, -5)],
            {"a": 1535.0, "b": 1500.0, "c": 1465.0},
        )
        await store.commit(
            "2",
            [play("2", "a", 4, 12), play("2", "b", 4, 12), play("2", "c", None, -5)],
            {"a": 1560.0, "b": 1510.0, "c": 1430.0},
        )
        await store.commit("3", [play("3", "a", 2, 18)], {"a": 1560.0})

        stats = await store.fetch_stats()

        assert [s.participant for s in stats] == ["a", "b", "c"]
        a, b, c = stats
        assert (a.games, a.wins, a.total_points) == (3, 3, 45)
        assert a.avg_attempts == 3.0
        assert (b.games, b.wins, b.avg_attempts, b.total_points) == (2, 2, 4.0, 24)
        assert (c.games, c.wins, c.total_points) == (2, 0, -10)
        assert c.avg_attempts is None

    async def test_average_rounded_to_two_places(self, store):
        for i, attempts in enumerate((3, 4, 4), start=1):
            await store.commit(str(i), [play(str(i), "a", attempts, 12)], {"a": 1500.0})

        (row,) = await store.fetch_stats()
        assert row.avg_attempts == 3.67

    async def test_rated_participant_without_plays(self, store):
        await store.commit("1", [], {"ghost": 1490.0})

        (row,) = await store.fetch_stats()
        assert (row.games, row.wins, row.total_points, row.avg_attempts) == (0, 0, 0, None)

    async def test_equal_ratings_ordered_by_id(self, store):
        await store.commit("1", [], {"zed": 1500.0, "amy": 1500.0, "top": 1600.0})

        assert [s.participant for s in await store.fetch_stats()] == ["top", "amy", "zed"]

    async def test_empty_store(self, store):
        assert await store.fetch_stats() == []


class TestReset:
    """Tests for wiping state."""

    async def test_reset_clears_everything(self, store):
        await store.commit("1", [play("1", "a", 3, 15)], {"a": 1510.0})

        await store.reset()

        assert await store.fetch_stats() == []
        assert await store.fetch_plays() == []
        assert await store.fetch_rating("a") == 1500.0

    async def test_reset_empty_store(self, store):
        await store.reset()
        assert await store.fetch_stats() == []
