"""Persistence for plays and ratings using SQLModel."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable, Iterable, Mapping, Sequence
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, TypeVar

import structlog
from sqlalchemy import delete, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool, StaticPool
from sqlmodel import Session, SQLModel, col, create_engine, select

from wordle_ladder.core.errors import CommitError
from wordle_ladder.models import Play, PlayerRating, PlayerStats
from wordle_ladder.ranking.base import PriorState

logger = structlog.get_logger()

T = TypeVar("T")


def _make_engine(database_url: str) -> Any:
    if database_url.startswith("duckdb:///") and ":memory:" not in database_url:
        Path(database_url.removeprefix("duckdb:///")).parent.mkdir(parents=True, exist_ok=True)
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection so every session sees the same in-memory database
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    # Use NullPool to avoid connection pooling issues on Windows
    return create_engine(database_url, poolclass=NullPool)


class LeaderboardStore:
    """Durable play history and current ratings.

    Handles:
    - ``plays``: one row per (puzzle, participant), replaced on re-submission
    - ``ratings``: one row per participant
    - Aggregate leaderboard statistics over both tables
    """

    def __init__(self, database_url: str, initial_rating: float = 1500.0) -> None:
        """Initialize the store and create tables.

        Args:
            database_url: SQLAlchemy URL (DuckDB by default).
            initial_rating: Rating reported for participants without a row.
        """
        self._engine = _make_engine(database_url)
        self.database_url = database_url
        self.initial_rating = initial_rating
        self._write_lock = asyncio.Lock()
        SQLModel.metadata.create_all(self._engine)
        logger.info("store_init", url=database_url)

    @asynccontextmanager
    async def writer(self) -> AsyncIterator[None]:
        """Hold the store's single-writer lock.

        Every puzzle write, from reading prior state to the commit, runs inside
        this block. ``commit`` does not take the lock itself; callers hold it.
        """
        async with self._write_lock:
            yield

    async def _run_session(self, fn: Callable[[Session], T]) -> T:
        """Run sync session work on a worker thread.

        Uncommitted work is rolled back when the session closes.
        """

        def _run() -> T:
            with Session(self._engine) as session:
                return fn(session)

        return await asyncio.to_thread(_run)

    # ==================== Reads ====================

    async def fetch_rating(self, participant: str) -> float:
        """Get the committed rating for a participant (default if unseen)."""

        def _get(session: Session) -> float:
            row = session.get(PlayerRating, participant)
            return self.initial_rating if row is None else row.rating

        return await self._run_session(_get)

    async def fetch_play_count(self, participant: str, exclude_puzzle: str | None = None) -> int:
        """Count committed plays for a participant.

        Args:
            participant: Participant id.
            exclude_puzzle: Puzzle whose row, if any, is not counted.
        """

        def _get(session: Session) -> int:
            statement = (
                select(func.count()).select_from(Play).where(Play.participant == participant)
            )
            if exclude_puzzle is not None:
                statement = statement.where(Play.puzzle_id != exclude_puzzle)
            return int(session.exec(statement).one())

        return await self._run_session(_get)

    async def fetch_prior_state(
        self, participants: Iterable[str], exclude_puzzle: str
    ) -> dict[str, PriorState]:
        """Read ratings and play counts for several participants at once.

        Plays for ``exclude_puzzle`` are not counted so re-scoring a puzzle
        sees the same experience as the first scoring did.
        """
        ids = list(participants)

        def _get(session: Session) -> dict[str, PriorState]:
            ratings = {
                r.participant: r.rating
                for r in session.exec(
                    select(PlayerRating).where(col(PlayerRating.participant).in_(ids))
                )
            }
            counts = dict(
                session.exec(
                    select(Play.participant, func.count())
                    .where(col(Play.participant).in_(ids), Play.puzzle_id != exclude_puzzle)
                    .group_by(Play.participant)
                ).all()
            )
            return {
                p: PriorState(
                    rating=ratings.get(p, self.initial_rating),
                    games_played=int(counts.get(p, 0)),
                )
                for p in ids
            }

        return await self._run_session(_get)

    async def fetch_plays(self, puzzle_id: str | None = None) -> list[Play]:
        """Get play rows, optionally for one puzzle."""

        def _get(session: Session) -> list[Play]:
            statement = select(Play)
            if puzzle_id is not None:
                statement = statement.where(Play.puzzle_id == puzzle_id)
            statement = statement.order_by(col(Play.puzzle_id), col(Play.participant))
            return list(session.exec(statement).all())

        return await self._run_session(_get)

    async def fetch_stats(self) -> list[PlayerStats]:
        """Aggregate per-participant statistics, highest rating first.

        A single statement, so the result reflects one committed snapshot.
        """

        def _get(session: Session) -> list[PlayerStats]:
            statement = (
                select(
                    PlayerRating.participant,
                    PlayerRating.rating,
                    func.count(col(Play.puzzle_id)),
                    func.count(col(Play.attempts)),
                    func.avg(col(Play.attempts)),
                    func.coalesce(func.sum(col(Play.points)), 0),
                )
                .select_from(PlayerRating)
                .outerjoin(Play, col(Play.participant) == col(PlayerRating.participant))
                .group_by(col(PlayerRating.participant), col(PlayerRating.rating))
                .order_by(col(PlayerRating.rating).desc(), col(PlayerRating.participant))
            )
            return [
                PlayerStats(
                    participant=participant,
                    rating=float(rating),
                    games=int(games),
                    wins=int(wins),
                    avg_attempts=None if avg is None else round(float(avg), 2),
                    total_points=int(total),
                )
                for participant, rating, games, wins, avg, total in session.exec(statement).all()
            ]

        return await self._run_session(_get)

    # ==================== Writes ====================

    async def commit(
        self,
        puzzle_id: str,
        plays: Sequence[Play],
        new_ratings: Mapping[str, float],
    ) -> None:
        """Write a puzzle's plays and ratings as one transaction.

        Play rows are upserted on (puzzle_id, participant) and rating rows on
        participant. Either everything is written or nothing is.

        Raises:
            CommitError: If the transaction could not be completed.
        """

        def _save(session: Session) -> None:
            for play in plays:
                existing = session.get(Play, (puzzle_id, play.participant))
                if existing:
                    existing.attempts = play.attempts
                    existing.points = play.points
                    session.add(existing)
                else:
                    session.add(
                        Play(
                            puzzle_id=puzzle_id,
                            participant=play.participant,
                            attempts=play.attempts,
                            points=play.points,
                        )
                    )

            for participant, rating in new_ratings.items():
                existing = session.get(PlayerRating, participant)
                if existing:
                    existing.rating = rating
                    session.add(existing)
                else:
                    session.add(PlayerRating(participant=participant, rating=rating))

            session.commit()

        try:
            await self._run_session(_save)
        except SQLAlchemyError as e:
            logger.error("commit_failed", puzzle=puzzle_id, error=str(e))
            raise CommitError(puzzle_id, type(e).__name__) from e

    async def reset(self) -> None:
        """Delete all plays and ratings in one transaction."""

        def _reset(session: Session) -> None:
            connection = session.connection()
            connection.execute(delete(Play))
            connection.execute(delete(PlayerRating))
            session.commit()

        async with self._write_lock:
            await self._run_session(_reset)
        logger.info("state_reset")

    # ==================== Lifecycle ====================

    async def close(self) -> None:
        """Dispose of the database engine."""
        self._engine.dispose()
