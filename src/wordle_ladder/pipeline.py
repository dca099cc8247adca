"""Pipeline orchestration: announcement in, committed ratings out."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from wordle_ladder.core.config import LeaderboardConfig
from wordle_ladder.core.errors import ScoringError
from wordle_ladder.core.progress import BackfillProgress
from wordle_ladder.ingestion import (
    Announcement,
    IdentityResolver,
    NameDirectory,
    ResultExtractor,
)
from wordle_ladder.models import PlayerStats, PuzzleResult
from wordle_ladder.ranking import PointsTable, create_rating_system
from wordle_ladder.services.leaderboard import LeaderboardService
from wordle_ladder.services.scoring import PuzzleScore, ScoringService
from wordle_ladder.services.storage import LeaderboardStore

logger = structlog.get_logger()


@dataclass
class BackfillSummary:
    """Counts from replaying a message history."""

    seen: int = 0
    recorded: int = 0
    skipped: int = 0
    failed: int = 0


class LeaderboardPipeline:
    """Processes announcements one puzzle at a time.

    Historical replay and live delivery both go through ``process``, so
    replaying a puzzle that was already delivered live converges on the same
    stored rows.
    """

    def __init__(
        self,
        config: LeaderboardConfig,
        store: LeaderboardStore | None = None,
        progress: BackfillProgress | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Leaderboard configuration.
            store: Store to use. Created from ``config.database_url`` if None.
            progress: Progress display for backfills.
        """
        self.config = config
        self.store = store or LeaderboardStore(
            config.database_url, initial_rating=config.ranking.initial_rating
        )
        self.progress = progress or BackfillProgress()

        resolver = IdentityResolver(NameDirectory(config.participants))
        self.extractor = ResultExtractor(
            resolver,
            channel_id=config.channel_id,
            header_prefix=config.header_prefix,
        )
        self.scoring = ScoringService(
            self.store,
            create_rating_system(config),
            PointsTable.from_config(config.points),
        )
        self.leaderboard = LeaderboardService(self.store)

    async def start(self) -> None:
        """Apply start-up actions such as a requested full reset."""
        if self.config.reset_on_start:
            logger.warning("reset_requested")
            await self.store.reset()

    async def process(self, announcement: Announcement) -> PuzzleScore | None:
        """Extract and record one announcement.

        Returns:
            The committed PuzzleScore, or None when the message is not a
            results announcement or its puzzle was rejected.
        """
        result = self.extractor.extract(announcement)
        if result is None:
            return None
        return await self._record(result)

    async def _record(self, result: PuzzleResult) -> PuzzleScore | None:
        try:
            return await self.scoring.record_puzzle(result)
        except ScoringError as e:
            logger.error("puzzle_rejected", puzzle=e.puzzle_id, error=str(e))
            return None

    async def backfill(self, announcements: Sequence[Announcement]) -> BackfillSummary:
        """Replay a message history in order.

        Args:
            announcements: Messages, oldest first.

        Returns:
            Summary counts.
        """
        summary = BackfillSummary()
        logger.info("backfill_start", messages=len(announcements))

        async for announcement, (matched, score) in self.progress.track(
            announcements, self._replay_one, description="Backfilling"
        ):
            summary.seen += 1
            if not matched:
                summary.skipped += 1
            elif score is None:
                summary.failed += 1
            else:
                summary.recorded += 1
                logger.debug("backfill_puzzle", puzzle=score.puzzle_id, message=announcement.id)

        logger.info(
            "backfill_complete",
            recorded=summary.recorded,
            skipped=summary.skipped,
            failed=summary.failed,
        )
        return summary

    async def _replay_one(self, announcement: Announcement) -> tuple[bool, PuzzleScore | None]:
        result = self.extractor.extract(announcement)
        if result is None:
            return False, None
        return True, await self._record(result)

    async def list_stats(self) -> list[PlayerStats]:
        return await self.leaderboard.list_stats()

    async def close(self) -> None:
        await self.store.close()

