import tempfile
from pathlib import Path

import pytest

from wordle_ladder.core.config import LeaderboardConfig
from wordle_ladder.core.progress import BackfillProgress
from wordle_ladder.ingestion import Announcement
from wordle_ladder.pipeline import LeaderboardPipeline
from wordle_ladder.services.storage import LeaderboardStore

CHANNEL_ID = "900"


@pytest.fixture
def db_url():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield f"duckdb:///{Path(tmpdir) / 'ladder.duckdb'}"


@pytest.fixture
async def store(db_url):
    store = LeaderboardStore(db_url)
    try:
        yield store
    finally:
        await store.close()


@pytest.fixture
def config(db_url):
    return LeaderboardConfig(
        channel_id=CHANNEL_ID,
        database_url=db_url,
        participants={"Alice": "111", "bob": "222", "Carol Ann": "333"},
        display_names={"111": "alice", "222": "bob", "333": "carol"},
    )


@pytest.fixture
async def pipeline(config):
    pipeline = LeaderboardPipeline(config, progress=BackfillProgress(disable=True))
    try:
        yield pipeline
    finally:
        await pipeline.close()


@pytest.fixture
def make_summary():
    """Build a plain-text group summary message."""

    def _make_summary(
        message_id: str,
        lines: list[str],
        channel_id: str = CHANNEL_ID,
        mentions: list[dict] | None = None,
    ) -> Announcement:
        content = "\n".join(
            ["**Your group is on a 3 day streak!** 🔥 Here are yesterday's results:", *lines]
        )
        return Announcement.model_validate(
            {
                "id": message_id,
                "channel_id": channel_id,
                "content": content,
                "mentions": mentions or [],
            }
        )

    return _make_summary
