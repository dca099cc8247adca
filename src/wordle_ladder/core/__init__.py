"""Core configuration and utilities for the Wordle ladder."""

from wordle_ladder.core.config import (
    DEFAULT_DATABASE_URL,
    DEFAULT_HEADER_PREFIX,
    LeaderboardConfig,
    PointsConfig,
    RankingConfig,
    apply_env_overrides,
    load_config,
)
from wordle_ladder.core.errors import (
    CommitError,
    ConfigurationError,
    DuplicateParticipantError,
    MissingFieldError,
    ScoringError,
)
from wordle_ladder.core.progress import BackfillProgress

__all__ = [
    "DEFAULT_DATABASE_URL",
    "DEFAULT_HEADER_PREFIX",
    "LeaderboardConfig",
    "PointsConfig",
    "RankingConfig",
    "BackfillProgress",
    "apply_env_overrides",
    "load_config",
    "CommitError",
    "ConfigurationError",
    "DuplicateParticipantError",
    "MissingFieldError",
    "ScoringError",
]
