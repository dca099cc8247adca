"""Configuration schemas and loading for the Wordle ladder."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from wordle_ladder.core.errors import MissingFieldError

DEFAULT_HEADER_PREFIX = "**Your group is on"
DEFAULT_DATABASE_URL = "duckdb:///wordle_stats.duckdb"
MAX_ATTEMPTS = 6

ENV_CHANNEL_ID = "WORDLE_CHANNEL_ID"
ENV_DB_FILE = "DB_FILE"
ENV_RESET = "RESET_WORDLE_DB"


class RankingConfig(BaseModel):
    """Pairwise Elo configuration.

    Attributes:
        initial_rating: Rating assumed for a participant with no rating row.
        k_base: Learning-rate factor for a participant with no prior plays.
        k_step: Amount the factor shrinks per prior play.
        k_floor: Lowest factor a participant can reach.
    """

    initial_rating: float = 1500.0
    k_base: float = 35.0
    k_step: float = 2.0
    k_floor: float = 10.0

    @field_validator("k_floor")
    @classmethod
    def validate_floor_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("k_floor must be positive so ratings never freeze")
        return v


class PointsConfig(BaseModel):
    """Points awarded per outcome."""

    by_attempts: dict[int, int] = Field(
        default_factory=lambda: {1: 25, 2: 18, 3: 15, 4: 12, 5: 10, 6: 5}
    )
    failure: int = -5

    @field_validator("by_attempts")
    @classmethod
    def validate_all_attempts_mapped(cls, v: dict[int, int]) -> dict[int, int]:
        expected = set(range(1, MAX_ATTEMPTS + 1))
        if set(v) != expected:
            msg = f"Points must be defined for exactly attempts 1..{MAX_ATTEMPTS}, got {sorted(v)}"
            raise ValueError(msg)
        return v


class LeaderboardConfig(BaseModel):
    """Complete leaderboard configuration."""

    channel_id: str | None = None
    database_url: str = DEFAULT_DATABASE_URL
    reset_on_start: bool = False
    header_prefix: str = DEFAULT_HEADER_PREFIX
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    points: PointsConfig = Field(default_factory=PointsConfig)
    participants: dict[str, str] = Field(default_factory=dict)
    display_names: dict[str, str] = Field(default_factory=dict)

    @field_validator("channel_id", mode="before")
    @classmethod
    def coerce_channel_id(cls, v: Any) -> Any:
        # Snowflake ids are often written unquoted in YAML
        return str(v) if isinstance(v, int) else v

    @field_validator("participants", "display_names", mode="before")
    @classmethod
    def coerce_id_mapping(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {str(k): str(val) if isinstance(val, int) else val for k, val in v.items()}
        return v

    @field_validator("header_prefix")
    @classmethod
    def validate_header_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = "header_prefix cannot be empty"
            raise ValueError(msg)
        return v

    @field_validator("participants")
    @classmethod
    def validate_participant_ids(cls, v: dict[str, str]) -> dict[str, str]:
        """Ensure every name maps to a non-empty participant id."""
        for name, participant_id in v.items():
            if not participant_id or not str(participant_id).strip():
                msg = f"Participant id for '{name}' cannot be empty"
                raise ValueError(msg)
        return v

    def display_name(self, participant: str) -> str:
        """Get the display name for a participant, falling back to the id."""
        return self.display_names.get(participant, participant)

    def require_channel(self, source: str = "config") -> str:
        """Return the watched channel id, raising when it is not configured."""
        if not self.channel_id:
            raise MissingFieldError("channel_id", f"{source} (or set {ENV_CHANNEL_ID})")
        return self.channel_id


def apply_env_overrides(
    config: LeaderboardConfig, environ: Mapping[str, str] | None = None
) -> LeaderboardConfig:
    """Overlay environment settings onto a loaded config.

    Args:
        config: Base configuration.
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        New config with overrides applied.
    """
    env = os.environ if environ is None else environ
    updates: dict[str, Any] = {}

    channel_id = env.get(ENV_CHANNEL_ID)
    if channel_id:
        updates["channel_id"] = channel_id

    db_file = env.get(ENV_DB_FILE)
    if db_file:
        updates["database_url"] = f"duckdb:///{Path(db_file)}"

    if env.get(ENV_RESET, "").strip().lower() == "true":
        updates["reset_on_start"] = True

    if not updates:
        return config
    return config.model_copy(update=updates)


def load_config(
    path: str | Path | None = None, environ: Mapping[str, str] | None = None
) -> LeaderboardConfig:
    """Load and validate configuration from an optional YAML file.

    Args:
        path: Path to YAML configuration file. Defaults are used when None.
        environ: Environment mapping for overrides (defaults to ``os.environ``).

    Returns:
        Validated LeaderboardConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    if path is None:
        return apply_env_overrides(LeaderboardConfig(), environ)

    config_path = Path(path)
    if not config_path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with config_path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return apply_env_overrides(LeaderboardConfig.model_validate(data), environ)
