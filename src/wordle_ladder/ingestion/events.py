"""Announcement event models and chat export loading."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = structlog.get_logger()


def _coerce_id(v: Any) -> Any:
    return str(v) if isinstance(v, int) else v


class Mention(BaseModel):
    """A user explicitly referenced by the message."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str | None = None
    nickname: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_snowflake(cls, v: Any) -> Any:
        return _coerce_id(v)

    @property
    def names(self) -> list[str]:
        return [n for n in (self.name, self.nickname) if n]


class EmbedFooter(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: str = ""


class EmbedField(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    value: str = ""


class Embed(BaseModel):
    """Structured panel attached to a message."""

    model_config = ConfigDict(extra="ignore")

    description: str | None = None
    footer: EmbedFooter | None = None
    fields: list[EmbedField] = Field(default_factory=list)


class Announcement(BaseModel):
    """One chat message that may carry a Wordle results summary."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    channel_id: str = Field(default="", alias="channelId")
    content: str = ""
    timestamp: datetime | None = None
    mentions: list[Mention] = Field(default_factory=list)
    embeds: list[Embed] = Field(default_factory=list)

    @field_validator("id", "channel_id", mode="before")
    @classmethod
    def coerce_snowflake(cls, v: Any) -> Any:
        return _coerce_id(v)

    @field_validator("content", mode="before")
    @classmethod
    def coerce_content(cls, v: Any) -> Any:
        return "" if v is None else v

    @property
    def mention_ids(self) -> list[str]:
        return [m.id for m in self.mentions]


def _read_records(path: Path) -> tuple[list[dict[str, Any]], str | None]:
    """Read raw message records and an export-level channel id, if any."""
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".jsonl":
        records = [json.loads(line) for line in text.splitlines() if line.strip()]
        return records, None

    data = json.loads(text)
    # Handle dict with "messages" key or plain list
    if isinstance(data, dict) and "messages" in data:
        channel = data.get("channel")
        channel_id = channel.get("id") if isinstance(channel, dict) else None
        return list(data["messages"]), None if channel_id is None else str(channel_id)
    if isinstance(data, list):
        return data, None

    msg = f"Unrecognized export format in {path}: expected a list or an object with 'messages'"
    raise ValueError(msg)


def load_announcements(path: str | Path) -> list[Announcement]:
    """Load announcements from a JSON / JSON-lines chat export.

    Messages are returned in chronological order when timestamps are present,
    otherwise in file order.

    Args:
        path: Export file path.

    Returns:
        Parsed announcements.

    Raises:
        FileNotFoundError: If the export doesn't exist.
        ValueError: If the file is not a recognized export.
    """
    export_path = Path(path)
    if not export_path.exists():
        msg = f"Export file not found: {export_path}"
        raise FileNotFoundError(msg)

    records, channel_id = _read_records(export_path)
    announcements = []
    for record in records:
        if channel_id and "channel_id" not in record and "channelId" not in record:
            record = {**record, "channel_id": channel_id}
        announcements.append(Announcement.model_validate(record))

    if all(a.timestamp is not None for a in announcements):
        announcements.sort(key=lambda a: a.timestamp)

    logger.info("export_loaded", path=str(export_path), messages=len(announcements))
    return announcements
