"""Announcement ingestion: event models, identity resolution, extraction."""

from wordle_ladder.ingestion.events import (
    Announcement,
    Embed,
    EmbedField,
    EmbedFooter,
    Mention,
    load_announcements,
)
from wordle_ladder.ingestion.extractor import ResultExtractor, parse_result_line
from wordle_ladder.ingestion.identity import IdentityResolver, NameDirectory

__all__ = [
    "Announcement",
    "Embed",
    "EmbedField",
    "EmbedFooter",
    "IdentityResolver",
    "Mention",
    "NameDirectory",
    "ResultExtractor",
    "load_announcements",
    "parse_result_line",
]
