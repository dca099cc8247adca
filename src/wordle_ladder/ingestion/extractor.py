"""Extract per-participant Wordle outcomes from results announcements."""

from __future__ import annotations

import re
from collections.abc import Iterable

import structlog

from wordle_ladder.core.config import DEFAULT_HEADER_PREFIX
from wordle_ladder.models import Outcome, PuzzleResult

from .events import Announcement, Embed
from .identity import REFERENCE_RE, IdentityResolver, NameDirectory

logger = structlog.get_logger()

# 3/6: <@1> <@2>   or   X/6: somebody
RESULT_LINE_RE = re.compile(r"^([1-6Xx])/6:\s*(.+)$")
RESULT_PREFIX_RE = re.compile(r"^\W*[1-6Xx]/6:")
FOOTER_RE = re.compile(r"Wordle\s*No\.?\s*(\d+)", re.IGNORECASE)

# Crown and other marker glyphs, markdown emphasis, whitespace
_LEADING_DECORATION_RE = re.compile(r"^[\W_]+")
_MARKDOWN_RE = re.compile(r"[*~`|]")


def strip_decoration(line: str) -> str:
    """Remove leading marker glyphs and markdown from a result line."""
    return _MARKDOWN_RE.sub("", _LEADING_DECORATION_RE.sub("", line)).strip()


def parse_result_line(line: str) -> tuple[int | None, str] | None:
    """Split a result line into (attempts, participant text).

    Returns:
        ``(attempts, rest)`` with attempts None for a failure, or None when
        the line is not a result line.
    """
    m = RESULT_LINE_RE.match(strip_decoration(line))
    if not m:
        return None
    raw, rest = m.groups()
    attempts = None if raw in ("X", "x") else int(raw)
    return attempts, rest.strip()


def embed_lines(embed: Embed) -> list[str]:
    """Collect candidate result lines from a structured panel."""
    if embed.description:
        return embed.description.splitlines()

    lines = []
    for f in embed.fields:
        if RESULT_PREFIX_RE.match(f.name):
            lines.append(f"{f.name} {f.value}")
        elif RESULT_PREFIX_RE.match(f.value):
            lines.append(f.value)
    return lines


class ResultExtractor:
    """Turn one announcement into a PuzzleResult, or None.

    Attributes:
        resolver: Identity resolver for participant tokens.
        channel_id: Only announcements from this channel are read. None
            accepts any channel.
        header_prefix: Opening text of a plain-text summary.
    """

    def __init__(
        self,
        resolver: IdentityResolver | None = None,
        channel_id: str | None = None,
        header_prefix: str = DEFAULT_HEADER_PREFIX,
    ) -> None:
        self.resolver = resolver or IdentityResolver()
        self.channel_id = channel_id
        self.header_prefix = header_prefix

    def extract(self, announcement: Announcement) -> PuzzleResult | None:
        """Extract the puzzle id and outcomes from an announcement.

        Args:
            announcement: Message event.

        Returns:
            PuzzleResult with at least one outcome, or None when the message
            is not a results announcement for the watched channel.
        """
        if self.channel_id and announcement.channel_id != self.channel_id:
            return None

        mentioned = None
        if announcement.mentions:
            mentioned = NameDirectory.from_mentions(announcement.mentions)

        if announcement.embeds:
            result = self._extract_embed(announcement, mentioned)
            if result is not None:
                return result

        if announcement.content.lstrip().startswith(self.header_prefix):
            return self._build(announcement.id, announcement.content.splitlines(), mentioned)

        return None

    def _extract_embed(
        self, announcement: Announcement, mentioned: NameDirectory | None
    ) -> PuzzleResult | None:
        embed = announcement.embeds[0]
        footer = embed.footer.text if embed.footer else ""
        m = FOOTER_RE.search(footer)
        if not m:
            return None
        return self._build(str(int(m.group(1))), embed_lines(embed), mentioned)

    def _build(
        self, puzzle_id: str, lines: Iterable[str], mentioned: NameDirectory | None
    ) -> PuzzleResult | None:
        seen: set[tuple[str, int | None]] = set()
        outcomes: list[Outcome] = []

        for line in lines:
            parsed = parse_result_line(line)
            if parsed is None:
                continue
            attempts, rest = parsed
            for participant in self.participants_in(rest, mentioned):
                key = (participant, attempts)
                if key in seen:
                    continue
                seen.add(key)
                outcomes.append(Outcome(participant, attempts))

        if not outcomes:
            return None
        return PuzzleResult(puzzle_id=puzzle_id, outcomes=outcomes)

    def participants_in(self, text: str, mentioned: NameDirectory | None = None) -> list[str]:
        """Resolve every participant token in the text after ``N/6:``.

        Explicit references split the text into segments. Words inside a
        segment are matched greedily so multi-word display names resolve as
        one token; a name never spans a reference. Words that match nothing
        are reported and skipped.
        """
        participants: list[str] = []
        # split() with a capture group alternates text, id, text, ...
        for n, part in enumerate(REFERENCE_RE.split(text)):
            if n % 2:
                participants.append(part)
            else:
                participants.extend(self._names_in(part.split(), mentioned))
        return participants

    def _names_in(self, words: list[str], mentioned: NameDirectory | None) -> list[str]:
        participants = []
        i = 0
        while i < len(words):
            for j in range(len(words), i + 1, -1):
                candidate = " ".join(words[i:j])
                participant = self._lookup_quiet(candidate, mentioned)
                if participant is not None:
                    participants.append(participant)
                    i = j
                    break
            else:
                participant = self.resolver.resolve(words[i], mentioned)
                if participant is not None:
                    participants.append(participant)
                i += 1

        return participants

    def _lookup_quiet(self, name: str, mentioned: NameDirectory | None) -> str | None:
        if mentioned is not None:
            participant = mentioned.lookup(name)
            if participant is not None:
                return participant
        return self.resolver.directory.lookup(name)
