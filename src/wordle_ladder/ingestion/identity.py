"""Resolve mention tokens to canonical participant ids."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from types import MappingProxyType

import structlog

from .events import Mention

logger = structlog.get_logger()

# <@123> or <@!123> (nickname form)
REFERENCE_RE = re.compile(r"<@!?(\d+)>")


def normalize_name(token: str) -> str:
    """Trim, drop a leading ``@`` and trailing punctuation, casefold."""
    name = token.strip().lstrip("@").rstrip(",;.")
    return name.casefold()


class NameDirectory:
    """Read-only, case-insensitive name -> participant id table."""

    def __init__(self, names: Mapping[str, str] | None = None) -> None:
        table = {normalize_name(k): str(v) for k, v in (names or {}).items()}
        self._names = MappingProxyType(table)

    @classmethod
    def from_mentions(cls, mentions: Iterable[Mention]) -> NameDirectory:
        """Build a directory from the display names a message supplies."""
        return cls({name: m.id for m in mentions for name in m.names})

    def lookup(self, name: str) -> str | None:
        return self._names.get(normalize_name(name))

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_name(name) in self._names


class IdentityResolver:
    """Map a raw token to a participant id.

    Explicit ``<@id>`` references are authoritative. Bare names are looked up
    in the message's own mention names first, then in the static directory.
    """

    def __init__(self, directory: NameDirectory | None = None) -> None:
        self.directory = directory or NameDirectory()

    @staticmethod
    def reference_id(token: str) -> str | None:
        """Embedded id of an explicit reference token, if it is one."""
        m = REFERENCE_RE.fullmatch(token.strip())
        return m.group(1) if m else None

    def resolve(self, token: str, mentioned: NameDirectory | None = None) -> str | None:
        """Resolve a token to a participant id.

        Args:
            token: Explicit reference or bare display name.
            mentioned: Names of users the message explicitly mentions.

        Returns:
            Participant id, or None when the token is unknown.
        """
        participant = self.reference_id(token)
        if participant is not None:
            return participant

        if not normalize_name(token):
            return None

        if mentioned is not None:
            participant = mentioned.lookup(token)
            if participant is not None:
                return participant

        participant = self.directory.lookup(token)
        if participant is None:
            logger.warning("unresolved_participant", token=token)
        return participant
