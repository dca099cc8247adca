"""Custom exceptions for configuration and scoring errors."""

from __future__ import annotations

from collections.abc import Iterable


class ConfigurationError(Exception):
    """Base exception for configuration errors with optional suggestions."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"[Configuration Error] {self.message}"
        if self.suggestion:
            msg += f"\n[Suggestion] {self.suggestion}"
        return msg


class MissingFieldError(ConfigurationError):
    """Error when a required configuration field is missing."""

    def __init__(self, field: str, config_path: str) -> None:
        super().__init__(
            f"Missing required field '{field}' in {config_path}",
            "Add the field to your configuration.",
        )


class ScoringError(Exception):
    """Base exception for failures scoped to a single puzzle."""

    def __init__(self, puzzle_id: str, message: str) -> None:
        self.puzzle_id = puzzle_id
        super().__init__(f"Puzzle {puzzle_id}: {message}")


class DuplicateParticipantError(ScoringError):
    """A participant appears more than once in one puzzle's outcomes."""

    def __init__(self, puzzle_id: str, participants: Iterable[str]) -> None:
        self.participants = sorted(participants)
        super().__init__(
            puzzle_id,
            f"duplicate participants in outcome set: {', '.join(self.participants)}",
        )


class CommitError(ScoringError):
    """The atomic write of a puzzle's plays and ratings did not complete."""

    def __init__(self, puzzle_id: str, reason: str = "transaction rolled back") -> None:
        super().__init__(puzzle_id, f"commit failed ({reason})")
