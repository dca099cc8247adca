"""Fixed points awarded per Wordle outcome."""

from __future__ import annotations

from collections.abc import Mapping

from wordle_ladder.core.config import PointsConfig


class PointsTable:
    """Lookup from attempts (1..6, or None for failure) to points."""

    def __init__(self, by_attempts: Mapping[int, int], failure: int) -> None:
        self._by_attempts = dict(by_attempts)
        self.failure = failure

    @classmethod
    def from_config(cls, config: PointsConfig) -> PointsTable:
        return cls(config.by_attempts, config.failure)

    def points_for(self, attempts: int | None) -> int:
        """Get points for an outcome.

        Raises:
            KeyError: If attempts is outside 1..6.
        """
        if attempts is None:
            return self.failure
        return self._by_attempts[attempts]

    def as_dict(self) -> dict[str, int]:
        table = {str(k): v for k, v in sorted(self._by_attempts.items())}
        table["X"] = self.failure
        return table


DEFAULT_POINTS = PointsTable.from_config(PointsConfig())
