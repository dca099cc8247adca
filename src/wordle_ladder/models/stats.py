from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class PlayerStats:
    """Leaderboard row derived from a participant's play history.

    ``wins`` counts plays with a numeric result (not failed), and
    ``avg_attempts`` is None when the participant never solved a puzzle.
    """

    participant: str
    rating: float
    games: int
    wins: int
    avg_attempts: float | None
    total_points: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
