from .outcome import Outcome, PuzzleResult
from .play import Play
from .rating import PlayerRating
from .stats import PlayerStats

__all__ = ["Outcome", "Play", "PlayerRating", "PlayerStats", "PuzzleResult"]
