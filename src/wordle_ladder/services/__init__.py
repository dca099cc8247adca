from .leaderboard import LeaderboardService
from .scoring import PuzzleScore, ScoringService
from .storage import LeaderboardStore

__all__ = ["LeaderboardService", "LeaderboardStore", "PuzzleScore", "ScoringService"]
