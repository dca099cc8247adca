from .store import LeaderboardStore

__all__ = ["LeaderboardStore"]
