"""Wordle Ladder.

Turn daily group Wordle result announcements into pairwise Elo ratings,
points and a persistent leaderboard.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
