"""Report rendering for the Wordle ladder."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence

from tabulate import tabulate

from wordle_ladder.models import PlayerStats
from wordle_ladder.services.scoring import PuzzleScore

LEADERBOARD_HEADERS = ("User", "Elo", "Points", "Avg Guesses", "Games", "Solved")


def _name(participant: str, display_names: Mapping[str, str] | None) -> str:
    return (display_names or {}).get(participant, participant)


def render_leaderboard(
    stats: Sequence[PlayerStats],
    display_names: Mapping[str, str] | None = None,
    title: str = "Wordle Leaderboard",
) -> str:
    """Render leaderboard rows as a Markdown table.

    Args:
        stats: Rows from the leaderboard service, already ordered.
        display_names: Optional participant id -> display name map.
        title: Heading placed above the table.

    Returns:
        Markdown content.
    """
    rows = [
        (
            _name(s.participant, display_names),
            round(s.rating),
            s.total_points,
            "N/A" if s.avg_attempts is None else f"{s.avg_attempts:.2f}",
            s.games,
            s.wins,
        )
        for s in stats
    ]
    table = tabulate(rows, headers=LEADERBOARD_HEADERS, tablefmt="github")
    return f"**{title}**\n{table}"


def format_puzzle_score(score: PuzzleScore, display_names: Mapping[str, str] | None = None) -> str:
    """One-line summary of a scored puzzle, e.g. ``alice:3 (15pt, +17.5)``."""
    parts = []
    for o in score.outcomes:
        delta = score.deltas.get(o.participant, 0.0)
        parts.append(
            f"{_name(o.participant, display_names)}:{'X' if o.failed else o.attempts} "
            f"({score.points[o.participant]}pt, {delta:+.1f})"
        )
    return " | ".join(parts)


def export_stats_json(stats: Sequence[PlayerStats]) -> str:
    """Serialize leaderboard rows to JSON for dashboards."""
    return json.dumps([s.to_dict() for s in stats], indent=2)
