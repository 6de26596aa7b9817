"""
Centralized text labels for the poker league standings engine.

Note labels are part of the stored tournament notes format; changing them
breaks extraction from previously recorded tournaments.
"""
from __future__ import annotations

NOTES = {
    'bounty_label': 'Bounty players',
    'consolation_label': 'Consolation players',
}

NAMES = {
    'series_tournament': '{series} - {date}',
    'unknown_player': 'Unknown ({player_id})',
    'unknown_league': 'Unknown League',
}

API = {
    'results_saved': 'Tournament results saved: {players} ranked player(s).',
    'finale_saved': 'Season event results recorded for {players} player(s).',
    'scoreboards_rebuilt': 'Rebuilt {count} scoreboard(s).',
    'invalid_json': 'Request body must be a JSON object.',
}


def note_line(label_key: str, names: list) -> str:
    """Render one notes annotation line, e.g. 'Bounty players: Ann, Ann, Bob'."""
    return f"{NOTES[label_key]}: {', '.join(names)}"
