"""
Scoring calculator for tournament finishing orders.

Tournament games pay total_players * (11 - rank) to the top ten finishers.
Consolation games pay a fixed 100/50/25 to the top three.
"""
from dataclasses import dataclass

from services.errors import ValidationError
from services.validation import RankingValidator
import config


@dataclass(frozen=True)
class RankedResult:
    """One player's finishing rank in a game."""

    player_id: str
    rank: int


def coerce_rankings(entries) -> list:
    """
    Normalize caller-supplied rankings into RankedResult objects.

    Accepts any mix of:
    - bare player ids, ranked by their position in the list (1-based)
    - (player_id, rank) pairs
    - dicts with 'player_id' and 'rank' keys
    - RankedResult instances

    Rank values are passed through untouched so validation can report them.
    """
    ranked = []
    for index, entry in enumerate(entries or [], start=1):
        if isinstance(entry, RankedResult):
            ranked.append(entry)
        elif isinstance(entry, str):
            ranked.append(RankedResult(entry, index))
        elif isinstance(entry, dict):
            ranked.append(RankedResult(entry.get('player_id'), entry.get('rank')))
        else:
            try:
                player_id, rank = entry
            except (TypeError, ValueError):
                raise ValidationError(f'Ranking entry #{index} is not a player id or (player_id, rank) pair') from None
            ranked.append(RankedResult(player_id, rank))
    return ranked


def points_for_rank(game_type: str, total_players: int, rank: int) -> int:
    """Return the points one finishing rank is worth."""
    if game_type == config.GAME_TYPE_CONSOLATION:
        return config.CONSOLATION_POINTS.get(rank, 0)
    if rank > config.TOURNAMENT_SCORING_POSITIONS:
        return 0
    return total_players * (config.TOURNAMENT_SCORING_POSITIONS + 1 - rank)


def score_tournament(game_type: str, total_players: int, ranked_results) -> dict:
    """
    Score a finished game.

    Args:
        game_type: 'Tournament' or 'Consolation'
        total_players: Number of players who entered (>= ranked entries for submissions)
        ranked_results: Finishing order, see coerce_rankings

    Returns:
        Dict of player_id -> points awarded

    Raises:
        ValidationError: unknown game type, bad player count, missing/invalid rank,
            duplicate player or tied rank
    """
    ranked = coerce_rankings(ranked_results)
    RankingValidator.validate(game_type, total_players, ranked).raise_if_invalid()

    return {
        entry.player_id: points_for_rank(game_type, total_players, entry.rank)
        for entry in ranked
    }
