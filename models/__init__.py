"""
SQLAlchemy models for the poker league standings engine.
"""
from .league import League, Season, Series
from .player import Player
from .tournament import Tournament, TournamentPlayer
from .scoreboard import Scoreboard
from .qualification import Qualification
from .audit_log import ActivityLog

__all__ = [
    'League',
    'Season',
    'Series',
    'Player',
    'Tournament',
    'TournamentPlayer',
    'Scoreboard',
    'Qualification',
    'ActivityLog',
]
