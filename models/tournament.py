"""
Tournament and TournamentPlayer models for recorded poker games.
"""
from datetime import datetime
from database import db, new_id
import config


class Tournament(db.Model):
    """Represents one recorded tournament, either within a series or as a season finale."""

    __tablename__ = 'tournaments'
    __table_args__ = (
        db.Index('ix_tournaments_season_event_type', 'season_id', 'event_type'),
    )

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    series_id = db.Column(db.String(32), db.ForeignKey('series.id', ondelete='CASCADE'), nullable=True)  # None for season finales
    season_id = db.Column(db.String(32), db.ForeignKey('seasons.id', ondelete='CASCADE'), nullable=False)
    league_id = db.Column(db.String(32), db.ForeignKey('leagues.id'), nullable=False)

    name = db.Column(db.String(200), nullable=False)
    date = db.Column(db.DateTime, nullable=False)

    game_type = db.Column(db.String(20), default=config.GAME_TYPE_TOURNAMENT)  # 'Tournament' or 'Consolation'
    event_type = db.Column(db.String(20), default=config.EVENT_TYPE_SERIES)  # 'series' or 'season_event'
    total_players = db.Column(db.Integer, nullable=False, default=0)

    # Free-text annotations, including the bounty/consolation display lines
    notes = db.Column(db.Text, nullable=True)

    # Status
    status = db.Column(db.String(20), default='completed')  # completed

    # Client-supplied key so a retried submission is not applied twice
    submission_id = db.Column(db.String(64), nullable=True, unique=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    results = db.relationship('TournamentPlayer', backref='tournament', lazy='dynamic', cascade='all, delete-orphan')
    qualifications = db.relationship('Qualification', backref='tournament', lazy='dynamic', cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Tournament {self.name}>'

    @property
    def is_season_event(self) -> bool:
        return self.event_type == config.EVENT_TYPE_SEASON_EVENT

    def append_note(self, line: str):
        """Append one line to the tournament notes."""
        self.notes = f'{self.notes}\n{line}' if self.notes else line

    def get_results_sorted(self):
        """Return ranked results by final position, then consolation-only entries."""
        ranked = (
            self.results
            .filter(TournamentPlayer.final_position.isnot(None))
            .order_by(TournamentPlayer.final_position)
            .all()
        )
        unranked = self.results.filter(TournamentPlayer.final_position.is_(None)).all()
        return ranked + unranked


class TournamentPlayer(db.Model):
    """Represents one player's outcome in one tournament."""

    __tablename__ = 'tournament_players'
    __table_args__ = (
        db.UniqueConstraint('tournament_id', 'player_id', name='uq_tournament_player'),
        db.Index('ix_tournament_players_player', 'player_id'),
    )

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    tournament_id = db.Column(db.String(32), db.ForeignKey('tournaments.id', ondelete='CASCADE'), nullable=False)
    player_id = db.Column(db.String(32), db.ForeignKey('players.id'), nullable=False)

    # Placement; None for players credited only through the consolation game
    final_position = db.Column(db.Integer, nullable=True)

    # Points awarded: placement + bounty + consolation
    points = db.Column(db.Integer, default=0)
    bounty_count = db.Column(db.Integer, default=0)
    bounty_points = db.Column(db.Integer, default=0)
    consolation_points = db.Column(db.Integer, default=0)

    # Season finale only
    payout = db.Column(db.Integer, default=0)
    starting_chips = db.Column(db.Integer, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<TournamentPlayer {self.player_id} #{self.final_position}>'

    @property
    def regular_points(self) -> int:
        """Points that came from placement alone."""
        return (self.points or 0) - (self.bounty_points or 0) - (self.consolation_points or 0)
