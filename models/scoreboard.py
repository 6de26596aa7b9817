"""
Scoreboard model: a player's cumulative standing within one series.
"""
from datetime import datetime
from database import db, new_id


def round_half_up(numerator: int, denominator: int) -> int:
    """Integer division rounded to nearest, halves rounded up."""
    return (2 * numerator + denominator) // (2 * denominator)


class Scoreboard(db.Model):
    """Represents one player's running totals in one series."""

    __tablename__ = 'scoreboards'
    __table_args__ = (
        db.UniqueConstraint('series_id', 'player_id', name='uq_scoreboard_series_player'),
        db.Index('ix_scoreboards_season', 'season_id'),
        db.Index('ix_scoreboards_player', 'player_id'),
    )

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    series_id = db.Column(db.String(32), db.ForeignKey('series.id', ondelete='CASCADE'), nullable=False)
    season_id = db.Column(db.String(32), db.ForeignKey('seasons.id'), nullable=False)
    league_id = db.Column(db.String(32), db.ForeignKey('leagues.id'), nullable=False)
    player_id = db.Column(db.String(32), db.ForeignKey('players.id'), nullable=False)

    total_points = db.Column(db.Integer, nullable=False, default=0)
    tournament_count = db.Column(db.Integer, nullable=False, default=0)

    # Exact sum of finishing positions; average_finish is derived from it
    position_sum = db.Column(db.Integer, nullable=False, default=0)
    best_finish = db.Column(db.Integer, nullable=True)
    average_finish = db.Column(db.Integer, nullable=True)

    win_count = db.Column(db.Integer, nullable=False, default=0)
    top_three_count = db.Column(db.Integer, nullable=False, default=0)

    last_updated = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<Scoreboard {self.player_id} in {self.series_id}: {self.total_points}>'

    def add_finish(self, position: int, points: int):
        """Fold one ranked tournament result into the running totals."""
        self.total_points = (self.total_points or 0) + points
        self.tournament_count = (self.tournament_count or 0) + 1
        self.position_sum = (self.position_sum or 0) + position
        if self.best_finish is None or position < self.best_finish:
            self.best_finish = position
        self.average_finish = round_half_up(self.position_sum, self.tournament_count)
        if position == 1:
            self.win_count = (self.win_count or 0) + 1
        if position <= 3:
            self.top_three_count = (self.top_three_count or 0) + 1
        self.last_updated = datetime.utcnow()

    def add_points(self, points: int):
        """Credit points that carry no finishing position (consolation games)."""
        self.total_points = (self.total_points or 0) + points
        self.last_updated = datetime.utcnow()

    def reset(self):
        """Zero every running total before a rebuild."""
        self.total_points = 0
        self.tournament_count = 0
        self.position_sum = 0
        self.best_finish = None
        self.average_finish = None
        self.win_count = 0
        self.top_three_count = 0
        self.last_updated = datetime.utcnow()
