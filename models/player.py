"""
Player model for league members.
"""
from datetime import datetime
from database import db, new_id


class Player(db.Model):
    """Represents a league player."""

    __tablename__ = 'players'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(200), nullable=True)
    is_active = db.Column(db.Boolean, default=True)
    join_date = db.Column(db.Date, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    results = db.relationship('TournamentPlayer', backref='player', lazy='dynamic')
    scoreboards = db.relationship('Scoreboard', backref='player', lazy='dynamic')

    def __repr__(self):
        return f'<Player {self.name}>'
