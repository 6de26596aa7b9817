"""
Qualification model for season finale eligibility.
"""
from datetime import datetime
from database import db, new_id
import config


class Qualification(db.Model):
    """A player's claim to a season finale seat, earned by a top-three finish."""

    __tablename__ = 'qualifications'
    __table_args__ = (
        db.Index('ix_qualifications_season_active', 'season_id', 'is_active'),
    )

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    season_id = db.Column(db.String(32), db.ForeignKey('seasons.id', ondelete='CASCADE'), nullable=False)
    league_id = db.Column(db.String(32), db.ForeignKey('leagues.id'), nullable=False)
    player_id = db.Column(db.String(32), db.ForeignKey('players.id'), nullable=False)
    tournament_id = db.Column(db.String(32), db.ForeignKey('tournaments.id', ondelete='CASCADE'), nullable=False)

    qualification_type = db.Column(db.String(20), nullable=False)  # 'Winner' or 'TopThree'
    qualification_date = db.Column(db.DateTime, default=datetime.utcnow)
    is_active = db.Column(db.Boolean, default=True)

    def __repr__(self):
        return f'<Qualification {self.player_id} {self.qualification_type}>'

