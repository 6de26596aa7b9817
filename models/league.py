"""
League, Season, and Series models: the containers tournaments are scored within.
"""
from datetime import datetime
from database import db, new_id


class League(db.Model):
    """Represents a poker league (e.g., Thursday Night Hold'em)."""

    __tablename__ = 'leagues'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, default=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    seasons = db.relationship('Season', backref='league', lazy='dynamic', cascade='all, delete-orphan')

    def __repr__(self):
        return f'<League {self.name}>'


class Season(db.Model):
    """Represents one season of a league; its finale seats qualified players."""

    __tablename__ = 'seasons'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    league_id = db.Column(db.String(32), db.ForeignKey('leagues.id', ondelete='CASCADE'), nullable=False)
    name = db.Column(db.String(200), nullable=False)

    start_date = db.Column(db.Date, nullable=True)
    end_date = db.Column(db.Date, nullable=True)
    is_active = db.Column(db.Boolean, default=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    series = db.relationship('Series', backref='season', lazy='dynamic', cascade='all, delete-orphan')
    qualifications = db.relationship('Qualification', backref='season', lazy='dynamic', cascade='all, delete-orphan')
    # Every tournament of the season, including finales that belong to no series
    tournaments = db.relationship('Tournament', backref='season', lazy='dynamic', cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Season {self.name}>'

    def get_series_ordered(self):
        """Return series in this season ordered by start date, then name."""
        return self.series.order_by(Series.start_date, Series.name).all()


class Series(db.Model):
    """Represents a themed grouping of tournaments within a season (e.g., Beginner Series)."""

    __tablename__ = 'series'

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    season_id = db.Column(db.String(32), db.ForeignKey('seasons.id', ondelete='CASCADE'), nullable=False)
    league_id = db.Column(db.String(32), db.ForeignKey('leagues.id'), nullable=False)
    name = db.Column(db.String(200), nullable=False)

    start_date = db.Column(db.Date, nullable=True)
    end_date = db.Column(db.Date, nullable=True)
    is_active = db.Column(db.Boolean, default=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Deleting a series removes its standings along with it
    tournaments = db.relationship('Tournament', backref='series', lazy='dynamic', cascade='all, delete-orphan')
    scoreboards = db.relationship('Scoreboard', backref='series', lazy='dynamic', cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Series {self.name}>'
