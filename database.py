"""
Database setup and initialization for the poker league standings engine.
"""
import uuid

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def init_db(app):
    """Initialize the database with the Flask app."""
    db.init_app(app)
    with app.app_context():
        # Import all models to register them with SQLAlchemy
        from models import (League, Season, Series, Player, Tournament,
                            TournamentPlayer, Scoreboard, Qualification, ActivityLog)
        db.create_all()


def new_id() -> str:
    """Return a fresh opaque identifier for a persisted entity."""
    return uuid.uuid4().hex
