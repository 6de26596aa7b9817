"""Shared fixtures: a Flask app on a throwaway SQLite file and league factories."""
import pytest

from app import create_app
from database import db
from services import entity_store as store
from services import locks, report_cache


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setenv('FLASK_ENV', 'testing')
    app = create_app({
        'TESTING': True,
        'STRUCTURED_LOGGING': False,
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'league.db'}",
    })
    report_cache.clear()
    locks.reset()
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()
    report_cache.clear()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def league(app):
    league = store.create('league', name="Thursday Night Hold'em")
    db.session.commit()
    return league


@pytest.fixture
def season(league):
    season = store.create('season', league_id=league.id, name='Spring 2024')
    db.session.commit()
    return season


@pytest.fixture
def make_series(season):
    def _make(name='Main Series'):
        series = store.create('series', season_id=season.id, league_id=season.league_id, name=name)
        db.session.commit()
        return series
    return _make


@pytest.fixture
def series(make_series):
    return make_series()


@pytest.fixture
def make_player(app):
    def _make(name, email=None):
        player = store.create('player', name=name, email=email)
        db.session.commit()
        return player
    return _make


@pytest.fixture
def players(make_player):
    """Eight players named P1..P8."""
    return [make_player(f'P{i}') for i in range(1, 9)]
