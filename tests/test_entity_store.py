from datetime import datetime

import pytest

from database import db
from models import Player, Qualification, Scoreboard, Tournament, TournamentPlayer
from services import entity_store as store
from services.errors import EntityNotFound
from services.qualification import record_season_finale
from services.scoreboard import record_tournament_results


def test_create_assigns_opaque_id(app):
    player = store.create('player', name='Ann')
    assert isinstance(player.id, str)
    assert len(player.id) == 32
    assert store.get('player', player.id) is player


def test_get_missing_raises(app):
    with pytest.raises(EntityNotFound) as excinfo:
        store.get('season', 'missing')
    assert excinfo.value.kind == 'season'
    assert excinfo.value.to_dict()['code'] == 'NOT_FOUND'

    with pytest.raises(EntityNotFound):
        store.get('season', None)


def test_unknown_kind(app):
    with pytest.raises(ValueError):
        store.get('casino', 'x')


def test_find_and_list(series, make_player):
    make_player('Ann')
    make_player('Bob', email='bob@example.com')

    assert store.find('player', name='Bob').email == 'bob@example.com'
    assert store.find('player', name='Zed') is None
    assert [p.name for p in store.list('player', order_by=Player.name.desc())] == ['Bob', 'Ann']
    assert [s.id for s in store.list('series', season_id=series.season_id)] == [series.id]


def test_update(season):
    store.update('season', season.id, name='Fall 2024', is_active=False)
    db.session.commit()
    refreshed = store.get('season', season.id)
    assert refreshed.name == 'Fall 2024'
    assert refreshed.is_active is False


def test_delete_cascades_to_scoreboards(series, make_player):
    ann = make_player('Ann')
    store.create('scoreboard', series_id=series.id, season_id=series.season_id,
                 league_id=series.league_id, player_id=ann.id, total_points=10)
    db.session.commit()

    store.delete('series', series.id)
    db.session.commit()

    assert Scoreboard.query.count() == 0
    with pytest.raises(EntityNotFound):
        store.get('series', series.id)
    assert store.get('player', ann.id).name == 'Ann'


def _row_counts() -> dict:
    return {
        'tournaments': Tournament.query.count(),
        'results': TournamentPlayer.query.count(),
        'qualifications': Qualification.query.count(),
        'scoreboards': Scoreboard.query.count(),
    }


def test_delete_series_with_recorded_results(series, players):
    record_tournament_results(series.id, 8, datetime(2024, 3, 7, 19), [p.id for p in players[:4]])
    assert Qualification.query.count() == 3

    store.delete('series', series.id)
    db.session.commit()

    assert _row_counts() == {'tournaments': 0, 'results': 0, 'qualifications': 0, 'scoreboards': 0}
    assert Player.query.count() == len(players)


def test_delete_season_with_finale(series, players):
    record_tournament_results(series.id, 8, datetime(2024, 3, 7, 19), [p.id for p in players[:3]])
    record_season_finale(series.season_id, 'Spring Finale', '2024-06-01', [p.id for p in players[:3]])
    assert Tournament.query.filter_by(series_id=None).count() == 1

    series_id, season_id = series.id, series.season_id
    store.delete('season', season_id)
    db.session.commit()

    assert _row_counts() == {'tournaments': 0, 'results': 0, 'qualifications': 0, 'scoreboards': 0}
    with pytest.raises(EntityNotFound):
        store.get('series', series_id)
    assert Player.query.count() == len(players)


def test_delete_league_removes_everything_below_it(league, series, players):
    record_tournament_results(series.id, 8, datetime(2024, 3, 7, 19), [players[0].id])

    league_id = league.id
    store.delete('league', league_id)
    db.session.commit()

    assert _row_counts() == {'tournaments': 0, 'results': 0, 'qualifications': 0, 'scoreboards': 0}
    assert store.list('season') == []
