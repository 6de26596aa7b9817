"""JSON API endpoints for scoring, standings, and season finale qualification."""
from flask import Blueprint, current_app, jsonify, request

from models import TournamentPlayer
from services import entity_store as store
from services.cache_invalidation import invalidate_standings_caches
from services.errors import ValidationError
from services.qualification import (get_previous_season_events, get_qualification_status,
                                    get_qualified_players, record_season_finale)
from services.report_cache import get_or_build
from services.scoreboard import rebuild_series_scoreboards, record_tournament_results
from services.scoring import score_tournament
from services.standings import (get_player_profile, get_season_standings, get_series_standings,
                                get_tournament_result_details, get_tournament_results)
from services.validation import validate_list_fields
import config
import strings as text

api_bp = Blueprint('api', __name__)


def _ttl() -> int:
    return max(1, int(current_app.config.get('REPORT_CACHE_TTL_SECONDS', 60)))


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError(text.API['invalid_json'])
    return data


def _cached(key: str, builder):
    return jsonify(get_or_build(key, builder, _ttl()))


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

@api_bp.route('/score', methods=['POST'])
def score():
    """Score a finishing order without recording it."""
    data = _json_body()
    validate_list_fields({'rankings': data.get('rankings')}).raise_if_invalid()
    points = score_tournament(
        data.get('game_type', config.GAME_TYPE_TOURNAMENT),
        data.get('total_players'),
        data.get('rankings') or [],
    )
    return jsonify({'ok': True, 'points': points})


@api_bp.route('/series/<series_id>/results', methods=['POST'])
def submit_results(series_id):
    data = _json_body()
    tournament = record_tournament_results(
        series_id,
        total_players=data.get('total_players'),
        game_time=data.get('game_time'),
        rankings=data.get('rankings') or [],
        bounties=data.get('bounties') or [],
        consolation=data.get('consolation') or [],
        new_players=data.get('new_players') or [],
        game_type=data.get('game_type', config.GAME_TYPE_TOURNAMENT),
        name=data.get('name'),
        submission_id=data.get('submission_id'),
    )
    invalidate_standings_caches(season_id=tournament.season_id, series_id=series_id)
    ranked = tournament.results.filter(
        TournamentPlayer.final_position.isnot(None)
    ).count()
    return jsonify({
        'ok': True,
        'tournament_id': tournament.id,
        'message': text.API['results_saved'].format(players=ranked),
    }), 201


@api_bp.route('/series/<series_id>/rebuild', methods=['POST'])
def rebuild_series(series_id):
    scoreboards = rebuild_series_scoreboards(series_id)
    season_id = scoreboards[0].season_id if scoreboards else store.get('series', series_id).season_id
    invalidate_standings_caches(season_id=season_id, series_id=series_id)
    return jsonify({
        'ok': True,
        'count': len(scoreboards),
        'message': text.API['scoreboards_rebuilt'].format(count=len(scoreboards)),
    })


# ---------------------------------------------------------------------------
# Standings and results
# ---------------------------------------------------------------------------

@api_bp.route('/series/<series_id>/standings')
def series_standings(series_id):
    return _cached(f'standings:series:{series_id}', lambda: get_series_standings(series_id))


@api_bp.route('/standings')
def season_standings():
    return _cached('standings:season:all', get_season_standings)


@api_bp.route('/players/<player_id>/profile')
def player_profile(player_id):
    return _cached(f'players:{player_id}:profile', lambda: get_player_profile(player_id))


@api_bp.route('/tournaments')
def tournaments():
    season_id = request.args.get('season_id') or None
    series_id = request.args.get('series_id') or None
    return _cached(
        f'tournaments:list:{season_id or "*"}:{series_id or "*"}',
        lambda: {'tournaments': get_tournament_results(season_id=season_id, series_id=series_id)},
    )


@api_bp.route('/tournaments/<tournament_id>')
def tournament_details(tournament_id):
    return _cached(f'tournaments:{tournament_id}', lambda: get_tournament_result_details(tournament_id))


# ---------------------------------------------------------------------------
# Season finale qualification
# ---------------------------------------------------------------------------

@api_bp.route('/seasons/<season_id>/qualified')
def qualified_players(season_id):
    name_filter = (request.args.get('q') or '').strip()
    return _cached(
        f'qualification:{season_id}:qualified:{name_filter.lower()}',
        lambda: {'season_id': season_id, 'players': get_qualified_players(season_id, name_filter or None)},
    )


@api_bp.route('/seasons/<season_id>/qualification-status')
def qualification_status(season_id):
    return _cached(f'qualification:{season_id}:status', lambda: get_qualification_status(season_id))


@api_bp.route('/seasons/<season_id>/finale', methods=['POST'])
def submit_finale(season_id):
    data = _json_body()
    tournament = record_season_finale(
        season_id,
        event_name=data.get('event_name'),
        event_date=data.get('event_date'),
        final_rankings=data.get('final_rankings') or [],
    )
    invalidate_standings_caches(season_id=season_id)
    return jsonify({
        'ok': True,
        'tournament_id': tournament.id,
        'message': text.API['finale_saved'].format(players=tournament.total_players),
    }), 201


@api_bp.route('/seasons/<season_id>/finales')
def season_finales(season_id):
    return _cached(
        f'qualification:{season_id}:finales',
        lambda: {'season_id': season_id, 'events': get_previous_season_events(season_id)},
    )
