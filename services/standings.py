"""
Standings query service.

Read-only projections over scoreboards and recorded results:
series and season leaderboards with a point-source breakdown, player
profiles, and tournament result listings. Nothing here writes.
"""
import re

from sqlalchemy import func

from database import db
from models import (League, Player, Scoreboard, Season, Series, Tournament,
                    TournamentPlayer)
from services import entity_store as store
import config
import strings as text

RECENT_RESULTS_LIMIT = 10


def parse_noted_players(notes: str | None, label: str) -> list:
    """
    Extract the comma-separated names following '<label>:' in tournament notes.

    Only the remainder of the matching line is read. Returns an empty list
    when the label is absent.
    """
    if not notes:
        return []
    match = re.search(rf'^\s*{re.escape(label)}:(.*)$', notes, flags=re.MULTILINE)
    if not match:
        return []
    return [name.strip() for name in match.group(1).split(',') if name.strip()]


def _iso(value):
    return value.isoformat() if value is not None else None


def _league_dict(league) -> dict:
    if league is None:
        return {'id': None, 'name': text.NAMES['unknown_league']}
    return {'id': league.id, 'name': league.name}


def _season_dict(season) -> dict:
    return {
        'id': season.id,
        'name': season.name,
        'league_id': season.league_id,
        'start_date': _iso(season.start_date),
        'end_date': _iso(season.end_date),
        'is_active': bool(season.is_active),
    }


def _series_dict(series) -> dict:
    return {
        'id': series.id,
        'name': series.name,
        'season_id': series.season_id,
        'league_id': series.league_id,
        'start_date': _iso(series.start_date),
        'is_active': bool(series.is_active),
    }


def _point_breakdown(series_id: str) -> dict:
    """Sum each player's point sources over the series' recorded results."""
    rows = (
        db.session.query(
            TournamentPlayer.player_id,
            func.coalesce(func.sum(TournamentPlayer.points), 0),
            func.coalesce(func.sum(TournamentPlayer.bounty_points), 0),
            func.coalesce(func.sum(TournamentPlayer.consolation_points), 0),
        )
        .join(Tournament, TournamentPlayer.tournament_id == Tournament.id)
        .filter(Tournament.series_id == series_id)
        .group_by(TournamentPlayer.player_id)
        .all()
    )
    return {
        player_id: {
            'regular_points': int(points) - int(bounty) - int(consolation),
            'bounty_points': int(bounty),
            'consolation_points': int(consolation),
        }
        for player_id, points, bounty, consolation in rows
    }


def _standings_rows(series) -> list:
    scoreboards = (
        series.scoreboards
        .order_by(Scoreboard.total_points.desc(), Scoreboard.id)
        .all()
    )
    breakdown = _point_breakdown(series.id)
    empty = {'regular_points': 0, 'bounty_points': 0, 'consolation_points': 0}

    rows = []
    for scoreboard in scoreboards:
        player = scoreboard.player
        rows.append({
            'player_id': scoreboard.player_id,
            'player_name': player.name if player else
                text.NAMES['unknown_player'].format(player_id=scoreboard.player_id),
            'total_points': scoreboard.total_points or 0,
            'tournament_count': scoreboard.tournament_count or 0,
            'best_finish': scoreboard.best_finish,
            'average_finish': scoreboard.average_finish,
            'win_count': scoreboard.win_count or 0,
            'top_three_count': scoreboard.top_three_count or 0,
            'last_updated': _iso(scoreboard.last_updated),
            **breakdown.get(scoreboard.player_id, empty),
        })
    for position, row in enumerate(rows, start=1):
        row['position'] = position
    return rows


def get_series_standings(series_id: str) -> dict:
    """
    Leaderboard for one series, highest total points first.

    Raises:
        EntityNotFound: the series does not exist
    """
    series = store.get('series', series_id)
    season = series.season
    return {
        'series': _series_dict(series),
        'season': _season_dict(season) if season else None,
        'league': _league_dict(db.session.get(League, series.league_id)),
        'standings': _standings_rows(series),
    }


def get_season_standings() -> dict:
    """Leaderboards for every season, grouped by series."""
    seasons = Season.query.order_by(Season.start_date.desc(), Season.name).all()
    leagues = {league.id: league for league in League.query.all()}

    payload = []
    for season in seasons:
        payload.append({
            'season': _season_dict(season),
            'league': _league_dict(leagues.get(season.league_id)),
            'series': [
                {'series': _series_dict(series), 'standings': _standings_rows(series)}
                for series in season.get_series_ordered()
            ],
        })
    return {'seasons': payload}


def _result_row(result, tournament) -> dict:
    return {
        'tournament_id': tournament.id,
        'tournament_name': tournament.name,
        'date': _iso(tournament.date),
        'series_id': tournament.series_id,
        'event_type': tournament.event_type,
        'final_position': result.final_position,
        'points': result.points or 0,
        'bounty_points': result.bounty_points or 0,
        'consolation_points': result.consolation_points or 0,
        'payout': result.payout or 0,
    }


def get_player_profile(player_id: str) -> dict:
    """
    Lifetime totals for one player across every series they have a scoreboard in.

    best_finish is None when the player has no recorded positions.

    Raises:
        EntityNotFound: the player does not exist
    """
    player = store.get('player', player_id)
    scoreboards = player.scoreboards.all()
    series_by_id = {
        series.id: series
        for series in Series.query.filter(Series.id.in_([sb.series_id for sb in scoreboards])).all()
    } if scoreboards else {}

    total_points = sum(sb.total_points or 0 for sb in scoreboards)
    tournament_count = sum(sb.tournament_count or 0 for sb in scoreboards)
    position_sum = sum(sb.position_sum or 0 for sb in scoreboards)
    best_finishes = [sb.best_finish for sb in scoreboards if sb.best_finish is not None]

    recent = (
        db.session.query(TournamentPlayer, Tournament)
        .join(Tournament, TournamentPlayer.tournament_id == Tournament.id)
        .filter(TournamentPlayer.player_id == player.id)
        .order_by(Tournament.date.desc(), Tournament.created_at.desc())
        .limit(RECENT_RESULTS_LIMIT)
        .all()
    )

    series_rows = []
    for scoreboard in sorted(scoreboards, key=lambda sb: sb.total_points or 0, reverse=True):
        series = series_by_id.get(scoreboard.series_id)
        series_rows.append({
            'series_id': scoreboard.series_id,
            'series_name': series.name if series else None,
            'season_id': scoreboard.season_id,
            'total_points': scoreboard.total_points or 0,
            'tournament_count': scoreboard.tournament_count or 0,
            'best_finish': scoreboard.best_finish,
            'average_finish': scoreboard.average_finish,
            'win_count': scoreboard.win_count or 0,
            'top_three_count': scoreboard.top_three_count or 0,
        })

    return {
        'player': {
            'id': player.id,
            'name': player.name,
            'email': player.email,
            'is_active': bool(player.is_active),
            'join_date': _iso(player.join_date),
        },
        'totals': {
            'total_points': total_points,
            'tournament_count': tournament_count,
            'best_finish': min(best_finishes) if best_finishes else None,
            'average_finish': round(position_sum / tournament_count, 2) if tournament_count else None,
            'win_count': sum(sb.win_count or 0 for sb in scoreboards),
            'top_three_count': sum(sb.top_three_count or 0 for sb in scoreboards),
            'series_count': len(scoreboards),
        },
        'series': series_rows,
        'recent_results': [_result_row(result, tournament) for result, tournament in recent],
    }


def get_tournament_results(season_id: str | None = None, series_id: str | None = None) -> list:
    """Recorded tournaments, newest first, with entrant count and winner."""
    query = Tournament.query
    if season_id:
        query = query.filter(Tournament.season_id == season_id)
    if series_id:
        query = query.filter(Tournament.series_id == series_id)
    tournaments = query.order_by(Tournament.date.desc(), Tournament.created_at.desc()).all()

    winners = dict(
        db.session.query(TournamentPlayer.tournament_id, Player.name)
        .join(Player, TournamentPlayer.player_id == Player.id)
        .filter(TournamentPlayer.final_position == 1)
        .all()
    )
    counts = dict(
        db.session.query(TournamentPlayer.tournament_id, func.count(TournamentPlayer.id))
        .group_by(TournamentPlayer.tournament_id)
        .all()
    )

    return [
        {
            'id': t.id,
            'name': t.name,
            'date': _iso(t.date),
            'series_id': t.series_id,
            'season_id': t.season_id,
            'game_type': t.game_type,
            'event_type': t.event_type,
            'status': t.status,
            'total_players': t.total_players,
            'result_count': counts.get(t.id, 0),
            'winner': winners.get(t.id),
        }
        for t in tournaments
    ]


def get_tournament_result_details(tournament_id: str) -> dict:
    """
    One tournament with its ordered results.

    Bounty and consolation names are read back from the notes annotations.
    """
    tournament = store.get('tournament', tournament_id)
    results = tournament.get_results_sorted()
    return {
        'tournament': {
            'id': tournament.id,
            'name': tournament.name,
            'date': _iso(tournament.date),
            'series_id': tournament.series_id,
            'season_id': tournament.season_id,
            'league_id': tournament.league_id,
            'game_type': tournament.game_type,
            'event_type': tournament.event_type,
            'is_season_event': tournament.is_season_event,
            'status': tournament.status,
            'total_players': tournament.total_players,
            'notes': tournament.notes,
        },
        'results': [
            {
                'player_id': result.player_id,
                'player_name': result.player.name if result.player else
                    text.NAMES['unknown_player'].format(player_id=result.player_id),
                'final_position': result.final_position,
                'points': result.points or 0,
                'regular_points': result.regular_points,
                'bounty_count': result.bounty_count or 0,
                'bounty_points': result.bounty_points or 0,
                'consolation_points': result.consolation_points or 0,
                'payout': result.payout or 0,
                'starting_chips': result.starting_chips,
            }
            for result in results
        ],
        'bounty_players': parse_noted_players(tournament.notes, text.NOTES['bounty_label']),
        'consolation_players': parse_noted_players(tournament.notes, text.NOTES['consolation_label']),
        'is_consolation': tournament.game_type == config.GAME_TYPE_CONSOLATION,
    }
