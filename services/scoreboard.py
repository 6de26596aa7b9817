"""
Scoreboard aggregator: applies a finished tournament to per-series standings.

Handles the write path for a result submission:
1. Validate the submission and resolve every referenced player
2. Create the tournament and one TournamentPlayer per credited player
3. Fold each result into the (series, player) scoreboard
4. Emit qualifications for top-three finishers

The whole submission is one transaction, serialized per series.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError

from database import db, new_id
from models import Scoreboard, Tournament, TournamentPlayer
from services import entity_store as store
from services.audit import log_action
from services.errors import PartialWriteFailure, ValidationError
from services.locks import entity_lock
from services.scoring import RankedResult, coerce_rankings, points_for_rank, score_tournament
from services.validation import (NewPlayerValidator, SubmissionValidator, ValidationIssue,
                                 ValidationResult, parse_datetime)
import config
import strings as text

logger = logging.getLogger(__name__)


def _qualification_type(position: int) -> str | None:
    if position == 1:
        return config.QUALIFICATION_WINNER
    if position <= config.QUALIFYING_POSITIONS:
        return config.QUALIFICATION_TOP_THREE
    return None


def _assign_new_player_ids(new_players: list) -> dict:
    """Map each temporary player id to the id its Player record will be created with."""
    return {new_player['id']: new_id() for new_player in new_players}


def _remap(pending: dict, player_id):
    return pending.get(player_id, player_id) if isinstance(player_id, str) else player_id


def _resolve_players(player_ids, pending: dict) -> dict:
    """Load every referenced existing player; raises EntityNotFound for unknown ids."""
    players = {}
    for player_id in player_ids:
        if player_id in pending or player_id in players:
            continue
        players[player_id] = store.get('player', player_id)
    return players


def _get_or_create_scoreboard(series, player_id: str) -> Scoreboard:
    scoreboard = store.find('scoreboard', series_id=series.id, player_id=player_id)
    if scoreboard is None:
        scoreboard = store.create(
            'scoreboard',
            series_id=series.id,
            season_id=series.season_id,
            league_id=series.league_id,
            player_id=player_id,
        )
    return scoreboard


def record_tournament_results(series_id: str, total_players: int, game_time, rankings,
                              bounties=(), consolation=(), new_players=(),
                              game_type: str = config.GAME_TYPE_TOURNAMENT,
                              name: str | None = None,
                              submission_id: str | None = None) -> Tournament:
    """
    Record one finalized tournament and update the series standings.

    Args:
        series_id: Series the tournament belongs to
        total_players: Number of entrants (may exceed the ranked players)
        game_time: When the game was played (datetime or ISO-8601 string)
        rankings: Finishing order; bare player ids or (player_id, rank) pairs
        bounties: Player ids, one entry per bounty collected
        consolation: Consolation game finishing order (unranked players only)
        new_players: [{'id': temp_id, 'name': ..., 'email': ...}] created first;
            temp ids may be used in rankings, bounties and consolation
        game_type: 'Tournament' or 'Consolation'
        name: Optional tournament name
        submission_id: Optional idempotency key; a repeat returns the first result

    Returns:
        The recorded Tournament

    Raises:
        EntityNotFound: series or a referenced player does not exist
        ValidationError: inconsistent submission; nothing is written
        PartialWriteFailure: a write failed; the transaction was rolled back
    """
    series = store.get('series', series_id)
    SubmissionValidator.validate_shape(
        {'rankings': rankings, 'bounties': bounties, 'consolation': consolation,
         'new_players': new_players},
        name=name, submission_id=submission_id
    ).raise_if_invalid()
    new_players = list(new_players or [])

    with entity_lock('series', series.id):
        if submission_id:
            existing = store.find('tournament', submission_id=submission_id)
            if existing is not None:
                if existing.series_id != series.id:
                    raise ValidationError(
                        f'Submission id {submission_id} was already used for another series',
                        issues=[ValidationIssue(
                            'SUBMISSION_ID_CONFLICT',
                            f'Submission id {submission_id} belongs to tournament {existing.id} '
                            f'in a different series',
                            field='submission_id',
                            entity_id=existing.id
                        )]
                    )
                logger.info('Submission %s already recorded as tournament %s', submission_id, existing.id,
                            extra={'series_id': series.id, 'tournament_id': existing.id})
                return existing

        checks = ValidationResult()
        checks.merge(NewPlayerValidator.validate(new_players))
        checks.raise_if_invalid()

        pending = _assign_new_player_ids(new_players)
        ranked = [
            RankedResult(_remap(pending, entry.player_id), entry.rank)
            for entry in coerce_rankings(rankings)
        ]
        bounty_ids = [_remap(pending, player_id) for player_id in bounties or []]
        consolation_ids = [_remap(pending, player_id) for player_id in consolation or []]

        SubmissionValidator.validate(
            total_players, ranked, bounty_ids, consolation_ids, game_type
        ).raise_if_invalid()
        played_at = parse_datetime(game_time, 'game_time')

        real_pending = {real_id: temp_id for temp_id, real_id in pending.items()}
        players = _resolve_players(
            [entry.player_id for entry in ranked] + consolation_ids, real_pending
        )
        placement_points = score_tournament(game_type, total_players, ranked)

        bounty_counts = {}
        for player_id in bounty_ids:
            bounty_counts[player_id] = bounty_counts.get(player_id, 0) + 1

        tournament_id = new_id()
        step = 'creating new players'
        try:
            for new_player in new_players:
                player = store.create(
                    'player',
                    id=pending[new_player['id']],
                    name=new_player['name'].strip(),
                    email=new_player.get('email'),
                    join_date=played_at.date(),
                )
                players[player.id] = player

            step = 'creating tournament'
            tournament = store.create(
                'tournament',
                id=tournament_id,
                series_id=series.id,
                season_id=series.season_id,
                league_id=series.league_id,
                name=name or text.NAMES['series_tournament'].format(
                    series=series.name, date=played_at.strftime('%Y-%m-%d')),
                date=played_at,
                game_type=game_type,
                event_type=config.EVENT_TYPE_SERIES,
                total_players=total_players,
                status='completed',
                submission_id=submission_id,
            )

            for entry in sorted(ranked, key=lambda r: r.rank):
                player_id = entry.player_id
                position = entry.rank
                bounty_count = bounty_counts.get(player_id, 0)
                bounty_points = bounty_count * config.BOUNTY_POINT_VALUE
                points = placement_points[player_id] + bounty_points

                step = f'recording result for player {player_id}'
                store.create(
                    'tournament_player',
                    tournament_id=tournament.id,
                    player_id=player_id,
                    final_position=position,
                    points=points,
                    bounty_count=bounty_count,
                    bounty_points=bounty_points,
                    consolation_points=0,
                )

                step = f'updating scoreboard for player {player_id}'
                _get_or_create_scoreboard(series, player_id).add_finish(position, points)

                qualification_type = _qualification_type(position)
                if qualification_type:
                    step = f'recording qualification for player {player_id}'
                    store.create(
                        'qualification',
                        season_id=series.season_id,
                        league_id=series.league_id,
                        player_id=player_id,
                        tournament_id=tournament.id,
                        qualification_type=qualification_type,
                        qualification_date=played_at,
                        is_active=True,
                    )

            for index, player_id in enumerate(consolation_ids, start=1):
                points = points_for_rank(config.GAME_TYPE_CONSOLATION, len(consolation_ids), index)
                step = f'recording consolation result for player {player_id}'
                store.create(
                    'tournament_player',
                    tournament_id=tournament.id,
                    player_id=player_id,
                    final_position=None,
                    points=points,
                    bounty_count=0,
                    bounty_points=0,
                    consolation_points=points,
                )
                _get_or_create_scoreboard(series, player_id).add_points(points)

            step = 'writing notes'
            if bounty_ids:
                tournament.append_note(text.note_line(
                    'bounty_label', [players[player_id].name for player_id in bounty_ids]))
            if consolation_ids:
                tournament.append_note(text.note_line(
                    'consolation_label', [players[player_id].name for player_id in consolation_ids]))

            step = 'writing activity log'
            log_action(
                action='tournament_results_recorded',
                entity_type='tournament',
                entity_id=tournament.id,
                details={
                    'series_id': series.id,
                    'total_players': total_players,
                    'ranked': len(ranked),
                    'bounties': len(bounty_ids),
                    'consolation': len(consolation_ids),
                    'new_players': len(new_players),
                }
            )
            step = 'committing'
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.exception('Result submission for series %s failed while %s', series_id, step,
                             extra={'series_id': series_id, 'tournament_id': tournament_id, 'step': step})
            raise PartialWriteFailure(tournament_id, step, str(exc)) from exc

    logger.info('Recorded tournament %s in series %s with %d ranked player(s)',
                tournament.id, series.id, len(ranked),
                extra={'series_id': series.id, 'tournament_id': tournament.id})
    return tournament


def rebuild_series_scoreboards(series_id: str) -> list:
    """
    Recompute every scoreboard of a series from its recorded results.

    Used after administrative edits to TournamentPlayer records.

    Returns:
        List of rebuilt Scoreboard objects ordered by total points (descending)

    Raises:
        SQLAlchemyError: a write failed; the stored scoreboards are left as they were
    """
    series = store.get('series', series_id)

    with entity_lock('series', series.id):
        step = 'loading results'
        try:
            results = (
                TournamentPlayer.query
                .join(Tournament, TournamentPlayer.tournament_id == Tournament.id)
                .filter(Tournament.series_id == series.id)
                .order_by(Tournament.date, Tournament.created_at)
                .all()
            )

            step = 'resetting scoreboards'
            scoreboards = {sb.player_id: sb for sb in series.scoreboards.all()}
            for scoreboard in scoreboards.values():
                scoreboard.reset()

            step = 'replaying results'
            touched = set()
            for result in results:
                scoreboard = scoreboards.get(result.player_id)
                if scoreboard is None:
                    scoreboard = _get_or_create_scoreboard(series, result.player_id)
                    scoreboards[result.player_id] = scoreboard
                if result.final_position is None:
                    scoreboard.add_points(result.points or 0)
                else:
                    scoreboard.add_finish(result.final_position, result.points or 0)
                touched.add(result.player_id)

            step = 'removing empty scoreboards'
            for player_id, scoreboard in list(scoreboards.items()):
                if player_id not in touched:
                    db.session.delete(scoreboard)
                    scoreboards.pop(player_id)

            step = 'writing activity log'
            log_action(
                action='series_scoreboards_rebuilt',
                entity_type='series',
                entity_id=series.id,
                details={'results': len(results), 'scoreboards': len(scoreboards)}
            )
            step = 'committing'
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception('Scoreboard rebuild for series %s failed while %s', series_id, step,
                             extra={'series_id': series_id, 'step': step})
            raise

    logger.info('Rebuilt %d scoreboard(s) for series %s', len(scoreboards), series.id,
                extra={'series_id': series.id})
    return sorted(scoreboards.values(), key=lambda sb: sb.total_points, reverse=True)
