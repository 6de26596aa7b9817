"""
Qualification engine for the season finale.

Players earn a finale seat with a top-three series finish. Seats are ranked
by chip count: a base stack, a bonus for the best qualification type held,
and a bonus per season point.
"""
import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from database import db, new_id
from models import Player, Qualification, Scoreboard, Tournament
from services import entity_store as store
from services.audit import log_action
from services.errors import PartialWriteFailure
from services.locks import entity_lock
from services.scoring import coerce_rankings
from services.validation import FinaleValidator, parse_datetime, validate_list_fields
import config
import strings as text

logger = logging.getLogger(__name__)


def calculate_chip_count(qualification_type: str, season_points: int) -> int:
    """Starting chips for one qualification record and the player's season points."""
    chips = config.BASE_CHIPS
    if qualification_type == config.QUALIFICATION_WINNER:
        chips += config.WINNER_CHIP_BONUS
    elif qualification_type == config.QUALIFICATION_TOP_THREE:
        chips += config.TOP_THREE_CHIP_BONUS
    return chips + (season_points or 0) * config.CHIPS_PER_POINT


def finale_prize(position: int) -> int:
    return config.SEASON_EVENT_PRIZES.get(position, 0)


def _season_totals(season_id: str) -> dict:
    """player_id -> (points, tournament_count) summed over every series in the season."""
    rows = (
        db.session.query(
            Scoreboard.player_id,
            func.coalesce(func.sum(Scoreboard.total_points), 0),
            func.coalesce(func.sum(Scoreboard.tournament_count), 0),
        )
        .filter(Scoreboard.season_id == season_id)
        .group_by(Scoreboard.player_id)
        .all()
    )
    return {player_id: (int(points), int(count)) for player_id, points, count in rows}


def _best_qualifications(season_id: str) -> dict:
    """Keep the highest-chip active qualification per player."""
    totals = _season_totals(season_id)
    qualifications = (
        Qualification.query
        .filter_by(season_id=season_id, is_active=True)
        .order_by(Qualification.qualification_date)
        .all()
    )

    best = {}
    for qualification in qualifications:
        points, count = totals.get(qualification.player_id, (0, 0))
        chips = calculate_chip_count(qualification.qualification_type, points)
        current = best.get(qualification.player_id)
        if current is None or chips > current['total_chips']:
            best[qualification.player_id] = {
                'player_id': qualification.player_id,
                'tournament_count': count,
                'total_chips': chips,
                'qualification_type': qualification.qualification_type,
            }
    return best


def get_qualified_players(season_id: str, name_filter: str | None = None) -> list:
    """
    Finale seat ranking for a season, highest chip count first.

    Args:
        season_id: Season to rank
        name_filter: Optional case-insensitive substring match on player name

    Raises:
        EntityNotFound: the season does not exist
    """
    season = store.get('season', season_id)
    best = _best_qualifications(season.id)
    if not best:
        return []

    names = dict(
        db.session.query(Player.id, Player.name)
        .filter(Player.id.in_(list(best.keys())))
        .all()
    )

    needle = (name_filter or '').strip().lower()
    qualified = []
    for player_id, entry in best.items():
        name = names.get(player_id) or text.NAMES['unknown_player'].format(player_id=player_id)
        if needle and needle not in name.lower():
            continue
        qualified.append({**entry, 'name': name})

    qualified.sort(key=lambda q: (-q['total_chips'], q['name'].lower()))
    return qualified


def get_qualification_status(season_id: str) -> dict:
    """Seat summary for the season finale."""
    season = store.get('season', season_id)
    base = Qualification.query.filter_by(season_id=season.id, is_active=True)

    total_qualified = (
        db.session.query(func.count(func.distinct(Qualification.player_id)))
        .filter(Qualification.season_id == season.id, Qualification.is_active.is_(True))
        .scalar()
    ) or 0
    winners = base.filter(Qualification.qualification_type == config.QUALIFICATION_WINNER).count()
    top_three = base.filter(Qualification.qualification_type == config.QUALIFICATION_TOP_THREE).count()

    return {
        'total_qualified': total_qualified,
        'max_players': config.SEASON_EVENT_MAX_PLAYERS,
        'tournament_winners': winners,
        'top_qualifiers': top_three,
        'remaining_spots': max(0, config.SEASON_EVENT_MAX_PLAYERS - total_qualified),
    }


def record_season_finale(season_id: str, event_name: str, event_date, final_rankings) -> Tournament:
    """
    Record the season finale's final ranking.

    The finale is a tournament without a series, so it never feeds series
    standings. Each ranked player gets points=0, a prize from the payout
    table and the chip count they started with (None if not qualified).

    Raises:
        EntityNotFound: season or a ranked player does not exist
        ValidationError: missing name/date, empty, oversized or tied ranking
        PartialWriteFailure: a write failed; the transaction was rolled back
    """
    season = store.get('season', season_id)
    validate_list_fields({'final_rankings': final_rankings}).raise_if_invalid()
    ranked = coerce_rankings(final_rankings)

    with entity_lock('season', season.id):
        FinaleValidator.validate(event_name, event_date, ranked).raise_if_invalid()
        played_at = parse_datetime(event_date, 'event_date')
        for entry in ranked:
            store.get('player', entry.player_id)

        chips = {
            player_id: entry['total_chips']
            for player_id, entry in _best_qualifications(season.id).items()
        }

        tournament_id = new_id()
        step = 'creating season event'
        try:
            tournament = store.create(
                'tournament',
                id=tournament_id,
                series_id=None,
                season_id=season.id,
                league_id=season.league_id,
                name=event_name.strip(),
                date=played_at,
                game_type=config.GAME_TYPE_TOURNAMENT,
                event_type=config.EVENT_TYPE_SEASON_EVENT,
                total_players=len(ranked),
                status='completed',
            )

            for entry in sorted(ranked, key=lambda r: r.rank):
                step = f'recording finale result for player {entry.player_id}'
                store.create(
                    'tournament_player',
                    tournament_id=tournament.id,
                    player_id=entry.player_id,
                    final_position=entry.rank,
                    points=0,
                    bounty_count=0,
                    bounty_points=0,
                    consolation_points=0,
                    payout=finale_prize(entry.rank),
                    starting_chips=chips.get(entry.player_id),
                )

            log_action(
                action='season_event_recorded',
                entity_type='tournament',
                entity_id=tournament.id,
                details={'season_id': season.id, 'players': len(ranked)}
            )
            step = 'committing'
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.exception('Season event for season %s failed while %s', season_id, step,
                             extra={'season_id': season_id, 'tournament_id': tournament_id, 'step': step})
            raise PartialWriteFailure(tournament_id, step, str(exc)) from exc

    logger.info('Recorded season event %s for season %s with %d player(s)',
                tournament.id, season.id, len(ranked),
                extra={'season_id': season.id, 'tournament_id': tournament.id})
    return tournament


def get_previous_season_events(season_id: str) -> list:
    """Recorded finales for a season, newest first, with their results."""
    season = store.get('season', season_id)
    events = (
        Tournament.query
        .filter_by(season_id=season.id, event_type=config.EVENT_TYPE_SEASON_EVENT)
        .order_by(Tournament.date.desc(), Tournament.created_at.desc())
        .all()
    )

    payload = []
    for event in events:
        results = event.get_results_sorted()
        payload.append({
            'id': event.id,
            'name': event.name,
            'date': event.date.isoformat() if event.date else None,
            'player_count': len(results),
            'results': [
                {
                    'position': result.final_position,
                    'player_id': result.player_id,
                    'player_name': result.player.name if result.player else
                        text.NAMES['unknown_player'].format(player_id=result.player_id),
                    'starting_chips': result.starting_chips,
                    'prize': result.payout or 0,
                }
                for result in results
            ],
        })
    return payload
