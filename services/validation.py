"""
Validation service for the poker league standings engine.

Provides input validation for:
- Ranked results (strict order, positive ranks, known game type)
- Tournament result submissions (field size, bounties, consolation entries)
- Season finale rankings
"""
from datetime import date, datetime, timezone
from typing import List, Optional

from services.errors import ValidationError
import config


def parse_datetime(value, field: str) -> datetime:
    """
    Accept a datetime, date, or ISO-8601 string and return a naive UTC datetime.

    Raises:
        ValidationError: the value cannot be read as a date
    """
    parsed = None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            parsed = None

    if parsed is None:
        raise ValidationError(f'{field} must be an ISO-8601 date or datetime (got {value!r})')
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _is_player_id(value) -> bool:
    return isinstance(value, str) and bool(value)


class ValidationIssue:
    """Represents a single validation problem."""

    def __init__(self, code: str, message: str, field: str = None, entity_id: str = None):
        self.code = code
        self.message = message
        self.field = field
        self.entity_id = entity_id

    def to_dict(self) -> dict:
        return {
            'code': self.code,
            'message': self.message,
            'field': self.field,
            'entity_id': self.entity_id
        }


class ValidationResult:
    """Collection of validation results."""

    def __init__(self):
        self.errors: List[ValidationIssue] = []

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, code: str, message: str, field: str = None, entity_id: str = None):
        self.errors.append(ValidationIssue(code, message, field, entity_id))

    def merge(self, other: 'ValidationResult'):
        """Merge another ValidationResult into this one."""
        self.errors.extend(other.errors)

    def raise_if_invalid(self):
        """Raise ValidationError carrying every collected issue."""
        if self.is_valid:
            return
        raise ValidationError(self.errors[0].message, issues=list(self.errors))

    def to_dict(self) -> dict:
        return {
            'is_valid': self.is_valid,
            'error_count': len(self.errors),
            'errors': [e.to_dict() for e in self.errors],
        }


def validate_list_fields(fields: dict) -> ValidationResult:
    """Every non-None value in fields must be a list or tuple."""
    result = ValidationResult()
    for field, value in fields.items():
        if value is not None and not isinstance(value, (list, tuple)):
            result.add_error(
                'INVALID_LIST',
                f'{field} must be a list (got {type(value).__name__})',
                field=field
            )
    return result


class RankingValidator:
    """Validates a ranked result list before scoring."""

    @classmethod
    def validate(cls, game_type: str, total_players: int, ranked_results: list) -> ValidationResult:
        result = ValidationResult()

        if game_type not in config.GAME_TYPES:
            result.add_error(
                'UNKNOWN_GAME_TYPE',
                f'No scoring strategy for game type: {game_type}',
                field='game_type'
            )

        if not isinstance(total_players, int) or isinstance(total_players, bool) or total_players < 1:
            result.add_error(
                'INVALID_TOTAL_PLAYERS',
                f'Total players must be a positive integer (got {total_players!r})',
                field='total_players'
            )

        seen_players = set()
        seen_ranks = set()
        for entry in ranked_results:
            if not isinstance(entry.player_id, str) or not entry.player_id:
                result.add_error(
                    'INVALID_PLAYER',
                    f'Ranking entry has no valid player id (got {entry.player_id!r})',
                    field='player_id'
                )
                continue
            rank = entry.rank
            if not isinstance(rank, int) or isinstance(rank, bool):
                result.add_error(
                    'INVALID_RANK',
                    f'Player {entry.player_id} has no valid rank (got {rank!r})',
                    field='rank',
                    entity_id=entry.player_id
                )
                continue
            if rank < 1:
                result.add_error(
                    'INVALID_RANK',
                    f'Player {entry.player_id} has rank {rank}; ranks start at 1',
                    field='rank',
                    entity_id=entry.player_id
                )
            if entry.player_id in seen_players:
                result.add_error(
                    'DUPLICATE_PLAYER',
                    f'Player {entry.player_id} is ranked more than once',
                    field='player_id',
                    entity_id=entry.player_id
                )
            if rank in seen_ranks:
                result.add_error(
                    'TIED_RANK',
                    f'Rank {rank} is assigned to more than one player; ties must be broken before scoring',
                    field='rank',
                    entity_id=entry.player_id
                )
            seen_players.add(entry.player_id)
            seen_ranks.add(rank)

        return result


class SubmissionValidator:
    """Validates a tournament result submission as a whole."""

    @classmethod
    def validate_shape(cls, fields: dict, name=None, submission_id=None) -> ValidationResult:
        """Check the container types of a raw submission before anything reads them."""
        result = validate_list_fields(fields)

        if name is not None and not isinstance(name, str):
            result.add_error('INVALID_NAME', f'Tournament name must be text (got {name!r})', field='name')

        if submission_id is not None and not isinstance(submission_id, str):
            result.add_error(
                'INVALID_SUBMISSION_ID',
                f'Submission id must be a string (got {submission_id!r})',
                field='submission_id'
            )

        return result

    @classmethod
    def validate(cls, total_players: int, rankings: list, bounties: list,
                 consolation: list, game_type: str) -> ValidationResult:
        result = ValidationResult()

        if not rankings:
            result.add_error('NO_RANKINGS', 'At least one ranked player is required', field='rankings')

        if isinstance(total_players, int) and total_players < len(rankings):
            result.add_error(
                'TOTAL_PLAYERS_TOO_SMALL',
                f'Total players ({total_players}) cannot be less than the number of '
                f'ranked players ({len(rankings)})',
                field='total_players'
            )

        result.merge(RankingValidator.validate(game_type, total_players, rankings))

        ranked_ids = {entry.player_id for entry in rankings if isinstance(entry.player_id, str)}
        bounty_ids = set()
        for player_id in bounties:
            if not _is_player_id(player_id):
                result.add_error(
                    'INVALID_BOUNTY_PLAYER',
                    f'Bounty entries must be player ids (got {player_id!r})',
                    field='bounties'
                )
                continue
            bounty_ids.add(player_id)
        for player_id in sorted(bounty_ids):
            if player_id not in ranked_ids:
                result.add_error(
                    'BOUNTY_NOT_RANKED',
                    f'Bounty credited to player {player_id} who is not in the rankings',
                    field='bounties',
                    entity_id=player_id
                )

        seen_consolation = set()
        for player_id in consolation:
            if not _is_player_id(player_id):
                result.add_error(
                    'INVALID_CONSOLATION_PLAYER',
                    f'Consolation entries must be player ids (got {player_id!r})',
                    field='consolation'
                )
                continue
            if player_id in ranked_ids:
                result.add_error(
                    'CONSOLATION_RANKED',
                    f'Player {player_id} cannot be both ranked and in the consolation game',
                    field='consolation',
                    entity_id=player_id
                )
            if player_id in seen_consolation:
                result.add_error(
                    'DUPLICATE_CONSOLATION',
                    f'Player {player_id} appears more than once in the consolation game',
                    field='consolation',
                    entity_id=player_id
                )
            seen_consolation.add(player_id)

        return result


class NewPlayerValidator:
    """Validates players created alongside a result submission."""

    @classmethod
    def validate(cls, new_players: list) -> ValidationResult:
        result = ValidationResult()
        seen_ids = set()

        for index, new_player in enumerate(new_players):
            if not isinstance(new_player, dict):
                result.add_error(
                    'INVALID_NEW_PLAYER',
                    f'New player #{index + 1} must be an object with id and name',
                    field='new_players'
                )
                continue
            temp_id = new_player.get('id')
            if not temp_id:
                result.add_error(
                    'NEW_PLAYER_ID_REQUIRED',
                    f'New player #{index + 1} needs a temporary id to be referenced by',
                    field='new_players'
                )
                temp_id = None
            elif not isinstance(temp_id, str):
                result.add_error(
                    'NEW_PLAYER_ID_INVALID',
                    f'New player #{index + 1} has a temporary id that is not a string (got {temp_id!r})',
                    field='new_players'
                )
                temp_id = None
            elif temp_id in seen_ids:
                result.add_error(
                    'DUPLICATE_NEW_PLAYER',
                    f'Temporary player id {temp_id} is used more than once',
                    field='new_players',
                    entity_id=temp_id
                )
            else:
                seen_ids.add(temp_id)

            label = temp_id or index + 1
            name = new_player.get('name')
            if name is not None and not isinstance(name, str):
                result.add_error(
                    'NEW_PLAYER_NAME_INVALID',
                    f'New player {label} has a name that is not a string (got {name!r})',
                    field='new_players',
                    entity_id=temp_id
                )
            elif not (name or '').strip():
                result.add_error(
                    'NEW_PLAYER_NAME_REQUIRED',
                    f'New player {label} needs a name',
                    field='new_players',
                    entity_id=temp_id
                )

            email = new_player.get('email')
            if email is not None and not isinstance(email, str):
                result.add_error(
                    'NEW_PLAYER_EMAIL_INVALID',
                    f'New player {label} has an email that is not a string',
                    field='new_players',
                    entity_id=temp_id
                )

        return result


class FinaleValidator:
    """Validates a season finale submission."""

    @classmethod
    def validate(cls, event_name: Optional[str], event_date, rankings: list) -> ValidationResult:
        result = ValidationResult()

        if event_name is not None and not isinstance(event_name, str):
            result.add_error(
                'EVENT_NAME_INVALID',
                f'Event name must be text (got {event_name!r})',
                field='event_name'
            )
        elif not (event_name or '').strip():
            result.add_error('EVENT_NAME_REQUIRED', 'Event name is required', field='event_name')

        if not event_date:
            result.add_error('EVENT_DATE_REQUIRED', 'Event date is required', field='event_date')

        if not rankings:
            result.add_error(
                'NO_RANKINGS',
                'Please add at least one player to the rankings',
                field='final_rankings'
            )
        elif len(rankings) > config.SEASON_EVENT_MAX_PLAYERS:
            result.add_error(
                'TOO_MANY_PLAYERS',
                f'A season event seats at most {config.SEASON_EVENT_MAX_PLAYERS} players',
                field='final_rankings'
            )

        result.merge(RankingValidator.validate(config.GAME_TYPE_TOURNAMENT, max(len(rankings), 1), rankings))
        return result
