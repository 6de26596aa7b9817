"""Error types raised by the scoring and standings services."""


class LeagueError(Exception):
    """Base class for scoring engine failures surfaced to callers."""

    status_code = 500
    code = 'LEAGUE_ERROR'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {'ok': False, 'code': self.code, 'error': self.message}


class ValidationError(LeagueError):
    """Malformed or inconsistent input; raised before anything is written."""

    status_code = 400
    code = 'VALIDATION_ERROR'

    def __init__(self, message: str, issues: list | None = None):
        super().__init__(message)
        self.issues = issues or []

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload['issues'] = [issue.to_dict() for issue in self.issues]
        return payload


class EntityNotFound(LeagueError):
    """A referenced league, season, series, player or tournament does not exist."""

    status_code = 404
    code = 'NOT_FOUND'

    def __init__(self, kind: str, entity_id):
        super().__init__(f'{kind} {entity_id} not found')
        self.kind = kind
        self.entity_id = entity_id

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload.update({'kind': self.kind, 'entity_id': self.entity_id})
        return payload


class PartialWriteFailure(LeagueError):
    """A multi-step write failed part way; the transaction was rolled back."""

    status_code = 500
    code = 'PARTIAL_WRITE'

    def __init__(self, tournament_id, step: str, reason: str):
        super().__init__(f'Failed while {step} for tournament {tournament_id}: {reason}')
        self.tournament_id = tournament_id
        self.step = step
        self.reason = reason

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload.update({'tournament_id': self.tournament_id, 'step': self.step, 'reason': self.reason})
        return payload
