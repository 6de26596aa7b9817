"""
Generic persisted-entity store used by the scoring services.

Entities are addressed by kind name and opaque string id. Writes are flushed
but never committed here: the calling service owns the transaction.
"""
from database import db
from models import (League, Season, Series, Player, Tournament,
                    TournamentPlayer, Scoreboard, Qualification)
from services.errors import EntityNotFound

MODELS = {
    'league': League,
    'season': Season,
    'series': Series,
    'player': Player,
    'tournament': Tournament,
    'tournament_player': TournamentPlayer,
    'scoreboard': Scoreboard,
    'qualification': Qualification,
}


def _model(kind: str):
    try:
        return MODELS[kind]
    except KeyError:
        raise ValueError(f'Unknown entity kind: {kind}') from None


def get(kind: str, entity_id):
    """Return the entity or raise EntityNotFound."""
    entity = db.session.get(_model(kind), entity_id) if entity_id else None
    if entity is None:
        raise EntityNotFound(kind, entity_id)
    return entity


def find(kind: str, **filters):
    """Return the first entity matching the filters, or None."""
    return _model(kind).query.filter_by(**filters).first()


def list(kind: str, order_by=None, **filters):
    """Return every entity of a kind matching the equality filters."""
    model = _model(kind)
    query = model.query.filter_by(**filters)
    if order_by is not None:
        query = query.order_by(*order_by) if isinstance(order_by, tuple) else query.order_by(order_by)
    return query.all()


def create(kind: str, **fields):
    """Create an entity and flush it so its id is assigned."""
    entity = _model(kind)(**fields)
    db.session.add(entity)
    db.session.flush()
    return entity


def update(kind: str, entity_id, **fields):
    """Apply field changes to an existing entity."""
    entity = get(kind, entity_id)
    for name, value in fields.items():
        setattr(entity, name, value)
    db.session.flush()
    return entity


def delete(kind: str, entity_id) -> None:
    """Delete an entity; relationship cascades remove its children."""
    entity = get(kind, entity_id)
    db.session.delete(entity)
    db.session.flush()
