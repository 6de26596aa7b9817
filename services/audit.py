"""Helpers for writing scoring activity logs."""
import json
from database import db
from models.audit_log import ActivityLog


def log_action(action: str, entity_type: str, entity_id: str | None = None, details: dict | None = None) -> None:
    """Append an activity log record to the current transaction."""
    entry = ActivityLog(
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details_json=json.dumps(details or {}, default=str),
    )
    db.session.add(entry)
