"""Activity log model for scoring state changes."""
from datetime import datetime
from database import db


class ActivityLog(db.Model):
    """Immutable entries for result submissions, rebuilds, and finales."""

    __tablename__ = 'activity_logs'
    __table_args__ = (
        db.Index('ix_activity_logs_created_at', 'created_at'),
        db.Index('ix_activity_logs_action', 'action'),
        db.Index('ix_activity_logs_entity', 'entity_type', 'entity_id'),
    )

    id = db.Column(db.Integer, primary_key=True)
    action = db.Column(db.String(80), nullable=False)
    entity_type = db.Column(db.String(80), nullable=False)
    entity_id = db.Column(db.String(32), nullable=True)
    details_json = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
