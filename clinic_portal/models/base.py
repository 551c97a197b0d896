import uuid
from datetime import datetime
from clinic_portal.extensions import db


def generate_uuid():
    return str(uuid.uuid4())


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


def iso(value):
    """isoformat() or None"""
    return value.isoformat() if value else None
