from datetime import datetime
from clinic_portal.extensions import db
from .base import generate_uuid, iso


class Event(db.Model):
    """Clinic-wide announcement shown on the public site and patient portal"""
    __tablename__ = 'events'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    event_date = db.Column(db.Date, nullable=False, index=True)
    event_time = db.Column(db.String(20))
    location = db.Column(db.String(255))
    is_public = db.Column(db.Boolean, default=True, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'event_date': iso(self.event_date),
            'event_time': self.event_time,
            'location': self.location,
            'is_public': self.is_public,
            'created_at': iso(self.created_at),
        }
