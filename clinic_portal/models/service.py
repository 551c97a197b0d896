from datetime import datetime
from clinic_portal.extensions import db
from .base import generate_uuid, iso


class Service(db.Model):
    __tablename__ = 'services'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text)
    price = db.Column(db.Numeric(10, 2))
    duration_minutes = db.Column(db.Integer)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'price': float(self.price) if self.price is not None else None,
            'duration_minutes': self.duration_minutes,
            'is_active': self.is_active,
            'created_at': iso(self.created_at),
        }

    def __repr__(self):
        return f"<Service {self.name}>"
