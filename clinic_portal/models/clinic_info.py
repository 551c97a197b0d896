"""
Clinic Info Model - single row describing the clinic for the public site
"""
from datetime import datetime
from clinic_portal.extensions import db
from .base import generate_uuid


class ClinicInfo(db.Model):
    __tablename__ = 'clinic_info'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    name = db.Column(db.String(150), nullable=False, default='Our Clinic')
    about_us = db.Column(db.Text)
    mission = db.Column(db.Text)
    address = db.Column(db.String(255))
    phone = db.Column(db.String(30))
    email = db.Column(db.String(120))
    opening_hours = db.Column(db.String(255))
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'about_us': self.about_us,
            'mission': self.mission,
            'address': self.address,
            'phone': self.phone,
            'email': self.email,
            'opening_hours': self.opening_hours,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }
