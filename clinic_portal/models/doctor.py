from datetime import datetime
from clinic_portal.extensions import db
from .base import generate_uuid, iso


class Doctor(db.Model):
    """
    Doctor reference data.

    available_days / available_hours are display text for the booking
    screen; they only constrain bookings when BOOKING_ENFORCE_AVAILABILITY
    is switched on.
    """
    __tablename__ = 'doctors'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), unique=True, nullable=True, index=True)

    name = db.Column(db.String(150), nullable=False)
    specialization = db.Column(db.String(150), nullable=False)
    qualification = db.Column(db.String(255))
    experience_years = db.Column(db.Integer)
    available_days = db.Column(db.JSON, default=list)  # e.g. ["Monday", "Wednesday"]
    available_hours = db.Column(db.String(100))  # e.g. "9:00 AM - 5:00 PM"
    image_url = db.Column(db.String(500))

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship('User', back_populates='doctor')
    appointments = db.relationship('Appointment', back_populates='doctor', lazy='dynamic')

    def works_on(self, day_name):
        """True if day_name (e.g. 'Monday') is one of the listed available days"""
        days = self.available_days or []
        return day_name.lower() in {d.lower() for d in days}

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'specialization': self.specialization,
            'qualification': self.qualification,
            'experience_years': self.experience_years,
            'available_days': list(self.available_days or []),
            'available_hours': self.available_hours,
            'image_url': self.image_url,
            'created_at': iso(self.created_at),
        }

    def __repr__(self):
        return f"<Doctor {self.name} - {self.specialization}>"
