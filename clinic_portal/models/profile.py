from clinic_portal.extensions import db
from .base import TimestampMixin, generate_uuid, iso


class Profile(db.Model, TimestampMixin):
    """Patient profile - one row per registered patient account"""
    __tablename__ = 'profiles'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), unique=True, nullable=False, index=True)

    # Personal
    full_name = db.Column(db.String(200), nullable=False)
    phone = db.Column(db.String(30))
    date_of_birth = db.Column(db.Date)
    address = db.Column(db.String(255))

    # Emergency contact
    emergency_contact = db.Column(db.String(200))
    emergency_phone = db.Column(db.String(30))

    # Relationships (hard delete of a patient removes everything that references it)
    user = db.relationship('User', back_populates='profile')
    appointments = db.relationship('Appointment', back_populates='patient', lazy='dynamic', cascade='all, delete-orphan')
    prescriptions = db.relationship('Prescription', back_populates='patient', lazy='dynamic', cascade='all, delete-orphan')
    reports = db.relationship('MedicalReport', back_populates='patient', lazy='dynamic', cascade='all, delete-orphan')
    billing_records = db.relationship('BillingRecord', back_populates='patient', lazy='dynamic', cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'full_name': self.full_name,
            'phone': self.phone,
            'date_of_birth': iso(self.date_of_birth),
            'address': self.address,
            'emergency_contact': self.emergency_contact,
            'emergency_phone': self.emergency_phone,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }

    def __repr__(self):
        return f"<Profile {self.full_name} ({self.id})>"
