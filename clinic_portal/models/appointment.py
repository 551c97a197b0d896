from clinic_portal.extensions import db
from .base import TimestampMixin, generate_uuid, iso

APPOINTMENT_STATUSES = ('scheduled', 'confirmed', 'completed', 'cancelled')


class Appointment(db.Model, TimestampMixin):
    __tablename__ = 'appointments'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    patient_id = db.Column(db.String(36), db.ForeignKey('profiles.id'), nullable=False, index=True)
    doctor_id = db.Column(db.String(36), db.ForeignKey('doctors.id'), nullable=False, index=True)
    service_id = db.Column(db.String(36), db.ForeignKey('services.id'), nullable=True, index=True)  # None = general consultation

    appointment_date = db.Column(db.Date, nullable=False, index=True)
    appointment_time = db.Column(db.String(5), nullable=False)  # e.g. "10:30"

    # Status: scheduled, confirmed, completed, cancelled
    status = db.Column(db.String(20), default='scheduled', index=True)
    notes = db.Column(db.Text)

    patient = db.relationship('Profile', back_populates='appointments')
    doctor = db.relationship('Doctor', back_populates='appointments')
    service = db.relationship('Service')
    prescriptions = db.relationship('Prescription', back_populates='appointment', lazy='dynamic', cascade='all, delete-orphan')

    def to_dict(self, expand=()):
        """
        Serialize for API responses.

        expand: any of 'doctor', 'service', 'patient' to embed the related
        row's display fields.
        """
        data = {
            'id': self.id,
            'patient_id': self.patient_id,
            'doctor_id': self.doctor_id,
            'service_id': self.service_id,
            'appointment_date': iso(self.appointment_date),
            'appointment_time': self.appointment_time,
            'status': self.status,
            'notes': self.notes,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }
        if 'doctor' in expand:
            data['doctor'] = {
                'name': self.doctor.name,
                'specialization': self.doctor.specialization,
            } if self.doctor else None
        if 'service' in expand:
            data['service'] = {
                'name': self.service.name,
                'duration_minutes': self.service.duration_minutes,
            } if self.service else None
        if 'patient' in expand:
            data['patient'] = {
                'full_name': self.patient.full_name,
                'phone': self.patient.phone,
            } if self.patient else None
        return data

    def __repr__(self):
        return f"<Appointment {self.patient_id} - {self.doctor_id} on {self.appointment_date} {self.appointment_time}>"
