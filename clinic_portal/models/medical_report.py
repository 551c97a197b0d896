"""
Medical Report Model
Stores metadata for uploaded report files; the bytes live in object storage
"""
from datetime import datetime
from clinic_portal.extensions import db
from .base import generate_uuid, iso


class MedicalReport(db.Model):
    __tablename__ = 'medical_reports'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    patient_id = db.Column(db.String(36), db.ForeignKey('profiles.id'), nullable=False, index=True)
    doctor_id = db.Column(db.String(36), db.ForeignKey('doctors.id'), nullable=False, index=True)
    appointment_id = db.Column(db.String(36), db.ForeignKey('appointments.id', ondelete='SET NULL'), nullable=True, index=True)

    title = db.Column(db.String(255), nullable=False)
    notes = db.Column(db.Text)

    # File storage
    file_name = db.Column(db.String(255), nullable=False)  # original upload name
    file_type = db.Column(db.String(100))  # MIME type
    file_url = db.Column(db.String(500), nullable=False)  # public URL of the stored object

    uploaded_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    patient = db.relationship('Profile', back_populates='reports')
    doctor = db.relationship('Doctor')
    appointment = db.relationship('Appointment')

    def to_dict(self):
        return {
            'id': self.id,
            'patient_id': self.patient_id,
            'patient_name': self.patient.full_name if self.patient else None,
            'doctor_id': self.doctor_id,
            'appointment_id': self.appointment_id,
            'appointment_date': iso(self.appointment.appointment_date) if self.appointment else None,
            'title': self.title,
            'notes': self.notes,
            'file_name': self.file_name,
            'file_type': self.file_type,
            'file_url': self.file_url,
            'uploaded_at': iso(self.uploaded_at),
        }

    def __repr__(self):
        return f"<MedicalReport {self.title} - Patient: {self.patient_id}>"
