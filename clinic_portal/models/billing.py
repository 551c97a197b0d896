from datetime import datetime
from clinic_portal.extensions import db
from .base import generate_uuid, iso

BILLING_STATUSES = ('pending', 'paid')


class BillingRecord(db.Model):
    __tablename__ = 'billing'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    patient_id = db.Column(db.String(36), db.ForeignKey('profiles.id'), nullable=False, index=True)
    doctor_id = db.Column(db.String(36), db.ForeignKey('doctors.id'), nullable=False, index=True)

    # Optional links to what is being billed
    appointment_id = db.Column(db.String(36), db.ForeignKey('appointments.id', ondelete='SET NULL'), nullable=True)
    prescription_id = db.Column(db.String(36), db.ForeignKey('prescriptions.id', ondelete='SET NULL'), nullable=True)
    report_id = db.Column(db.String(36), db.ForeignKey('medical_reports.id', ondelete='SET NULL'), nullable=True)

    service_type = db.Column(db.String(100), nullable=False)  # consultation, prescription, report, ...
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    description = db.Column(db.Text)

    # Status: pending, paid
    status = db.Column(db.String(20), default='pending', nullable=False, index=True)
    paid_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    patient = db.relationship('Profile', back_populates='billing_records')
    doctor = db.relationship('Doctor')

    def to_dict(self):
        return {
            'id': self.id,
            'patient_id': self.patient_id,
            'patient_name': self.patient.full_name if self.patient else None,
            'doctor_id': self.doctor_id,
            'appointment_id': self.appointment_id,
            'prescription_id': self.prescription_id,
            'report_id': self.report_id,
            'service_type': self.service_type,
            'amount': float(self.amount) if self.amount is not None else None,
            'description': self.description,
            'status': self.status,
            'paid_at': iso(self.paid_at),
            'created_at': iso(self.created_at),
        }

    def __repr__(self):
        return f"<BillingRecord {self.id} {self.amount} ({self.status})>"
