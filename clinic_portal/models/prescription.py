from datetime import datetime
from clinic_portal.extensions import db
from .base import generate_uuid, iso


class Prescription(db.Model):
    """
    Prescription written by a doctor against an appointment.

    medications and instructions are free text, as entered in the console.
    """

    __tablename__ = "prescriptions"

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    appointment_id = db.Column(
        db.String(36), db.ForeignKey("appointments.id"), nullable=False, index=True
    )
    patient_id = db.Column(
        db.String(36), db.ForeignKey("profiles.id"), nullable=False, index=True
    )
    doctor_id = db.Column(
        db.String(36), db.ForeignKey("doctors.id"), nullable=False, index=True
    )

    medications = db.Column(db.Text, nullable=False)
    instructions = db.Column(db.Text, nullable=True)
    follow_up_date = db.Column(db.Date, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    appointment = db.relationship("Appointment", back_populates="prescriptions")
    patient = db.relationship("Profile", back_populates="prescriptions")
    doctor = db.relationship("Doctor")

    def to_dict(self, expand=()):
        """Convert to dictionary for API responses."""
        data = {
            "id": self.id,
            "appointment_id": self.appointment_id,
            "patient_id": self.patient_id,
            "doctor_id": self.doctor_id,
            "medications": self.medications,
            "instructions": self.instructions or "",
            "follow_up_date": iso(self.follow_up_date),
            "created_at": iso(self.created_at),
        }
        if "doctor" in expand:
            data["doctor"] = {"name": self.doctor.name} if self.doctor else None
        if "patient" in expand:
            data["patient"] = {"full_name": self.patient.full_name} if self.patient else None
        if "appointment" in expand:
            data["appointment"] = (
                {"appointment_date": iso(self.appointment.appointment_date)}
                if self.appointment
                else None
            )
        return data

    def __repr__(self):
        return f"<Prescription {self.id} - Patient: {self.patient_id}>"
