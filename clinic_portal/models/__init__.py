from .user import User
from .profile import Profile
from .doctor import Doctor
from .service import Service
from .appointment import Appointment, APPOINTMENT_STATUSES
from .prescription import Prescription
from .medical_report import MedicalReport
from .billing import BillingRecord, BILLING_STATUSES
from .event import Event
from .clinic_info import ClinicInfo
from .audit_log import AuditLog

__all__ = ["User", "Profile", "Doctor", "Service", "Appointment", "Prescription", "MedicalReport", "BillingRecord", "Event", "ClinicInfo", "AuditLog", "APPOINTMENT_STATUSES", "BILLING_STATUSES"]
