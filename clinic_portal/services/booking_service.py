"""
Booking Service
Three-step appointment booking wizard and the appointment insert it ends in.

Step 1 picks a doctor (and optionally a service), step 2 picks a date and a
time slot, step 3 is a read-only review whose confirm action inserts exactly
one appointment with status "scheduled".
"""
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Callable, Dict, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from clinic_portal.extensions import db
from clinic_portal.models import Appointment, Doctor, Profile, Service
from clinic_portal.utils.parsing import parse_date

logger = logging.getLogger(__name__)

# Half-hour slots over a morning and an afternoon shift
TIME_SLOTS = (
    '09:00', '09:30', '10:00', '10:30', '11:00', '11:30',
    '14:00', '14:30', '15:00', '15:30', '16:00', '16:30', '17:00',
)

FIRST_STEP = 1
LAST_STEP = 3

STEP_TITLES = {
    1: 'Select Doctor & Service',
    2: 'Choose Date & Time',
    3: 'Confirm Details',
}


class BookingError(Exception):
    """Base class for booking wizard failures."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class StepNotReady(BookingError):
    """The requested transition is not allowed from the current step."""


class InvalidSelection(BookingError):
    """A selected value is not acceptable (past date, unknown slot)."""


class ProfileNotFound(BookingError):
    """The signed-in account has no patient profile."""


class MissingRequiredFields(BookingError):
    """Doctor, date or time is missing at confirmation."""


class SelectionNotFound(BookingError):
    """The chosen doctor or service does not exist (or the service is inactive)."""


class SlotUnavailable(BookingError):
    """Doctor does not work that day, or the slot is already taken."""


@dataclass
class BookingDraft:
    doctor_id: str = ''
    service_id: str = ''
    day: Optional[date] = None
    time: str = ''
    notes: str = ''


class BookingWizard:
    """
    Linear 1 -> 2 -> 3 wizard over a BookingDraft.

    next() is gated on the current step's selections; previous() is
    unconditional and keeps everything already entered.
    """

    def __init__(self, draft: Optional[BookingDraft] = None, step: int = FIRST_STEP):
        if step not in STEP_TITLES:
            raise InvalidSelection(f'Invalid step {step}')
        self.draft = draft or BookingDraft()
        self.step = step

    # -- selections -------------------------------------------------------

    def select_doctor(self, doctor_id: str, service_id: str = '') -> None:
        self.draft.doctor_id = doctor_id or ''
        self.draft.service_id = service_id or ''

    def select_slot(self, day: Optional[date], time: str, notes: Optional[str] = None,
                    today: Optional[date] = None) -> None:
        if day is not None:
            check_bookable_day(day, today)
        if time:
            check_time_slot(time)
        self.draft.day = day
        self.draft.time = time or ''
        if notes is not None:
            self.draft.notes = notes

    # -- transitions ------------------------------------------------------

    def can_advance(self) -> bool:
        if self.step == 1:
            return bool(self.draft.doctor_id)
        if self.step == 2:
            return bool(self.draft.day and self.draft.time)
        return False

    def next(self, today: Optional[date] = None) -> int:
        if self.step == LAST_STEP:
            raise StepNotReady('Already at the confirmation step')
        if not self.can_advance():
            if self.step == 1:
                raise StepNotReady('Please select a doctor')
            raise StepNotReady('Please select a date and time')
        if self.step == 2:
            check_bookable_day(self.draft.day, today)
            check_time_slot(self.draft.time)
        self.step += 1
        return self.step

    def previous(self) -> int:
        if self.step == FIRST_STEP:
            raise StepNotReady('Already at the first step')
        self.step -= 1
        return self.step

    # -- confirmation -----------------------------------------------------

    def build_payload(self, profile: Optional[Profile], today: Optional[date] = None) -> Dict[str, Any]:
        """
        Appointment insert payload.

        Validates profile first, then field presence, then the date and slot
        again since a restored wizard has not been through next().
        """
        if profile is None:
            raise ProfileNotFound('User profile not found. Please try again.')
        if not self.draft.doctor_id or not self.draft.day or not self.draft.time:
            raise MissingRequiredFields('Please fill in all required fields.')
        check_bookable_day(self.draft.day, today)
        check_time_slot(self.draft.time)
        return {
            'patient_id': profile.id,
            'doctor_id': self.draft.doctor_id,
            'service_id': self.draft.service_id or None,
            'appointment_date': self.draft.day.isoformat(),
            'appointment_time': self.draft.time,
            'notes': self.draft.notes,
            'status': 'scheduled',
        }

    def confirm(self, profile: Optional[Profile], insert: Callable[[Dict[str, Any]], Any],
                today: Optional[date] = None):
        """
        Validate and perform the single appointment insert.

        Whatever insert raises propagates unchanged; the wizard stays on the
        confirmation step so the caller can retry.
        """
        if self.step != LAST_STEP:
            raise StepNotReady('Review your appointment before confirming')
        payload = self.build_payload(profile, today)
        return insert(payload)

    # -- serialization ----------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            'step': self.step,
            'title': STEP_TITLES[self.step],
            'can_advance': self.can_advance(),
            'doctor_id': self.draft.doctor_id,
            'service_id': self.draft.service_id,
            'date': self.draft.day.isoformat() if self.draft.day else None,
            'time': self.draft.time,
            'notes': self.draft.notes,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'BookingWizard':
        """Rebuild a wizard sent back by a client. Checks shape only; next() and confirm() re-check the rest."""
        data = {} if data is None else data
        if not isinstance(data, dict):
            raise InvalidSelection('Invalid wizard state')
        try:
            step = int(data.get('step') or FIRST_STEP)
        except (TypeError, ValueError):
            raise InvalidSelection('Invalid step')
        try:
            day = parse_date(data.get('date'))
        except ValueError as e:
            raise InvalidSelection(str(e))
        time = data.get('time') or ''
        if time:
            check_time_slot(time)
        draft = BookingDraft(
            doctor_id=data.get('doctor_id') or '',
            service_id=data.get('service_id') or '',
            day=day,
            time=time,
            notes=data.get('notes') or '',
        )
        return cls(draft=draft, step=step)


def earliest_bookable_date(today: Optional[date] = None) -> date:
    """Today is not bookable; the first open day is tomorrow."""
    return (today or date.today()) + timedelta(days=1)


def check_bookable_day(day: date, today: Optional[date] = None) -> None:
    if day < earliest_bookable_date(today):
        raise InvalidSelection('Please choose a date after today')


def check_time_slot(time: str) -> None:
    if time not in TIME_SLOTS:
        raise InvalidSelection(f'Invalid time slot {time}')


def check_selection(doctor_id: str, service_id: str = '') -> None:
    """Doctor must exist; a chosen service must exist and be active."""
    if not doctor_id or not db.session.get(Doctor, doctor_id):
        raise SelectionNotFound('Doctor not found')
    if service_id:
        service = db.session.get(Service, service_id)
        if not service or not service.is_active:
            raise SelectionNotFound('Service not found')


def build_summary(wizard: BookingWizard, profile: Optional[Profile]) -> Dict[str, Any]:
    """Read-only review shown on the confirmation step."""
    draft = wizard.draft
    doctor = db.session.get(Doctor, draft.doctor_id) if draft.doctor_id else None
    service = db.session.get(Service, draft.service_id) if draft.service_id else None
    return {
        'doctor': {
            'name': doctor.name,
            'specialization': doctor.specialization,
        } if doctor else None,
        'service': {
            'name': service.name,
            'price': float(service.price) if service.price is not None else None,
            'duration_minutes': service.duration_minutes,
        } if service else {'name': 'General Consultation'},
        'date': draft.day.isoformat() if draft.day else None,
        'date_display': draft.day.strftime('%A, %B %d, %Y') if draft.day else None,
        'time': draft.time,
        'patient': {
            'full_name': profile.full_name,
            'phone': profile.phone,
        } if profile else None,
        'notes': draft.notes or None,
    }


def check_availability(payload: Dict[str, Any]) -> None:
    """
    Reject bookings outside the doctor's listed days or in a taken slot.
    Only applied when BOOKING_ENFORCE_AVAILABILITY is on.
    """
    doctor = db.session.get(Doctor, payload['doctor_id'])
    day = parse_date(payload['appointment_date'])
    if doctor and doctor.available_days and not doctor.works_on(day.strftime('%A')):
        raise SlotUnavailable(f'{doctor.name} is not available on {day.strftime("%A")}')

    taken = Appointment.query.filter(
        Appointment.doctor_id == payload['doctor_id'],
        Appointment.appointment_date == day,
        Appointment.appointment_time == payload['appointment_time'],
        Appointment.status != 'cancelled',
    ).first()
    if taken:
        raise SlotUnavailable('This time slot is already booked. Please choose another time.')


def insert_appointment(payload: Dict[str, Any]) -> Appointment:
    """
    Single insert of an appointment row.

    Database errors roll the session back and propagate with the driver's
    message intact.
    """
    if current_app.config.get('BOOKING_ENFORCE_AVAILABILITY'):
        check_availability(payload)

    appointment = Appointment(
        patient_id=payload['patient_id'],
        doctor_id=payload['doctor_id'],
        service_id=payload['service_id'],
        appointment_date=parse_date(payload['appointment_date']),
        appointment_time=payload['appointment_time'],
        notes=payload['notes'],
        status=payload['status'],
    )
    try:
        db.session.add(appointment)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise

    logger.info(
        "Appointment %s booked for patient %s with doctor %s on %s %s",
        appointment.id, appointment.patient_id, appointment.doctor_id,
        payload['appointment_date'], payload['appointment_time'],
    )
    return appointment
