"""
Booking API Routes
HTTP surface of the three-step booking wizard.

The wizard state travels with each request ({"wizard": {...}}) so no
server-side session is kept between steps.
"""
from flask import Blueprint, request, jsonify, g
from flask_jwt_extended import jwt_required
from sqlalchemy.exc import SQLAlchemyError
from clinic_portal.models import Doctor, Service
from clinic_portal.services.booking_service import (
    BookingWizard,
    BookingError,
    InvalidSelection,
    MissingRequiredFields,
    ProfileNotFound,
    SelectionNotFound,
    SlotUnavailable,
    StepNotReady,
    TIME_SLOTS,
    build_summary,
    check_selection,
    earliest_bookable_date,
    insert_appointment,
)
from clinic_portal.utils.decorators import require_role, get_current_profile
import logging

logger = logging.getLogger(__name__)

booking_bp = Blueprint('booking', __name__, url_prefix='/api/booking')

BOOKING_ERROR_STATUS = {
    StepNotReady: 400,
    InvalidSelection: 400,
    MissingRequiredFields: 400,
    ProfileNotFound: 404,
    SelectionNotFound: 404,
    SlotUnavailable: 409,
}


def _error(message, status, wizard=None):
    body = {'success': False, 'error': message}
    if wizard is not None:
        body['wizard'] = wizard.to_dict()
    return jsonify(body), status


def _booking_error(e, wizard=None):
    return _error(e.message, BOOKING_ERROR_STATUS.get(type(e), 400), wizard)


@booking_bp.route('/options', methods=['GET'])
@jwt_required()
@require_role('patient')
def booking_options():
    """Doctors, active services and time slots to choose from"""
    doctors = Doctor.query.order_by(Doctor.name.asc()).all()
    services = Service.query.filter(Service.is_active.is_(True)).order_by(Service.name.asc()).all()
    profile = get_current_profile()
    return jsonify({
        'success': True,
        'data': {
            'doctors': [d.to_dict() for d in doctors],
            'services': [s.to_dict() for s in services],
            'time_slots': list(TIME_SLOTS),
            'earliest_date': earliest_bookable_date().isoformat(),
            'profile': profile.to_dict() if profile else None,
            'wizard': BookingWizard().to_dict(),
        }
    }), 200


@booking_bp.route('/step', methods=['POST'])
@jwt_required()
@require_role('patient')
def booking_step():
    """
    Move the wizard one step.
    Body: {"wizard": {step, doctor_id, service_id, date, time, notes}, "action": "next" | "previous"}
    """
    data = request.get_json(silent=True)
    if not data:
        return _error('Request body must be JSON', 400)

    action = data.get('action')
    if action not in ('next', 'previous'):
        return _error('Field "action" must be "next" or "previous"', 400)

    try:
        wizard = BookingWizard.from_dict(data.get('wizard'))
    except BookingError as e:
        return _booking_error(e)

    try:
        # Anything past step 1 carries a doctor that must still exist
        if wizard.step >= 2 or (action == 'next' and wizard.can_advance()):
            check_selection(wizard.draft.doctor_id, wizard.draft.service_id)
        if action == 'previous':
            wizard.previous()
        else:
            wizard.next()
    except BookingError as e:
        return _booking_error(e, wizard)

    body = {'success': True, 'data': {'wizard': wizard.to_dict()}}
    if wizard.step == 3:
        body['data']['summary'] = build_summary(wizard, get_current_profile())
    return jsonify(body), 200


@booking_bp.route('/confirm', methods=['POST'])
@jwt_required()
@require_role('patient')
def booking_confirm():
    """
    Confirm the reviewed booking: one appointment insert with status "scheduled".
    Body: {"wizard": {...}} on step 3
    """
    data = request.get_json(silent=True)
    if not data:
        return _error('Request body must be JSON', 400)

    try:
        wizard = BookingWizard.from_dict(data.get('wizard'))
    except BookingError as e:
        return _booking_error(e)

    profile = get_current_profile()

    def insert(payload):
        check_selection(payload['doctor_id'], payload['service_id'])
        return insert_appointment(payload)

    try:
        appointment = wizard.confirm(profile, insert)
    except BookingError as e:
        return _booking_error(e, wizard)
    except SQLAlchemyError as e:
        logger.error(f"Booking failed for user {g.current_user.id}: {e}", exc_info=True)
        return _error(str(getattr(e, 'orig', None) or e), 500, wizard)

    return jsonify({
        'success': True,
        'data': appointment.to_dict(expand=('doctor', 'service')),
        'message': 'Your appointment has been successfully scheduled.'
    }), 201
