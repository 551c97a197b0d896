"""
Patient portal: own profile, appointments, prescriptions, reports and
clinic events.
"""
from flask import Blueprint, request, jsonify, g
from flask_jwt_extended import jwt_required
from sqlalchemy.exc import SQLAlchemyError
from clinic_portal.models import Appointment, Prescription, MedicalReport
from clinic_portal.extensions import db
from clinic_portal.routes.public import upcoming_public_events
from clinic_portal.services.dashboard_service import count_upcoming_appointments
from clinic_portal.utils.decorators import require_role, require_patient_profile
from clinic_portal.utils.parsing import parse_date
import logging

logger = logging.getLogger(__name__)

patient_bp = Blueprint('patient', __name__, url_prefix='/api/patient')

PATIENT_EVENTS_LIMIT = 5
RECENT_APPOINTMENTS = 3

PROFILE_FIELDS = ['full_name', 'phone', 'date_of_birth', 'address', 'emergency_contact', 'emergency_phone']


def _own_appointments(profile):
    return profile.appointments.order_by(
        Appointment.appointment_date.desc(),
        Appointment.appointment_time.desc()
    ).all()


@patient_bp.route('/profile', methods=['GET'])
@jwt_required()
@require_role('patient')
@require_patient_profile
def get_profile():
    return jsonify({
        'success': True,
        'data': g.profile.to_dict()
    }), 200


@patient_bp.route('/profile', methods=['PUT'])
@jwt_required()
@require_role('patient')
@require_patient_profile
def update_profile():
    """
    Update own profile
    Body: any of full_name, phone, date_of_birth, address, emergency_contact, emergency_phone
    """
    data = request.get_json(silent=True)
    if not data:
        return jsonify({
            'success': False,
            'error': 'Request body must be JSON'
        }), 400

    profile = g.profile

    if 'full_name' in data and not (data['full_name'] or '').strip():
        return jsonify({
            'success': False,
            'error': 'Field "full_name" cannot be empty'
        }), 400

    try:
        for field in PROFILE_FIELDS:
            if field not in data:
                continue
            if field == 'date_of_birth':
                setattr(profile, field, parse_date(data[field], 'date_of_birth'))
            else:
                value = data[field]
                setattr(profile, field, value.strip() if isinstance(value, str) else value)
        db.session.commit()
    except ValueError as e:
        db.session.rollback()
        return jsonify({
            'success': False,
            'error': str(e)
        }), 400
    except SQLAlchemyError as e:
        db.session.rollback()
        return jsonify({
            'success': False,
            'error': f'Failed to update profile: {str(e)}'
        }), 500

    return jsonify({
        'success': True,
        'data': profile.to_dict(),
        'message': 'Profile updated successfully'
    }), 200


@patient_bp.route('/appointments', methods=['GET'])
@jwt_required()
@require_role('patient')
@require_patient_profile
def list_appointments():
    """Own appointments with doctor and service, latest date first"""
    appointments = _own_appointments(g.profile)
    return jsonify({
        'success': True,
        'data': [a.to_dict(expand=('doctor', 'service')) for a in appointments]
    }), 200


@patient_bp.route('/prescriptions', methods=['GET'])
@jwt_required()
@require_role('patient')
@require_patient_profile
def list_prescriptions():
    prescriptions = g.profile.prescriptions.order_by(Prescription.created_at.desc()).all()
    return jsonify({
        'success': True,
        'data': [p.to_dict(expand=('doctor',)) for p in prescriptions]
    }), 200


@patient_bp.route('/reports', methods=['GET'])
@jwt_required()
@require_role('patient')
@require_patient_profile
def list_reports():
    reports = g.profile.reports.order_by(MedicalReport.uploaded_at.desc()).all()
    return jsonify({
        'success': True,
        'data': [r.to_dict() for r in reports]
    }), 200


@patient_bp.route('/events', methods=['GET'])
@jwt_required()
@require_role('patient')
def list_events():
    events = upcoming_public_events(PATIENT_EVENTS_LIMIT)
    return jsonify({
        'success': True,
        'data': [e.to_dict() for e in events]
    }), 200


@patient_bp.route('/overview', methods=['GET'])
@jwt_required()
@require_role('patient')
@require_patient_profile
def overview():
    """Quick stats, recent appointments and upcoming events"""
    profile = g.profile
    appointments = _own_appointments(profile)
    events = upcoming_public_events(PATIENT_EVENTS_LIMIT)

    return jsonify({
        'success': True,
        'data': {
            'profile': profile.to_dict(),
            'stats': {
                'appointments': len(appointments),
                'upcoming_appointments': count_upcoming_appointments(appointments),
                'prescriptions': profile.prescriptions.count(),
                'events': len(events),
            },
            'recent_appointments': [
                a.to_dict(expand=('doctor', 'service'))
                for a in appointments[:RECENT_APPOINTMENTS]
            ],
            'events': [e.to_dict() for e in events],
        }
    }), 200
