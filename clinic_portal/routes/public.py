"""
Public site data: clinic info, doctors, services, events, contact form.
No authentication required.
"""
from flask import Blueprint, request, jsonify
from datetime import date
from clinic_portal.models import ClinicInfo, Doctor, Service, Event
from clinic_portal.utils.parsing import missing_fields
import logging

logger = logging.getLogger(__name__)

public_bp = Blueprint('public', __name__, url_prefix='/api/public')

PUBLIC_EVENTS_LIMIT = 6


def upcoming_public_events(limit):
    """Public events dated today or later, soonest first"""
    return Event.query.filter(
        Event.is_public.is_(True),
        Event.event_date >= date.today()
    ).order_by(Event.event_date.asc()).limit(limit).all()


@public_bp.route('/clinic-info', methods=['GET'])
def get_clinic_info():
    info = ClinicInfo.query.first()
    if not info:
        return jsonify({
            'success': False,
            'error': 'Clinic information not found'
        }), 404
    return jsonify({
        'success': True,
        'data': info.to_dict()
    }), 200


@public_bp.route('/doctors', methods=['GET'])
def list_doctors():
    """All doctors, most experienced first"""
    doctors = Doctor.query.order_by(
        Doctor.experience_years.desc().nullslast(),
        Doctor.name.asc()
    ).all()
    return jsonify({
        'success': True,
        'data': [d.to_dict() for d in doctors]
    }), 200


@public_bp.route('/services', methods=['GET'])
def list_services():
    """Active services, cheapest first"""
    services = Service.query.filter(Service.is_active.is_(True)).order_by(Service.price.asc()).all()
    return jsonify({
        'success': True,
        'data': [s.to_dict() for s in services]
    }), 200


@public_bp.route('/events', methods=['GET'])
def list_events():
    events = upcoming_public_events(PUBLIC_EVENTS_LIMIT)
    return jsonify({
        'success': True,
        'data': [e.to_dict() for e in events]
    }), 200


@public_bp.route('/contact', methods=['POST'])
def contact():
    """
    Contact form. Messages are logged and acknowledged; nothing is stored.
    Body: name, email, message, phone (optional)
    """
    data = request.get_json(silent=True) or {}
    missing = missing_fields(data, ['name', 'email', 'message'])
    if missing:
        return jsonify({
            'success': False,
            'error': f'Field "{missing[0]}" is required'
        }), 400

    logger.info(
        "Contact message from %s <%s> phone=%s: %s",
        data['name'], data['email'], data.get('phone') or '-', data['message'][:200]
    )

    return jsonify({
        'success': True,
        'message': "Message sent! We'll get back to you within 24 hours."
    }), 200
