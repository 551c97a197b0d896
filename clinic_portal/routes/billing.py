"""
Billing API Routes
Doctor-side billing records for prescriptions, reports and visits
"""
from flask import Blueprint, request, jsonify, g
from flask_jwt_extended import jwt_required
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime
from clinic_portal.extensions import db
from clinic_portal.models import BillingRecord, Profile, BILLING_STATUSES
from clinic_portal.services.dashboard_service import billing_summary
from clinic_portal.utils.decorators import require_role, require_doctor_profile
from clinic_portal.utils.audit import log_audit
from clinic_portal.utils.parsing import parse_amount, parse_choice, missing_fields
import logging

logger = logging.getLogger(__name__)

billing_bp = Blueprint('billing', __name__, url_prefix='/api/billing')


def _own_record(record_id):
    return BillingRecord.query.filter_by(id=record_id, doctor_id=g.doctor.id).first()


@billing_bp.route('', methods=['GET'])
@jwt_required()
@require_role('doctor')
@require_doctor_profile
def list_billing():
    """
    Billing records of the current doctor, newest first
    Query params:
        status: pending | paid (optional)
    """
    query = BillingRecord.query.filter_by(doctor_id=g.doctor.id)

    status = request.args.get('status', type=str)
    if status:
        try:
            query = query.filter(BillingRecord.status == parse_choice(status, BILLING_STATUSES))
        except ValueError as e:
            return jsonify({
                'success': False,
                'error': str(e)
            }), 400

    records = query.order_by(BillingRecord.created_at.desc()).all()
    return jsonify({
        'success': True,
        'data': [r.to_dict() for r in records]
    }), 200


@billing_bp.route('/summary', methods=['GET'])
@jwt_required()
@require_role('doctor')
@require_doctor_profile
def get_summary():
    """Revenue (paid only) and outstanding totals"""
    records = BillingRecord.query.filter_by(doctor_id=g.doctor.id).all()
    return jsonify({
        'success': True,
        'data': billing_summary(records)
    }), 200


@billing_bp.route('', methods=['POST'])
@jwt_required()
@require_role('doctor')
@require_doctor_profile
def create_billing():
    """
    Create a billing record

    Body:
        patient_id: Profile ID (required)
        service_type: e.g. consultation, prescription, report (required)
        amount: non-negative number (required)
        description, appointment_id, prescription_id, report_id: optional
    """
    data = request.get_json(silent=True)
    if not data:
        return jsonify({
            'success': False,
            'error': 'Request body is required'
        }), 400

    missing = missing_fields(data, ['patient_id', 'service_type', 'amount'])
    if missing:
        return jsonify({
            'success': False,
            'error': f'Field "{missing[0]}" is required'
        }), 400

    try:
        amount = parse_amount(data['amount'])
    except ValueError as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 400

    if not db.session.get(Profile, data['patient_id']):
        return jsonify({
            'success': False,
            'error': 'Patient not found'
        }), 404

    record = BillingRecord(
        patient_id=data['patient_id'],
        doctor_id=g.doctor.id,
        appointment_id=data.get('appointment_id') or None,
        prescription_id=data.get('prescription_id') or None,
        report_id=data.get('report_id') or None,
        service_type=data['service_type'],
        amount=amount,
        description=data.get('description') or None,
        status='pending',
    )
    try:
        db.session.add(record)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error creating billing record: {e}", exc_info=True)
        return jsonify({
            'success': False,
            'error': f'Failed to create billing record: {str(e)}'
        }), 500

    log_audit('billing', 'create', entity_id=record.id,
              details={'patient_id': record.patient_id, 'amount': str(amount)})

    return jsonify({
        'success': True,
        'data': record.to_dict(),
        'message': 'Billing record created'
    }), 201


@billing_bp.route('/<record_id>/status', methods=['PUT'])
@jwt_required()
@require_role('doctor')
@require_doctor_profile
def update_billing_status(record_id):
    """Mark a record paid (stamps paid_at) or back to pending"""
    record = _own_record(record_id)
    if not record:
        return jsonify({
            'success': False,
            'error': 'Billing record not found'
        }), 404

    data = request.get_json(silent=True) or {}
    try:
        new_status = parse_choice(data.get('status'), BILLING_STATUSES)
    except ValueError as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 400

    old_status = record.status
    try:
        record.status = new_status
        record.paid_at = datetime.utcnow() if new_status == 'paid' else None
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        return jsonify({
            'success': False,
            'error': f'Update failed: {str(e)}'
        }), 500

    log_audit('billing', 'update', entity_id=record.id,
              details={'status': [old_status, new_status]})

    return jsonify({
        'success': True,
        'data': record.to_dict(),
        'message': f'Billing record marked {new_status}'
    }), 200
