"""
Health check endpoints for monitoring and load balancers
"""
import os
from datetime import datetime

from flask import Blueprint, jsonify
from sqlalchemy.exc import SQLAlchemyError

from clinic_portal.extensions import db
from clinic_portal.services.storage_service import bucket_path

health_bp = Blueprint('health', __name__, url_prefix='/health')


def _database_status():
    try:
        db.session.execute(db.text('SELECT 1'))
    except SQLAlchemyError as e:
        db.session.rollback()
        return f'error: {str(e)}'
    return 'connected'


def _storage_status():
    """Bucket directory must exist (or be creatable) and be writable"""
    path = bucket_path()
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        return f'error: {str(e)}'
    return 'writable' if os.access(path, os.W_OK) else 'error: not writable'


@health_bp.route('', methods=['GET'])
@health_bp.route('/ping', methods=['GET'])
def health_check():
    """No dependencies touched"""
    return jsonify({
        'status': 'healthy',
        'timestamp': datetime.utcnow().isoformat(),
        'service': 'clinic-portal'
    }), 200


@health_bp.route('/ready', methods=['GET'])
def readiness_check():
    """Database reachable and report storage writable"""
    checks = {
        'database': _database_status(),
        'storage': _storage_status(),
    }
    ready = checks['database'] == 'connected' and checks['storage'] == 'writable'
    return jsonify({
        'status': 'ready' if ready else 'not_ready',
        **checks,
        'timestamp': datetime.utcnow().isoformat()
    }), 200 if ready else 503


@health_bp.route('/live', methods=['GET'])
def liveness_check():
    return jsonify({
        'status': 'alive',
        'timestamp': datetime.utcnow().isoformat()
    }), 200
