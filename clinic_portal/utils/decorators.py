from functools import wraps
from flask import jsonify, g
from flask_jwt_extended import get_jwt_identity
from clinic_portal.extensions import db
from clinic_portal.models import User, Doctor, Profile


def get_current_user():
    """Return the User behind the current JWT, or None."""
    identity = get_jwt_identity()
    if not identity:
        return None
    return db.session.get(User, identity)


def get_current_profile():
    """Patient profile of the current JWT user, or None."""
    user = getattr(g, 'current_user', None) or get_current_user()
    if not user:
        return None
    return Profile.query.filter_by(user_id=user.id).first()


def get_current_doctor():
    """Doctor row linked to the current JWT user, or None."""
    user = getattr(g, 'current_user', None) or get_current_user()
    if not user:
        return None
    return Doctor.query.filter_by(user_id=user.id).first()


def require_role(*roles):
    """
    Decorator to require specific roles
    Usage: @require_role('doctor')
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            """
            Require that the current JWT-authenticated user has one of the given roles.
            Must be used together with @jwt_required() on the route.
            """
            user = get_current_user()

            if not user or not user.is_active:
                return jsonify({
                    'success': False,
                    'error': 'Authentication required'
                }), 401

            if user.role not in roles:
                return jsonify({
                    'success': False,
                    'error': f'Permission denied. Required roles: {", ".join(roles)}'
                }), 403

            g.current_user = user
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def require_doctor_profile(f):
    """
    Resolve the doctor row for the signed-in doctor into g.doctor.
    Use after @require_role('doctor').
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        doctor = get_current_doctor()
        if not doctor:
            return jsonify({
                'success': False,
                'error': 'Doctor profile not found'
            }), 404
        g.doctor = doctor
        return f(*args, **kwargs)
    return decorated_function


def require_patient_profile(f):
    """
    Resolve the patient profile for the signed-in patient into g.profile.
    Use after @require_role('patient').
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        profile = get_current_profile()
        if not profile:
            return jsonify({
                'success': False,
                'error': 'Profile not found'
            }), 404
        g.profile = profile
        return f(*args, **kwargs)
    return decorated_function
