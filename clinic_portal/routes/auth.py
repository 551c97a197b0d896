from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    jwt_required,
    get_jwt_identity,
    get_jwt,
)
from sqlalchemy.exc import SQLAlchemyError
from clinic_portal.models import User, Profile, Doctor
from clinic_portal.extensions import db
from clinic_portal.services.email_service import send_signup_confirmation_email
from clinic_portal.utils.parsing import missing_fields
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')

MIN_PASSWORD_LENGTH = 6


def _issue_tokens(user):
    """Access + refresh tokens for user; identity is the user id."""
    identity = str(user.id)
    additional_claims = {
        "email": user.email,
        "role": user.role,
    }
    access_token = create_access_token(
        identity=identity,
        additional_claims=additional_claims,
        fresh=True,
    )
    refresh_token = create_refresh_token(
        identity=identity,
        additional_claims=additional_claims,
    )
    expires_in = int(current_app.config['JWT_ACCESS_TOKEN_EXPIRES'].total_seconds())
    return {
        'access_token': access_token,
        'refresh_token': refresh_token,
        'token_type': 'bearer',
        'expires_in': expires_in,
    }


def _session_payload(user):
    """User plus the profile or doctor row the account is linked to."""
    data = user.to_dict()
    profile = Profile.query.filter_by(user_id=user.id).first()
    doctor = Doctor.query.filter_by(user_id=user.id).first()
    data['profile_id'] = profile.id if profile else None
    data['full_name'] = profile.full_name if profile else (doctor.name if doctor else None)
    data['doctor_id'] = doctor.id if doctor else None
    return data


def _authenticate(data):
    """
    Check email/password from a login body.
    Returns (user, None) or (None, (response, status)).
    """
    if not data:
        return None, (jsonify({
            'success': False,
            'error': 'Request body must be JSON'
        }), 400)

    email = (data.get('email') or '').strip().lower()
    password = data.get('password')

    if not email or not password:
        return None, (jsonify({
            'success': False,
            'error': 'Email and password required'
        }), 400)

    user = User.query.filter_by(email=email).first()

    if not user or not user.check_password(password):
        return None, (jsonify({
            'success': False,
            'error': 'Invalid login credentials'
        }), 401)

    if not user.is_active:
        return None, (jsonify({
            'success': False,
            'error': 'Account is deactivated'
        }), 403)

    return user, None


def _login_response(user):
    # Update login tracking
    user.last_login = datetime.utcnow()
    user.login_count = (user.login_count or 0) + 1
    db.session.commit()

    body = {
        'success': True,
        'data': _session_payload(user),
    }
    body.update(_issue_tokens(user))
    return jsonify(body), 200


@auth_bp.route('/signup', methods=['POST'])
def signup():
    """
    Register a patient account and its profile.
    Body: email, password, confirm_password, full_name, phone (optional)
    """
    data = request.get_json(silent=True)
    if not data:
        return jsonify({
            'success': False,
            'error': 'Request body must be JSON'
        }), 400

    missing = missing_fields(data, ['email', 'password', 'full_name'])
    if missing:
        return jsonify({
            'success': False,
            'error': f'Field "{missing[0]}" is required'
        }), 400

    password = data['password']
    if 'confirm_password' in data and data['confirm_password'] != password:
        return jsonify({
            'success': False,
            'error': 'Passwords do not match. Please try again.'
        }), 400

    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({
            'success': False,
            'error': f'Password should be at least {MIN_PASSWORD_LENGTH} characters'
        }), 400

    email = data['email'].strip().lower()
    if '@' not in email:
        return jsonify({
            'success': False,
            'error': 'Invalid email address'
        }), 400

    if User.query.filter_by(email=email).first():
        return jsonify({
            'success': False,
            'error': 'User already registered'
        }), 409

    try:
        user = User(email=email, role='patient', is_active=True)
        user.set_password(password)
        db.session.add(user)
        db.session.flush()  # Get user.id

        profile = Profile(
            user_id=user.id,
            full_name=data['full_name'].strip(),
            phone=(data.get('phone') or '').strip() or None,
        )
        db.session.add(profile)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Sign up failed for {email}: {e}", exc_info=True)
        return jsonify({
            'success': False,
            'error': f'Sign up failed: {str(e)}'
        }), 500

    redirect_url = f"{current_app.config['FRONTEND_BASE_URL'].rstrip('/')}/"
    send_signup_confirmation_email(user.email, profile.full_name, redirect_url)

    logger.info(f"Patient account created: {user.email}")

    return jsonify({
        'success': True,
        'data': {
            'user': user.to_dict(),
            'profile': profile.to_dict(),
        },
        'message': 'Account created! You can now sign in.'
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """Sign in with email/password and receive JWT tokens"""
    user, error = _authenticate(request.get_json(silent=True))
    if error:
        return error
    return _login_response(user)


@auth_bp.route('/doctor/login', methods=['POST'])
def doctor_login():
    """Sign in to the doctor console; only doctor accounts are accepted"""
    user, error = _authenticate(request.get_json(silent=True))
    if error:
        return error

    if not user.is_doctor():
        return jsonify({
            'success': False,
            'error': 'This account does not have doctor access'
        }), 403

    return _login_response(user)


@auth_bp.route('/logout', methods=['POST'])
@jwt_required()
def logout():
    """Stateless JWT: the client deletes its tokens"""
    return jsonify({
        'success': True,
        'message': 'Signed out successfully'
    }), 200


@auth_bp.route('/session', methods=['GET'])
@jwt_required(optional=True)
def get_session():
    """
    Current session. Without a token this returns a null session instead
    of 401 so the client can decide where to route.
    """
    user_id = get_jwt_identity()
    user = db.session.get(User, user_id) if user_id else None

    if not user or not user.is_active:
        return jsonify({
            'success': True,
            'data': None
        }), 200

    return jsonify({
        'success': True,
        'data': {
            'user': _session_payload(user),
            'expires_at': get_jwt().get('exp'),
        }
    }), 200


@auth_bp.route('/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh():
    """Refresh access token using refresh token"""
    identity = get_jwt_identity()
    user = db.session.get(User, identity)
    if not user or not user.is_active:
        return jsonify({
            'success': False,
            'error': 'Could not refresh token'
        }), 401

    new_access_token = create_access_token(
        identity=identity,
        additional_claims={"email": user.email, "role": user.role},
        fresh=False  # refreshed tokens are not fresh
    )
    return jsonify({
        'success': True,
        'access_token': new_access_token,
        'token_type': 'bearer',
        'expires_in': int(current_app.config['JWT_ACCESS_TOKEN_EXPIRES'].total_seconds())
    }), 200
