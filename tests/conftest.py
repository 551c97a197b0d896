from datetime import date, timedelta

import pytest

from clinic_portal import create_app
from clinic_portal.extensions import db
from clinic_portal.models import (
    User,
    Profile,
    Doctor,
    Service,
    Appointment,
    Event,
    ClinicInfo,
    BillingRecord,
)

PASSWORD = 'secret123'


@pytest.fixture
def app(tmp_path):
    app = create_app('testing')
    app.config['STORAGE_ROOT'] = str(tmp_path / 'storage')
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def auth_headers(token):
    return {'Authorization': f'Bearer {token}'}


def make_doctor(app, name='Dr. Amy Stone', specialization='General Dentistry', **kwargs):
    with app.app_context():
        doctor = Doctor(name=name, specialization=specialization, **kwargs)
        db.session.add(doctor)
        db.session.commit()
        return doctor.id


def make_service(app, name='Dental Checkup', price='50.00', is_active=True, **kwargs):
    with app.app_context():
        service = Service(name=name, price=price, duration_minutes=30, is_active=is_active, **kwargs)
        db.session.add(service)
        db.session.commit()
        return service.id


def make_event(app, title='Open Day', days_ahead=7, is_public=True):
    with app.app_context():
        event = Event(title=title, event_date=date.today() + timedelta(days=days_ahead), is_public=is_public)
        db.session.add(event)
        db.session.commit()
        return event.id


def make_clinic_info(app, **kwargs):
    data = {'name': 'BrightSmile Dental Clinic', 'phone': '+1 (555) 123-4567'}
    data.update(kwargs)
    with app.app_context():
        info = ClinicInfo(**data)
        db.session.add(info)
        db.session.commit()
        return info.id


def make_appointment(app, patient_id, doctor_id, day=None, time='10:00', status='scheduled', service_id=None):
    with app.app_context():
        appointment = Appointment(
            patient_id=patient_id,
            doctor_id=doctor_id,
            service_id=service_id,
            appointment_date=day or date.today() + timedelta(days=3),
            appointment_time=time,
            status=status,
        )
        db.session.add(appointment)
        db.session.commit()
        return appointment.id


def make_billing(app, patient_id, doctor_id, amount, status='pending', service_type='consultation'):
    with app.app_context():
        record = BillingRecord(
            patient_id=patient_id,
            doctor_id=doctor_id,
            amount=amount,
            status=status,
            service_type=service_type,
        )
        db.session.add(record)
        db.session.commit()
        return record.id


def signup_and_login(client, email='jane@example.com', full_name='Jane Patient', phone='555-0100'):
    resp = client.post('/api/auth/signup', json={
        'email': email,
        'password': PASSWORD,
        'confirm_password': PASSWORD,
        'full_name': full_name,
        'phone': phone,
    })
    assert resp.status_code == 201, resp.get_json()
    resp = client.post('/api/auth/login', json={'email': email, 'password': PASSWORD})
    assert resp.status_code == 200, resp.get_json()
    body = resp.get_json()
    return {
        'user_id': body['data']['id'],
        'profile_id': body['data']['profile_id'],
        'token': body['access_token'],
        'refresh_token': body['refresh_token'],
        'headers': auth_headers(body['access_token']),
    }


@pytest.fixture
def patient(client):
    return signup_and_login(client)


@pytest.fixture
def doctor_account(app, client):
    """Doctor user linked to a doctors row, signed in through the doctor login"""
    with app.app_context():
        user = User(email='doc@clinic.com', role='doctor', is_active=True)
        user.set_password(PASSWORD)
        db.session.add(user)
        db.session.flush()
        doctor = Doctor(
            user_id=user.id,
            name='Dr. Sarah Johnson',
            specialization='General Dentistry',
            experience_years=12,
            available_days=['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday'],
        )
        db.session.add(doctor)
        db.session.commit()
        doctor_id = doctor.id
        user_id = user.id

    resp = client.post('/api/auth/doctor/login', json={'email': 'doc@clinic.com', 'password': PASSWORD})
    assert resp.status_code == 200, resp.get_json()
    token = resp.get_json()['access_token']
    return {
        'user_id': user_id,
        'doctor_id': doctor_id,
        'token': token,
        'headers': auth_headers(token),
    }


@pytest.fixture
def patient_without_profile(app, client):
    """Patient-role account that has no profile row"""
    with app.app_context():
        user = User(email='noprofile@example.com', role='patient', is_active=True)
        user.set_password(PASSWORD)
        db.session.add(user)
        db.session.commit()
    resp = client.post('/api/auth/login', json={'email': 'noprofile@example.com', 'password': PASSWORD})
    assert resp.status_code == 200
    return {'headers': auth_headers(resp.get_json()['access_token'])}
