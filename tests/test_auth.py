from clinic_portal.models import User, Profile

from conftest import PASSWORD, auth_headers, signup_and_login


def signup(client, **overrides):
    body = {
        'email': 'new@example.com',
        'password': PASSWORD,
        'confirm_password': PASSWORD,
        'full_name': 'New Patient',
        'phone': '555-0199',
    }
    body.update(overrides)
    return client.post('/api/auth/signup', json=body)


def test_signup_creates_patient_and_profile(app, client):
    resp = signup(client, email='New@Example.com ')
    assert resp.status_code == 201
    data = resp.get_json()['data']
    assert data['user']['email'] == 'new@example.com'
    assert data['user']['role'] == 'patient'
    assert data['profile']['full_name'] == 'New Patient'
    assert data['profile']['phone'] == '555-0199'

    with app.app_context():
        user = User.query.filter_by(email='new@example.com').one()
        assert user.password_hash != PASSWORD
        assert Profile.query.filter_by(user_id=user.id).count() == 1


def test_signup_password_mismatch(app, client):
    resp = signup(client, confirm_password='different')
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'Passwords do not match. Please try again.'
    with app.app_context():
        assert User.query.count() == 0


def test_signup_requires_full_name(client):
    resp = signup(client, full_name='  ')
    assert resp.status_code == 400
    assert 'full_name' in resp.get_json()['error']


def test_signup_short_password(client):
    resp = signup(client, password='abc', confirm_password='abc')
    assert resp.status_code == 400


def test_signup_duplicate_email(client):
    assert signup(client).status_code == 201
    resp = signup(client)
    assert resp.status_code == 409
    assert resp.get_json()['error'] == 'User already registered'


def test_login_returns_tokens_and_session(client):
    signup(client)
    resp = client.post('/api/auth/login', json={'email': 'new@example.com', 'password': PASSWORD})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['access_token']
    assert body['refresh_token']
    assert body['token_type'] == 'bearer'
    assert body['data']['role'] == 'patient'
    assert body['data']['full_name'] == 'New Patient'
    assert body['data']['profile_id']
    assert body['data']['login_count'] == 1


def test_login_wrong_password(client):
    signup(client)
    resp = client.post('/api/auth/login', json={'email': 'new@example.com', 'password': 'nope'})
    assert resp.status_code == 401
    assert resp.get_json()['error'] == 'Invalid login credentials'


def test_login_missing_fields(client):
    resp = client.post('/api/auth/login', json={'email': 'new@example.com'})
    assert resp.status_code == 400


def test_doctor_login_rejects_patients(client, patient):
    resp = client.post('/api/auth/doctor/login', json={'email': 'jane@example.com', 'password': PASSWORD})
    assert resp.status_code == 403


def test_doctor_login_links_doctor_row(client, doctor_account):
    resp = client.get('/api/auth/session', headers=doctor_account['headers'])
    assert resp.status_code == 200
    user = resp.get_json()['data']['user']
    assert user['role'] == 'doctor'
    assert user['doctor_id'] == doctor_account['doctor_id']
    assert user['full_name'] == 'Dr. Sarah Johnson'


def test_session_without_token_is_null(client):
    resp = client.get('/api/auth/session')
    assert resp.status_code == 200
    assert resp.get_json()['data'] is None


def test_session_with_token(client, patient):
    resp = client.get('/api/auth/session', headers=patient['headers'])
    data = resp.get_json()['data']
    assert data['user']['profile_id'] == patient['profile_id']
    assert data['expires_at']


def test_refresh_issues_new_access_token(client, patient):
    resp = client.post('/api/auth/refresh', headers=auth_headers(patient['refresh_token']))
    assert resp.status_code == 200
    token = resp.get_json()['access_token']
    assert client.get('/api/patient/profile', headers=auth_headers(token)).status_code == 200


def test_logout(client, patient):
    resp = client.post('/api/auth/logout', headers=patient['headers'])
    assert resp.status_code == 200
    assert resp.get_json()['success'] is True


def test_invalid_token(client):
    resp = client.get('/api/patient/profile', headers=auth_headers('not-a-jwt'))
    assert resp.status_code == 401
    assert resp.get_json()['success'] is False


def test_signup_and_login_helper_second_account(client, patient):
    other = signup_and_login(client, email='other@example.com', full_name='Other Patient')
    assert other['profile_id'] != patient['profile_id']
