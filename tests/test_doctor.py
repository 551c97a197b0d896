import io
from datetime import date, timedelta

from clinic_portal.extensions import db
from clinic_portal.models import (
    Appointment,
    AuditLog,
    BillingRecord,
    MedicalReport,
    Prescription,
    Profile,
    User,
)

from conftest import make_appointment, make_billing, make_doctor, make_service, signup_and_login


def upload(client, headers, appointment_id, filename='scan.pdf', content=b'%PDF-1.4 test', **fields):
    data = {
        'title': 'Panoramic X-Ray',
        'appointment_id': appointment_id,
        'file': (io.BytesIO(content), filename),
    }
    data.update(fields)
    return client.post('/api/doctor/reports', headers=headers, data=data, content_type='multipart/form-data')


def test_profile(client, doctor_account):
    resp = client.get('/api/doctor/profile', headers=doctor_account['headers'])
    assert resp.status_code == 200
    assert resp.get_json()['data']['id'] == doctor_account['doctor_id']


def test_patient_cannot_open_console(client, patient):
    resp = client.get('/api/doctor/appointments', headers=patient['headers'])
    assert resp.status_code == 403


def test_doctor_account_without_doctor_row(app, client):
    with app.app_context():
        user = User(email='unlinked@clinic.com', role='doctor')
        user.set_password('secret123')
        db.session.add(user)
        db.session.commit()
    token = client.post('/api/auth/doctor/login', json={
        'email': 'unlinked@clinic.com', 'password': 'secret123'
    }).get_json()['access_token']

    resp = client.get('/api/doctor/profile', headers={'Authorization': f'Bearer {token}'})
    assert resp.status_code == 404
    assert resp.get_json()['error'] == 'Doctor profile not found'


def test_appointments_own_only_ascending(app, client, doctor_account, patient):
    other_doctor = make_doctor(app)
    service_id = make_service(app)
    make_appointment(app, patient['profile_id'], doctor_account['doctor_id'], day=date.today() + timedelta(days=5), time='14:00')
    make_appointment(app, patient['profile_id'], doctor_account['doctor_id'], day=date.today() + timedelta(days=5), time='09:00', service_id=service_id)
    make_appointment(app, patient['profile_id'], doctor_account['doctor_id'], day=date.today() + timedelta(days=1))
    make_appointment(app, patient['profile_id'], other_doctor)

    resp = client.get('/api/doctor/appointments', headers=doctor_account['headers'])
    data = resp.get_json()['data']
    assert len(data) == 3
    assert [(a['appointment_date'], a['appointment_time']) for a in data] == sorted(
        (a['appointment_date'], a['appointment_time']) for a in data
    )
    assert data[0]['patient'] == {'full_name': 'Jane Patient', 'phone': '555-0100'}
    assert data[1]['service']['name'] == 'Dental Checkup'


def test_appointments_filters(app, client, doctor_account, patient):
    day = date.today() + timedelta(days=2)
    make_appointment(app, patient['profile_id'], doctor_account['doctor_id'], day=day, status='confirmed')
    make_appointment(app, patient['profile_id'], doctor_account['doctor_id'], day=day + timedelta(days=1))

    resp = client.get('/api/doctor/appointments?status=confirmed', headers=doctor_account['headers'])
    assert [a['status'] for a in resp.get_json()['data']] == ['confirmed']

    resp = client.get(f'/api/doctor/appointments?date={day.isoformat()}', headers=doctor_account['headers'])
    assert len(resp.get_json()['data']) == 1

    assert client.get('/api/doctor/appointments?status=lost', headers=doctor_account['headers']).status_code == 400
    assert client.get('/api/doctor/appointments?date=tomorrow', headers=doctor_account['headers']).status_code == 400


def test_status_update_changes_only_status(app, client, doctor_account, patient):
    appointment_id = make_appointment(app, patient['profile_id'], doctor_account['doctor_id'])
    with app.app_context():
        before = db.session.get(Appointment, appointment_id).to_dict()

    resp = client.put(f'/api/doctor/appointments/{appointment_id}/status',
                      headers=doctor_account['headers'], json={'status': 'confirmed'})
    assert resp.status_code == 200
    assert resp.get_json()['data']['status'] == 'confirmed'

    with app.app_context():
        after = db.session.get(Appointment, appointment_id).to_dict()
        assert AuditLog.query.filter_by(entity_type='appointment', action='update').count() == 1

    assert after['status'] == 'confirmed'
    for key in ('patient_id', 'doctor_id', 'service_id', 'appointment_date', 'appointment_time', 'notes', 'created_at'):
        assert after[key] == before[key]


def test_status_update_rejects_unknown_status(app, client, doctor_account, patient):
    appointment_id = make_appointment(app, patient['profile_id'], doctor_account['doctor_id'])
    resp = client.put(f'/api/doctor/appointments/{appointment_id}/status',
                      headers=doctor_account['headers'], json={'status': 'done'})
    assert resp.status_code == 400


def test_status_update_other_doctors_appointment(app, client, doctor_account, patient):
    appointment_id = make_appointment(app, patient['profile_id'], make_doctor(app))
    resp = client.put(f'/api/doctor/appointments/{appointment_id}/status',
                      headers=doctor_account['headers'], json={'status': 'cancelled'})
    assert resp.status_code == 404


def test_create_prescription(app, client, doctor_account, patient):
    appointment_id = make_appointment(app, patient['profile_id'], doctor_account['doctor_id'])
    resp = client.post('/api/doctor/prescriptions', headers=doctor_account['headers'], json={
        'appointment_id': appointment_id,
        'medications': 'Ibuprofen 400mg',
        'instructions': 'Twice daily after meals',
        'follow_up_date': (date.today() + timedelta(days=14)).isoformat(),
    })
    assert resp.status_code == 201
    body = resp.get_json()
    assert body['data']['patient_id'] == patient['profile_id']
    assert body['data']['patient']['full_name'] == 'Jane Patient'
    assert 'billing' not in body

    resp = client.get('/api/doctor/prescriptions', headers=doctor_account['headers'])
    data = resp.get_json()['data']
    assert len(data) == 1
    assert data[0]['appointment']['appointment_date']

    with app.app_context():
        assert BillingRecord.query.count() == 0


def test_create_prescription_with_billing(app, client, doctor_account, patient):
    appointment_id = make_appointment(app, patient['profile_id'], doctor_account['doctor_id'])
    resp = client.post('/api/doctor/prescriptions', headers=doctor_account['headers'], json={
        'appointment_id': appointment_id,
        'medications': 'Chlorhexidine rinse',
        'billing': {'amount': '25.50', 'description': 'Prescription fee'},
    })
    assert resp.status_code == 201
    billing = resp.get_json()['billing']
    assert billing['amount'] == 25.5
    assert billing['status'] == 'pending'
    assert billing['service_type'] == 'prescription'

    with app.app_context():
        record = BillingRecord.query.one()
        assert record.prescription_id == Prescription.query.one().id


def test_prescription_kept_when_billing_invalid(app, client, doctor_account, patient):
    appointment_id = make_appointment(app, patient['profile_id'], doctor_account['doctor_id'])
    resp = client.post('/api/doctor/prescriptions', headers=doctor_account['headers'], json={
        'appointment_id': appointment_id,
        'medications': 'Chlorhexidine rinse',
        'billing': {'amount': '-5'},
    })
    assert resp.status_code == 201
    body = resp.get_json()
    assert body['billing'] is None
    assert body['billing_error']
    with app.app_context():
        assert Prescription.query.count() == 1
        assert BillingRecord.query.count() == 0


def test_create_prescription_requires_fields(client, doctor_account):
    resp = client.post('/api/doctor/prescriptions', headers=doctor_account['headers'], json={'medications': 'x'})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'Please fill in all required fields.'


def test_upload_report(app, client, doctor_account, patient):
    appointment_id = make_appointment(app, patient['profile_id'], doctor_account['doctor_id'])
    resp = upload(client, doctor_account['headers'], appointment_id, notes='No caries')
    assert resp.status_code == 201
    data = resp.get_json()['data']
    assert data['title'] == 'Panoramic X-Ray'
    assert data['file_name'] == 'scan.pdf'
    assert data['patient_id'] == patient['profile_id']
    assert data['file_url'].startswith('http://clinic.test/storage/medical-reports/reports/')
    assert data['file_url'].endswith('.pdf')

    path = data['file_url'].replace('http://clinic.test', '')
    served = client.get(path)
    assert served.status_code == 200
    assert served.data == b'%PDF-1.4 test'

    resp = client.get('/api/patient/reports', headers=patient['headers'])
    assert [r['title'] for r in resp.get_json()['data']] == ['Panoramic X-Ray']


def test_upload_report_with_amount_bills_separately(app, client, doctor_account, patient):
    appointment_id = make_appointment(app, patient['profile_id'], doctor_account['doctor_id'])
    resp = upload(client, doctor_account['headers'], appointment_id, amount='80', description='Imaging')
    assert resp.status_code == 201
    assert resp.get_json()['billing']['service_type'] == 'report'
    with app.app_context():
        assert BillingRecord.query.one().report_id == MedicalReport.query.one().id


def test_upload_report_rejects_extension(app, client, doctor_account, patient):
    appointment_id = make_appointment(app, patient['profile_id'], doctor_account['doctor_id'])
    resp = upload(client, doctor_account['headers'], appointment_id, filename='malware.exe')
    assert resp.status_code == 400
    with app.app_context():
        assert MedicalReport.query.count() == 0


def test_upload_report_requires_file(client, doctor_account):
    resp = client.post('/api/doctor/reports', headers=doctor_account['headers'],
                       data={'title': 'No file', 'appointment_id': 'x'}, content_type='multipart/form-data')
    assert resp.status_code == 400


def test_overview_counts(app, client, doctor_account, patient):
    doctor_id = doctor_account['doctor_id']
    make_appointment(app, patient['profile_id'], doctor_id, day=date.today())
    make_appointment(app, patient['profile_id'], doctor_id, day=date.today() + timedelta(days=3))
    make_appointment(app, patient['profile_id'], doctor_id, day=date.today() + timedelta(days=4), status='cancelled')
    make_billing(app, patient['profile_id'], doctor_id, '100.00', status='paid')
    make_billing(app, patient['profile_id'], doctor_id, '40.00', status='pending')

    data = client.get('/api/doctor/overview', headers=doctor_account['headers']).get_json()['data']
    assert data['todays_appointments'] == 1
    assert data['upcoming_appointments'] == 2
    assert data['total_appointments'] == 3
    assert data['total_revenue'] == 100.0
    assert data['pending_amount'] == 40.0


def test_patients_list(app, client, doctor_account, patient):
    other = signup_and_login(client, email='other@example.com', full_name='Other Patient')
    make_appointment(app, patient['profile_id'], doctor_account['doctor_id'])
    make_appointment(app, patient['profile_id'], doctor_account['doctor_id'], time='11:00')
    make_appointment(app, other['profile_id'], make_doctor(app))

    resp = client.get('/api/doctor/patients', headers=doctor_account['headers'])
    assert [p['full_name'] for p in resp.get_json()['data']] == ['Jane Patient']


def test_delete_patient_removes_everything(app, client, doctor_account, patient):
    appointment_id = make_appointment(app, patient['profile_id'], doctor_account['doctor_id'])
    client.post('/api/doctor/prescriptions', headers=doctor_account['headers'], json={
        'appointment_id': appointment_id,
        'medications': 'Ibuprofen',
        'billing': {'amount': 10},
    })

    resp = client.delete(f"/api/doctor/patients/{patient['profile_id']}", headers=doctor_account['headers'])
    assert resp.status_code == 200

    with app.app_context():
        assert db.session.get(Profile, patient['profile_id']) is None
        assert db.session.get(User, patient['user_id']) is None
        assert Appointment.query.count() == 0
        assert Prescription.query.count() == 0
        assert BillingRecord.query.count() == 0
        assert AuditLog.query.filter_by(entity_type='patient', action='delete').count() == 1

    assert client.get('/api/patient/profile', headers=patient['headers']).status_code == 401


def test_delete_unknown_patient(client, doctor_account):
    resp = client.delete('/api/doctor/patients/missing', headers=doctor_account['headers'])
    assert resp.status_code == 404
