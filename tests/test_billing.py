from decimal import Decimal
from types import SimpleNamespace

from clinic_portal.services.dashboard_service import billing_summary, total_revenue

from conftest import make_billing, make_doctor


def record(amount, status):
    return SimpleNamespace(amount=Decimal(amount), status=status)


def test_total_revenue_counts_paid_only():
    records = [record('100.00', 'paid'), record('40.00', 'pending'), record('15.50', 'paid')]
    assert total_revenue(records) == Decimal('115.50')


def test_billing_summary():
    summary = billing_summary([record('100.00', 'paid'), record('40.00', 'pending')])
    assert summary == {
        'total_revenue': 100.0,
        'pending_amount': 40.0,
        'paid_count': 1,
        'pending_count': 1,
    }


def test_billing_summary_empty():
    assert billing_summary([])['total_revenue'] == 0.0


def test_create_and_list(client, doctor_account, patient):
    resp = client.post('/api/billing', headers=doctor_account['headers'], json={
        'patient_id': patient['profile_id'],
        'service_type': 'consultation',
        'amount': 60,
        'description': 'Checkup',
    })
    assert resp.status_code == 201
    created = resp.get_json()['data']
    assert created['status'] == 'pending'
    assert created['patient_name'] == 'Jane Patient'

    resp = client.get('/api/billing', headers=doctor_account['headers'])
    assert [r['id'] for r in resp.get_json()['data']] == [created['id']]


def test_create_validation(client, doctor_account, patient):
    resp = client.post('/api/billing', headers=doctor_account['headers'], json={
        'patient_id': patient['profile_id'],
        'service_type': 'consultation',
        'amount': 'ten',
    })
    assert resp.status_code == 400

    resp = client.post('/api/billing', headers=doctor_account['headers'], json={
        'patient_id': 'missing',
        'service_type': 'consultation',
        'amount': 10,
    })
    assert resp.status_code == 404


def test_mark_paid_then_pending(client, app, doctor_account, patient):
    record_id = make_billing(app, patient['profile_id'], doctor_account['doctor_id'], '70.00')

    resp = client.put(f'/api/billing/{record_id}/status', headers=doctor_account['headers'], json={'status': 'paid'})
    assert resp.status_code == 200
    data = resp.get_json()['data']
    assert data['status'] == 'paid'
    assert data['paid_at']

    resp = client.put(f'/api/billing/{record_id}/status', headers=doctor_account['headers'], json={'status': 'pending'})
    assert resp.get_json()['data']['paid_at'] is None


def test_invalid_status(client, app, doctor_account, patient):
    record_id = make_billing(app, patient['profile_id'], doctor_account['doctor_id'], '70.00')
    resp = client.put(f'/api/billing/{record_id}/status', headers=doctor_account['headers'], json={'status': 'refunded'})
    assert resp.status_code == 400


def test_status_filter_and_summary(client, app, doctor_account, patient):
    doctor_id = doctor_account['doctor_id']
    make_billing(app, patient['profile_id'], doctor_id, '100.00', status='paid')
    make_billing(app, patient['profile_id'], doctor_id, '25.25', status='paid')
    make_billing(app, patient['profile_id'], doctor_id, '40.00')
    make_billing(app, patient['profile_id'], make_doctor(app), '999.00', status='paid')

    resp = client.get('/api/billing?status=paid', headers=doctor_account['headers'])
    assert len(resp.get_json()['data']) == 2

    summary = client.get('/api/billing/summary', headers=doctor_account['headers']).get_json()['data']
    assert summary == {
        'total_revenue': 125.25,
        'pending_amount': 40.0,
        'paid_count': 2,
        'pending_count': 1,
    }


def test_other_doctors_record_not_found(client, app, doctor_account, patient):
    record_id = make_billing(app, patient['profile_id'], make_doctor(app), '10.00')
    resp = client.put(f'/api/billing/{record_id}/status', headers=doctor_account['headers'], json={'status': 'paid'})
    assert resp.status_code == 404
