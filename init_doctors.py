#!/usr/bin/env python3
"""
Create sign-in accounts for the doctor console.
Each account is linked to a Doctor row (created when missing).
Run with: python init_doctors.py
"""
from clinic_portal import create_app
from clinic_portal.extensions import db
from clinic_portal.models import User, Doctor

# Default doctor accounts to create
DEFAULT_DOCTORS = [
    {
        'email': 'sarah.johnson@clinic.com',
        'password': 'doctor123',
        'name': 'Dr. Sarah Johnson',
        'specialization': 'General Dentistry',
    },
    {
        'email': 'michael.chen@clinic.com',
        'password': 'doctor123',
        'name': 'Dr. Michael Chen',
        'specialization': 'Orthodontics',
    },
]


def create_doctor_accounts():
    """Create default doctor users"""
    app = create_app()

    with app.app_context():
        db.create_all()

        print("=" * 60)
        print("Initializing Doctor Accounts")
        print("=" * 60)
        print()

        created_count = 0

        for item in DEFAULT_DOCTORS:
            email = item['email']

            if User.query.filter_by(email=email).first():
                print(f"  - Account '{email}' already exists (skipping)")
                continue

            user = User(email=email, role='doctor', is_active=True)
            user.set_password(item['password'])
            db.session.add(user)
            db.session.flush()

            doctor = Doctor.query.filter_by(name=item['name'], user_id=None).first()
            if doctor is None:
                doctor = Doctor(name=item['name'], specialization=item['specialization'])
                db.session.add(doctor)
            doctor.user_id = user.id

            created_count += 1
            print(f"  + Created: {email} -> {doctor.name} - Password: {item['password']}")

        db.session.commit()

        print()
        print("=" * 60)
        print(f"Created {created_count} new doctor account(s)")
        print("=" * 60)
        print("\nIMPORTANT: Change passwords after first login!")


if __name__ == '__main__':
    create_doctor_accounts()
