"""
Database seed data - runs once on app startup if tables are empty.
"""
import logging
from datetime import date, timedelta

from sqlalchemy.exc import SQLAlchemyError

from clinic_portal.extensions import db
from clinic_portal.models import ClinicInfo, Service, Doctor, Event

logger = logging.getLogger(__name__)

CLINIC_INFO = {
    "name": "BrightSmile Dental Clinic",
    "about_us": "A family dental practice offering preventive, restorative and cosmetic care.",
    "mission": "To provide exceptional dental care that enhances the health, function, and beauty of our patients' smiles.",
    "address": "123 Health Street, Medical District, City 12345",
    "phone": "+1 (555) 123-4567",
    "email": "info@brightsmile.com",
    "opening_hours": "Mon-Fri: 8:00 AM - 6:00 PM\nSat: 9:00 AM - 3:00 PM\nSun: Closed",
}

SERVICES = [
    {"name": "Dental Checkup", "description": "Routine examination and cleaning", "price": "50.00", "duration_minutes": 30},
    {"name": "Teeth Whitening", "description": "Professional whitening session", "price": "150.00", "duration_minutes": 60},
    {"name": "Root Canal", "description": "Endodontic treatment of an infected tooth", "price": "400.00", "duration_minutes": 90},
    {"name": "Orthodontic Consultation", "description": "Assessment for braces or aligners", "price": "80.00", "duration_minutes": 45},
]

DOCTORS = [
    {
        "name": "Dr. Sarah Johnson",
        "specialization": "General Dentistry",
        "qualification": "DDS",
        "experience_years": 12,
        "available_days": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"],
        "available_hours": "9:00 AM - 5:00 PM",
    },
    {
        "name": "Dr. Michael Chen",
        "specialization": "Orthodontics",
        "qualification": "DMD, MS",
        "experience_years": 8,
        "available_days": ["Monday", "Wednesday", "Friday"],
        "available_hours": "10:00 AM - 4:00 PM",
    },
]

EVENTS = [
    {"title": "Free Dental Checkup Day", "description": "Walk-in checkups for all ages.", "days_ahead": 14, "event_time": "09:00 AM", "location": "Main Clinic"},
    {"title": "Kids Oral Hygiene Workshop", "description": "Brushing and flossing tips for children.", "days_ahead": 30, "event_time": "11:00 AM", "location": "Community Hall"},
]


def seed_default_data():
    """Create clinic info, services, doctors and events where each table is empty."""
    try:
        if ClinicInfo.query.count() == 0:
            db.session.add(ClinicInfo(**CLINIC_INFO))
            logger.info("Seeded clinic info")

        if Service.query.count() == 0:
            for item in SERVICES:
                db.session.add(Service(is_active=True, **item))
            logger.info("Seeded %d default services", len(SERVICES))

        if Doctor.query.count() == 0:
            for item in DOCTORS:
                db.session.add(Doctor(**item))
            logger.info("Seeded %d default doctors", len(DOCTORS))

        if Event.query.count() == 0:
            today = date.today()
            for item in EVENTS:
                data = dict(item)
                data["event_date"] = today + timedelta(days=data.pop("days_ahead"))
                db.session.add(Event(is_public=True, **data))
            logger.info("Seeded %d default events", len(EVENTS))

        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.warning("Default data seeding skipped: %s", e)
