"""
Production entry point for Gunicorn / uWSGI:
    gunicorn -w 4 -b 0.0.0.0:8000 wsgi:application

FLASK_ENV=production makes create_app refuse a default SECRET_KEY.
"""
import os

from clinic_portal import create_app

application = app = create_app(os.getenv('FLASK_ENV', 'production'))
