from .health import health_bp
from .auth import auth_bp
from .public import public_bp
from .booking import booking_bp
from .patient import patient_bp
from .doctor import doctor_bp
from .billing import billing_bp
from .storage import storage_bp

__all__ = ['health_bp', 'auth_bp', 'public_bp', 'booking_bp', 'patient_bp', 'doctor_bp', 'billing_bp', 'storage_bp']
