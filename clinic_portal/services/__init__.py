from .booking_service import (
    BookingWizard,
    BookingDraft,
    BookingError,
    TIME_SLOTS,
    build_summary,
    insert_appointment,
)

from .dashboard_service import (
    count_todays_appointments,
    count_upcoming_appointments,
    total_revenue,
    pending_amount,
    billing_summary,
)

from .email_service import send_signup_confirmation_email

__all__ = [
    # Booking
    "BookingWizard",
    "BookingDraft",
    "BookingError",
    "TIME_SLOTS",
    "build_summary",
    "insert_appointment",
    # Dashboard
    "count_todays_appointments",
    "count_upcoming_appointments",
    "total_revenue",
    "pending_amount",
    "billing_summary",
    # Email
    "send_signup_confirmation_email",
]
