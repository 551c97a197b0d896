from .decorators import (
    require_role,
    require_doctor_profile,
    require_patient_profile,
    get_current_user,
    get_current_profile,
    get_current_doctor,
)

from .audit import log_audit

from .parsing import parse_date, parse_amount, parse_choice, missing_fields

__all__ = [
    # Decorators
    "require_role",
    "require_doctor_profile",
    "require_patient_profile",
    "get_current_user",
    "get_current_profile",
    "get_current_doctor",
    # Audit
    "log_audit",
    # Parsing
    "parse_date",
    "parse_amount",
    "parse_choice",
    "missing_fields",
]
