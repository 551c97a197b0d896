"""
Audit trail for doctor-side changes: status updates, prescriptions,
reports, billing and patient removal.
"""
import json
import logging
from typing import Optional

from flask import g, has_app_context
from sqlalchemy.exc import SQLAlchemyError

from clinic_portal.extensions import db
from clinic_portal.models import AuditLog

logger = logging.getLogger(__name__)


def _acting_user_id() -> Optional[str]:
    if not has_app_context():
        return None
    user = g.get('current_user')
    return user.id if user is not None else None


def log_audit(
    entity_type: str,
    action: str,
    entity_id: Optional[str] = None,
    details: Optional[dict] = None,
    user_id: Optional[str] = None,
) -> Optional[AuditLog]:
    """
    Write one audit row in its own commit. The actor defaults to the user
    resolved by require_role. A failed write is logged and never raised.
    """
    entry = AuditLog(
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        action=action,
        user_id=user_id or _acting_user_id(),
        details=json.dumps(details, default=str, sort_keys=True) if details else None,
    )
    try:
        db.session.add(entry)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.warning("Audit %s/%s for %s not written: %s", entity_type, action, entity_id, e)
        return None
    return entry
