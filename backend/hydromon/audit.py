"""Audit logging utilities."""
from typing import Any, Optional

from sqlalchemy.orm import Session

from hydromon.access.principal import Principal
from hydromon.models import AuditLog


def log_action(
    db: Session,
    principal: Optional[Principal],
    action: str,
    resource_type: str,
    resource_id: Any,
    details: Optional[dict] = None,
) -> AuditLog:
    """Add an audit row to the current transaction.

    Args:
        db: Database session (the caller commits)
        principal: Acting user (None for system actions)
        action: dotted action name, e.g. 'device.status'
        resource_type: 'device', 'alert_rule', 'pump_log' or 'user'
        resource_id: ID of the affected entity
        details: JSON-serializable context
    """
    log = AuditLog(
        actor_user_id=principal.id if principal else None,
        action=action,
        resource_type=resource_type,
        resource_id=str(resource_id),
        details=details or {},
    )
    db.add(log)
    return log


def entity_to_dict(entity: Any) -> dict:
    """Convert an SQLAlchemy entity to a dict for logging."""
    result = {}
    for column in entity.__table__.columns:
        value = getattr(entity, column.name)
        if hasattr(value, "isoformat"):
            value = value.isoformat()
        elif hasattr(value, "value"):
            value = value.value
        result[column.name] = value
    return result
