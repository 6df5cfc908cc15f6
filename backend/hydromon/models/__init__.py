"""All SQLAlchemy models – re-exported for Alembic and app use."""

from hydromon.models.user import User, Account, Role
from hydromon.models.device import Device, DeviceStatus
from hydromon.models.readings import WaterData, LightData, PumpLog, PumpAction
from hydromon.models.alert import AlertRule, Severity
from hydromon.models.audit import AuditLog

__all__ = [
    "User", "Account", "Role",
    "Device", "DeviceStatus",
    "WaterData", "LightData", "PumpLog", "PumpAction",
    "AlertRule", "Severity",
    "AuditLog",
]
