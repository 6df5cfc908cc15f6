"""Device operations: listing, detail and status changes."""
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from hydromon.access import DEVICE, Principal, guarded, validate_input
from hydromon.audit import log_action
from hydromon.models import AlertRule, Device, DeviceStatus, LightData, PumpLog, WaterData
from hydromon.schemas import (
    AlertRuleResponse,
    DeviceDetailResponse,
    DeviceResponse,
    DeviceStatusUpdate,
    DeviceSummary,
    LightDataResponse,
    PumpLogResponse,
    WaterDataResponse,
)

logger = logging.getLogger(__name__)

DETAIL_WATER_POINTS = 50
DETAIL_LIGHT_POINTS = 50
DETAIL_PUMP_LOGS = 20
SUMMARY_RECENT_ALERTS = 5


@guarded()
def list_devices(db: Session, principal: Principal) -> list[DeviceResponse]:
    """Devices owned by the caller, newest first."""
    devices = (
        db.query(Device)
        .filter(Device.owner_id == principal.id)
        .order_by(Device.created_at.desc())
        .all()
    )
    return [DeviceResponse.model_validate(d) for d in devices]


@guarded()
def device_summary(db: Session, principal: Principal) -> DeviceSummary:
    """Dashboard counters for the caller's fleet."""
    counts = dict(
        db.query(Device.status, func.count(Device.id))
        .filter(Device.owner_id == principal.id)
        .group_by(Device.status)
        .all()
    )
    failing = (
        db.query(Device)
        .filter(Device.owner_id == principal.id, Device.status == DeviceStatus.ERROR)
        .order_by(Device.created_at.desc())
        .limit(SUMMARY_RECENT_ALERTS)
        .all()
    )
    return DeviceSummary(
        total=sum(counts.values()),
        active=counts.get(DeviceStatus.ACTIVE, 0),
        error=counts.get(DeviceStatus.ERROR, 0),
        recent_alerts=[DeviceResponse.model_validate(d) for d in failing],
    )


@guarded()
def get_device(db: Session, principal: Principal, device_id: str) -> DeviceDetailResponse:
    device = DEVICE.resolve(db, principal, device_id)

    water = (
        db.query(WaterData)
        .filter(WaterData.device_id == device.id)
        .order_by(WaterData.timestamp.desc())
        .limit(DETAIL_WATER_POINTS)
        .all()
    )
    light = (
        db.query(LightData)
        .filter(LightData.device_id == device.id)
        .order_by(LightData.timestamp.desc())
        .limit(DETAIL_LIGHT_POINTS)
        .all()
    )
    pumps = (
        db.query(PumpLog)
        .filter(PumpLog.device_id == device.id)
        .order_by(PumpLog.timestamp.desc())
        .limit(DETAIL_PUMP_LOGS)
        .all()
    )
    rules = (
        db.query(AlertRule)
        .filter(AlertRule.device_id == device.id)
        .order_by(AlertRule.created_at.desc())
        .all()
    )

    return DeviceDetailResponse(
        **DeviceResponse.model_validate(device).model_dump(),
        owner_id=device.owner_id,
        water_data=[WaterDataResponse.model_validate(w) for w in water],
        light_data=[LightDataResponse.model_validate(row) for row in light],
        pump_logs=[PumpLogResponse.model_validate(p) for p in pumps],
        alert_rules=[AlertRuleResponse.model_validate(r) for r in rules],
    )


@guarded()
def update_device_status(db: Session, principal: Principal, device_id: str, status) -> DeviceResponse:
    """Set a device's status. Concurrent writers: last write wins."""
    data = validate_input(DeviceStatusUpdate, {"status": status})
    device = DEVICE.resolve(db, principal, device_id)

    before = device.status.value if device.status else None
    device.status = data.status
    log_action(
        db, principal, "device.status", "device", device.id,
        {"before": before, "after": data.status.value},
    )
    db.commit()
    db.refresh(device)
    logger.info("Device %s status %s -> %s", device.id, before, data.status.value)
    return DeviceResponse.model_validate(device)
