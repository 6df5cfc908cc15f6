"""Pump control: an append-only command log per device."""
import logging
from typing import Any, Mapping, Optional, Union

from sqlalchemy.orm import Session

from hydromon.access import DEVICE, Principal, guarded, validate_input
from hydromon.audit import log_action
from hydromon.models import Device, PumpLog
from hydromon.schemas import PumpControlRequest, PumpLogResponse
from hydromon.services.limits import check_limit

logger = logging.getLogger(__name__)

DEFAULT_LOG_LIMIT = 30


@guarded()
def control_pump(
    db: Session,
    principal: Principal,
    device_id: str,
    data: Union[PumpControlRequest, Mapping[str, Any]],
) -> PumpLogResponse:
    data = validate_input(PumpControlRequest, data)
    device = DEVICE.resolve(db, principal, device_id)

    entry = PumpLog(device_id=device.id, action=data.action, duration=data.duration)
    db.add(entry)
    db.flush()
    log_action(
        db, principal, "pump.control", "pump_log", entry.id,
        {"device_id": device.id, "action": data.action.value, "duration": data.duration},
    )
    db.commit()
    db.refresh(entry)
    logger.info("Pump %s on device %s (duration=%s)", data.action.value, device.id, data.duration)
    return PumpLogResponse.model_validate(entry)


@guarded()
def list_pump_logs(
    db: Session,
    principal: Principal,
    device_id: Optional[str] = None,
    limit: int = DEFAULT_LOG_LIMIT,
) -> list[PumpLogResponse]:
    """Pump history for one owned device, or for all of them."""
    check_limit(limit)
    query = db.query(PumpLog).join(PumpLog.device).filter(Device.owner_id == principal.id)
    if device_id is not None:
        device = DEVICE.resolve(db, principal, device_id)
        query = query.filter(PumpLog.device_id == device.id)

    rows = query.order_by(PumpLog.timestamp.desc()).limit(limit).all()
    return [PumpLogResponse.model_validate(r) for r in rows]
