"""Device API endpoints. Every route is owner-scoped."""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from hydromon.access import Principal
from hydromon.auth import get_principal
from hydromon.database import get_db
from hydromon.schemas import (
    AlertRuleCreate,
    AlertRuleFields,
    AlertRuleResponse,
    DeviceDetailResponse,
    DeviceResponse,
    DeviceStatusUpdate,
    DeviceSummary,
    LightDataResponse,
    PumpControlRequest,
    PumpLogResponse,
    WaterDataResponse,
)
from hydromon.services import alerts, devices, pumps, readings

router = APIRouter(prefix="/devices", tags=["devices"])


@router.get("", response_model=List[DeviceResponse])
def list_devices(db: Session = Depends(get_db), principal: Optional[Principal] = Depends(get_principal)):
    """List the caller's devices."""
    return devices.list_devices(db, principal)


@router.get("/summary", response_model=DeviceSummary)
def device_summary(db: Session = Depends(get_db), principal: Optional[Principal] = Depends(get_principal)):
    return devices.device_summary(db, principal)


@router.get("/{device_id}", response_model=DeviceDetailResponse)
def get_device(
    device_id: str,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_principal),
):
    """Device with recent readings, pump logs and alert rules."""
    return devices.get_device(db, principal, device_id)


@router.put("/{device_id}/status", response_model=DeviceResponse)
def update_status(
    device_id: str,
    data: DeviceStatusUpdate,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_principal),
):
    return devices.update_device_status(db, principal, device_id, data.status)


@router.get("/{device_id}/water-data", response_model=List[WaterDataResponse])
def water_data(
    device_id: str,
    limit: int = Query(readings.DEFAULT_LIMIT),
    from_ts: Optional[datetime] = Query(None, alias="from"),
    to_ts: Optional[datetime] = Query(None, alias="to"),
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_principal),
):
    """Water-quality readings, newest first."""
    return readings.get_water_data(db, principal, device_id, limit=limit, from_ts=from_ts, to_ts=to_ts)


@router.get("/{device_id}/light-data", response_model=List[LightDataResponse])
def light_data(
    device_id: str,
    limit: int = Query(readings.DEFAULT_LIMIT),
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_principal),
):
    return readings.get_light_data(db, principal, device_id, limit=limit)


@router.get("/{device_id}/alert-rules", response_model=List[AlertRuleResponse])
def list_alert_rules(
    device_id: str,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_principal),
):
    return alerts.list_alert_rules(db, principal, device_id)


@router.post("/{device_id}/alert-rules", response_model=AlertRuleResponse, status_code=201)
def create_alert_rule(
    device_id: str,
    data: AlertRuleFields,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_principal),
):
    payload = AlertRuleCreate(device_id=device_id, **data.model_dump())
    return alerts.create_alert_rule(db, principal, payload)


@router.post("/{device_id}/pump", response_model=PumpLogResponse, status_code=201)
def control_pump(
    device_id: str,
    data: PumpControlRequest,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_principal),
):
    """Record a pump command for the device."""
    return pumps.control_pump(db, principal, device_id, data)


@router.get("/{device_id}/pump-logs", response_model=List[PumpLogResponse])
def device_pump_logs(
    device_id: str,
    limit: int = Query(pumps.DEFAULT_LOG_LIMIT),
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_principal),
):
    return pumps.list_pump_logs(db, principal, device_id=device_id, limit=limit)
