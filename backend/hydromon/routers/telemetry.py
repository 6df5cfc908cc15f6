"""Cross-device readings feeds, scoped to the caller's devices."""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from hydromon.access import Principal
from hydromon.auth import get_principal
from hydromon.database import get_db
from hydromon.schemas import (
    LightIntensityResponse,
    PumpLogResponse,
    WaterDataResponse,
    WaterDataWithDevice,
)
from hydromon.services import pumps, readings

router = APIRouter(tags=["telemetry"])


@router.get("/water-data/latest", response_model=List[WaterDataWithDevice])
def latest_water_data(
    device_id: Optional[str] = Query(None),
    limit: int = Query(readings.DEFAULT_LIMIT),
    from_ts: Optional[datetime] = Query(None, alias="from"),
    to_ts: Optional[datetime] = Query(None, alias="to"),
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_principal),
):
    return readings.latest_water_data(
        db, principal, device_id=device_id, limit=limit, from_ts=from_ts, to_ts=to_ts
    )


@router.get("/water-data/{point_id}", response_model=WaterDataResponse)
def water_point(
    point_id: int,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_principal),
):
    return readings.get_water_point(db, principal, point_id)


@router.get("/light-data/latest-intensity", response_model=LightIntensityResponse)
def latest_light_intensity(
    device_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_principal),
):
    return readings.latest_light_intensity(db, principal, device_id=device_id)


@router.get("/pump-logs", response_model=List[PumpLogResponse])
def pump_logs(
    limit: int = Query(pumps.DEFAULT_LOG_LIMIT),
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_principal),
):
    return pumps.list_pump_logs(db, principal, limit=limit)
