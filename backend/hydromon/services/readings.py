"""Water-quality and light timeseries queries.

Rows are returned newest first. Chart consumers re-sort ascending after
fetching.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, contains_eager

from hydromon.access import DEVICE, WATER_DATA, Principal, guarded
from hydromon.models import Device, LightData, WaterData
from hydromon.schemas import (
    LightDataResponse,
    LightIntensityResponse,
    WaterDataResponse,
    WaterDataWithDevice,
)
from hydromon.services.limits import check_limit, check_range

DEFAULT_LIMIT = 50


def _in_range(query, column, from_ts: Optional[datetime], to_ts: Optional[datetime]):
    if from_ts is not None:
        query = query.filter(column >= from_ts)
    if to_ts is not None:
        query = query.filter(column <= to_ts)
    return query


@guarded()
def get_water_data(
    db: Session,
    principal: Principal,
    device_id: str,
    limit: int = DEFAULT_LIMIT,
    from_ts: Optional[datetime] = None,
    to_ts: Optional[datetime] = None,
) -> list[WaterDataResponse]:
    """Timeseries slice for one device the caller owns."""
    check_limit(limit)
    from_ts, to_ts = check_range(from_ts, to_ts)
    device = DEVICE.resolve(db, principal, device_id)

    query = db.query(WaterData).filter(WaterData.device_id == device.id)
    rows = (
        _in_range(query, WaterData.timestamp, from_ts, to_ts)
        .order_by(WaterData.timestamp.desc())
        .limit(limit)
        .all()
    )
    return [WaterDataResponse.model_validate(r) for r in rows]


@guarded()
def latest_water_data(
    db: Session,
    principal: Principal,
    device_id: Optional[str] = None,
    limit: int = DEFAULT_LIMIT,
    from_ts: Optional[datetime] = None,
    to_ts: Optional[datetime] = None,
) -> list[WaterDataWithDevice]:
    """Most recent readings across every device the caller owns.

    Scoped by joining through Device.owner_id; a specific ``device_id`` is
    resolved first so a foreign device is reported, not silently empty.
    """
    check_limit(limit)
    from_ts, to_ts = check_range(from_ts, to_ts)

    query = (
        db.query(WaterData)
        .join(WaterData.device)
        .options(contains_eager(WaterData.device))
        .filter(Device.owner_id == principal.id)
    )
    if device_id is not None:
        device = DEVICE.resolve(db, principal, device_id)
        query = query.filter(WaterData.device_id == device.id)

    rows = (
        _in_range(query, WaterData.timestamp, from_ts, to_ts)
        .order_by(WaterData.timestamp.desc())
        .limit(limit)
        .all()
    )
    return [WaterDataWithDevice.model_validate(r) for r in rows]


@guarded()
def get_water_point(db: Session, principal: Principal, point_id: int) -> WaterDataResponse:
    point = WATER_DATA.resolve(db, principal, point_id)
    return WaterDataResponse.model_validate(point)


@guarded()
def get_light_data(
    db: Session,
    principal: Principal,
    device_id: str,
    limit: int = DEFAULT_LIMIT,
) -> list[LightDataResponse]:
    check_limit(limit)
    device = DEVICE.resolve(db, principal, device_id)
    rows = (
        db.query(LightData)
        .filter(LightData.device_id == device.id)
        .order_by(LightData.timestamp.desc())
        .limit(limit)
        .all()
    )
    return [LightDataResponse.model_validate(r) for r in rows]


@guarded()
def latest_light_intensity(
    db: Session,
    principal: Principal,
    device_id: Optional[str] = None,
) -> LightIntensityResponse:
    """Newest intensity reading; 0.0 when nothing has been recorded."""
    query = (
        db.query(LightData.intensity)
        .join(LightData.device)
        .filter(Device.owner_id == principal.id)
    )
    if device_id is not None:
        device = DEVICE.resolve(db, principal, device_id)
        query = query.filter(LightData.device_id == device.id)

    latest = query.order_by(LightData.timestamp.desc()).first()
    return LightIntensityResponse(intensity=latest.intensity if latest else 0.0)
