"""Pydantic schemas for device, reading, alert and pump operations."""
import enum
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, PositiveInt, field_validator

from hydromon.models import DeviceStatus, PumpAction, Severity


# === Devices ===
class DeviceResponse(BaseModel):
    id: str
    name: str
    type: str
    status: DeviceStatus
    location: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class DeviceStatusUpdate(BaseModel):
    """Owners may move a device between these states; ERROR is device-reported."""
    status: DeviceStatus

    @field_validator("status")
    @classmethod
    def validate_settable(cls, value: DeviceStatus) -> DeviceStatus:
        if value == DeviceStatus.ERROR:
            raise ValueError("status must be one of ACTIVE, INACTIVE, MAINTENANCE")
        return value


class DeviceSummary(BaseModel):
    total: int
    active: int
    error: int
    recent_alerts: List[DeviceResponse] = []


# === Readings ===
class DeviceRef(BaseModel):
    id: str
    name: str

    model_config = {"from_attributes": True}


class WaterDataResponse(BaseModel):
    id: int
    device_id: str
    timestamp: datetime
    temperature: float
    ph: float
    dissolved_oxygen: float
    turbidity: float

    model_config = {"from_attributes": True}


class WaterDataWithDevice(WaterDataResponse):
    device: DeviceRef


class LightDataResponse(BaseModel):
    id: int
    device_id: str
    timestamp: datetime
    intensity: float

    model_config = {"from_attributes": True}


class LightIntensityResponse(BaseModel):
    intensity: float


# === Pumps ===
class PumpControlRequest(BaseModel):
    action: PumpAction
    duration: Optional[PositiveInt] = None  # seconds


class PumpLogResponse(BaseModel):
    id: int
    device_id: str
    action: PumpAction
    duration: Optional[int] = None
    timestamp: datetime

    model_config = {"from_attributes": True}


# === Alert rules ===
class Metric(str, enum.Enum):
    TEMPERATURE = "temperature"
    PH = "ph"
    DISSOLVED_OXYGEN = "dissolved_oxygen"
    TURBIDITY = "turbidity"
    LIGHT_INTENSITY = "light_intensity"


class AlertCondition(BaseModel):
    metric: Metric
    operator: Literal[">", "<", ">=", "<=", "=="]
    threshold: float = Field(allow_inf_nan=False)


class AlertRuleFields(BaseModel):
    name: str = Field(min_length=3, max_length=200)
    description: Optional[str] = None
    condition: AlertCondition
    severity: Severity

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        cleaned = value.strip()
        if len(cleaned) < 3:
            raise ValueError("name must be at least 3 characters")
        return cleaned


class AlertRuleCreate(AlertRuleFields):
    device_id: str = Field(min_length=1)


class AlertRuleResponse(BaseModel):
    id: str
    owner_id: str
    device_id: str
    name: str
    description: Optional[str] = None
    condition: AlertCondition
    severity: Severity
    created_at: datetime

    model_config = {"from_attributes": True}


class DeviceDetailResponse(DeviceResponse):
    """Device with its most recent readings, newest first."""
    owner_id: str
    water_data: List[WaterDataResponse] = []
    light_data: List[LightDataResponse] = []
    pump_logs: List[PumpLogResponse] = []
    alert_rules: List[AlertRuleResponse] = []
