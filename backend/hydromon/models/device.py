"""Device registry model."""
import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, func
from sqlalchemy.orm import relationship

from hydromon.database import Base
from hydromon.models.user import new_id


class DeviceStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ERROR = "ERROR"
    MAINTENANCE = "MAINTENANCE"


class Device(Base):
    """A monitoring station owned by exactly one user."""
    __tablename__ = "device"

    id = Column(String(36), primary_key=True, default=new_id)
    owner_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    type = Column(String(50), nullable=False)
    status = Column(
        Enum(
            DeviceStatus,
            name="device_status",
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
        ),
        nullable=False,
        default=DeviceStatus.INACTIVE,
    )
    location = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    owner = relationship("User", back_populates="devices")
    water_data = relationship("WaterData", back_populates="device", cascade="all, delete-orphan", passive_deletes=True)
    light_data = relationship("LightData", back_populates="device", cascade="all, delete-orphan", passive_deletes=True)
    pump_logs = relationship("PumpLog", back_populates="device", cascade="all, delete-orphan", passive_deletes=True)
    alert_rules = relationship("AlertRule", back_populates="device", cascade="all, delete-orphan", passive_deletes=True)
