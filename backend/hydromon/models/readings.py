"""Timeseries readings and pump log models.

None of these carry an owner column: ownership is always resolved through
the parent Device.
"""
import enum
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from hydromon.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WaterData(Base):
    __tablename__ = "water_data"

    id = Column(Integer, primary_key=True, autoincrement=True)
    device_id = Column(String(36), ForeignKey("device.id", ondelete="CASCADE"), nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    temperature = Column(Float, nullable=False)
    ph = Column(Float, nullable=False)
    dissolved_oxygen = Column(Float, nullable=False)
    turbidity = Column(Float, nullable=False)

    device = relationship("Device", back_populates="water_data")


class LightData(Base):
    __tablename__ = "light_data"

    id = Column(Integer, primary_key=True, autoincrement=True)
    device_id = Column(String(36), ForeignKey("device.id", ondelete="CASCADE"), nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    intensity = Column(Float, nullable=False)

    device = relationship("Device", back_populates="light_data")


class PumpAction(str, enum.Enum):
    ON = "ON"
    OFF = "OFF"


class PumpLog(Base):
    """Append-only record of pump commands."""
    __tablename__ = "pump_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    device_id = Column(String(36), ForeignKey("device.id", ondelete="CASCADE"), nullable=False, index=True)
    action = Column(
        Enum(
            PumpAction,
            name="pump_action",
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
        ),
        nullable=False,
    )
    duration = Column(Integer, nullable=True)  # seconds
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    device = relationship("Device", back_populates="pump_logs")
