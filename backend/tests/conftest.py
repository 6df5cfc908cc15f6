"""Test fixtures for HydroMon: in-memory SQLite, seeded users and devices."""
from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from typing import Dict

# Settings are read once at import time; configure them before hydromon loads.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOGIN_RATE_LIMIT", "1000/minute")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hydromon.access import Principal
from hydromon.auth import create_access_token, hash_password
from hydromon.database import Base, get_db
from hydromon.main import app
from hydromon.models import Device, DeviceStatus, LightData, PumpAction, PumpLog, Role, User, WaterData

PASSWORD = "Secret123"

T0 = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def users(db) -> Dict[str, User]:
    """owner (u1), other (u2) and an admin, all with PASSWORD."""
    hashed = hash_password(PASSWORD)
    seeded = {
        "owner": User(email="owner@example.com", name="owner", hashed_password=hashed, role=Role.USER),
        "other": User(email="other@example.com", name="other", hashed_password=hashed, role=Role.USER),
        "admin": User(email="admin@example.com", name="admin", hashed_password=hashed, role=Role.ADMIN),
    }
    db.add_all(seeded.values())
    db.commit()
    return seeded


@pytest.fixture
def devices(db, users) -> Dict[str, Device]:
    seeded = {
        "d1": Device(owner_id=users["owner"].id, name="Pond A", type="water_sensor",
                     status=DeviceStatus.ACTIVE, location="North"),
        "d2": Device(owner_id=users["owner"].id, name="Pond B", type="water_sensor",
                     status=DeviceStatus.ERROR),
        "d3": Device(owner_id=users["other"].id, name="Tank", type="water_sensor"),
    }
    db.add_all(seeded.values())
    db.commit()
    return seeded


@pytest.fixture
def readings(db, devices):
    """60 water and light points on d1 one minute apart, 5 on d3, 3 pump logs on d1."""
    d1, d3 = devices["d1"], devices["d3"]
    for i in range(60):
        ts = T0 + timedelta(minutes=i)
        db.add(WaterData(device_id=d1.id, timestamp=ts, temperature=20 + i / 10,
                         ph=7.0, dissolved_oxygen=8.0, turbidity=2.0))
        db.add(LightData(device_id=d1.id, timestamp=ts, intensity=float(i)))
    for i in range(5):
        ts = T0 + timedelta(hours=2, minutes=i)
        db.add(WaterData(device_id=d3.id, timestamp=ts, temperature=15.0,
                         ph=6.5, dissolved_oxygen=7.0, turbidity=1.0))
        db.add(LightData(device_id=d3.id, timestamp=ts, intensity=500.0))
    for i, action in enumerate([PumpAction.ON, PumpAction.OFF, PumpAction.ON]):
        db.add(PumpLog(device_id=d1.id, action=action, duration=60,
                       timestamp=T0 + timedelta(minutes=i)))
    db.commit()


@pytest.fixture
def owner(users) -> Principal:
    return Principal.from_user(users["owner"])


@pytest.fixture
def other(users) -> Principal:
    return Principal.from_user(users["other"])


@pytest.fixture
def admin(users) -> Principal:
    return Principal.from_user(users["admin"])


@pytest.fixture
def client(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Bearer headers for a seeded user."""

    def _headers(user: User) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _headers
