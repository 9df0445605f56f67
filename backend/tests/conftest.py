import json
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clinic_booking.database import get_db
from clinic_booking.main import app
from clinic_booking.models.generated import Base, ClinicSettings, Professionals, Services

# Monday-Friday 08:00-20:00 with lunch 12:00-13:00, Saturday morning, Sunday closed
OPERATING_HOURS = {
    "0": {"open": False},
    **{
        str(weekday): {"open": True, "start": "08:00", "end": "20:00", "lunchStart": "12:00", "lunchEnd": "13:00"}
        for weekday in range(1, 6)
    },
    "6": {"open": True, "start": "08:00", "end": "12:00"},
}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded(db):
    """Clinic hours, two professionals and a 30 minute service."""
    db.add(ClinicSettings(operating_hours=json.dumps(OPERATING_HOURS)))
    ana = Professionals(name="Ana")
    bia = Professionals(name="Bia")
    facial = Services(name="Limpeza de pele", duration=30)
    db.add_all([ana, bia, facial])
    db.commit()
    return {"professional_id": ana.id, "other_professional_id": bia.id, "service_id": facial.id}


@pytest.fixture
def events(monkeypatch):
    """Capture emitted events instead of pushing them to Redis."""
    emitted = []
    monkeypatch.setattr(
        "clinic_booking.services.bookings.emit_event",
        lambda event_type, payload: emitted.append((event_type, payload)),
    )
    return emitted


@pytest.fixture
def client(db, events):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
