import os

# Settings are read once at import time, so configure before importing wildtrack
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
for name in ("ADMIN_USERNAME", "ADMIN_PASSWORD_HASH", "ADMIN_ROLE"):
    os.environ.pop(name, None)

from datetime import date

import pytest
from fastapi.testclient import TestClient

from wildtrack import auth, database, models
from wildtrack.main import app

ADMIN_PASSWORD = "savanna-sunrise"


@pytest.fixture(autouse=True)
def reset_database():
    database.Base.metadata.drop_all(bind=database.engine)
    database.Base.metadata.create_all(bind=database.engine)
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


def bearer(role="admin", username="ranger", subject_id="1"):
    token = auth.token_codec.issue(subject_id, role, username)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    return bearer("admin")


@pytest.fixture
def manager_headers():
    return bearer("manager", username="lodge-manager")


@pytest.fixture
def guest_headers():
    return bearer("guest", username="visitor")


@pytest.fixture
def admin_user(db):
    admin = models.Admin(
        username="ranger",
        password=auth.get_password_hash(ADMIN_PASSWORD),
        name="Head Ranger",
        email="ranger@umzuluwildtrack.co.za",
        role="admin",
        is_active=True,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


@pytest.fixture
def tracked_store():
    """Replace get_db with a stub that records every time a handler asks for the store."""
    calls = []

    def tracking_get_db():
        calls.append(True)
        yield None

    app.dependency_overrides[database.get_db] = tracking_get_db
    return calls


def booking_payload(**overrides):
    payload = {
        "name": "Thandi Nkosi",
        "email": "thandi@example.co.za",
        "phone": "+27 82 555 0101",
        "safariPackage": "Big Five Morning Safari",
        "date": date.today().isoformat(),
        "guests": 2,
        "message": "Celebrating an anniversary",
    }
    payload.update(overrides)
    return payload


def message_payload(**overrides):
    payload = {
        "name": "Pieter van Wyk",
        "email": "pieter@example.com",
        "phone": "0825550202",
        "subject": "Group rates",
        "message": "Do you offer discounts for groups of twelve?",
        "category": "booking",
    }
    payload.update(overrides)
    return payload


def safari_payload(**overrides):
    payload = {
        "name": "Sundowner Drive",
        "description": "Late afternoon drive ending with drinks at a waterhole.",
        "shortDescription": "Drinks at sunset by the waterhole",
        "price": 1100,
        "duration": "3 hours",
        "maxGuests": 8,
        "minGuests": 2,
        "features": ["Open vehicle"],
        "includes": ["Sundowner drinks"],
        "requirements": ["Warm layer"],
        "schedule": {"startTime": "16:00", "endTime": "19:00", "meetingPoint": "Main Lodge Reception"},
        "category": "afternoon",
    }
    payload.update(overrides)
    return payload
