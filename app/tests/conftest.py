import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker

# CRITICAL: Set test database URL BEFORE importing any app modules
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING"] = "true"
for _var in ("DATABASE_HOST", "SMTP_HOST", "SMTP_USER", "SMTP_PASS"):
    os.environ.pop(_var, None)

from app.main import app
from app.database import Base
from app import models  # noqa: F401
import app.database as db_module
import app.dependencies as dependencies_module
from app.utils.email_utils import NullTransport


@pytest.fixture(scope="session")
def test_engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # share same in-memory DB across connections
    )
    return engine


@pytest.fixture()
def db_session(test_engine):
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )
    # Fresh schema per test
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def patch_sessionlocal(monkeypatch, test_engine, db_session):
    # Patch engine FIRST so every session factory below binds to the test engine
    monkeypatch.setattr(db_module, "engine", test_engine, raising=True)

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )
    monkeypatch.setattr(db_module, "SessionLocal", TestingSessionLocal, raising=True)
    # get_db in dependencies.py looks SessionLocal up at call time
    monkeypatch.setattr(
        dependencies_module, "SessionLocal", TestingSessionLocal, raising=True
    )

    # Disable rate limiter globally for tests
    if hasattr(app.state, "limiter"):
        setattr(app.state.limiter, "enabled", False)
    yield


@pytest.fixture()
def outbox():
    """Null email transport wired into the email endpoints."""
    transport = NullTransport()
    app.dependency_overrides[dependencies_module.get_email_service] = (
        lambda: dependencies_module.EmailService(transport=transport)
    )
    yield transport.outbox
    app.dependency_overrides.pop(dependencies_module.get_email_service, None)


@pytest.fixture()
def client():
    return TestClient(app)


def _property_payload(**overrides):
    payload = {
        "title": "Renovated Colonial",
        "description": "Three bedroom colonial close to the park",
        "address": "123 Walnut St",
        "city": "Pittsburgh",
        "state": "PA",
        "zipCode": "15232",
        "propertyType": "House",
        "listingType": "sell",
        "squareFeet": 1800,
        "bedrooms": 3,
        "bathrooms": 2,
        "price": 325000,
        "features": ["Garage", "Fireplace"],
        "amenities": ["Central Air"],
        "ownerName": "Dana Smith",
        "ownerEmail": "dana@example.com",
        "latitude": 40.45,
        "longitude": -79.93,
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def property_payload():
    return _property_payload

