"""Shared fixtures: an in-memory SQLite store wired into the app."""

import os

os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CORS_ORIGINS"] = "http://localhost:3000"

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import get_db
from main import app
from models import AnalyticsRecord, Base


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def client(engine):
    """Test client whose requests share the in-memory store."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_client(client):
    """Client holding a valid session cookie for user 'alice'."""
    client.post("/api/register", json={"username": "alice", "password": "pw123"})
    response = client.post("/api/login", json={"username": "alice", "password": "pw123"})
    assert response.status_code == 200
    return client


@pytest.fixture
def seed_analytics(db_session):
    rows = [
        AnalyticsRecord(day=date(2022, 10, 4), age="15-25", gender="Male", a=10, b=1, c=2, d=3, e=4, f=5),
        AnalyticsRecord(day=date(2022, 10, 4), age=">25", gender="Female", a=20, b=1, c=2, d=3, e=4, f=5),
        AnalyticsRecord(day=date(2022, 10, 5), age="15-25", gender="Female", a=30, b=1, c=2, d=3, e=4, f=5),
        AnalyticsRecord(day=date(2022, 10, 6), age=">25", gender="Male", a=40, b=1, c=2, d=3, e=4, f=5),
        AnalyticsRecord(day=date(2022, 10, 3), age="15-25", gender="Male", a=5, b=1, c=2, d=3, e=4, f=5),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return rows
