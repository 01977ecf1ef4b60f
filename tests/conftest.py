"""
Pytest configuration and shared fixtures.

Settings are read at import time, so the environment is pointed at a
throwaway SQLite file and upload directory before the app is imported.
"""

import os
import shutil
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="ojt-tests-")
os.environ["USE_SQLITE"] = "true"
os.environ["SQLITE_PATH"] = os.path.join(_TMP_DIR, "test.db")
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["SEED_ADMIN_USERNAME"] = ""
os.environ["SEED_ADMIN_PASSWORD"] = ""

import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.security import get_password_hash
from app.db.base import Base
from app.db.init_db import seed_lookups
from app.db.models.user import User
from app.db.session import SessionLocal, engine
from app.main import app


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh schema, seeded lookups and an empty upload dir for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_lookups(db)
    finally:
        db.close()
    shutil.rmtree(settings.UPLOAD_DIR, ignore_errors=True)
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    yield


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    """Anonymous test client."""
    return TestClient(app)


def signup(client, username="alice", email="alice@x.com", password="secret1", full_name="Alice A"):
    return client.post("/api/signup", json={
        "username": username,
        "email": email,
        "password": password,
        "fullName": full_name,
    })


@pytest.fixture
def alice():
    """Client with a freshly signed-up regular user session. Returns (client, user)."""
    c = TestClient(app)
    response = signup(c)
    assert response.status_code == 201
    return c, response.json()["user"]


@pytest.fixture
def bob():
    c = TestClient(app)
    response = signup(c, username="bob", email="bob@school.edu", full_name="Bob B")
    assert response.status_code == 201
    return c, response.json()["user"]


@pytest.fixture
def admin(db_session):
    """Client logged in as an admin created directly in the database."""
    user = User(
        username="admin",
        email="admin@ojtorganizer.com",
        hashed_password=get_password_hash("adminpass"),
        full_name="Administrator",
        role="admin",
    )
    db_session.add(user)
    db_session.commit()

    c = TestClient(app)
    response = c.post("/api/login", json={"username": "admin", "password": "adminpass"})
    assert response.status_code == 200
    return c, response.json()["user"]


@pytest.fixture
def sample_task_data():
    """Sample task payload (user_id filled in by the test)."""
    return {
        "title": "Log Week 1",
        "description": "Orientation and network inventory",
        "category_id": 1,
        "priority_id": 2,
        "status_id": 1,
        "due_date": "2026-06-15",
        "estimated_hours": 8,
        "date_performed": "2026-06-10",
        "hours_rendered": 7.5,
        "department": "IT Services",
        "supervisor": "Engr. Santos",
        "remarks": "Shadowed the network team",
    }


@pytest.fixture
def make_client():
    """Factory: signs up a new user on a fresh client, returns (client, response)."""
    def _make(**kwargs):
        c = TestClient(app)
        return c, signup(c, **kwargs)
    return _make
