"""
Shared fixtures.

The settings object is built at import time, so the database URL and secret
must be in the environment before anything from ``churchfinder`` is imported.
Each test gets freshly created tables in a throwaway SQLite file.
"""
import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="churchfinder-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient
from passlib.context import CryptContext

from churchfinder.core import security
from churchfinder.core.database import db
from churchfinder.core.security import create_access_token
from churchfinder.main import app
from churchfinder.models.user import User, UserRole, UserStatus
from churchfinder.schemas.church import ChurchCreate
from churchfinder.services.church_service import create_church


# Minimum bcrypt cost keeps the suite fast
security.pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=4)

PASSWORD = "correct-horse-battery"


@pytest.fixture(autouse=True)
def database():
    db.init_db()
    yield db
    db.drop_db()


@pytest.fixture
def session(database):
    session = database.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(database):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_church(session):
    """Factory: insert a church and return its id."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "name": f"Church {counter['n']:03d}",
            "denomination": "Baptist",
            "city": "Denver",
            "state": "CO",
            "latitude": 39.7392,
            "longitude": -104.9903,
        }
        data.update(overrides)
        church = create_church(session, ChurchCreate(**data))
        session.commit()
        return church.id

    return _make


@pytest.fixture
def make_user(session):
    """Factory: insert a user and return (user, bearer headers)."""
    def _make(email="member@example.com", role=UserRole.USER, status=UserStatus.ACTIVE):
        user = User(
            email=email,
            display_name=email.split("@")[0].title(),
            hashed_password=security.get_password_hash(PASSWORD),
            role=role,
            status=status,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        headers = {"Authorization": f"Bearer {create_access_token(user.id)}"}
        return user, headers

    return _make


@pytest.fixture
def user_headers(make_user):
    return make_user()[1]


@pytest.fixture
def admin_headers(make_user):
    return make_user(email="admin@example.com", role=UserRole.ADMIN)[1]


@pytest.fixture
def user_password():
    return PASSWORD
