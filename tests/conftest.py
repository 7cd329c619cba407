"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from sitecms.api.dependencies import get_media_store
from sitecms.config import get_settings
from sitecms.database import Database, get_db
from sitecms.main import app
from sitecms.models.enums import UserRole
from sitecms.models.user import User
from sitecms.services.auth import get_password_hash
from sitecms.services.bootstrap import initialize_database

ADMIN_PASSWORD = "admin123"  # noqa: S105


class FakeMediaStore:
    """Media store that records calls instead of uploading."""

    def __init__(self):
        self.calls: list[dict] = []
        self.error: Exception | None = None

    async def store(self, data, *, filename, content_type, resource_type, transformation):
        self.calls.append(
            {
                "data": data,
                "filename": filename,
                "content_type": content_type,
                "resource_type": resource_type,
                "transformation": transformation,
            }
        )
        if self.error is not None:
            raise self.error
        return f"https://media.example.com/{resource_type}/{len(self.calls)}/{filename}"


@pytest.fixture
def database():
    """Fresh in-memory store per test, migrated and bootstrapped."""
    db = Database("sqlite://", poolclass=StaticPool)
    initialize_database(db, get_settings())
    yield db
    db.dispose()


@pytest.fixture
def db(database):
    """Database session shared by the test and the app."""
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def media_store():
    return FakeMediaStore()


@pytest.fixture
def client(database, db, media_store):
    """Create a test client with database and media store overrides."""

    def override_get_db():
        yield db

    app.state.database = database
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_media_store] = lambda: media_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    app.state.database = None


@pytest.fixture
def auth_client(client):
    """Test client logged in as the bootstrap admin."""
    response = client.post(
        "/api/auth/login", json={"username": "admin", "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200
    return client


@pytest.fixture
def make_user(db):
    """Factory for additional users."""

    def _make_user(
        username: str, email: str, password: str = "secret123", role: str = UserRole.USER.value
    ) -> User:
        user = User(
            username=username,
            email=email,
            password_hash=get_password_hash(password),
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user
