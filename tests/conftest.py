"""
Test configuration and fixtures.

Provides:
- A fresh application per test backed by an in-memory SQLite database
- TestClient with the application lifespan running (tables created)
- Helpers to create trips and users through the API
"""
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app


@pytest.fixture(scope="function")
def settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-secret",
        JWT_EXPIRES_DAYS=1,
        CORS_ORIGINS="http://localhost:3000",
        _env_file=None,
    )


@pytest.fixture(scope="function")
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="function")
def db_session(app, client):
    """Session on the same database the application uses."""
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def trip(client: TestClient) -> dict:
    resp = client.post("/api/trips", json={
        "title": "Japan Trip",
        "destination": "Tokyo",
        "startDate": "2025-04-01",
        "endDate": "2025-04-10",
    })
    assert resp.status_code == 201
    return resp.json()


@pytest.fixture
def user_payload() -> dict:
    return {"username": "traveler", "email": "traveler@example.com", "password": "s3cret-pass"}
