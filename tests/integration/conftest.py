"""
API fixtures: the app runs against the per-test in-memory database.
"""
import pytest


@pytest.fixture
def override_get_db(session_factory):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    return _get_db


@pytest.fixture
def api_client(override_get_db):
    """TestClient whose get_db dependency is bound to the in-memory engine."""
    from fastapi.testclient import TestClient
    from api.api import app
    from api.config import get_db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(api_client):
    """Register a fresh user through the API and return its bearer header."""

    def _auth_headers(email="student@example.com", password="testpass123"):
        response = api_client.post(
            "/auth/register",
            json={"email": email, "password": password, "firstName": "Ada", "lastName": "Lovelace"},
        )
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _auth_headers
