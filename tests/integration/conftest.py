"""
Integration test fixtures
"""

import pytest
from fastapi.testclient import TestClient

from homehub.api.dependencies import get_db
from homehub.api.main import app
from homehub.api.middleware.timing import get_latency_tracker


@pytest.fixture
def client(session_factory):
    """API client bound to the in-memory test database."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    get_latency_tracker().reset()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def create_listing(client, headers_for):
    """POST a listing form as a user and return the response JSON."""

    def _create(user, form, expected_status=201):
        response = client.post("/api/v1/properties", json=form, headers=headers_for(user))
        assert response.status_code == expected_status, response.text
        return response.json()

    return _create
