"""Shared fixtures for file server API tests.

Provides a TestClient whose DirectoryService is replaced with one serving
the temporary ``served_root`` directory.
"""

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_directory_service
from main import app


@pytest.fixture
def api_client(local_service):
    """Provide a TestClient backed by ``local_service``.

    The lifespan is not run (the client is not used as a context manager),
    so the dependency override is the only service the routes see.

    Example:
        def test_something(api_client):
            response = api_client.get("/api/fs/list")
            assert response.status_code == 200
    """
    app.dependency_overrides[get_directory_service] = lambda: local_service

    client = TestClient(app)

    yield client

    app.dependency_overrides.clear()
