"""
Pytest configuration and fixtures for FastAPI testing.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def mock_zerodb():
    """
    Stand-in ZeroDB client. Guarded updates match by default.
    """
    client = AsyncMock()
    client.tables.query_rows.return_value = []
    client.tables.query_all_rows.return_value = []
    client.tables.insert_rows.return_value = {"inserted_count": 1}
    client.tables.update_rows.return_value = {"matched_count": 1, "modified_count": 1}
    return client


@pytest.fixture
def client(mock_zerodb):
    """
    Test client for the application with the store dependency overridden.

    The app is imported late so environment fixtures apply first.
    """
    from integrations.zerodb.dependencies import get_zerodb_client
    from main import app

    async def override_get_zerodb_client():
        return mock_zerodb

    app.dependency_overrides[get_zerodb_client] = override_get_zerodb_client
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def mock_env(monkeypatch):
    """
    Set up mock environment variables for testing.
    """
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.setenv("API_VERSION", "v1")
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:5173")
    monkeypatch.setenv("ZERODB_API_KEY", "test_key")
    monkeypatch.setenv("ZERODB_PROJECT_ID", "test_project")
