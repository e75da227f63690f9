"""
Tests for health check endpoint.
"""

from datetime import datetime, timedelta, timezone

import pytest


def test_health_endpoint_structure(client):
    """
    Expected response:
    {
        "status": "healthy",
        "timestamp": "2026-01-01T00:00:00.000+00:00",
        "database": "connected" | "disconnected"
    }
    """
    response = client.get("/health")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"

    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] in ("connected", "disconnected")

    try:
        datetime.fromisoformat(data["timestamp"])
    except ValueError:
        pytest.fail("timestamp is not in valid ISO format")


def test_health_endpoint_timestamp_is_recent(client):
    before = datetime.now(timezone.utc) - timedelta(milliseconds=1)
    response = client.get("/health")
    after = datetime.now(timezone.utc)

    timestamp = datetime.fromisoformat(response.json()["timestamp"])

    assert before <= timestamp <= after


def test_health_reports_store_readiness(client):
    from main import app

    app.state.store_ready = True
    try:
        assert client.get("/health").json()["database"] == "connected"
    finally:
        app.state.store_ready = False

    assert client.get("/health").json()["database"] == "disconnected"
