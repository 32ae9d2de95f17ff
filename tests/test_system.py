"""Tests for hundred_days/routers/system.py."""

from __future__ import annotations

from datetime import datetime

from fastapi.testclient import TestClient


def test_health(client: TestClient):
    response = client.get("/api/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "OK"
    assert payload["message"] == "Server is running"
    assert payload["timestamp"].endswith("Z")
    datetime.fromisoformat(payload["timestamp"].replace("Z", "+00:00"))


def test_cors_diagnostic_echoes_origin(client: TestClient):
    response = client.get(
        "/api/test-cors", headers={"Origin": "http://localhost:5173"}
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["message"] == "CORS is working!"
    assert payload["origin"] == "http://localhost:5173"
    assert payload["timestamp"]


def test_cors_diagnostic_without_origin(client: TestClient):
    assert client.get("/api/test-cors").json()["origin"] is None
