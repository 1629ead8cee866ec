"""Tests for health check endpoints."""

import sqlite3
from unittest.mock import patch

from fastapi.testclient import TestClient


class TestHealthEndpoints:
    """Tests for /health endpoints."""

    def test_health_check_success(self, client: TestClient):
        """Health check returns healthy status."""
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        assert data["database"] == "connected"
        assert data["registered_filters"] == 0

    def test_health_counts_filters(self, client: TestClient, registered_filter_id: str):
        response = client.get("/health")
        assert response.json()["registered_filters"] == 1

    def test_health_degraded_on_database_error(self, client: TestClient, app_context):
        with patch.object(
            app_context.filter_service,
            "get_all_filters",
            side_effect=sqlite3.OperationalError("database is locked"),
        ):
            response = client.get("/health")

        data = response.json()
        assert response.status_code == 200
        assert data["status"] == "degraded"
        assert data["database"].startswith("error:")

    def test_readiness_check(self, client: TestClient):
        """Readiness probe returns ready."""
        response = client.get("/health/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    def test_readiness_fails_on_database_error(self, client: TestClient, app_context):
        with patch.object(
            app_context.filter_service,
            "get_all_filters",
            side_effect=sqlite3.OperationalError("disk I/O error"),
        ):
            response = client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["error"] is True

    def test_liveness_check(self, client: TestClient):
        """Liveness probe returns alive."""
        response = client.get("/health/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestRootEndpoint:
    """Tests for root endpoint."""

    def test_root_returns_info(self, client: TestClient):
        """Root endpoint returns API info."""
        response = client.get("/")
        assert response.status_code == 200

        data = response.json()
        assert "message" in data
        assert data["docs"] == "/docs"
        assert data["health"] == "/health"


class TestErrorEnvelope:
    def test_unknown_route_uses_envelope(self, client: TestClient):
        response = client.get("/api/v1/nope")

        assert response.status_code == 404
        data = response.json()
        assert data["error"] is True
        assert data["status_code"] == 404
        assert data["path"] == "/api/v1/nope"
