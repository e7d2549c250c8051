"""Unit tests for the HTTP endpoints."""

import pytest
from fastapi.testclient import TestClient

from objective_progress import __version__
from objective_progress.main import app


@pytest.fixture
def client(test_env):
    """Test client with the lifespan (and snapshot store) running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def progress_payload():
    """The revenue scenario as a camelCase request body."""
    return {
        "objective": {
            "id": "obj-revenue",
            "baselineValue": 30000,
            "kpiTargetValue": 50000,
            "targetDirection": "increase",
            "baselineDate": "2026-01-14",
            "evaluationDate": "2026-04-14",
            "status": "in_progress",
        },
        "currentValue": 40000,
        "snapshots": [
            {"snapshotDate": "2026-02-13", "kpiValue": 35000},
            {"snapshotDate": "2026-03-15", "kpiValue": 40000},
        ],
        "today": "2026-03-15",
    }


class TestHealthCheckEndpoint:
    """Tests for the /health endpoint."""

    def test_health_check_returns_200(self, client):
        response = client.get("/health")
        assert response.status_code == 200

    def test_health_check_reports_store(self, client):
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["version"] == __version__
        assert data["snapshot_store_connected"] is True
        assert "timestamp" in data

    def test_root_lists_endpoints(self, client):
        data = client.get("/").json()
        assert data["version"] == __version__
        assert "/api/v1/objectives/progress" in data["endpoints"].values()


class TestProgressEndpoint:
    """Tests for POST /api/v1/objectives/progress."""

    def test_revenue_scenario(self, client, progress_payload):
        response = client.post("/api/v1/objectives/progress", json=progress_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["progressPercentage"] == 50.0
        assert data["healthStatus"] == "at_risk"
        assert data["velocity"] == pytest.approx(166.6667, rel=1e-4)
        assert data["projectedValue"] == pytest.approx(45000)
        assert data["willComplete"] is False
        assert data["trend"] == "up"
        assert data["daysElapsed"] == 60
        assert data["daysRemaining"] == 30
        assert data["totalDays"] == 90
        assert data["isLoading"] is False

    def test_null_current_value_is_loading(self, client, progress_payload):
        progress_payload["currentValue"] = None

        data = client.post("/api/v1/objectives/progress", json=progress_payload).json()

        assert data["isLoading"] is True
        assert data["progressPercentage"] is None
        assert data["velocity"] is None

    def test_invalid_snapshot_rejected(self, client, progress_payload):
        progress_payload["snapshots"] = [{"snapshotDate": "2026-03-15"}]

        response = client.post("/api/v1/objectives/progress", json=progress_payload)

        assert response.status_code == 422


class TestSnapshotEndpoints:
    """Tests for the snapshot store endpoints."""

    def test_store_then_list(self, client):
        for day, value in (("2026-03-01", 10), ("2026-03-02", 12), ("2026-03-03", 15)):
            response = client.post(
                "/api/v1/objectives/obj-1/snapshots",
                json={"snapshotDate": day, "kpiValue": value},
            )
            assert response.status_code == 201
            assert response.json()["objectiveId"] == "obj-1"

        data = client.get("/api/v1/objectives/obj-1/snapshots", params={"limit": 2}).json()

        assert [s["kpiValue"] for s in data] == [12.0, 15.0]
        assert [s["snapshotDate"] for s in data] == ["2026-03-02", "2026-03-03"]

    def test_mismatched_objective_id_rejected(self, client):
        response = client.post(
            "/api/v1/objectives/obj-1/snapshots",
            json={"objectiveId": "obj-2", "snapshotDate": "2026-03-01", "kpiValue": 1},
        )
        assert response.status_code == 400
