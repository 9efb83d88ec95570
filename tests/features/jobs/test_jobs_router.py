"""
Tests for the refresh trigger and job run endpoints.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from tierlist.core.enums import JobStatus, Mode, RefreshMode, Trigger
from tierlist.features.jobs import router as jobs_router_module
from tierlist.features.jobs.dependencies import get_job_service
from tierlist.features.jobs.schemas import JobRunResponse
from tierlist.main import app

STARTED_AT = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def mock_run_refresh():
    with patch.object(jobs_router_module, "run_refresh", new_callable=AsyncMock) as mock_run:
        yield mock_run


@pytest.fixture
def job_service():
    service = AsyncMock()
    app.dependency_overrides[get_job_service] = lambda: service
    yield service
    app.dependency_overrides.pop(get_job_service, None)


def _job_run(**overrides) -> JobRunResponse:
    values = {
        "id": 3,
        "mode": Mode.RAID,
        "status": JobStatus.SUCCESS,
        "trigger": "manual",
        "started_at": STARTED_AT,
        "items_updated": 12,
    }
    values.update(overrides)
    return JobRunResponse(**values)


class TestRefreshEndpoints:
    """Test cases for the refresh triggers."""

    def test_manual_refresh_defaults_to_all(self, client, mock_run_refresh):
        response = client.post("/api/refresh")

        assert response.status_code == 202
        assert response.json() == {"status": "accepted", "mode": "ALL", "trigger": "manual"}
        payload = mock_run_refresh.await_args.args[0]
        assert payload.mode == RefreshMode.ALL
        assert payload.trigger == Trigger.MANUAL

    def test_body_mode_wins_over_query(self, client, mock_run_refresh):
        response = client.post(
            "/api/refresh", params={"mode": "RAID"}, json={"mode": "MYTHIC_PLUS"}
        )

        assert response.status_code == 202
        assert response.json()["mode"] == "MYTHIC_PLUS"

    def test_query_mode(self, client, mock_run_refresh):
        response = client.post("/api/refresh", params={"mode": "RAID"})

        assert response.json()["mode"] == "RAID"
        assert mock_run_refresh.await_args.args[0].mode == RefreshMode.RAID

    def test_invalid_mode(self, client, mock_run_refresh):
        response = client.post("/api/refresh", json={"mode": "PVP"})

        assert response.status_code == 422
        mock_run_refresh.assert_not_awaited()

    @pytest.mark.parametrize("method", ["get", "post"])
    def test_cron_refresh(self, client, mock_run_refresh, method):
        response = getattr(client, method)("/api/cron/refresh")

        assert response.status_code == 202
        assert response.json()["trigger"] == "cron"
        assert mock_run_refresh.await_args.args[0].trigger == Trigger.CRON

    def test_background_failure_still_accepted(self, client, mock_run_refresh):
        mock_run_refresh.side_effect = RuntimeError("upstream down")

        response = client.post("/api/refresh")

        assert response.status_code == 202


class TestJobRunEndpoints:
    """Test cases for job run history."""

    def test_list_job_runs(self, client, job_service):
        job_service.get_latest_job_runs.return_value = [_job_run()]

        response = client.get("/api/jobs/runs", params={"status": "SUCCESS", "limit": 10})

        assert response.status_code == 200
        assert response.json()[0]["items_updated"] == 12
        job_service.get_latest_job_runs.assert_awaited_once_with(
            limit=10, status=JobStatus.SUCCESS
        )

    def test_get_job_run(self, client, job_service):
        job_service.get_job_run.return_value = _job_run(
            status=JobStatus.FAILED, error_message="boom"
        )

        response = client.get("/api/jobs/runs/3")

        assert response.status_code == 200
        assert response.json()["error_message"] == "boom"

    def test_unknown_job_run(self, client, job_service):
        job_service.get_job_run.return_value = None

        response = client.get("/api/jobs/runs/404")

        assert response.status_code == 404

    def test_service_error_returns_500(self, client, job_service):
        job_service.get_latest_job_runs.side_effect = RuntimeError("db down")

        response = client.get("/api/jobs/runs")

        assert response.status_code == 500
