"""
Tests for the tier list endpoints.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from tierlist.core.enums import Mode, Role, Tier
from tierlist.features.snapshots.dependencies import get_snapshot_service
from tierlist.features.snapshots.schemas import SnapshotSummary, SnapshotView, SpecView
from tierlist.main import app

CREATED_AT = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


def _view(mode: Mode = Mode.MYTHIC_PLUS) -> SnapshotView:
    return SnapshotView(
        snapshot_id=7,
        mode=mode,
        created_at=CREATED_AT,
        metadata_json={"source": "mock"},
        specs=[
            SpecView(
                id=1,
                mode=mode,
                role=Role.DPS,
                class_name="Mage",
                spec_name="Fire",
                score=97.5,
                tier=Tier.S,
                sample_size=200,
                rank=1,
                previous_rank=3,
                rank_delta=2,
            )
        ],
    )


@pytest.fixture
def snapshot_service():
    service = AsyncMock()
    app.dependency_overrides[get_snapshot_service] = lambda: service
    yield service
    app.dependency_overrides.pop(get_snapshot_service, None)


@pytest.fixture
def client():
    return TestClient(app)


class TestTierListEndpoint:
    """Test cases for GET /api/tier."""

    def test_defaults_to_mythic_plus(self, client, snapshot_service):
        snapshot_service.get_latest.return_value = _view()

        response = client.get("/api/tier")

        assert response.status_code == 200
        body = response.json()
        assert body["snapshot_id"] == 7
        assert body["specs"][0]["rank_delta"] == 2
        assert body["specs"][0]["tier"] == "S"
        snapshot_service.get_latest.assert_awaited_once_with(Mode.MYTHIC_PLUS)

    def test_mode_query_parameter(self, client, snapshot_service):
        snapshot_service.get_latest.return_value = _view(Mode.RAID)

        response = client.get("/api/tier", params={"mode": "RAID"})

        assert response.status_code == 200
        snapshot_service.get_latest.assert_awaited_once_with(Mode.RAID)

    def test_not_found_before_first_snapshot(self, client, snapshot_service):
        snapshot_service.get_latest.return_value = None

        response = client.get("/api/tier")

        assert response.status_code == 404

    def test_invalid_mode(self, client, snapshot_service):
        response = client.get("/api/tier", params={"mode": "PVP"})

        assert response.status_code == 422
        snapshot_service.get_latest.assert_not_awaited()

    def test_service_error_returns_500(self, client, snapshot_service):
        snapshot_service.get_latest.side_effect = RuntimeError("db down")

        response = client.get("/api/tier")

        assert response.status_code == 500


class TestSnapshotHistoryEndpoints:
    """Test cases for snapshot history and lookup."""

    def test_history(self, client, snapshot_service):
        snapshot_service.list_history.return_value = [
            SnapshotSummary(id=7, mode=Mode.RAID, created_at=CREATED_AT)
        ]

        response = client.get("/api/tier/history", params={"mode": "RAID", "limit": 5})

        assert response.status_code == 200
        assert response.json()[0]["id"] == 7
        snapshot_service.list_history.assert_awaited_once_with(mode=Mode.RAID, limit=5)

    def test_snapshot_by_id(self, client, snapshot_service):
        snapshot_service.get_by_id.return_value = _view()

        response = client.get("/api/tier/snapshots/7")

        assert response.status_code == 200
        snapshot_service.get_by_id.assert_awaited_once_with(7)

    def test_unknown_snapshot(self, client, snapshot_service):
        snapshot_service.get_by_id.return_value = None

        response = client.get("/api/tier/snapshots/99")

        assert response.status_code == 404
