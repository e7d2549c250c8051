"""Unit tests for SnapshotService and build_snapshot."""

import sqlite3
from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest

from objective_progress.models import (
    HealthStatus,
    ObjectiveProgressData,
    ObjectiveSnapshot,
)
from objective_progress.services.progress_engine import compute_progress
from objective_progress.services.snapshot_service import SnapshotService, build_snapshot


async def _store_series(service, objective_id, start, values):
    for offset, value in enumerate(values):
        await service.store_snapshot(
            ObjectiveSnapshot(
                objective_id=objective_id,
                snapshot_date=start + timedelta(days=offset),
                kpi_value=value,
            )
        )


class TestSnapshotService:
    """Tests for storing and querying snapshots."""

    @pytest.mark.asyncio
    async def test_store_and_read_back(self, snapshot_service):
        await snapshot_service.store_snapshot(
            ObjectiveSnapshot(
                objective_id="obj-1",
                snapshot_date=date(2026, 3, 1),
                kpi_value=120.5,
                progress_percentage=40.0,
                days_remaining=20,
                velocity=1.5,
                projected_value=150.5,
                health_status=HealthStatus.AT_RISK,
            )
        )

        snapshots = await snapshot_service.get_recent_snapshots("obj-1")

        assert len(snapshots) == 1
        snapshot = snapshots[0]
        assert snapshot.id is not None
        assert snapshot.snapshot_date == date(2026, 3, 1)
        assert snapshot.kpi_value == 120.5
        assert snapshot.health_status == HealthStatus.AT_RISK
        assert snapshot.velocity == 1.5
        assert snapshot.created_at == date(2026, 3, 1)

    @pytest.mark.asyncio
    async def test_recent_limit_keeps_newest_in_ascending_order(self, snapshot_service):
        await _store_series(snapshot_service, "obj-1", date(2026, 1, 1), range(15))

        snapshots = await snapshot_service.get_recent_snapshots("obj-1", limit=10)

        assert len(snapshots) == 10
        assert [s.kpi_value for s in snapshots] == [float(v) for v in range(5, 15)]
        dates = [s.snapshot_date for s in snapshots]
        assert dates == sorted(dates)

    @pytest.mark.asyncio
    async def test_objectives_are_isolated(self, snapshot_service):
        await _store_series(snapshot_service, "obj-1", date(2026, 1, 1), [1, 2])
        await _store_series(snapshot_service, "obj-2", date(2026, 1, 1), [7])

        assert len(await snapshot_service.get_recent_snapshots("obj-1")) == 2
        assert len(await snapshot_service.get_recent_snapshots("obj-2")) == 1
        assert await snapshot_service.get_recent_snapshots("obj-3") == []

    @pytest.mark.asyncio
    async def test_same_date_snapshots_are_kept(self, snapshot_service):
        for value in (10, 11):
            await snapshot_service.store_snapshot(
                ObjectiveSnapshot(objective_id="obj-1", snapshot_date=date(2026, 1, 1), kpi_value=value)
            )

        snapshots = await snapshot_service.get_recent_snapshots("obj-1")
        assert [s.kpi_value for s in snapshots] == [10.0, 11.0]

    @pytest.mark.asyncio
    async def test_invalid_limit(self, snapshot_service):
        with pytest.raises(ValueError, match="limit"):
            await snapshot_service.get_recent_snapshots("obj-1", limit=0)

    @pytest.mark.asyncio
    async def test_store_requires_objective_id(self, snapshot_service):
        with pytest.raises(ValueError, match="objective_id"):
            await snapshot_service.store_snapshot(
                ObjectiveSnapshot(snapshot_date=date(2026, 1, 1), kpi_value=1)
            )

    @pytest.mark.asyncio
    async def test_file_database_persists_between_instances(self, tmp_path):
        db_path = str(tmp_path / "snapshots.db")
        first = SnapshotService(db_path=db_path)
        await _store_series(first, "obj-1", date(2026, 1, 1), [1, 2, 3])
        first.close()

        second = SnapshotService(db_path=db_path)
        snapshots = await second.get_recent_snapshots("obj-1")
        second.close()

        assert [s.kpi_value for s in snapshots] == [1.0, 2.0, 3.0]

    def test_is_connected(self, snapshot_service):
        assert snapshot_service.is_connected() is True

    @pytest.mark.asyncio
    async def test_file_connection_released_when_query_fails(self, tmp_path, monkeypatch):
        service = SnapshotService(db_path=str(tmp_path / "snapshots.db"))
        conn = MagicMock()
        conn.execute.side_effect = sqlite3.OperationalError("disk I/O error")
        monkeypatch.setattr(service, "_get_connection", lambda: conn)

        with pytest.raises(sqlite3.OperationalError):
            await service.store_snapshot(
                ObjectiveSnapshot(objective_id="obj-1", snapshot_date=date(2026, 1, 1), kpi_value=1)
            )
        with pytest.raises(sqlite3.OperationalError):
            await service.get_recent_snapshots("obj-1")

        assert conn.close.call_count == 2


class TestBuildSnapshot:
    """Tests for build_snapshot."""

    def test_from_computed_progress(self, revenue_objective, revenue_snapshots, today):
        progress = compute_progress(revenue_objective, 40000, revenue_snapshots, today)

        snapshot = build_snapshot("obj-revenue", progress, today)

        assert snapshot.objective_id == "obj-revenue"
        assert snapshot.snapshot_date == today
        assert snapshot.kpi_value == 40000
        assert snapshot.progress_percentage == 50.0
        assert snapshot.days_remaining == 30
        assert snapshot.velocity == progress.velocity
        assert snapshot.projected_value == progress.projected_value
        assert snapshot.health_status == HealthStatus.AT_RISK

    def test_nothing_to_record_while_loading(self, today):
        progress = ObjectiveProgressData(
            health_status=HealthStatus.OFF_TRACK,
            days_elapsed=1,
            days_remaining=1,
            total_days=2,
            is_loading=True,
        )
        assert build_snapshot("obj-1", progress, today) is None

    def test_nothing_to_record_without_percentage(self, today):
        progress = ObjectiveProgressData(
            current_value=10,
            health_status=HealthStatus.OFF_TRACK,
            days_elapsed=1,
            days_remaining=1,
            total_days=2,
        )
        assert build_snapshot("obj-1", progress, today) is None
