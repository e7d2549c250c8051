"""Pytest configuration and shared fixtures."""

from datetime import date, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from objective_progress.models import (
    Objective,
    ObjectiveSnapshot,
    ObjectiveStatus,
    OrdersAggregation,
    TargetDirection,
)
from objective_progress.services.snapshot_service import SnapshotService


@pytest.fixture
def anyio_backend():
    """Configure anyio backend for async tests."""
    return "asyncio"


# =============================================================================
# Environment and Configuration Fixtures
# =============================================================================

@pytest.fixture
def test_env(monkeypatch, tmp_path):
    """Set up test environment variables and reset cached settings."""
    from objective_progress import config

    test_vars = {
        "SNAPSHOT_DB_PATH": str(tmp_path / "snapshots.db"),
        "SNAPSHOT_LIMIT": "10",
        "LOG_LEVEL": "DEBUG",
        "ENVIRONMENT": "test",
    }
    for key, value in test_vars.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setattr(config, "_settings", None)
    return test_vars


# =============================================================================
# Test Data Fixtures
# =============================================================================

@pytest.fixture
def today():
    """Fixed reference date; the engine never reads the clock."""
    return date(2026, 3, 15)


@pytest.fixture
def revenue_objective(today):
    """Revenue objective 60 days in, 30 days to go, 30k -> 50k."""
    return Objective(
        id="obj-revenue",
        baseline_value=30000,
        kpi_target_value=50000,
        target_direction=TargetDirection.INCREASE,
        baseline_date=today - timedelta(days=60),
        evaluation_date=today + timedelta(days=30),
        status=ObjectiveStatus.IN_PROGRESS,
        kpi_type="revenue",
        kpi_unit="EUR",
        company_id="1204",
    )


@pytest.fixture
def revenue_snapshots(today):
    """Two snapshots 30 days apart: 35k then 40k."""
    return [
        ObjectiveSnapshot(
            objective_id="obj-revenue",
            snapshot_date=today - timedelta(days=30),
            kpi_value=35000,
        ),
        ObjectiveSnapshot(objective_id="obj-revenue", snapshot_date=today, kpi_value=40000),
    ]


@pytest.fixture
def sample_aggregation():
    """Orders aggregation for one month of a single company."""
    return OrdersAggregation(
        total_revenue=40000.0,
        total_orders=1600,
        avg_ticket=25.0,
        total_discounts=2000.0,
        total_refunds=400.0,
        net_revenue=39600.0,
        promotion_rate=5.0,
        refund_rate=1.0,
        avg_discount_per_order=1.25,
        unique_customers=800,
        orders_per_customer=2.0,
    )


# =============================================================================
# Collaborator Fixtures
# =============================================================================

@pytest.fixture
def mock_orders_client(sample_aggregation):
    """Create a mock order-management client."""
    client = MagicMock()
    client.fetch_orders_aggregated = AsyncMock(return_value=sample_aggregation)
    return client


@pytest.fixture
def snapshot_service():
    """In-memory snapshot store, closed after the test."""
    service = SnapshotService(db_path=":memory:")
    yield service
    service.close()
