"""Service layer for the objective progress engine."""

from .kpi_service import KpiService, OrdersClient, extract_kpi_value, previous_complete_month
from .snapshot_service import SnapshotService, build_snapshot
from .progress_service import ObjectiveProgressService
from .progress_engine import compute_progress, compute_unmeasured_progress

__all__ = [
    "KpiService",
    "OrdersClient",
    "extract_kpi_value",
    "previous_complete_month",
    "SnapshotService",
    "build_snapshot",
    "ObjectiveProgressService",
    "compute_progress",
    "compute_unmeasured_progress",
]
