"""Service that gathers an objective's inputs and runs the progress engine."""

import logging
from datetime import date
from typing import Optional

from ..models import KpiValueResult, Objective, ObjectiveProgressData, ObjectiveSnapshot
from .kpi_service import KpiService, previous_complete_month
from .progress_engine import compute_progress, compute_unmeasured_progress
from .snapshot_service import DEFAULT_SNAPSHOT_LIMIT, SnapshotService, build_snapshot

logger = logging.getLogger(__name__)


class ObjectiveProgressService:
    """
    Orchestrates progress computation for stored objectives.

    Fetches the current KPI value and the recent snapshot history, then hands
    both to the pure progress engine. Upstream failures never reach the
    engine's numeric path: a failed KPI lookup yields the loading result and
    a failed snapshot lookup yields an empty history. Objectives whose KPI
    cannot be measured at all get a final insufficient-data result instead.
    """

    def __init__(
        self,
        kpi_service: KpiService,
        snapshot_service: SnapshotService,
        snapshot_limit: int = DEFAULT_SNAPSHOT_LIMIT,
    ):
        """
        Initialize the progress service.

        Args:
            kpi_service: Provider of current-period KPI values
            snapshot_service: Store of historical snapshots
            snapshot_limit: Number of recent snapshots used for velocity
        """
        self.kpi_service = kpi_service
        self.snapshot_service = snapshot_service
        self.snapshot_limit = snapshot_limit

    async def _fetch_current_value(self, objective: Objective, today: date) -> KpiValueResult:
        try:
            return await self.kpi_service.get_current_value(objective, today)
        except Exception as e:
            logger.warning(f"Failed to fetch KPI value for objective {objective.id}: {e}")
            return KpiValueResult(value=None, month_label=previous_complete_month(today).label)

    async def _fetch_snapshots(self, objective: Objective) -> list[ObjectiveSnapshot]:
        if not objective.id:
            return []
        try:
            return await self.snapshot_service.get_recent_snapshots(
                objective.id, limit=self.snapshot_limit
            )
        except Exception as e:
            logger.warning(f"Failed to fetch snapshots for objective {objective.id}: {e}")
            return []

    async def get_progress(self, objective: Objective, today: date) -> ObjectiveProgressData:
        """
        Compute the current progress of an objective.

        Args:
            objective: Objective configuration
            today: Reference date

        Returns:
            ObjectiveProgressData for ``today``
        """
        kpi = await self._fetch_current_value(objective, today)
        if not kpi.measurable:
            logger.info(f"Objective {objective.id}: KPI not measurable, insufficient data")
            return compute_unmeasured_progress(objective, today, month_label=kpi.month_label)

        snapshots = await self._fetch_snapshots(objective)

        progress = compute_progress(
            objective,
            kpi.value,
            snapshots,
            today,
            month_label=kpi.month_label,
        )
        logger.info(
            f"Objective {objective.id}: health={progress.health_status.value}, "
            f"progress={progress.progress_percentage}, trend={progress.trend.value}"
        )
        return progress

    async def record_snapshot(
        self, objective: Objective, today: date
    ) -> Optional[ObjectiveSnapshot]:
        """
        Compute today's progress and append it to the snapshot history.

        Returns:
            The stored snapshot, or None when there was nothing to record
        """
        if not objective.id:
            raise ValueError("objective.id is required to record a snapshot")

        progress = await self.get_progress(objective, today)
        snapshot = build_snapshot(objective.id, progress, today)
        if snapshot is None:
            logger.info(f"Objective {objective.id}: no progress to record for {today.isoformat()}")
            return None

        await self.snapshot_service.store_snapshot(snapshot)
        return snapshot
