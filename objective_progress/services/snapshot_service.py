"""Service for storing and querying objective snapshots."""

import logging
import sqlite3
from datetime import date
from typing import Optional

from ..models import HealthStatus, ObjectiveProgressData, ObjectiveSnapshot

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_LIMIT = 10


def build_snapshot(
    objective_id: str,
    progress: ObjectiveProgressData,
    today: date,
) -> Optional[ObjectiveSnapshot]:
    """
    Build the snapshot record for a computed progress result.

    Args:
        objective_id: Objective the snapshot belongs to
        progress: Progress computed for ``today``
        today: Snapshot date

    Returns:
        ObjectiveSnapshot, or None when the result carries no current value
        or no progress percentage (loading, or no target configured)
    """
    if progress.current_value is None or progress.progress_percentage is None:
        return None

    return ObjectiveSnapshot(
        objective_id=objective_id,
        snapshot_date=today,
        kpi_value=progress.current_value,
        progress_percentage=progress.progress_percentage,
        days_remaining=progress.days_remaining,
        velocity=progress.velocity,
        projected_value=progress.projected_value,
        health_status=progress.health_status,
        created_at=today,
    )


class SnapshotService:
    """Append-only SQLite store of objective snapshots."""

    def __init__(self, db_path: str = "objective_snapshots.db"):
        """
        Initialize the snapshot service.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = db_path
        self._connection = None
        self._init_database()

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create a database connection."""
        if self.db_path == ":memory:":
            # In-memory databases vanish with their connection
            if self._connection is None:
                self._connection = sqlite3.connect(self.db_path)
            return self._connection
        return sqlite3.connect(self.db_path)

    def _release(self, conn: sqlite3.Connection) -> None:
        if self.db_path != ":memory:":
            conn.close()

    def _init_database(self) -> None:
        """Initialize the SQLite database schema."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS objective_snapshots (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    objective_id TEXT NOT NULL,
                    snapshot_date TEXT NOT NULL,
                    kpi_value REAL NOT NULL,
                    progress_percentage REAL,
                    days_remaining INTEGER,
                    velocity REAL,
                    projected_value REAL,
                    health_status TEXT,
                    created_at TEXT DEFAULT CURRENT_DATE
                )
            """
            )
            cursor.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_objective_date
                ON objective_snapshots(objective_id, snapshot_date)
            """
            )
            conn.commit()
        finally:
            self._release(conn)

    async def store_snapshot(self, snapshot: ObjectiveSnapshot) -> None:
        """
        Append a snapshot to the store.

        Args:
            snapshot: Snapshot to store; must carry an objective_id
        """
        if not snapshot.objective_id:
            raise ValueError("snapshot.objective_id is required to store a snapshot")

        conn = self._get_connection()
        try:
            conn.execute(
                """
                INSERT INTO objective_snapshots
                (objective_id, snapshot_date, kpi_value, progress_percentage, days_remaining,
                 velocity, projected_value, health_status, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
                (
                    snapshot.objective_id,
                    snapshot.snapshot_date.isoformat(),
                    snapshot.kpi_value,
                    snapshot.progress_percentage,
                    snapshot.days_remaining,
                    snapshot.velocity,
                    snapshot.projected_value,
                    snapshot.health_status.value if snapshot.health_status else None,
                    (snapshot.created_at or snapshot.snapshot_date).isoformat(),
                ),
            )
            conn.commit()
        finally:
            self._release(conn)
        logger.debug(
            f"Stored snapshot for objective {snapshot.objective_id} "
            f"on {snapshot.snapshot_date.isoformat()}"
        )

    async def get_recent_snapshots(
        self, objective_id: str, limit: int = DEFAULT_SNAPSHOT_LIMIT
    ) -> list[ObjectiveSnapshot]:
        """
        Get the most recent snapshots of an objective.

        Args:
            objective_id: Objective to query
            limit: Maximum number of snapshots to return

        Returns:
            Up to ``limit`` newest snapshots, ordered ascending by date
        """
        if limit < 1:
            raise ValueError("limit must be at least 1")

        conn = self._get_connection()
        try:
            rows = conn.execute(
                """
                SELECT id, objective_id, snapshot_date, kpi_value, progress_percentage,
                       days_remaining, velocity, projected_value, health_status, created_at
                FROM objective_snapshots
                WHERE objective_id = ?
                ORDER BY snapshot_date DESC, id DESC
                LIMIT ?
            """,
                (objective_id, limit),
            ).fetchall()
        finally:
            self._release(conn)

        snapshots: list[ObjectiveSnapshot] = []
        for row in reversed(rows):
            (
                row_id,
                row_objective_id,
                snapshot_date,
                kpi_value,
                progress_percentage,
                days_remaining,
                velocity,
                projected_value,
                health_status,
                created_at,
            ) = row
            snapshots.append(
                ObjectiveSnapshot(
                    id=row_id,
                    objective_id=row_objective_id,
                    snapshot_date=snapshot_date,
                    kpi_value=kpi_value,
                    progress_percentage=progress_percentage,
                    days_remaining=days_remaining,
                    velocity=velocity,
                    projected_value=projected_value,
                    health_status=HealthStatus(health_status) if health_status else None,
                    created_at=created_at,
                )
            )

        return snapshots

    def is_connected(self) -> bool:
        """Check that the database answers a trivial query."""
        try:
            conn = self._get_connection()
            try:
                conn.execute("SELECT 1")
            finally:
                self._release(conn)
            return True
        except sqlite3.Error as e:
            logger.warning(f"Snapshot store connectivity check failed: {e}")
            return False

    def close(self) -> None:
        """Close any open database connections."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None
