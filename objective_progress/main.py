"""FastAPI application entry point for the objective progress service.

Exposes the progress engine over HTTP: a stateless progress computation
endpoint, read/append access to the snapshot store, and a health check.
"""

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from . import __version__
from .config import settings
from .models import Objective, ObjectiveProgressData, ObjectiveSnapshot, ServiceHealth
from .services.progress_engine import compute_progress
from .services.snapshot_service import SnapshotService

logger = logging.getLogger(__name__)

# Global instances
snapshot_service: Optional[SnapshotService] = None


class ProgressRequest(BaseModel):
    """Request body for a progress computation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    objective: Objective
    current_value: Optional[float] = None
    snapshots: list[ObjectiveSnapshot] = Field(default_factory=list)
    today: Optional[date] = Field(
        None, description="Reference date (defaults to the server's current date)"
    )
    month_label: Optional[str] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - startup and shutdown.

    Opens the snapshot store on startup and closes it on shutdown.
    """
    global snapshot_service

    logger.info("Starting objective progress service")
    app_settings = settings()

    try:
        snapshot_service = SnapshotService(db_path=app_settings.snapshot_db_path)
        logger.info(f"Snapshot store initialized at {app_settings.snapshot_db_path}")
    except Exception as e:
        logger.error(f"Failed to initialize snapshot store: {e}")
        snapshot_service = None

    logger.info(f"Objective progress service v{__version__} started on port {app_settings.port}")

    yield

    logger.info("Shutting down objective progress service")
    if snapshot_service:
        snapshot_service.close()
        snapshot_service = None
    logger.info("Shutdown complete")


app = FastAPI(
    title="Objective Progress Service",
    description=(
        "Progress, health, velocity and projection of strategic objectives "
        "from their baseline, target, current KPI value and snapshot history."
    ),
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log unhandled errors and return a structured error response."""
    logger.error(f"Unhandled exception on {request.url.path}: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": str(exc),
        },
    )


@app.get("/health", response_model=ServiceHealth)
async def health_check() -> ServiceHealth:
    """
    Health check endpoint for monitoring server status.

    The progress endpoint needs no backing store, so a missing snapshot
    store only degrades the service.
    """
    connected = snapshot_service.is_connected() if snapshot_service else False
    return ServiceHealth(
        status="healthy" if connected else "degraded",
        version=__version__,
        snapshot_store_connected=connected,
    )


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Objective Progress Service",
        "version": __version__,
        "health_check": "/health",
        "endpoints": {
            "compute_progress": "/api/v1/objectives/progress",
            "snapshots": "/api/v1/objectives/{objective_id}/snapshots",
        },
    }


@app.post("/api/v1/objectives/progress", response_model=ObjectiveProgressData)
async def api_compute_progress(request: ProgressRequest) -> ObjectiveProgressData:
    """
    Compute progress for an objective from the supplied inputs.

    Nothing is read from storage; the caller provides the objective, the
    current KPI value and the snapshot history.
    """
    today = request.today or date.today()
    logger.info(
        f"Computing progress for objective {request.objective.id} "
        f"with {len(request.snapshots)} snapshots"
    )
    return compute_progress(
        request.objective,
        request.current_value,
        request.snapshots,
        today,
        month_label=request.month_label,
    )


@app.get("/api/v1/objectives/{objective_id}/snapshots", response_model=list[ObjectiveSnapshot])
async def api_get_snapshots(
    objective_id: str,
    limit: Optional[int] = Query(default=None, ge=1, le=365),
) -> list[ObjectiveSnapshot]:
    """Return the most recent snapshots of an objective, oldest first."""
    if not snapshot_service:
        raise HTTPException(status_code=503, detail="Snapshot store not initialized")
    return await snapshot_service.get_recent_snapshots(
        objective_id, limit=limit or settings().snapshot_limit
    )


@app.post(
    "/api/v1/objectives/{objective_id}/snapshots",
    response_model=ObjectiveSnapshot,
    status_code=201,
)
async def api_store_snapshot(objective_id: str, snapshot: ObjectiveSnapshot) -> ObjectiveSnapshot:
    """Append a snapshot to an objective's history."""
    if not snapshot_service:
        raise HTTPException(status_code=503, detail="Snapshot store not initialized")
    if snapshot.objective_id and snapshot.objective_id != objective_id:
        raise HTTPException(status_code=400, detail="objectiveId does not match the URL")

    stored = snapshot.model_copy(update={"objective_id": objective_id})
    await snapshot_service.store_snapshot(stored)
    return stored
