"""Health check data models."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class ServiceHealth(BaseModel):
    """Health status response for the progress API."""

    status: str = Field(
        ...,
        description="Overall health status: 'healthy' or 'degraded'",
        examples=["healthy"],
    )
    version: str = Field(..., description="Version of the service", examples=["0.1.0"])
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Timestamp when health check was performed",
    )
    snapshot_store_connected: bool = Field(
        ..., description="Whether the snapshot SQLite database is accessible"
    )
