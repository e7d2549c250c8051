"""Objective snapshot data model."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..utils.dates import coerce_date
from .enums import HealthStatus


class ObjectiveSnapshot(BaseModel):
    """A point-in-time KPI observation for one objective."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    snapshot_date: date = Field(..., description="Date the snapshot was taken")
    kpi_value: float = Field(..., description="KPI value at snapshot time")

    id: Optional[int] = Field(None, description="Storage identifier")
    objective_id: Optional[str] = Field(None, description="Objective this snapshot belongs to")
    progress_percentage: Optional[float] = Field(None, description="Progress % at snapshot time")
    days_remaining: Optional[int] = Field(None, description="Days until the deadline")
    velocity: Optional[float] = Field(None, description="KPI change per day")
    projected_value: Optional[float] = Field(None, description="Projected final value")
    health_status: Optional[HealthStatus] = Field(None, description="Health at snapshot time")
    created_at: Optional[date] = Field(None, description="When the row was written")

    @field_validator("snapshot_date", "created_at", mode="before")
    @classmethod
    def normalize_dates(cls, v):
        return coerce_date(v)
