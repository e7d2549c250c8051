"""Strategic objective data model."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..utils.dates import coerce_date
from .enums import ObjectiveStatus, TargetDirection


class Objective(BaseModel):
    """
    Static configuration of a strategic objective.

    Only the baseline, target, direction, dates and status feed the progress
    engine. The KPI descriptor fields (type, unit and the company/brand/address
    scope) are consumed by the KPI value provider.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "id": "obj-42",
                "baselineValue": 30000,
                "kpiTargetValue": 50000,
                "targetDirection": "increase",
                "baselineDate": "2026-01-01",
                "evaluationDate": "2026-06-30",
                "status": "in_progress",
                "kpiType": "revenue",
                "kpiUnit": "EUR",
                "companyId": "1204",
            }
        },
    )

    id: Optional[str] = Field(None, description="Opaque objective identifier")
    baseline_value: Optional[float] = Field(
        None, description="KPI value when the objective started (defaults to 0)"
    )
    kpi_target_value: Optional[float] = Field(
        None, description="KPI value the objective aims for"
    )
    target_direction: TargetDirection = Field(
        TargetDirection.INCREASE, description="Direction the KPI has to move"
    )
    baseline_date: Optional[date] = Field(
        None, description="When the baseline was captured (defaults to created_at)"
    )
    evaluation_date: Optional[date] = Field(None, description="Objective deadline")
    status: ObjectiveStatus = Field(ObjectiveStatus.PENDING, description="Workflow status")
    created_at: Optional[date] = Field(None, description="When the objective was created")

    kpi_type: Optional[str] = Field(None, description="KPI identifier, e.g. 'revenue'")
    kpi_unit: Optional[str] = Field(None, description="Display unit of the KPI")
    company_id: Optional[str] = Field(None, description="Company scope of the KPI")
    brand_id: Optional[str] = Field(None, description="Brand scope of the KPI")
    address_id: Optional[str] = Field(None, description="Address scope of the KPI")

    @field_validator("baseline_date", "evaluation_date", "created_at", mode="before")
    @classmethod
    def normalize_dates(cls, v):
        """Accept datetimes and ISO timestamps, keeping only the calendar date."""
        return coerce_date(v)

    @property
    def effective_baseline_date(self) -> Optional[date]:
        """Baseline date, falling back to the creation date."""
        return self.baseline_date or self.created_at
