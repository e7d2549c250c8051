"""Computed objective progress data model."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import HealthStatus, TrendDirection


class ObjectiveProgressData(BaseModel):
    """
    Result of one progress computation.

    Built fresh on every recomputation and never mutated. Numeric fields that
    could not be computed are ``None`` rather than zero, so "not computable"
    stays distinguishable from "computed as zero".
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "currentValue": 40000,
                "progressPercentage": 50.0,
                "expectedProgress": 66.67,
                "healthStatus": "at_risk",
                "velocity": 166.67,
                "projectedValue": 45000,
                "willComplete": False,
                "trend": "up",
                "daysElapsed": 60,
                "daysRemaining": 30,
                "totalDays": 90,
                "monthLabel": "Septiembre 2026",
                "isLoading": False,
            }
        },
    )

    current_value: Optional[float] = Field(None, description="Current KPI value")
    progress_percentage: Optional[float] = Field(
        None, description="Progress towards the target (0 and up, >100 when exceeded)"
    )
    expected_progress: Optional[float] = Field(
        None, description="Progress expected from elapsed time (0-100)"
    )
    health_status: HealthStatus = Field(..., description="Health classification")
    velocity: Optional[float] = Field(None, description="Regression slope, KPI units per day")
    projected_value: Optional[float] = Field(None, description="KPI value projected at the deadline")
    will_complete: bool = Field(False, description="Whether the projection meets the target")
    trend: TrendDirection = Field(TrendDirection.STABLE, description="Trend of the velocity")
    days_elapsed: int = Field(..., description="Days since the baseline date")
    days_remaining: int = Field(..., description="Days until the deadline")
    total_days: int = Field(..., description="Days from baseline to deadline")
    month_label: Optional[str] = Field(None, description="Reporting period of the current value")
    is_loading: bool = Field(False, description="Current KPI value not available yet")
