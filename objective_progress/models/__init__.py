"""Data models for the objective progress engine."""

from .enums import HealthStatus, ObjectiveStatus, TargetDirection, TrendDirection
from .objective import Objective
from .snapshot import ObjectiveSnapshot
from .progress import ObjectiveProgressData
from .kpi import KpiPeriod, KpiValueResult, OrdersAggregation
from .health import ServiceHealth

__all__ = [
    "HealthStatus",
    "ObjectiveStatus",
    "TargetDirection",
    "TrendDirection",
    "Objective",
    "ObjectiveSnapshot",
    "ObjectiveProgressData",
    "KpiPeriod",
    "KpiValueResult",
    "OrdersAggregation",
    "ServiceHealth",
]
