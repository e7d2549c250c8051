"""Enumerations for objective configuration and progress classification."""

from enum import Enum


class TargetDirection(str, Enum):
    """Which way the KPI has to move for the objective to be met."""

    INCREASE = "increase"
    DECREASE = "decrease"
    MAINTAIN = "maintain"


class ObjectiveStatus(str, Enum):
    """Workflow status of an objective."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class HealthStatus(str, Enum):
    """Qualitative health of an objective relative to elapsed time."""

    ON_TRACK = "on_track"
    AT_RISK = "at_risk"
    OFF_TRACK = "off_track"
    COMPLETED = "completed"
    EXCEEDED = "exceeded"


class TrendDirection(str, Enum):
    """Trend of the KPI velocity, relative to the favorable direction."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"
