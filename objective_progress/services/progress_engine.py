"""Objective progress engine.

Turns an objective's baseline/target configuration, its current KPI value and
its snapshot history into an ``ObjectiveProgressData`` record:

1. Time accounting (days elapsed, remaining, total)
2. Guards for a missing current value or a missing target
3. Progress percentage by direction
4. Expected progress from elapsed time
5. Health classification
6. Velocity via least-squares regression over snapshots
7. Trend direction
8. Projected value at the deadline
9. Completion likelihood

Every function here is pure. ``today`` is always passed in, nothing reads the
clock or shared state, and input sequences are never mutated.
"""

import logging
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Optional, Union

from ..models.enums import HealthStatus, ObjectiveStatus, TargetDirection, TrendDirection
from ..models.objective import Objective
from ..models.progress import ObjectiveProgressData
from ..models.snapshot import ObjectiveSnapshot
from ..utils.dates import days_between

logger = logging.getLogger(__name__)

# Maintain objectives: full progress inside +/-5% of target, zero at 20%
MAINTAIN_TOLERANCE_RATIO = 0.05
MAINTAIN_MAX_DEVIATION_RATIO = 0.20

EXCEEDED_THRESHOLD = 110.0
COMPLETED_THRESHOLD = 100.0
ON_TRACK_RATIO = 0.9
AT_RISK_RATIO = 0.7

# Absolute, in KPI units per day
STABLE_VELOCITY_THRESHOLD = 0.01

SnapshotInput = Union[ObjectiveSnapshot, Mapping]


def calculate_progress(
    current: float,
    baseline: float,
    target: float,
    direction: TargetDirection,
) -> float:
    """
    Calculate progress towards the target as a percentage.

    For INCREASE: (current - baseline) / (target - baseline) * 100
    For DECREASE: (baseline - current) / (baseline - target) * 100
    For MAINTAIN: 100 inside a 5% band around the target, scaled down to 0
    at a 20% deviation.

    When target equals baseline, progress is 100 only if current equals the
    target, whatever the direction.

    Results are clamped at 0 but not capped, so a value above 100 means the
    target has been passed.

    Args:
        current: Current KPI value
        baseline: KPI value at the start of the objective
        target: Target KPI value (non-zero)
        direction: Direction the KPI has to move

    Returns:
        Progress percentage, 0 or greater
    """
    direction = TargetDirection(direction)

    if target == baseline:
        return 100.0 if current == target else 0.0

    if direction == TargetDirection.MAINTAIN:
        tolerance = abs(target) * MAINTAIN_TOLERANCE_RATIO
        max_deviation = abs(target) * MAINTAIN_MAX_DEVIATION_RATIO
        deviation = abs(current - target)
        if deviation <= tolerance:
            return 100.0
        return max(0.0, (1 - (deviation - tolerance) / (max_deviation - tolerance)) * 100)

    if direction == TargetDirection.INCREASE:
        progress = (current - baseline) / (target - baseline) * 100
    else:
        progress = (baseline - current) / (baseline - target) * 100
    return max(0.0, progress)


def calculate_expected_progress(days_elapsed: int, total_days: int) -> float:
    """Progress expected from elapsed time alone, capped at 100."""
    if total_days <= 0:
        return 100.0
    return min(100.0, days_elapsed / total_days * 100)


def calculate_health_status(
    actual_progress: float,
    expected_progress: float,
    objective_status: ObjectiveStatus,
) -> HealthStatus:
    """
    Classify objective health from actual vs expected progress.

    Checks run in order and the first match wins:

    - objective already completed: exceeded at >= 110%, else completed
    - actual >= 110%: exceeded
    - actual >= 100%: completed
    - nothing expected yet: on_track if any progress, else off_track
    - actual/expected >= 0.9: on_track
    - actual/expected >= 0.7: at_risk
    - otherwise: off_track
    """
    if ObjectiveStatus(objective_status) == ObjectiveStatus.COMPLETED:
        if actual_progress >= EXCEEDED_THRESHOLD:
            return HealthStatus.EXCEEDED
        return HealthStatus.COMPLETED

    if actual_progress >= EXCEEDED_THRESHOLD:
        return HealthStatus.EXCEEDED
    if actual_progress >= COMPLETED_THRESHOLD:
        return HealthStatus.COMPLETED

    if expected_progress <= 0:
        return HealthStatus.ON_TRACK if actual_progress > 0 else HealthStatus.OFF_TRACK

    ratio = actual_progress / expected_progress
    if ratio >= ON_TRACK_RATIO:
        return HealthStatus.ON_TRACK
    if ratio >= AT_RISK_RATIO:
        return HealthStatus.AT_RISK
    return HealthStatus.OFF_TRACK


def calculate_velocity(snapshots: Sequence[SnapshotInput]) -> Optional[float]:
    """
    Estimate KPI change per day with a least-squares fit over snapshots.

    Snapshots are re-sorted by date on a copy. x is the number of days since
    the first snapshot and y the snapshot value; repeated dates are kept as
    separate points.

    Args:
        snapshots: Snapshot history in any order

    Returns:
        Regression slope in KPI units per day, or None with fewer than two
        snapshots or when every snapshot falls on the same date
    """
    if len(snapshots) < 2:
        return None

    ordered = sorted((_as_snapshot(s) for s in snapshots), key=lambda s: s.snapshot_date)
    first_date = ordered[0].snapshot_date

    n = len(ordered)
    sum_x = sum_y = sum_xy = sum_x2 = 0.0
    for snapshot in ordered:
        x = days_between(first_date, snapshot.snapshot_date)
        y = snapshot.kpi_value
        sum_x += x
        sum_y += y
        sum_xy += x * y
        sum_x2 += x * x

    denominator = n * sum_x2 - sum_x * sum_x
    if denominator == 0:
        return None

    return (n * sum_xy - sum_x * sum_y) / denominator


def calculate_trend(
    velocity: Optional[float],
    direction: TargetDirection,
    threshold: float = STABLE_VELOCITY_THRESHOLD,
) -> TrendDirection:
    """
    Map a velocity to a trend relative to the favorable direction.

    ``up`` means the KPI moves the way the objective wants: rising for
    increase objectives, falling for decrease objectives. Maintain objectives
    have no favorable direction and simply follow the sign.

    The default threshold is an absolute 0.01 KPI units per day, not scaled
    to the magnitude of the KPI.
    """
    if velocity is None or abs(velocity) < threshold:
        return TrendDirection.STABLE

    if TargetDirection(direction) == TargetDirection.DECREASE:
        return TrendDirection.UP if velocity < 0 else TrendDirection.DOWN
    return TrendDirection.UP if velocity > 0 else TrendDirection.DOWN


def calculate_projected_value(
    current_value: float,
    velocity: Optional[float],
    days_remaining: int,
) -> Optional[float]:
    """Extrapolate the fitted trend from the current value to the deadline."""
    if velocity is None or days_remaining <= 0:
        return None
    return current_value + velocity * days_remaining


def calculate_will_complete(
    projected_value: Optional[float],
    target: float,
    direction: TargetDirection,
) -> bool:
    """Whether the projected value satisfies the objective's target."""
    if projected_value is None:
        return False

    direction = TargetDirection(direction)
    if direction == TargetDirection.INCREASE:
        return projected_value >= target
    if direction == TargetDirection.DECREASE:
        return projected_value <= target
    return abs(projected_value - target) <= abs(target) * MAINTAIN_TOLERANCE_RATIO


def compute_progress(
    objective: Union[Objective, Mapping],
    current_value: Optional[float],
    snapshots: Sequence[SnapshotInput],
    today: date,
    month_label: Optional[str] = None,
) -> ObjectiveProgressData:
    """
    Compute the full progress picture of an objective.

    Args:
        objective: Objective configuration (model or camel/snake-case mapping)
        current_value: Current KPI value, or None while it is not available
        snapshots: KPI snapshot history, any order, possibly empty
        today: Reference date for all time accounting
        month_label: Reporting period of ``current_value``, passed through

    Returns:
        ObjectiveProgressData. Missing or degenerate inputs resolve to
        fallback values; no exception is raised for them.
    """
    if isinstance(objective, Mapping):
        objective = Objective.model_validate(objective)

    baseline = objective.baseline_value if objective.baseline_value is not None else 0.0
    target = objective.kpi_target_value
    direction = objective.target_direction

    days_elapsed, days_remaining, total_days = _time_accounting(objective, today)

    if current_value is None:
        logger.debug(f"Objective {objective.id}: current value not available, returning loading result")
        return ObjectiveProgressData(
            current_value=None,
            health_status=HealthStatus.OFF_TRACK,
            days_elapsed=days_elapsed,
            days_remaining=days_remaining,
            total_days=total_days,
            month_label=month_label,
            is_loading=True,
        )

    if not target:
        logger.debug(f"Objective {objective.id}: no target configured, progress not computable")
        return _minimal_result(objective, current_value, today, month_label)

    progress_percentage = calculate_progress(current_value, baseline, target, direction)
    expected_progress = calculate_expected_progress(days_elapsed, total_days)
    health_status = calculate_health_status(
        progress_percentage, expected_progress, objective.status
    )
    velocity = calculate_velocity(snapshots)
    projected_value = calculate_projected_value(current_value, velocity, days_remaining)
    trend = calculate_trend(velocity, direction)
    will_complete = calculate_will_complete(projected_value, target, direction)

    return ObjectiveProgressData(
        current_value=current_value,
        progress_percentage=progress_percentage,
        expected_progress=expected_progress,
        health_status=health_status,
        velocity=velocity,
        projected_value=projected_value,
        will_complete=will_complete,
        trend=trend,
        days_elapsed=days_elapsed,
        days_remaining=days_remaining,
        total_days=total_days,
        month_label=month_label,
        is_loading=False,
    )


def compute_unmeasured_progress(
    objective: Union[Objective, Mapping],
    today: date,
    month_label: Optional[str] = None,
) -> ObjectiveProgressData:
    """
    Progress of an objective whose KPI can never be measured.

    Used when no KPI is configured or the data source cannot answer the KPI
    type. Unlike the loading result this is final: ``is_loading`` is False and
    the health follows the objective status alone.
    """
    if isinstance(objective, Mapping):
        objective = Objective.model_validate(objective)
    logger.debug(f"Objective {objective.id}: KPI not measurable, insufficient data")
    return _minimal_result(objective, None, today, month_label)


def _minimal_result(
    objective: Objective,
    current_value: Optional[float],
    today: date,
    month_label: Optional[str],
) -> ObjectiveProgressData:
    days_elapsed, days_remaining, total_days = _time_accounting(objective, today)
    return ObjectiveProgressData(
        current_value=current_value,
        health_status=(
            HealthStatus.COMPLETED
            if objective.status == ObjectiveStatus.COMPLETED
            else HealthStatus.OFF_TRACK
        ),
        days_elapsed=days_elapsed,
        days_remaining=days_remaining,
        total_days=total_days,
        month_label=month_label,
        is_loading=False,
    )


def _time_accounting(objective: Objective, today: date) -> tuple[int, int, int]:
    baseline_date = objective.effective_baseline_date or today
    days_elapsed = days_between(baseline_date, today)
    days_remaining = (
        days_between(today, objective.evaluation_date) if objective.evaluation_date else 0
    )
    return days_elapsed, days_remaining, days_elapsed + days_remaining


def _as_snapshot(snapshot: SnapshotInput) -> ObjectiveSnapshot:
    if isinstance(snapshot, Mapping):
        return ObjectiveSnapshot.model_validate(snapshot)
    return snapshot
