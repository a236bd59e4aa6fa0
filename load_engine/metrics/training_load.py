"""Training load metrics computation (ATL, CTL, TSB).

Rolling averages over a gap-free daily series of normalized load.

Metrics:
- ATL (Acute Training Load): mean daily load over the trailing 7 calendar days
- CTL (Chronic Training Load): mean daily load over the trailing 42 calendar days
- TSB (Training Stress Balance): CTL - ATL; positive = fresh, negative = overloaded

Properties:
- Windows run over calendar days, not activities: rest days are zero points
  and dilute the average on purpose. Averaging the last 7 activities would
  overstate the load of sporadic athletes.
- Windows are clipped at the start of the series: day 0 averages over one
  day, day 3 over four, and so on. There is no look-back past day 0.
- All math uses full float precision; values are rounded to integers only
  when building the output points.
- Deterministic: same input always produces the same output.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import date, timedelta

import numpy as np

from load_engine.metrics.errors import NON_CONTIGUOUS_SERIES, EngineContractError
from load_engine.metrics.policy import RollingWindows
from load_engine.schemas.training_load import (
    RollingLoadPoint,
    TrainingLoadMetrics,
    TrainingLoadPoint,
    TrainingStatus,
    WeeklyLoadTotal,
)

RAMP_RATE_MIN_POINTS = 14

RECOMMENDATIONS: dict[str, str] = {
    "peak": "High training stress detected. Consider reducing intensity and incorporating recovery.",
    "build": "Good building phase. Maintain current training progression while monitoring recovery.",
    "maintain": "Steady training load. Consider varying intensity or adding progressive overload.",
    "recover": "Low training stress. Good time for recovery or gradually increasing training load.",
}
EMPTY_RECOMMENDATION = "Start building your training load gradually."


def display_round(value: float) -> int:
    """Round half up to the nearest integer for presentation."""
    return math.floor(value + 0.5)


def _validate_contiguous(points: Sequence[TrainingLoadPoint]) -> None:
    for previous, current in zip(points, points[1:], strict=False):
        if current.date != previous.date + timedelta(days=1):
            raise EngineContractError(
                NON_CONTIGUOUS_SERIES,
                [f"expected {(previous.date + timedelta(days=1)).isoformat()} after {previous.date.isoformat()}, got {current.date.isoformat()}"],
            )


def _trailing_means(values: np.ndarray, window: int) -> np.ndarray:
    """Mean of each trailing window, clipped at the series start.

    result[i] = mean(values[max(0, i - window + 1) : i + 1])
    """
    cumulative = np.concatenate(([0.0], np.cumsum(values, dtype=float)))
    ends = np.arange(1, len(values) + 1)
    starts = np.maximum(0, ends - window)
    return (cumulative[ends] - cumulative[starts]) / (ends - starts)


def _rolling_series(
    points: Sequence[TrainingLoadPoint],
    windows: RollingWindows,
) -> tuple[np.ndarray, np.ndarray]:
    """Full-precision ATL and CTL series."""
    loads = np.array([point.normalized_load for point in points], dtype=float)
    return _trailing_means(loads, windows.acute_days), _trailing_means(loads, windows.chronic_days)


def compute_rolling_metrics(
    points: Sequence[TrainingLoadPoint],
    windows: RollingWindows | None = None,
) -> list[RollingLoadPoint]:
    """Compute ATL, CTL and TSB for each day of a gap-free series.

    Args:
        points: Daily points, strictly consecutive and ascending (as produced
            by ``aggregate_daily``)
        windows: Acute/chronic window lengths (default 7/42 days)

    Returns:
        One RollingLoadPoint per input point, rounded for display.

    Raises:
        EngineContractError: If the series has gaps, duplicates or is unordered.
    """
    if not points:
        return []

    _validate_contiguous(points)
    atl, ctl = _rolling_series(points, windows or RollingWindows())

    return [
        RollingLoadPoint(
            date=point.date,
            daily_load=display_round(point.normalized_load),
            atl=display_round(float(atl[i])),
            ctl=display_round(float(ctl[i])),
            tsb=display_round(float(ctl[i] - atl[i])),
            trimp=display_round(point.trimp),
            tss=display_round(point.tss),
        )
        for i, point in enumerate(points)
    ]


def compute_ramp_rate(points: Sequence[TrainingLoadPoint]) -> float:
    """Mean daily load of the last 7 days minus the mean of the 7 days before.

    Returns 0.0 for series shorter than 14 days.
    """
    if len(points) < RAMP_RATE_MIN_POINTS:
        return 0.0
    recent = points[-RAMP_RATE_MIN_POINTS:]
    first_week = sum(point.normalized_load for point in recent[:7]) / 7
    second_week = sum(point.normalized_load for point in recent[7:]) / 7
    return second_week - first_week


def determine_training_status(tsb: float, ramp_rate: float) -> TrainingStatus:
    """Map balance and ramp rate to a training status."""
    if tsb < -10 and ramp_rate > 5:
        return "peak"
    if tsb > 5:
        return "recover"
    if ramp_rate > 3:
        return "build"
    return "maintain"


def compute_weekly_totals(points: Sequence[TrainingLoadPoint]) -> list[WeeklyLoadTotal]:
    """Sum daily points per Monday-start week, oldest first."""
    weeks: dict[date, list[TrainingLoadPoint]] = {}
    for point in points:
        week_start = point.date - timedelta(days=point.date.weekday())
        weeks.setdefault(week_start, []).append(point)

    return [
        WeeklyLoadTotal(
            week_start=week_start,
            days=len(week_points),
            load=display_round(sum(p.normalized_load for p in week_points)),
            trimp=display_round(sum(p.trimp for p in week_points)),
            tss=display_round(sum(p.tss for p in week_points)),
            activity_count=sum(p.activity_count for p in week_points),
        )
        for week_start, week_points in sorted(weeks.items())
    ]


def summarize_training_load(
    points: Sequence[TrainingLoadPoint],
    windows: RollingWindows | None = None,
) -> TrainingLoadMetrics:
    """Summarize a gap-free daily series as of its last day.

    Args:
        points: Daily points, strictly consecutive and ascending
        windows: Acute/chronic window lengths (default 7/42 days)

    Returns:
        TrainingLoadMetrics with current ATL/CTL/TSB, ramp rate, status and
        weekly totals. An empty series yields zeros and status "recover".
    """
    if not points:
        return TrainingLoadMetrics(recommendation=EMPTY_RECOMMENDATION)

    _validate_contiguous(points)
    atl, ctl = _rolling_series(points, windows or RollingWindows())
    current_atl = float(atl[-1])
    current_ctl = float(ctl[-1])
    tsb = current_ctl - current_atl
    ramp_rate = compute_ramp_rate(points)
    status = determine_training_status(tsb, ramp_rate)

    return TrainingLoadMetrics(
        acute=display_round(current_atl),
        chronic=display_round(current_ctl),
        balance=display_round(tsb),
        ramp_rate=round(ramp_rate, 1),
        status=status,
        recommendation=RECOMMENDATIONS[status],
        weekly_totals=compute_weekly_totals(points),
    )
