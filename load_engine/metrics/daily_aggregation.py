"""Daily training aggregation from activities to a gap-free daily series.

Collapses same-day activities into one load point per local calendar day and
back-fills every other day of the requested window with an explicit zero
point. The rolling load model depends on this series being complete.

Rules:
- Same-day loads are summed (two sessions = their sum, not the max)
- trimp, tss and normalized load are summed independently
- Exactly one point per day in [reference_date - window_days + 1, reference_date]
- Missing days = explicit zero-valued point (rest day), never an absent entry
- Activities outside the window are ignored
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta

from load_engine.metrics.activity import Activity
from load_engine.metrics.errors import (
    INVALID_WINDOW,
    LOAD_COUNT_MISMATCH,
    REFERENCE_BEFORE_HISTORY,
    EngineContractError,
)
from load_engine.schemas.training_load import LoadResult, TrainingLoadPoint


def validate_window(window_days: int) -> None:
    """Reject negative window lengths."""
    if window_days < 0:
        raise EngineContractError(INVALID_WINDOW, [f"window_days must be >= 0, got {window_days}"])


def validate_reference_date(activities: Sequence[Activity], reference_date: date) -> None:
    """Reject a reference date that precedes every activity in a non-empty history."""
    if not activities:
        return
    earliest = min(activity.local_date for activity in activities)
    if reference_date < earliest:
        raise EngineContractError(
            REFERENCE_BEFORE_HISTORY,
            [f"reference_date {reference_date.isoformat()} is before the earliest activity {earliest.isoformat()}"],
        )


def window_start(reference_date: date, window_days: int) -> date:
    """First day of a window ending (inclusive) at reference_date."""
    return reference_date - timedelta(days=window_days - 1)


def aggregate_daily(
    activities: Sequence[Activity],
    loads: Sequence[LoadResult],
    window_days: int,
    reference_date: date,
) -> list[TrainingLoadPoint]:
    """Aggregate per-activity loads into one point per calendar day.

    Args:
        activities: Activities, in any order
        loads: Load results paired one-to-one with ``activities``
        window_days: Number of days in the window (0 yields an empty series)
        reference_date: Last day of the window ("today")

    Returns:
        Exactly ``window_days`` points, strictly ascending by date.

    Raises:
        EngineContractError: On a negative window, mismatched inputs, or a
            reference date earlier than every activity.
    """
    validate_window(window_days)
    if len(activities) != len(loads):
        raise EngineContractError(
            LOAD_COUNT_MISMATCH,
            [f"{len(activities)} activities but {len(loads)} load results"],
        )
    validate_reference_date(activities, reference_date)

    if window_days == 0:
        return []

    start_date = window_start(reference_date, window_days)

    # Initialize all dates in range to zero
    totals: dict[date, dict[str, float]] = {}
    current_date = start_date
    while current_date <= reference_date:
        totals[current_date] = {"trimp": 0.0, "tss": 0.0, "normalized_load": 0.0, "activity_count": 0, "duration_seconds": 0.0}
        current_date += timedelta(days=1)

    for activity, load in zip(activities, loads, strict=True):
        day = totals.get(activity.local_date)
        if day is None:
            continue
        day["trimp"] += load.trimp
        day["tss"] += load.tss
        day["normalized_load"] += load.normalized_load
        day["activity_count"] += 1
        day["duration_seconds"] += activity.moving_duration

    return [
        TrainingLoadPoint(
            date=day_date,
            trimp=values["trimp"],
            tss=values["tss"],
            normalized_load=values["normalized_load"],
            activity_count=int(values["activity_count"]),
            duration_seconds=values["duration_seconds"],
        )
        for day_date, values in totals.items()
    ]
