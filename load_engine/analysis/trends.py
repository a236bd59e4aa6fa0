"""Trend computation.

Period-over-period change of a metric between a "recent" period and the
immediately preceding "previous" period of equal length. Direction is
decided against an explicit per-metric deadband from ``TrendDeadbands``.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from loguru import logger

from load_engine.analysis.achievements import find_achievements
from load_engine.analysis.streaks import streak_summary
from load_engine.metrics.activity import Activity
from load_engine.metrics.errors import INVALID_WINDOW, EngineContractError
from load_engine.metrics.load_computation import compute_load
from load_engine.metrics.policy import TrendDeadbands, TrendMetric
from load_engine.metrics.thresholds import estimate_thresholds
from load_engine.schemas.insights import Insights, TrendDirection, TrendResult
from load_engine.schemas.thresholds import AthleteThresholds


def _mean(values: list[float]) -> float:
    """Order-independent mean (0 for no values)."""
    if not values:
        return 0.0
    return math.fsum(values) / len(values)


def metric_value(
    activities: Sequence[Activity],
    metric: TrendMetric,
    thresholds: AthleteThresholds | None = None,
) -> float:
    """Aggregate one metric over a set of activities.

    - pace: mean seconds per km over runs with a pace channel (0 if none)
    - distance: total distance in meters
    - load: mean normalized load over activities with positive duration
    - intensity: mean average heart rate over activities with heart rate
    - activity_count: number of activities
    """
    if metric is TrendMetric.PACE:
        return _mean([a.pace.seconds_per_km for a in activities if a.pace is not None])

    if metric is TrendMetric.DISTANCE:
        return math.fsum(a.distance or 0.0 for a in activities)

    if metric is TrendMetric.LOAD:
        resolved = thresholds or AthleteThresholds()
        return _mean([compute_load(a, resolved).normalized_load for a in activities if a.moving_duration > 0])

    if metric is TrendMetric.INTENSITY:
        return _mean([a.heart_rate.average for a in activities if a.heart_rate is not None])

    return float(len(activities))


def percent_change(recent: float, previous: float, metric: TrendMetric) -> float:
    """Percent change from previous to recent.

    Pace is inverted so that a positive change always means "better":
    fewer seconds per km is faster. A period without any pace data gives 0.
    For other metrics a zero previous period gives 100 when the recent
    period is positive and 0 otherwise.
    """
    if metric is TrendMetric.PACE:
        if recent <= 0 or previous <= 0:
            return 0.0
        return (previous - recent) / previous * 100.0

    if previous <= 0:
        return 100.0 if recent > 0 else 0.0
    return (recent - previous) / previous * 100.0


def _direction(change: float, deadband: float) -> TrendDirection:
    if change > deadband:
        return "up"
    if change < -deadband:
        return "down"
    return "stable"


def trend(
    recent_activities: Iterable[Activity],
    previous_activities: Iterable[Activity],
    metric: TrendMetric | str,
    *,
    thresholds: AthleteThresholds | None = None,
    deadbands: TrendDeadbands | None = None,
) -> TrendResult:
    """Compute the trend of one metric between two periods.

    Args:
        recent_activities: Activities of the recent period
        previous_activities: Activities of the preceding period (same length)
        metric: Metric to compare (TrendMetric or its string value)
        thresholds: Athlete thresholds, used by the load metric
        deadbands: Per-metric deadbands (default TrendDeadbands())

    Returns:
        TrendResult with percent change rounded to one decimal and direction
        "up", "down" or "stable".
    """
    metric = TrendMetric(metric)
    deadband = (deadbands or TrendDeadbands()).for_metric(metric)

    recent = metric_value(list(recent_activities), metric, thresholds)
    previous = metric_value(list(previous_activities), metric, thresholds)
    change = percent_change(recent, previous, metric)

    return TrendResult(
        metric=metric.value,
        value=round(change, 1),
        direction=_direction(change, deadband),
        recent=round(recent, 2),
        previous=round(previous, 2),
        deadband=deadband,
    )


def split_periods(
    activities: Iterable[Activity],
    reference_date: date,
    period_days: int = 7,
) -> tuple[list[Activity], list[Activity]]:
    """Split activities into recent and previous periods ending at reference_date.

    The recent period covers the ``period_days`` days ending on (and
    including) reference_date; the previous period is the ``period_days``
    days right before it. Activities outside both periods are dropped.

    Raises:
        EngineContractError: If period_days is not positive.
    """
    if period_days < 1:
        raise EngineContractError(INVALID_WINDOW, [f"period_days must be >= 1, got {period_days}"])

    recent_start = reference_date - timedelta(days=period_days - 1)
    previous_start = recent_start - timedelta(days=period_days)

    recent: list[Activity] = []
    previous: list[Activity] = []
    for activity in activities:
        day = activity.local_date
        if recent_start <= day <= reference_date:
            recent.append(activity)
        elif previous_start <= day < recent_start:
            previous.append(activity)
    return recent, previous


def compute_insights(
    activities: Iterable[Activity],
    reference_date: date,
    period_days: int = 7,
    *,
    thresholds: AthleteThresholds | None = None,
    deadbands: TrendDeadbands | None = None,
) -> Insights:
    """Trends for every metric plus streak summary and achievements.

    Args:
        activities: Full activity history
        reference_date: Last day of the recent period
        period_days: Length of each period in days
        thresholds: Athlete thresholds (estimated from the history if None)
        deadbands: Per-metric deadbands

    Returns:
        Insights bundle keyed by metric name.
    """
    history = list(activities)
    recent, previous = split_periods(history, reference_date, period_days)
    resolved = thresholds or estimate_thresholds(history)

    trends = {
        metric.value: trend(recent, previous, metric, thresholds=resolved, deadbands=deadbands)
        for metric in TrendMetric
    }
    logger.debug(
        f"[TRENDS] Computed insights: recent={len(recent)} previous={len(previous)} "
        f"period_days={period_days} reference_date={reference_date.isoformat()}"
    )

    return Insights(
        period_days=period_days,
        trends=trends,
        streak=streak_summary(history, reference_date),
        achievements=find_achievements(history, reference_date, period_days),
    )
