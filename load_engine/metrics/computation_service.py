"""Training load analysis service.

Chains the engine stages over one activity history:

1. Threshold estimation over the full history (profile overrides win)
2. Per-activity load for activities inside the window
3. Daily aggregation into a gap-free series
4. Rolling ATL/CTL/TSB and summary metrics
5. Zone distribution, insights and data quality over the same window

Every stage is a pure function; this module only wires them together.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from loguru import logger

from load_engine.analysis.trends import compute_insights
from load_engine.metrics.activity import Activity
from load_engine.metrics.daily_aggregation import aggregate_daily, validate_reference_date, validate_window, window_start
from load_engine.metrics.data_quality import assess_quality, count_sensor_coverage
from load_engine.metrics.load_computation import compute_loads
from load_engine.metrics.policy import DEFAULT_CONFIG, EngineConfig
from load_engine.metrics.thresholds import resolve_thresholds
from load_engine.metrics.training_load import compute_rolling_metrics, summarize_training_load
from load_engine.metrics.zones import zone_distribution
from load_engine.schemas.thresholds import ThresholdOverrides
from load_engine.schemas.training_load import TrainingLoadReport

DEFAULT_WINDOW_DAYS = 90
INSIGHT_PERIOD_DAYS = 7


def analyze_training_load(
    activities: Iterable[Activity],
    *,
    reference_date: date,
    window_days: int = DEFAULT_WINDOW_DAYS,
    overrides: ThresholdOverrides | None = None,
    config: EngineConfig | None = None,
) -> TrainingLoadReport:
    """Compute the full training load report for one athlete.

    Args:
        activities: Complete activity history (deduplicated, any order)
        reference_date: "Today"; last day of the window
        window_days: Lookback window in days (0 gives empty series)
        overrides: Stored athlete profile values that beat estimation
        config: Engine policy (zones, windows, deadbands, quality cutoffs)

    Returns:
        TrainingLoadReport

    Raises:
        EngineContractError: On a negative window or a reference date
            earlier than every activity in a non-empty history.
    """
    policy = config or DEFAULT_CONFIG
    history = list(activities)

    validate_window(window_days)
    validate_reference_date(history, reference_date)

    thresholds = resolve_thresholds(history, overrides)

    windowed: list[Activity] = []
    if window_days > 0:
        start_date = window_start(reference_date, window_days)
        windowed = [activity for activity in history if start_date <= activity.local_date <= reference_date]

    loads = compute_loads(windowed, thresholds)
    points = aggregate_daily(windowed, loads, window_days, reference_date)
    rolling = compute_rolling_metrics(points, policy.windows)
    metrics = summarize_training_load(points, policy.windows)

    zones = zone_distribution(windowed, thresholds.max_heart_rate, policy.zones)
    insights = compute_insights(
        history,
        reference_date,
        INSIGHT_PERIOD_DAYS,
        thresholds=thresholds,
        deadbands=policy.deadbands,
    )

    with_hr, with_power, total = count_sensor_coverage(windowed)
    quality = assess_quality(with_hr, with_power, total, policy.quality)

    logger.info(
        f"[METRICS] Training load analyzed: reference_date={reference_date.isoformat()} "
        f"window_days={window_days} activities={total} hr={with_hr} power={with_power} "
        f"atl={metrics.acute} ctl={metrics.chronic} tsb={metrics.balance} "
        f"status={metrics.status} quality={quality}"
    )

    return TrainingLoadReport(
        reference_date=reference_date,
        window_days=window_days,
        thresholds=thresholds,
        load_points=points,
        rolling=rolling,
        metrics=metrics,
        zone_distribution=zones,
        insights=insights,
        total_activities=total,
        activities_with_hr=with_hr,
        activities_with_power=with_power,
        data_quality=quality,
    )
