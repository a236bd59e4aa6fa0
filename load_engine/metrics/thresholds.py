"""Athlete threshold estimation.

Derives threshold heart rate, threshold pace and functional threshold power
from the complete activity history, so load calculation works without any
manually entered profile.

Rules:
- Input is the full history, never a windowed slice: thresholds reflect the
  athlete's best known fitness.
- Sustained efforts are activities with at least 20 minutes of moving time.
- Estimates use a high rank (top 5% for max HR, top 10% for sustained
  efforts) rather than the single best value, so one sensor spike does not
  define the athlete.
- Insufficient data never raises; each field degrades to a population
  default and is listed in ``defaulted_fields``.
- Threshold pace needs at least three qualifying runs (20+ minutes, 3+ km);
  a defaulted threshold pace never drives pace-based TSS.
- Resting heart rate cannot be observed from workout summaries and is always
  the population default unless overridden.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from loguru import logger

from load_engine.metrics.activity import Activity, SportCategory
from load_engine.schemas.thresholds import (
    DEFAULT_FTP_WATTS,
    DEFAULT_MAX_HEART_RATE,
    DEFAULT_RESTING_HEART_RATE,
    DEFAULT_THRESHOLD_HEART_RATE,
    DEFAULT_THRESHOLD_PACE_S_PER_KM,
    AthleteThresholds,
    ThresholdOverrides,
)

MIN_SUSTAINED_SECONDS = 1200.0  # 20 minutes
MIN_THRESHOLD_RUN_METERS = 3000.0
MIN_THRESHOLD_RUNS = 3
MIN_PLAUSIBLE_PACE_S_PER_KM = 150.0  # faster than 2:30/km is a GPS glitch
MAX_PLAUSIBLE_HEART_RATE = 230.0

MAX_HR_RANK = 0.05
SUSTAINED_EFFORT_RANK = 0.10
LTHR_FRACTION_OF_MAX = 0.85


def _ranked_value(values: list[float], rank: float, *, highest: bool = True) -> float | None:
    """Pick the value at a fractional rank from the best end of the list.

    Args:
        values: Candidate values
        rank: Fraction of the list to skip from the best end (0.1 = top 10%)
        highest: True if larger values are better, False if smaller are better

    Returns:
        Selected value, or None if there are no values
    """
    if not values:
        return None
    ordered = sorted(values, reverse=highest)
    index = min(len(ordered) - 1, math.floor(len(ordered) * rank))
    return ordered[index]


def _estimate_max_heart_rate(history: list[Activity]) -> float | None:
    peaks: list[float] = []
    for activity in history:
        channel = activity.heart_rate
        if channel is None:
            continue
        peak = channel.maximum or channel.average
        if peak <= MAX_PLAUSIBLE_HEART_RATE:
            peaks.append(peak)
    return _ranked_value(peaks, MAX_HR_RANK)


def _estimate_threshold_heart_rate(history: list[Activity]) -> float | None:
    sustained = [
        activity.heart_rate.average
        for activity in history
        if activity.heart_rate is not None
        and activity.moving_duration >= MIN_SUSTAINED_SECONDS
        and activity.heart_rate.average <= MAX_PLAUSIBLE_HEART_RATE
    ]
    return _ranked_value(sustained, SUSTAINED_EFFORT_RANK)


def _estimate_threshold_pace(history: list[Activity]) -> float | None:
    paces: list[float] = []
    for activity in history:
        if activity.category is not SportCategory.RUN:
            continue
        if activity.moving_duration < MIN_SUSTAINED_SECONDS or (activity.distance or 0.0) < MIN_THRESHOLD_RUN_METERS:
            continue
        channel = activity.pace
        if channel is not None and channel.seconds_per_km >= MIN_PLAUSIBLE_PACE_S_PER_KM:
            paces.append(channel.seconds_per_km)
    if len(paces) < MIN_THRESHOLD_RUNS:
        return None
    return _ranked_value(paces, SUSTAINED_EFFORT_RANK, highest=False)


def _estimate_ftp(history: list[Activity]) -> float | None:
    powers: list[float] = []
    for activity in history:
        if activity.category is not SportCategory.RIDE or activity.moving_duration < MIN_SUSTAINED_SECONDS:
            continue
        channel = activity.power
        if channel is not None:
            powers.append(channel.weighted or channel.average)
    return _ranked_value(powers, SUSTAINED_EFFORT_RANK)


def estimate_thresholds(activities: Iterable[Activity]) -> AthleteThresholds:
    """Estimate athlete thresholds from the complete activity history.

    Args:
        activities: Full activity history (not windowed)

    Returns:
        AthleteThresholds; fields without supporting data hold population
        defaults and are named in ``defaulted_fields``.
    """
    history = [activity for activity in activities if isinstance(activity, Activity)]
    defaulted: list[str] = []

    max_hr = _estimate_max_heart_rate(history)
    if max_hr is None:
        max_hr = DEFAULT_MAX_HEART_RATE
        defaulted.append("max_heart_rate")

    threshold_hr = _estimate_threshold_heart_rate(history)
    if threshold_hr is None:
        if "max_heart_rate" in defaulted:
            threshold_hr = DEFAULT_THRESHOLD_HEART_RATE
            defaulted.append("threshold_heart_rate")
        else:
            # Heart rate exists but no sustained effort: lactate threshold rule of thumb
            threshold_hr = max_hr * LTHR_FRACTION_OF_MAX
    threshold_hr = min(threshold_hr, max_hr)

    threshold_pace = _estimate_threshold_pace(history)
    if threshold_pace is None:
        threshold_pace = DEFAULT_THRESHOLD_PACE_S_PER_KM
        defaulted.append("threshold_pace")

    ftp = _estimate_ftp(history)
    if ftp is None:
        ftp = DEFAULT_FTP_WATTS
        defaulted.append("functional_threshold_power")

    defaulted.append("resting_heart_rate")

    if len(defaulted) > 1:
        logger.debug(f"[THRESHOLDS] Using population defaults for {defaulted} (history={len(history)} activities)")

    return AthleteThresholds(
        threshold_heart_rate=round(threshold_hr, 1),
        threshold_pace=round(threshold_pace, 1),
        functional_threshold_power=round(ftp, 1),
        max_heart_rate=round(max_hr, 1),
        resting_heart_rate=DEFAULT_RESTING_HEART_RATE,
        defaulted_fields=tuple(defaulted),
    )


def resolve_thresholds(
    activities: Iterable[Activity],
    overrides: ThresholdOverrides | None = None,
) -> AthleteThresholds:
    """Estimate thresholds, letting stored profile values win field by field.

    Args:
        activities: Full activity history
        overrides: User-entered profile values (any subset)

    Returns:
        AthleteThresholds combining overrides and estimates
    """
    estimated = estimate_thresholds(activities)
    if overrides is None:
        return estimated

    provided = overrides.model_dump(exclude_none=True)
    if not provided:
        return estimated

    defaulted = tuple(name for name in estimated.defaulted_fields if name not in provided)
    logger.debug(f"[THRESHOLDS] Applying profile overrides for {sorted(provided)}")
    return estimated.model_copy(update={**provided, "defaulted_fields": defaulted})
