"""Per-activity load computation.

Converts one activity into a normalized load value, choosing the highest
fidelity pathway the activity's sensors allow.

Priority order for normalized load (highest fidelity first):
1. Power-based TSS (non-running sports with a power channel and a known FTP)
2. Pace-based TSS (running with a pace channel and a non-default threshold pace)
3. HR-based TRIMP (heart rate reserve, exponentially weighted)
4. Session-RPE estimate
5. Duration fallback with a sport-specific base intensity

A logged activity with positive moving time always gets a positive load:
"no sensor data" must never look like a rest day. Activities with no moving
time get zero load everywhere.

Missing inputs never raise; each one degrades to the next tier.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from loguru import logger

from load_engine.metrics.activity import Activity, SportCategory, normalize_sport_type
from load_engine.schemas.thresholds import AthleteThresholds
from load_engine.schemas.training_load import IntensityLevel, LoadResult, LoadSource

# Banister TRIMP coefficients (0.64 * e^(1.92 * HRr))
TRIMP_WEIGHTING = 0.64
TRIMP_EXPONENT = 1.92

# Sport multipliers applied to TRIMP and to the duration fallback
SPORT_MULTIPLIERS: dict[str, float] = {
    "run": 1.0,
    "trailrun": 1.0,
    "virtualrun": 1.0,
    "ride": 0.85,  # Cycling typically lower intensity for same HR
    "virtualride": 0.85,
    "swim": 1.1,
    "hike": 0.7,
    "walk": 0.5,
    "workout": 0.9,
    "weighttraining": 0.8,
    "yoga": 0.6,
    "crosscountryskiing": 1.0,
    "alpineski": 0.8,
    "snowboard": 0.8,
    "iceskate": 0.9,
    "inlineskate": 0.9,
    "rowing": 1.0,
    "kayaking": 0.9,
    "canoeing": 0.9,
    "standuppaddling": 0.8,
    "surfing": 0.7,
    "kitesurf": 0.8,
    "windsurf": 0.8,
    "soccer": 1.0,
    "tennis": 0.9,
    "basketball": 0.95,
    "badminton": 0.9,
    "golf": 0.4,
    "rockclimbing": 0.9,
}
DEFAULT_SPORT_MULTIPLIER = 0.8

# Normalized power ~= average power * variability index when NP is not reported
VARIABILITY_INDEX: dict[str, float] = {
    "run": 1.02,
    "ride": 1.05,
    "virtualride": 1.02,
}
DEFAULT_VARIABILITY_INDEX = 1.03

# Pace multipliers for hilly runs, by elevation gain per km (steepest first)
GRADE_ADJUSTMENTS: tuple[tuple[float, float], ...] = (
    (50.0, 0.85),
    (30.0, 0.90),
    (15.0, 0.95),
)

# Load of one unmeasured hour before the sport multiplier (run = 50, ride = 42.5)
FALLBACK_LOAD_PER_HOUR = 50.0

# Guardrails
MAX_SESSION_TSS = 500.0
SHORT_SESSION_SECONDS = 60.0
SHORT_SESSION_TSS_CAP = 50.0

# Upper intensity factor bound (exclusive) per level; anything above is maximal
INTENSITY_BANDS: tuple[tuple[float, IntensityLevel], ...] = (
    (0.75, IntensityLevel.EASY),
    (0.85, IntensityLevel.MODERATE),
    (0.95, IntensityLevel.HARD),
)


def sport_multiplier(sport_type: str) -> float:
    """Sport-specific load multiplier (default 0.8 for unknown sports)."""
    return SPORT_MULTIPLIERS.get(normalize_sport_type(sport_type), DEFAULT_SPORT_MULTIPLIER)


def classify_intensity(intensity_factor: float | None) -> IntensityLevel:
    """Classify an intensity factor (1.0 = threshold)."""
    if intensity_factor is None:
        return IntensityLevel.UNKNOWN
    for upper, level in INTENSITY_BANDS:
        if intensity_factor < upper:
            return level
    return IntensityLevel.MAXIMAL


def _compute_trimp(activity: Activity, thresholds: AthleteThresholds, duration_sec: float) -> float:
    """Compute HR-based TRIMP.

    Formula: HRr = (HR_avg - HR_rest) / (HR_max - HR_rest), clamped to [0, 1]
    Formula: TRIMP = D_min * HRr * 0.64 * e^(1.92 * HRr) * sport_multiplier

    Returns:
        TRIMP score, or 0.0 without a heart rate channel or a usable HR range
    """
    channel = activity.heart_rate
    if channel is None:
        return 0.0

    hr_rest = thresholds.resting_heart_rate
    hr_max = thresholds.max_heart_rate
    if hr_max <= hr_rest:
        return 0.0

    reserve = (channel.average - hr_rest) / (hr_max - hr_rest)
    reserve = max(0.0, min(1.0, reserve))

    trimp = (duration_sec / 60.0) * reserve * TRIMP_WEIGHTING * math.exp(TRIMP_EXPONENT * reserve)
    return trimp * sport_multiplier(activity.sport_type)


def _compute_power_intensity(activity: Activity, thresholds: AthleteThresholds) -> float | None:
    """Intensity factor from power: IF = NP / FTP."""
    channel = activity.power
    if channel is None or not thresholds.has_power_threshold:
        return None

    normalized_power = channel.weighted
    if normalized_power is None:
        variability = VARIABILITY_INDEX.get(normalize_sport_type(activity.sport_type), DEFAULT_VARIABILITY_INDEX)
        normalized_power = channel.average * variability

    return normalized_power / thresholds.functional_threshold_power


def _compute_pace_intensity(activity: Activity, thresholds: AthleteThresholds) -> float | None:
    """Intensity factor from grade-adjusted pace: IF = threshold_pace / pace."""
    channel = activity.pace
    if channel is None or not thresholds.has_pace_threshold or channel.seconds_per_km <= 0:
        return None

    adjusted = channel.seconds_per_km
    for elevation_per_km, factor in GRADE_ADJUSTMENTS:
        if channel.elevation_per_km > elevation_per_km:
            # Climbing costs effort: treat the run as if it were faster on the flat
            adjusted *= factor
            break

    return thresholds.threshold_pace / adjusted


def _tss_from_intensity(intensity_factor: float, duration_sec: float) -> float:
    """TSS = hours * IF^2 * 100, with guardrails applied."""
    tss = (duration_sec / 3600.0) * intensity_factor**2 * 100.0
    tss = min(tss, MAX_SESSION_TSS)
    if duration_sec < SHORT_SESSION_SECONDS:
        tss = min(tss, SHORT_SESSION_TSS_CAP)
    return max(0.0, tss)


def compute_load(activity: Activity, thresholds: AthleteThresholds) -> LoadResult:
    """Compute the training load of a single activity.

    Args:
        activity: Activity record
        thresholds: Athlete thresholds (estimated or overridden)

    Returns:
        LoadResult with TRIMP, TSS, the priority-selected normalized load,
        the tier used and an intensity classification.

    Notes:
        - TSS of 100 = 1 hour at threshold
        - ``tss`` is only the power/pace value; 0 when neither applies
        - ``trimp`` is reported whenever heart rate exists, even if TSS wins
    """
    duration_sec = activity.moving_duration
    if duration_sec <= 0:
        return LoadResult()

    trimp = _compute_trimp(activity, thresholds, duration_sec)

    intensity_factor: float | None = None
    source = LoadSource.NONE
    if activity.category is SportCategory.RUN:
        intensity_factor = _compute_pace_intensity(activity, thresholds)
        if intensity_factor is not None:
            source = LoadSource.PACE_TSS
    else:
        intensity_factor = _compute_power_intensity(activity, thresholds)
        if intensity_factor is not None:
            source = LoadSource.POWER_TSS

    if intensity_factor is not None:
        tss = _tss_from_intensity(intensity_factor, duration_sec)
        return LoadResult(
            trimp=trimp,
            tss=tss,
            normalized_load=tss,
            source=source,
            intensity_factor=intensity_factor,
            intensity=classify_intensity(intensity_factor),
        )

    if trimp > 0:
        hr_intensity = None
        if activity.heart_rate is not None and thresholds.threshold_heart_rate > 0:
            hr_intensity = activity.heart_rate.average / thresholds.threshold_heart_rate
        return LoadResult(
            trimp=trimp,
            normalized_load=trimp,
            source=LoadSource.TRIMP,
            intensity_factor=hr_intensity,
            intensity=classify_intensity(hr_intensity),
        )

    hours = duration_sec / 3600.0
    if activity.perceived_exertion is not None:
        rpe_intensity = activity.perceived_exertion / 10.0
        return LoadResult(
            normalized_load=hours * rpe_intensity**2 * 100.0,
            source=LoadSource.RPE,
            intensity_factor=rpe_intensity,
            intensity=classify_intensity(rpe_intensity),
        )

    logger.debug(f"[LOAD] No sensor data for activity id={activity.id}, using duration fallback")
    return LoadResult(
        normalized_load=hours * FALLBACK_LOAD_PER_HOUR * sport_multiplier(activity.sport_type),
        source=LoadSource.DURATION,
        intensity=IntensityLevel.UNKNOWN,
    )


def compute_loads(activities: Iterable[Activity], thresholds: AthleteThresholds) -> list[LoadResult]:
    """Compute loads for many activities, preserving input order."""
    return [compute_load(activity, thresholds) for activity in activities]
