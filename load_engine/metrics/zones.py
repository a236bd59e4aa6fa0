"""Heart rate zone distribution.

Each activity's whole moving time goes into one zone, picked from its
average heart rate as a fraction of max heart rate. Activities without heart
rate data go to zone 2 (aerobic) instead of being dropped, so the
distribution always accounts for 100% of training time. This undercounts
unmeasured hard efforts; that is a known limitation of the policy.
"""

from __future__ import annotations

from collections.abc import Iterable

from load_engine.metrics.activity import Activity
from load_engine.metrics.policy import ZoneBoundaries
from load_engine.schemas.training_load import ZoneDistribution

ZONE_COUNT = 5
DEFAULT_ZONE = 2


def classify_zone(average_heart_rate: float | None, max_heart_rate: float, zones: ZoneBoundaries | None = None) -> int:
    """Map an average heart rate to a zone number (1-5).

    Args:
        average_heart_rate: Average heart rate in bpm (None if not recorded)
        max_heart_rate: Athlete max heart rate in bpm
        zones: Zone boundaries (default 60/70/80/90% of max)

    Returns:
        Zone number; DEFAULT_ZONE when heart rate or max heart rate is unusable
    """
    if not average_heart_rate or max_heart_rate <= 0:
        return DEFAULT_ZONE

    ratio = average_heart_rate / max_heart_rate
    for zone_number, upper in enumerate((zones or ZoneBoundaries()).boundaries, start=1):
        if ratio < upper:
            return zone_number
    return ZONE_COUNT


def _largest_remainder_percentages(seconds: list[float]) -> list[int]:
    """Integer percentages that sum to exactly 100."""
    total = sum(seconds)
    exact = [value / total * 100.0 for value in seconds]
    floors = [int(value) for value in exact]
    shortfall = 100 - sum(floors)
    by_remainder = sorted(range(len(exact)), key=lambda i: exact[i] - floors[i], reverse=True)
    for i in by_remainder[:shortfall]:
        floors[i] += 1
    return floors


def zone_distribution(
    activities: Iterable[Activity],
    max_heart_rate: float,
    zones: ZoneBoundaries | None = None,
) -> ZoneDistribution:
    """Percent of moving time spent in each heart rate zone.

    Args:
        activities: Activities to bucket (typically the analysis window)
        max_heart_rate: Athlete max heart rate in bpm
        zones: Zone boundaries (default 60/70/80/90% of max)

    Returns:
        ZoneDistribution whose five percentages sum to exactly 100 whenever
        any activity has moving time. With no moving time at all (an empty
        set, or only zero-duration activities) every zone is 0, so the sum
        is 0 rather than 100.
    """
    seconds = [0.0] * ZONE_COUNT
    for activity in activities:
        duration = activity.moving_duration
        if duration <= 0:
            continue
        zone_number = classify_zone(activity.average_heartrate, max_heart_rate, zones)
        seconds[zone_number - 1] += duration

    if sum(seconds) <= 0:
        return ZoneDistribution()

    zone1, zone2, zone3, zone4, zone5 = _largest_remainder_percentages(seconds)
    return ZoneDistribution(zone1=zone1, zone2=zone2, zone3=zone3, zone4=zone4, zone5=zone5)
