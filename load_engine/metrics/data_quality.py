"""Data quality assessment for training load metrics.

One deterministic signal gating how much a surface should trust the load
numbers, based on sensor coverage and sample size. Cutoffs live in
``QualityCutoffs`` and are reused by every caller.
"""

from __future__ import annotations

from collections.abc import Iterable

from load_engine.metrics.activity import Activity
from load_engine.metrics.policy import QualityCutoffs, QualityRequirement
from load_engine.schemas.training_load import DataQuality


def _meets(requirement: QualityRequirement, hr_pct: float, power_pct: float, total: int) -> bool:
    return hr_pct >= requirement.min_hr_pct and power_pct >= requirement.min_power_pct and total >= requirement.min_total


def assess_quality(
    activities_with_hr: int,
    activities_with_power: int,
    total: int,
    cutoffs: QualityCutoffs | None = None,
) -> DataQuality:
    """Assess data quality from activity counts.

    Args:
        activities_with_hr: Activities with heart rate data
        activities_with_power: Activities with power data
        total: Total activities considered
        cutoffs: Tier rules (defaults documented on QualityCutoffs)

    Returns:
        "excellent" | "good" | "fair" | "poor" | "none"

    Notes:
        - Total function: never raises. Negative counts are treated as 0 and
          sensor counts are capped at ``total``.
        - Zero activities always yields "none".
        - Monotone: more heart rate coverage or more activities at the same
          coverage never lowers the tier.
    """
    total = max(0, total)
    if total == 0:
        return "none"

    rules = cutoffs or QualityCutoffs()
    hr_pct = min(max(0, activities_with_hr), total) / total * 100.0
    power_pct = min(max(0, activities_with_power), total) / total * 100.0

    tiers: tuple[tuple[DataQuality, tuple[QualityRequirement, ...]], ...] = (
        ("excellent", rules.excellent),
        ("good", rules.good),
        ("fair", rules.fair),
        ("poor", rules.poor),
    )
    for tier, requirements in tiers:
        if any(_meets(requirement, hr_pct, power_pct, total) for requirement in requirements):
            return tier

    return "none"


def count_sensor_coverage(activities: Iterable[Activity]) -> tuple[int, int, int]:
    """Count (with heart rate, with power, total) activities."""
    with_hr = 0
    with_power = 0
    total = 0
    for activity in activities:
        total += 1
        if activity.has_heart_rate:
            with_hr += 1
        if activity.has_power:
            with_power += 1
    return with_hr, with_power, total
