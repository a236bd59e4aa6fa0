"""Engine policy constants - single source of truth.

Every tunable threshold the dashboard surfaces depend on lives here, once:
heart rate zone boundaries, rolling window lengths, trend deadbands and data
quality cutoffs. No call site may redefine its own copy.

Defaults reproduce the most common values observed across the dashboard
widgets. They are consistent policy choices, not authoritative sports-science
thresholds; hosts override them through ``EngineConfig`` (or ``Settings``).
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TrendMetric(StrEnum):
    """Metrics compared period-over-period by the trend analyzer."""

    PACE = "pace"
    DISTANCE = "distance"
    LOAD = "load"
    INTENSITY = "intensity"
    ACTIVITY_COUNT = "activity_count"


class ZoneBoundaries(BaseModel):
    """Heart rate zone boundaries as fractions of max heart rate.

    Four ascending cut points split the range into five zones:
    zone 1 < 60% <= zone 2 < 70% <= zone 3 < 80% <= zone 4 < 90% <= zone 5.
    """

    model_config = ConfigDict(frozen=True)

    boundaries: tuple[float, float, float, float] = (0.60, 0.70, 0.80, 0.90)

    @field_validator("boundaries")
    @classmethod
    def validate_ascending(cls, value: tuple[float, float, float, float]) -> tuple[float, float, float, float]:
        """Boundaries must be strictly increasing and positive."""
        if value[0] <= 0:
            raise ValueError(f"Zone boundaries must be positive, got {value}")
        if any(lower >= upper for lower, upper in zip(value, value[1:], strict=False)):
            raise ValueError(f"Zone boundaries must be strictly increasing, got {value}")
        return value


class RollingWindows(BaseModel):
    """Window lengths (calendar days) for acute and chronic load."""

    model_config = ConfigDict(frozen=True)

    acute_days: int = Field(default=7, ge=1)
    chronic_days: int = Field(default=42, ge=1)


class TrendDeadbands(BaseModel):
    """Percentage change below which a trend is reported as stable.

    - pace: 2% (pace varies little week to week; small changes matter)
    - distance: 5%
    - load: 10%
    - intensity: 5% (average heart rate)
    - activity_count: 10%
    """

    model_config = ConfigDict(frozen=True)

    pace: float = Field(default=2.0, ge=0.0)
    distance: float = Field(default=5.0, ge=0.0)
    load: float = Field(default=10.0, ge=0.0)
    intensity: float = Field(default=5.0, ge=0.0)
    activity_count: float = Field(default=10.0, ge=0.0)

    def for_metric(self, metric: TrendMetric) -> float:
        """Deadband (percent) for a metric."""
        return float(getattr(self, metric.value))


class QualityRequirement(BaseModel):
    """One sufficient condition for a data quality tier.

    All three minimums must hold. Percentages are 0-100.
    """

    model_config = ConfigDict(frozen=True)

    min_hr_pct: float = Field(default=0.0, ge=0.0, le=100.0)
    min_power_pct: float = Field(default=0.0, ge=0.0, le=100.0)
    min_total: int = Field(default=0, ge=0)


class QualityCutoffs(BaseModel):
    """Data quality tiers, evaluated from best to worst.

    A tier is assigned when any one of its requirements holds:
    - excellent: >=80% HR, >=20% power and >=20 activities
    - good: (>=60% HR and >=15 activities) or (>=40% power and >=10 activities)
    - fair: >=30% HR or >=10 activities
    - poor: >=10% HR or >=5 activities
    - none: anything else, including zero activities
    """

    model_config = ConfigDict(frozen=True)

    excellent: tuple[QualityRequirement, ...] = (
        QualityRequirement(min_hr_pct=80.0, min_power_pct=20.0, min_total=20),
    )
    good: tuple[QualityRequirement, ...] = (
        QualityRequirement(min_hr_pct=60.0, min_total=15),
        QualityRequirement(min_power_pct=40.0, min_total=10),
    )
    fair: tuple[QualityRequirement, ...] = (
        QualityRequirement(min_hr_pct=30.0),
        QualityRequirement(min_total=10),
    )
    poor: tuple[QualityRequirement, ...] = (
        QualityRequirement(min_hr_pct=10.0),
        QualityRequirement(min_total=5),
    )


class EngineConfig(BaseModel):
    """All host-overridable knobs of the engine."""

    model_config = ConfigDict(frozen=True)

    zones: ZoneBoundaries = Field(default_factory=ZoneBoundaries)
    windows: RollingWindows = Field(default_factory=RollingWindows)
    deadbands: TrendDeadbands = Field(default_factory=TrendDeadbands)
    quality: QualityCutoffs = Field(default_factory=QualityCutoffs)


DEFAULT_CONFIG = EngineConfig()
