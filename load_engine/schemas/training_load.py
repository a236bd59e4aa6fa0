"""Training load output schemas.

Plain serializable data only. Hosts cache, transmit or render these freely
(``model_dump()`` / ``model_dump_json()``).
"""

from datetime import date
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from load_engine.schemas.insights import Insights
from load_engine.schemas.thresholds import AthleteThresholds

DataQuality = Literal["excellent", "good", "fair", "poor", "none"]
TrainingStatus = Literal["peak", "build", "maintain", "recover"]


class LoadSource(StrEnum):
    """Calculation tier that produced an activity's normalized load."""

    POWER_TSS = "power_tss"
    PACE_TSS = "pace_tss"
    TRIMP = "trimp"
    RPE = "rpe"
    DURATION = "duration"
    NONE = "none"


class IntensityLevel(StrEnum):
    """Intensity classification of a single activity."""

    REST = "rest"
    EASY = "easy"
    MODERATE = "moderate"
    HARD = "hard"
    MAXIMAL = "maximal"
    UNKNOWN = "unknown"


class LoadResult(BaseModel):
    """Load of one activity.

    Attributes:
        trimp: Heart-rate TRIMP (0 when no heart rate channel)
        tss: Power- or pace-derived TSS (0 when neither channel applies)
        normalized_load: Load chosen by priority TSS > TRIMP > RPE > duration
        source: Tier that produced normalized_load
        intensity_factor: Relative intensity of the chosen tier, if known
        intensity: Intensity classification
    """

    model_config = ConfigDict(frozen=True)

    trimp: float = 0.0
    tss: float = 0.0
    normalized_load: float = 0.0
    source: LoadSource = LoadSource.NONE
    intensity_factor: float | None = None
    intensity: IntensityLevel = IntensityLevel.REST


class TrainingLoadPoint(BaseModel):
    """Load of one calendar day. Rest days are explicit all-zero points."""

    model_config = ConfigDict(frozen=True)

    date: date
    trimp: float = 0.0
    tss: float = 0.0
    normalized_load: float = 0.0
    activity_count: int = 0
    duration_seconds: float = 0.0


class RollingLoadPoint(BaseModel):
    """Rolling load model output for one day, rounded for display."""

    model_config = ConfigDict(frozen=True)

    date: date
    daily_load: int
    atl: int
    ctl: int
    tsb: int
    trimp: int
    tss: int


class WeeklyLoadTotal(BaseModel):
    """Summed load for one Monday-start week (clipped to the window)."""

    model_config = ConfigDict(frozen=True)

    week_start: date
    days: int
    load: int
    trimp: int
    tss: int
    activity_count: int


class TrainingLoadMetrics(BaseModel):
    """Summary of a rolling series as of its last day.

    Attributes:
        acute: Current ATL
        chronic: Current CTL
        balance: Current TSB (CTL - ATL)
        ramp_rate: Mean daily load of the last week minus the week before
        status: Training status derived from balance and ramp rate
        recommendation: One fixed sentence per status
        weekly_totals: Per-week load totals, oldest first
    """

    model_config = ConfigDict(frozen=True)

    acute: int = 0
    chronic: int = 0
    balance: int = 0
    ramp_rate: float = 0.0
    status: TrainingStatus = "recover"
    recommendation: str = ""
    weekly_totals: list[WeeklyLoadTotal] = Field(default_factory=list)


class ZoneDistribution(BaseModel):
    """Percent of moving time per heart rate zone (sums to 100, or all 0)."""

    model_config = ConfigDict(frozen=True)

    zone1: int = 0
    zone2: int = 0
    zone3: int = 0
    zone4: int = 0
    zone5: int = 0

    def total(self) -> int:
        return self.zone1 + self.zone2 + self.zone3 + self.zone4 + self.zone5


class TrainingLoadReport(BaseModel):
    """Everything a dashboard needs about training load for one window."""

    model_config = ConfigDict(frozen=True)

    reference_date: date
    window_days: int
    thresholds: AthleteThresholds
    load_points: list[TrainingLoadPoint]
    rolling: list[RollingLoadPoint]
    metrics: TrainingLoadMetrics
    zone_distribution: ZoneDistribution
    insights: Insights
    total_activities: int
    activities_with_hr: int
    activities_with_power: int
    data_quality: DataQuality
