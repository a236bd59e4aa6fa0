"""Insight schemas: trends, streaks and achievements."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

TrendDirection = Literal["up", "down", "stable"]
AchievementType = Literal["distance", "consistency"]


class TrendResult(BaseModel):
    """Period-over-period change of one metric.

    Attributes:
        metric: Metric name (pace, distance, load, intensity, activity_count)
        value: Percent change from previous to recent; for pace, positive means faster
        direction: "up", "down" or "stable" (within the metric's deadband)
        recent: Metric value over the recent period
        previous: Metric value over the previous period
        deadband: Deadband (percent) applied
    """

    model_config = ConfigDict(frozen=True)

    metric: str
    value: float
    direction: TrendDirection
    recent: float
    previous: float
    deadband: float


class StreakSummary(BaseModel):
    """Consistency of training on calendar days.

    Attributes:
        current: Consecutive active days ending today (or yesterday if today is empty)
        longest: Longest run of consecutive active days in the history
        consistency: Percent of the last 30 days with at least one activity
    """

    model_config = ConfigDict(frozen=True)

    current: int = 0
    longest: int = 0
    consistency: int = 0


class Achievement(BaseModel):
    """A notable recent accomplishment."""

    model_config = ConfigDict(frozen=True)

    type: AchievementType
    title: str
    date: date
    value: float


class Insights(BaseModel):
    """Trend and achievement signals for insight surfaces."""

    model_config = ConfigDict(frozen=True)

    period_days: int
    trends: dict[str, TrendResult] = Field(default_factory=dict)
    streak: StreakSummary = Field(default_factory=StreakSummary)
    achievements: list[Achievement] = Field(default_factory=list)
