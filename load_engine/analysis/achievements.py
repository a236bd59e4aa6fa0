"""Recent achievement detection."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta

from load_engine.analysis.streaks import consistency_streak
from load_engine.metrics.activity import Activity
from load_engine.schemas.insights import Achievement

CONSISTENCY_ACHIEVEMENT_DAYS = 5
MAX_ACHIEVEMENTS = 2


def find_achievements(
    activities: Iterable[Activity],
    reference_date: date,
    period_days: int = 7,
) -> list[Achievement]:
    """Detect a distance PR in the recent period and a consistency streak.

    Args:
        activities: Full activity history
        reference_date: Last day of the recent period
        period_days: Length of the recent period in days

    Returns:
        At most two achievements: distance PR first, then consistency.
    """
    history = [activity for activity in activities if activity.local_date <= reference_date]
    recent_start = reference_date - timedelta(days=period_days - 1)

    achievements: list[Achievement] = []

    recent = [a for a in history if a.local_date >= recent_start and a.distance]
    if recent:
        longest_recent = max(recent, key=lambda a: a.distance or 0.0)
        previous_best = max((a.distance or 0.0 for a in history if a.local_date < recent_start), default=0.0)
        if (longest_recent.distance or 0.0) > previous_best:
            achievements.append(
                Achievement(
                    type="distance",
                    title="New Distance PR!",
                    date=longest_recent.local_date,
                    value=round((longest_recent.distance or 0.0) / 1000.0, 2),
                )
            )

    streak = consistency_streak(history, reference_date)
    if streak >= CONSISTENCY_ACHIEVEMENT_DAYS:
        achievements.append(
            Achievement(
                type="consistency",
                title="Consistency Champion!",
                date=reference_date,
                value=float(streak),
            )
        )

    return achievements[:MAX_ACHIEVEMENTS]
