"""Consistency streaks over calendar days."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta

from load_engine.metrics.activity import Activity
from load_engine.schemas.insights import StreakSummary

CONSISTENCY_WINDOW_DAYS = 30


def active_days(activities: Iterable[Activity], reference_date: date) -> set[date]:
    """Local calendar days with at least one activity, up to reference_date."""
    return {activity.local_date for activity in activities if activity.local_date <= reference_date}


def consistency_streak(activities: Iterable[Activity], reference_date: date) -> int:
    """Count consecutive active days walking backward from reference_date.

    A day without activity ends the streak, except the reference day itself:
    not having trained yet today does not break yesterday's streak.
    """
    days = active_days(activities, reference_date)
    cursor = reference_date if reference_date in days else reference_date - timedelta(days=1)

    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def longest_streak(days: set[date]) -> int:
    """Longest run of consecutive dates in a set."""
    longest = 0
    current = 0
    previous: date | None = None
    for day in sorted(days):
        current = current + 1 if previous is not None and day - previous == timedelta(days=1) else 1
        longest = max(longest, current)
        previous = day
    return longest


def streak_summary(activities: Iterable[Activity], reference_date: date) -> StreakSummary:
    """Current streak, longest streak and 30-day consistency percentage."""
    history = list(activities)
    days = active_days(history, reference_date)
    window_start = reference_date - timedelta(days=CONSISTENCY_WINDOW_DAYS - 1)
    recent_days = sum(1 for day in days if day >= window_start)

    return StreakSummary(
        current=consistency_streak(history, reference_date),
        longest=longest_streak(days),
        consistency=min(100, round(recent_days / CONSISTENCY_WINDOW_DAYS * 100)),
    )
