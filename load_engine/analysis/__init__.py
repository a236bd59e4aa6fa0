"""Analysis module - period-over-period trends, streaks and achievements."""

from load_engine.analysis.achievements import find_achievements
from load_engine.analysis.streaks import consistency_streak, streak_summary
from load_engine.analysis.trends import compute_insights, split_periods, trend

__all__ = [
    "compute_insights",
    "consistency_streak",
    "find_achievements",
    "split_periods",
    "streak_summary",
    "trend",
]
