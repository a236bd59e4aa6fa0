"""Training load engine - normalized training stress from raw activity history.

This package provides:
- Threshold estimation from the complete history (with profile overrides)
- Per-activity load (power/pace TSS, TRIMP, session RPE, duration fallback)
- Gap-free daily aggregation and rolling ATL/CTL/TSB
- Heart rate zone distribution, trends, streaks and achievements
- Data quality assessment

Every function is pure: same inputs, same outputs, nothing persisted.
"""

from load_engine.analysis import compute_insights, find_achievements, split_periods, streak_summary, trend
from load_engine.metrics.activity import Activity, SportCategory
from load_engine.metrics.computation_service import analyze_training_load
from load_engine.metrics.daily_aggregation import aggregate_daily
from load_engine.metrics.data_quality import assess_quality
from load_engine.metrics.errors import EngineContractError
from load_engine.metrics.load_computation import compute_load, compute_loads
from load_engine.metrics.policy import EngineConfig, TrendMetric
from load_engine.metrics.thresholds import estimate_thresholds, resolve_thresholds
from load_engine.metrics.training_load import compute_rolling_metrics, summarize_training_load
from load_engine.metrics.zones import zone_distribution
from load_engine.schemas.thresholds import AthleteThresholds, ThresholdOverrides
from load_engine.schemas.training_load import LoadResult, RollingLoadPoint, TrainingLoadPoint, TrainingLoadReport

__all__ = [
    "Activity",
    "AthleteThresholds",
    "EngineConfig",
    "EngineContractError",
    "LoadResult",
    "RollingLoadPoint",
    "SportCategory",
    "ThresholdOverrides",
    "TrainingLoadPoint",
    "TrainingLoadReport",
    "TrendMetric",
    "aggregate_daily",
    "analyze_training_load",
    "assess_quality",
    "compute_insights",
    "compute_load",
    "compute_loads",
    "compute_rolling_metrics",
    "estimate_thresholds",
    "find_achievements",
    "resolve_thresholds",
    "split_periods",
    "streak_summary",
    "summarize_training_load",
    "trend",
    "zone_distribution",
]
