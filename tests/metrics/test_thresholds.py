"""Tests for athlete threshold estimation and profile overrides."""

from datetime import timedelta

import pytest

from load_engine.metrics.thresholds import estimate_thresholds, resolve_thresholds
from load_engine.schemas.thresholds import (
    DEFAULT_FTP_WATTS,
    DEFAULT_MAX_HEART_RATE,
    DEFAULT_RESTING_HEART_RATE,
    DEFAULT_THRESHOLD_HEART_RATE,
    DEFAULT_THRESHOLD_PACE_S_PER_KM,
    AthleteThresholds,
    ThresholdOverrides,
)


def test_empty_history_returns_population_defaults():
    thresholds = estimate_thresholds([])

    assert thresholds.max_heart_rate == DEFAULT_MAX_HEART_RATE
    assert thresholds.threshold_heart_rate == DEFAULT_THRESHOLD_HEART_RATE
    assert thresholds.threshold_pace == DEFAULT_THRESHOLD_PACE_S_PER_KM
    assert thresholds.functional_threshold_power == DEFAULT_FTP_WATTS
    assert thresholds.resting_heart_rate == DEFAULT_RESTING_HEART_RATE
    assert set(thresholds.defaulted_fields) == {
        "max_heart_rate",
        "threshold_heart_rate",
        "threshold_pace",
        "functional_threshold_power",
        "resting_heart_rate",
    }
    assert thresholds.has_power_threshold is False
    assert thresholds.has_pace_threshold is False


def test_malformed_history_items_are_ignored():
    thresholds = estimate_thresholds([None, "not an activity", 42])  # type: ignore[list-item]
    assert thresholds.max_heart_rate == DEFAULT_MAX_HEART_RATE


def test_max_heart_rate_uses_top_five_percent(make_activity, reference_date):
    history = [
        make_activity(reference_date - timedelta(days=i), moving_time=1800, average_heartrate=150, max_heartrate=180 + i)
        for i in range(20)
    ]
    thresholds = estimate_thresholds(history)

    # 20 values: skip the single best (199), take the next one
    assert thresholds.max_heart_rate == 198.0
    assert "max_heart_rate" not in thresholds.defaulted_fields


def test_implausible_heart_rate_spikes_are_ignored(make_activity, reference_date):
    history = [
        make_activity(reference_date, moving_time=1800, average_heartrate=150, max_heartrate=250),
        make_activity(reference_date, moving_time=1800, average_heartrate=150, max_heartrate=185),
    ]
    assert estimate_thresholds(history).max_heart_rate == 185.0


def test_threshold_heart_rate_from_sustained_efforts(make_activity, reference_date):
    history = [
        make_activity(reference_date - timedelta(days=i), moving_time=1800, average_heartrate=150 + i, max_heartrate=195)
        for i in range(10)
    ]
    # Short efforts never count, however hard
    history.append(make_activity(reference_date, moving_time=300, average_heartrate=190, max_heartrate=195))

    thresholds = estimate_thresholds(history)

    assert thresholds.threshold_heart_rate == 158.0
    assert "threshold_heart_rate" not in thresholds.defaulted_fields


def test_threshold_heart_rate_from_max_without_sustained_efforts(make_activity, reference_date):
    history = [make_activity(reference_date, moving_time=600, average_heartrate=150, max_heartrate=180)]
    thresholds = estimate_thresholds(history)

    assert thresholds.max_heart_rate == 180.0
    assert thresholds.threshold_heart_rate == 153.0
    assert "threshold_heart_rate" not in thresholds.defaulted_fields


def test_threshold_heart_rate_never_exceeds_max(make_activity, reference_date):
    history = [make_activity(reference_date, moving_time=2400, average_heartrate=165)]
    thresholds = estimate_thresholds(history)

    assert thresholds.max_heart_rate == 165.0
    assert thresholds.threshold_heart_rate <= thresholds.max_heart_rate


def test_threshold_pace_from_fastest_qualifying_runs(make_activity, reference_date):
    history = [
        make_activity(reference_date - timedelta(days=1), distance=10000, moving_time=3000),
        make_activity(reference_date - timedelta(days=2), distance=10000, moving_time=2700),
        make_activity(reference_date - timedelta(days=3), distance=10000, moving_time=2400),
        # Too short to qualify
        make_activity(reference_date - timedelta(days=4), distance=2000, moving_time=1300),
        make_activity(reference_date - timedelta(days=5), distance=5000, moving_time=900),
    ]
    thresholds = estimate_thresholds(history)

    assert thresholds.threshold_pace == 240.0
    assert thresholds.has_pace_threshold is True


def test_threshold_pace_needs_three_qualifying_runs(make_activity, reference_date):
    history = [
        make_activity(reference_date - timedelta(days=1), distance=10000, moving_time=3000),
        make_activity(reference_date - timedelta(days=2), distance=10000, moving_time=2700),
    ]
    thresholds = estimate_thresholds(history)

    assert thresholds.threshold_pace == DEFAULT_THRESHOLD_PACE_S_PER_KM
    assert "threshold_pace" in thresholds.defaulted_fields
    assert thresholds.has_pace_threshold is False


def test_ftp_prefers_weighted_power_from_rides(make_activity, reference_date):
    history = [
        make_activity(
            reference_date - timedelta(days=i),
            sport_type="Ride",
            moving_time=3600,
            average_watts=150,
            weighted_average_watts=200 + 10 * i,
        )
        for i in range(10)
    ]
    # Runs with power never define FTP
    history.append(make_activity(reference_date, moving_time=3600, average_watts=400))

    thresholds = estimate_thresholds(history)

    assert thresholds.functional_threshold_power == 280.0
    assert thresholds.has_power_threshold is True


def test_resting_heart_rate_is_always_defaulted(make_activity, reference_date):
    history = [make_activity(reference_date, moving_time=3600, average_heartrate=140, max_heartrate=180)]
    thresholds = estimate_thresholds(history)

    assert thresholds.resting_heart_rate == DEFAULT_RESTING_HEART_RATE
    assert "resting_heart_rate" in thresholds.defaulted_fields


# ---------------------------------------------------------------------------
# Overrides
# ---------------------------------------------------------------------------


def test_overrides_win_field_by_field(make_activity, reference_date):
    history = [make_activity(reference_date, moving_time=3600, average_heartrate=140, max_heartrate=180)]
    thresholds = resolve_thresholds(history, ThresholdOverrides(functional_threshold_power=250, resting_heart_rate=48))

    assert thresholds.functional_threshold_power == 250.0
    assert thresholds.resting_heart_rate == 48.0
    assert thresholds.max_heart_rate == 180.0
    assert "functional_threshold_power" not in thresholds.defaulted_fields
    assert "resting_heart_rate" not in thresholds.defaulted_fields
    assert "threshold_pace" in thresholds.defaulted_fields


def test_overridden_threshold_pace_enables_pace_tss():
    thresholds = resolve_thresholds([], ThresholdOverrides(threshold_pace=270))
    assert thresholds.has_pace_threshold is True


def test_no_overrides_equals_estimation(make_activity, reference_date):
    history = [make_activity(reference_date, moving_time=3600, average_heartrate=140)]
    assert resolve_thresholds(history) == estimate_thresholds(history)
    assert resolve_thresholds(history, ThresholdOverrides()) == estimate_thresholds(history)


def test_overrides_reject_non_positive_values():
    with pytest.raises(ValueError):
        ThresholdOverrides(max_heart_rate=0)


def test_default_thresholds_model():
    thresholds = AthleteThresholds()
    assert thresholds.has_power_threshold is False
    assert thresholds.has_pace_threshold is True
