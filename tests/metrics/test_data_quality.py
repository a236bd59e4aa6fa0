"""Tests for data quality assessment."""

import itertools
from datetime import timedelta

import pytest

from load_engine.metrics.data_quality import assess_quality, count_sensor_coverage
from load_engine.metrics.policy import QualityCutoffs, QualityRequirement

TIER_ORDER = {"none": 0, "poor": 1, "fair": 2, "good": 3, "excellent": 4}


@pytest.mark.parametrize(
    ("with_hr", "with_power", "total", "expected"),
    [
        (0, 0, 0, "none"),
        (20, 5, 20, "excellent"),
        (16, 4, 20, "excellent"),
        (16, 3, 20, "good"),
        (9, 0, 15, "good"),
        (0, 4, 10, "good"),
        (3, 0, 10, "fair"),
        (0, 0, 10, "fair"),
        (2, 0, 6, "fair"),
        (1, 0, 4, "poor"),
        (0, 0, 5, "poor"),
        (1, 0, 9, "poor"),
        (0, 0, 4, "none"),
    ],
)
def test_quality_tiers(with_hr, with_power, total, expected):
    assert assess_quality(with_hr, with_power, total) == expected


def test_quality_is_total_on_odd_inputs():
    assert assess_quality(-3, -1, -10) == "none"
    assert assess_quality(50, 50, 20) == "excellent"
    assert assess_quality(0, 0, 0) == "none"


def test_quality_monotone_in_heart_rate_coverage():
    for total, with_power in itertools.product(range(0, 31), (0, 3, 8)):
        tiers = [TIER_ORDER[assess_quality(hr, with_power, total)] for hr in range(0, total + 1)]
        assert tiers == sorted(tiers), (total, with_power)


def test_quality_monotone_in_total_at_fixed_coverage():
    for hr_share, power_share in itertools.product((0.0, 0.1, 0.3, 0.6, 0.8, 1.0), (0.0, 0.2, 0.4)):
        tiers = [
            TIER_ORDER[assess_quality(round(total * hr_share), round(total * power_share), total)]
            for total in range(0, 41, 10)
        ]
        assert tiers == sorted(tiers), (hr_share, power_share)


def test_custom_cutoffs():
    strict = QualityCutoffs(excellent=(QualityRequirement(min_hr_pct=100.0, min_power_pct=100.0, min_total=50),))
    assert assess_quality(20, 5, 20, strict) == "good"


def test_count_sensor_coverage(make_activity, reference_date):
    activities = [
        make_activity(reference_date, moving_time=1800, average_heartrate=150),
        make_activity(reference_date - timedelta(days=1), sport_type="Ride", moving_time=3600, average_watts=200),
        make_activity(reference_date - timedelta(days=2), sport_type="Ride", moving_time=3600, average_watts=200, average_heartrate=140),
        make_activity(reference_date - timedelta(days=3), sport_type="WeightTraining", moving_time=1800),
    ]
    assert count_sensor_coverage(activities) == (2, 2, 4)
