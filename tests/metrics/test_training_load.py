"""Tests for the rolling load model (ATL/CTL/TSB) and its summary."""

from datetime import date, timedelta

import pytest

from load_engine.metrics.errors import NON_CONTIGUOUS_SERIES, EngineContractError
from load_engine.metrics.policy import RollingWindows
from load_engine.metrics.training_load import (
    EMPTY_RECOMMENDATION,
    RECOMMENDATIONS,
    compute_ramp_rate,
    compute_rolling_metrics,
    compute_weekly_totals,
    determine_training_status,
    display_round,
    summarize_training_load,
)
from load_engine.schemas.training_load import TrainingLoadPoint

START = date(2024, 5, 6)  # a Monday


def _series(loads: list[float], start: date = START) -> list[TrainingLoadPoint]:
    return [
        TrainingLoadPoint(date=start + timedelta(days=i), normalized_load=load, trimp=load, activity_count=1 if load else 0)
        for i, load in enumerate(loads)
    ]


# ---------------------------------------------------------------------------
# Rolling window correctness
# ---------------------------------------------------------------------------


def test_constant_load_converges_to_load():
    rolling = compute_rolling_metrics(_series([60.0] * 50))

    assert all(point.atl == 60 for point in rolling)
    assert all(point.ctl == 60 for point in rolling)
    assert rolling[-1].tsb == 0


def test_no_look_back_past_series_start():
    rolling = compute_rolling_metrics(_series([70.0] + [0.0] * 9))

    # Day 0 averages over one day, not seven
    assert rolling[0].atl == 70
    assert rolling[0].ctl == 70
    # Day 3 averages over four days
    assert rolling[3].atl == display_round(70 / 4)
    # Day 7 no longer sees day 0 in the acute window
    assert rolling[7].atl == 0
    assert rolling[7].ctl == display_round(70 / 8)


def test_rest_days_dilute_the_window():
    rolling = compute_rolling_metrics(_series([0.0] * 6 + [70.0]))
    assert rolling[-1].atl == 10


def test_tsb_is_ctl_minus_atl():
    loads = [float(i % 5) * 20 for i in range(60)]
    for point in compute_rolling_metrics(_series(loads)):
        assert abs(point.tsb - (point.ctl - point.atl)) <= 1


def test_rounding_happens_only_at_output():
    # Sub-integer daily loads are averaged at full precision, then rounded half up
    rolling = compute_rolling_metrics(_series([0.4, 0.4, 0.6]))
    assert rolling[-1].atl == 0
    assert compute_rolling_metrics(_series([0.5]))[0].atl == 1
    assert compute_rolling_metrics(_series([2.5]))[0].daily_load == 3


def test_output_points_carry_daily_channels():
    (point,) = compute_rolling_metrics([TrainingLoadPoint(date=START, trimp=33.4, tss=51.6, normalized_load=51.6)])

    assert point.date == START
    assert point.daily_load == 52
    assert point.trimp == 33
    assert point.tss == 52


def test_custom_windows():
    rolling = compute_rolling_metrics(_series([30.0, 0.0, 0.0]), RollingWindows(acute_days=2, chronic_days=3))
    assert rolling[1].atl == 15
    assert rolling[2].atl == 0
    assert rolling[2].ctl == 10


def test_empty_series():
    assert compute_rolling_metrics([]) == []


@pytest.mark.parametrize(
    "points",
    [
        [TrainingLoadPoint(date=START), TrainingLoadPoint(date=START + timedelta(days=2))],
        [TrainingLoadPoint(date=START), TrainingLoadPoint(date=START)],
        [TrainingLoadPoint(date=START + timedelta(days=1)), TrainingLoadPoint(date=START)],
    ],
    ids=["gap", "duplicate", "unordered"],
)
def test_non_contiguous_series_raises(points):
    with pytest.raises(EngineContractError) as exc_info:
        compute_rolling_metrics(points)
    assert exc_info.value.code == NON_CONTIGUOUS_SERIES


# ---------------------------------------------------------------------------
# Ramp rate and status
# ---------------------------------------------------------------------------


def test_ramp_rate_needs_two_weeks():
    assert compute_ramp_rate(_series([50.0] * 13)) == 0.0


def test_ramp_rate_compares_last_two_weeks():
    assert compute_ramp_rate(_series([100.0] * 5 + [20.0] * 7 + [50.0] * 7)) == pytest.approx(30.0)


@pytest.mark.parametrize(
    ("tsb", "ramp", "status"),
    [
        (-15, 8, "peak"),
        (-15, 4, "build"),
        (6, 8, "recover"),
        (0, 3.5, "build"),
        (0, 0, "maintain"),
        (-5, -2, "maintain"),
    ],
)
def test_determine_training_status(tsb, ramp, status):
    assert determine_training_status(tsb, ramp) == status


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


def test_summary_of_empty_series():
    metrics = summarize_training_load([])

    assert metrics.acute == 0
    assert metrics.chronic == 0
    assert metrics.balance == 0
    assert metrics.recommendation == EMPTY_RECOMMENDATION
    assert metrics.weekly_totals == []


def test_summary_matches_last_rolling_point():
    points = _series([float(i) for i in range(30)])
    rolling = compute_rolling_metrics(points)
    metrics = summarize_training_load(points)

    assert metrics.acute == rolling[-1].atl
    assert metrics.chronic == rolling[-1].ctl
    assert metrics.balance == rolling[-1].tsb
    assert metrics.recommendation == RECOMMENDATIONS[metrics.status]


def test_sharp_load_jump_reports_peak():
    points = _series([40.0] * 35 + [70.0] * 7)
    metrics = summarize_training_load(points)

    assert metrics.ramp_rate == pytest.approx(30.0)
    assert metrics.balance < -10
    assert metrics.status == "peak"


def test_weekly_totals_use_monday_weeks():
    # Starts on a Monday: 10 days = one full week plus three days
    totals = compute_weekly_totals(_series([10.0] * 10))

    assert [week.week_start for week in totals] == [START, START + timedelta(days=7)]
    assert [week.days for week in totals] == [7, 3]
    assert [week.load for week in totals] == [70, 30]
    assert [week.activity_count for week in totals] == [7, 3]


def test_weekly_totals_clip_partial_first_week():
    totals = compute_weekly_totals(_series([5.0] * 4, start=START + timedelta(days=4)))

    assert totals[0].week_start == START
    assert totals[0].days == 3
    assert totals[1].week_start == START + timedelta(days=7)
