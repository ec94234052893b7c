from datetime import date, datetime, timedelta, timezone

import numpy as np
import pytest

from conftest import make_activity
from training_metrics.metrics.curve import (
    activity_power_curve,
    best_efforts,
    best_watts,
    between,
    in_year,
    merge_curves,
    of_sport,
    of_types,
    power_curve,
    power_curves_by_year,
)

LADDER = ((1, "1s"), (5, "5s"), (60, "1min"), (300, "5min"))


def _ride(activity_id, year, month, watts, activity_type="Ride"):
    return make_activity(activity_id, datetime(year, month, 1, 8, tzinfo=timezone.utc), watts, activity_type)


def test_best_effort_picks_first_window_on_tie():
    power = [100, 300, 300, 100, 300, 300, 100]
    efforts = best_efforts(power, [2])
    assert efforts[2] == (300.0, 1)


def test_durations_longer_than_stream_are_skipped():
    curve = activity_power_curve(np.full(90, 200.0), LADDER)
    assert [e.duration_seconds for e in curve] == [1, 5, 60]
    assert best_watts(curve, 300) is None


def test_curve_is_non_increasing_over_durations():
    rng = np.random.default_rng(5)
    power = np.clip(200 + rng.normal(0, 60, 1800), 0, None)
    curve = activity_power_curve(power, LADDER)
    watts = [e.watts for e in curve]
    assert watts == sorted(watts, reverse=True)


def test_cross_activity_curve_keeps_provenance():
    a = _ride(1, 2023, 6, np.concatenate([np.full(10, 900.0), np.full(400, 150.0)]))
    b = _ride(2, 2024, 3, np.full(400, 260.0))
    curve = power_curve([b, a], LADDER)

    sprint = next(e for e in curve if e.duration_seconds == 5)
    assert sprint.watts == pytest.approx(900.0)
    assert sprint.activity_id == 1
    assert sprint.activity_date == date(2023, 6, 1)

    long_effort = next(e for e in curve if e.duration_seconds == 300)
    assert long_effort.activity_id == 2


def test_equal_efforts_credit_the_earliest_activity():
    early = _ride(7, 2023, 1, np.full(100, 250.0))
    late = _ride(3, 2023, 9, np.full(100, 250.0))
    curve = power_curve([late, early], LADDER)
    assert all(e.activity_id == 7 for e in curve)


def test_yearly_curves_never_exceed_all_time():
    rng = np.random.default_rng(9)
    activities = [
        _ride(i, 2022 + i % 3, 1 + i % 12, np.clip(220 + rng.normal(0, 70, 900), 0, None))
        for i in range(12)
    ]
    all_time, yearly = power_curves_by_year(activities, LADDER)

    assert sorted(yearly) == [2022, 2023, 2024]
    for curve in yearly.values():
        for entry in curve:
            assert entry.watts <= best_watts(all_time, entry.duration_seconds)


def test_filters_narrow_the_scope():
    ride = _ride(1, 2024, 5, np.full(100, 300.0))
    run = _ride(2, 2024, 5, np.full(100, 500.0), activity_type="Run")
    old = _ride(3, 2021, 5, np.full(100, 400.0))

    assert best_watts(power_curve([ride, run, old], LADDER, include=of_types("Ride")), 60) == pytest.approx(400.0)
    assert best_watts(power_curve([ride, run, old], LADDER, include=in_year(2024)), 60) == pytest.approx(500.0)
    window = between(date(2024, 1, 1), date(2024, 12, 31))
    assert best_watts(power_curve([ride, old], LADDER, include=window), 60) == pytest.approx(300.0)


def test_activities_without_power_contribute_nothing():
    empty = _ride(1, 2024, 1, [])
    assert power_curve([empty], LADDER) == []


def test_first_window_wins_when_float_sums_differ_in_last_bits():
    # 0.3 + 0.6 and 0.2 + 0.7 are not bit-identical
    assert best_efforts([0.3, 0.6, 0.1, 0.2, 0.7, 0.2], [2])[2][1] == 0

    rng = np.random.default_rng(17)
    block = rng.uniform(150.0, 350.0, 50)
    # every 50-sample window of the repeated block has the same sum
    assert best_efforts(np.concatenate([block, block]), [50])[50][1] == 0


def test_equal_float_efforts_credit_the_earliest_activity():
    rng = np.random.default_rng(23)
    block = rng.uniform(150.0, 350.0, 60)
    ladder = ((60, "1min"),)
    early = _ride(9, 2023, 2, block)
    late = _ride(4, 2023, 8, block[::-1])

    curve = power_curve([late, early], ladder)
    assert curve[0].activity_id == 9

    merged = merge_curves(
        [activity_power_curve(block, ladder, activity=early), activity_power_curve(block[::-1], ladder, activity=late)],
        ladder,
    )
    assert merged[0].activity_id == 9


def test_sport_filter_includes_virtual_variants():
    outdoor = _ride(1, 2024, 5, np.full(100, 250.0))
    indoor = _ride(2, 2024, 6, np.full(100, 320.0), activity_type="VirtualRide")
    run = _ride(3, 2024, 7, np.full(100, 400.0), activity_type="Run")
    treadmill = _ride(4, 2024, 8, np.full(100, 450.0), activity_type="VirtualRun")
    hike = _ride(5, 2024, 9, np.full(100, 120.0), activity_type="Hike")
    activities = [outdoor, indoor, run, treadmill, hike]

    assert best_watts(power_curve(activities, LADDER, include=of_sport("Ride")), 60) == pytest.approx(320.0)
    assert best_watts(power_curve(activities, LADDER, include=of_sport("Run")), 60) == pytest.approx(450.0)
    assert best_watts(power_curve(activities, LADDER, include=of_sport("Hike")), 60) == pytest.approx(120.0)
    assert best_watts(power_curve(activities, LADDER, include=of_sport("VirtualRide")), 60) == pytest.approx(320.0)
    assert best_watts(power_curve(activities, LADDER, include=of_types("Ride")), 60) == pytest.approx(250.0)


def test_activity_day_is_the_utc_date():
    eastern = timezone(timedelta(hours=-5))
    late_evening = make_activity(1, datetime(2023, 12, 31, 23, 30, tzinfo=eastern), np.full(100, 250.0))
    assert late_evening.day == date(2024, 1, 1)

    curve = power_curve([late_evening], LADDER)
    assert curve[0].activity_date == date(2024, 1, 1)
    _, yearly = power_curves_by_year([late_evening], LADDER)
    assert list(yearly) == [2024]
    assert power_curve([late_evening], LADDER, include=in_year(2023)) == []

    naive = make_activity(2, datetime(2024, 3, 1, 23, 30), np.full(100, 250.0))
    assert naive.day == date(2024, 3, 1)
